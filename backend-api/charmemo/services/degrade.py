"""
Degrade-vs-propagate decisions for query results

Only the service layer calls these. A degraded value is always logged at
WARNING so "failed to load" never looks like "nothing there".
"""

import logging

from charmemo.core.result import Result

logger = logging.getLogger(__name__)


def degrade(result: Result, default, what: str):
    """Value of an Ok, or default for an Err (logged as a degradation)"""
    if result.is_ok:
        return result.value
    logger.warning(
        f"[degraded] {what}: {result.kind.value} error ({result.error.message}); serving default {default!r}"
    )
    return default


def propagate(result: Result):
    """Value of an Ok; re-raises the typed error of an Err"""
    return result.unwrap()
