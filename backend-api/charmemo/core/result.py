"""
Ok/Err result returned at the query layer boundary
"""

from dataclasses import dataclass
from functools import wraps
from typing import Generic, TypeVar, Union
import logging

from charmemo.core.errors import ErrorKind, MemoError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default):
        return self.value


@dataclass(frozen=True)
class Err:
    error: MemoError

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self):
        raise self.error

    def unwrap_or(self, default):
        return default


Result = Union[Ok[T], Err]


def returns_result(func):
    """Fold typed failures raised by an async query into Err"""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except MemoError as e:
            logger.warning(f"[query] {func.__name__} failed ({e.kind.value}): {e.message}")
            return Err(e)

    return wrapper
