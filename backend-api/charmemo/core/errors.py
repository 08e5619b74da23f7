"""
Error taxonomy shared by the data service, query and service layers
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of failure kinds"""
    NOT_FOUND = "not_found"
    VERSION_CONFLICT = "version_conflict"
    TRANSPORT = "transport"
    VALIDATION = "validation"


class MemoError(Exception):
    """Base class for every typed failure"""
    kind: ErrorKind

    def __init__(self, message: str, *, entity: Optional[str] = None, record_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.record_id = record_id

    def __repr__(self):
        return f"<{type(self).__name__}(kind={self.kind.value}, entity={self.entity}, id={self.record_id})>"


class NotFoundError(MemoError):
    """Record does not exist or is not visible to the caller"""
    kind = ErrorKind.NOT_FOUND


class VersionConflictError(MemoError):
    """Optimistic concurrency check failed; re-fetch before retrying"""
    kind = ErrorKind.VERSION_CONFLICT

    def __init__(
        self,
        message: str,
        *,
        entity: Optional[str] = None,
        record_id: Optional[str] = None,
        expected_version: Optional[int] = None,
        actual_version: Optional[int] = None,
    ):
        super().__init__(message, entity=entity, record_id=record_id)
        self.expected_version = expected_version
        self.actual_version = actual_version


class ConflictError(VersionConflictError):
    """A create collided with an existing natural key"""


class TransportError(MemoError):
    """Store or network failure; transient, the caller may retry"""
    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, *, entity: Optional[str] = None, record_id: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message, entity=entity, record_id=record_id)
        self.detail = detail

    @property
    def unauthorized(self) -> bool:
        return self.detail == "unauthorized"


class ValidationError(MemoError):
    """Write input rejected before it reached the store"""
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, field: Optional[str] = None, entity: Optional[str] = None):
        super().__init__(message, entity=entity)
        self.field = field
