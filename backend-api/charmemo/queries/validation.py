"""
Input checks run before a write reaches the data service
"""

from typing import Optional

from charmemo.core.errors import ValidationError
from charmemo.core.port import COMPOSITE_KEY_SEPARATOR

NAME_MAX_LENGTH = 50
MEMO_CONTENT_MAX_LENGTH = 10000


def require_id(value: Optional[str], field: str = "id", entity: Optional[str] = None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field, entity=entity)
    return value


def require_key_part(value: Optional[str], field: str, entity: Optional[str] = None) -> str:
    """An id that becomes part of a composite key; the separator would make the key ambiguous"""
    require_id(value, field, entity)
    if COMPOSITE_KEY_SEPARATOR in value:
        raise ValidationError(
            f"{field} must not contain {COMPOSITE_KEY_SEPARATOR!r}", field=field, entity=entity
        )
    return value


def require_name(value: Optional[str], max_length: int = NAME_MAX_LENGTH, field: str = "name", entity: Optional[str] = None) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} must not be blank", field=field, entity=entity)
    name = value.strip()
    if len(name) > max_length:
        raise ValidationError(f"{field} exceeds {max_length} characters", field=field, entity=entity)
    return name


def require_version(value, entity: Optional[str] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"expected version must be a positive integer, got {value!r}", field="version", entity=entity)
    return value


def require_order(value, field: str = "order", entity: Optional[str] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer, got {value!r}", field=field, entity=entity)
    return value


def check_content(value: Optional[str], entity: Optional[str] = "MemoContent") -> Optional[str]:
    if value is not None and len(value) > MEMO_CONTENT_MAX_LENGTH:
        raise ValidationError(f"content exceeds {MEMO_CONTENT_MAX_LENGTH} characters", field="content", entity=entity)
    return value
