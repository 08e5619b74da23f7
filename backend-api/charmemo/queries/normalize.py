"""
Raw record -> typed entity conversion
"""

from typing import Any, Dict, Iterable, List, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from charmemo.core.errors import TransportError

M = TypeVar("M", bound=BaseModel)


def parse_record(schema: Type[M], record: Dict[str, Any], entity: str) -> M:
    """Validate one payload; a malformed payload is a service failure"""
    if not isinstance(record, dict):
        raise TransportError(f"malformed {entity} payload: {record!r}", entity=entity, detail="malformed")
    try:
        return schema.model_validate(record)
    except PydanticValidationError as e:
        raise TransportError(
            f"malformed {entity} payload: {e.error_count()} invalid field(s)",
            entity=entity,
            record_id=record.get("id"),
            detail="malformed",
        ) from e


def parse_records(schema: Type[M], records: Iterable[Dict[str, Any]], entity: str) -> List[M]:
    if records is None:
        raise TransportError(f"missing {entity} payload", entity=entity, detail="malformed")
    return [parse_record(schema, r, entity) for r in records]


def by_order(items: Iterable[M]) -> List[M]:
    """Ascending by numeric order, ties broken by id"""
    return sorted(items, key=lambda x: (x.order, x.id))
