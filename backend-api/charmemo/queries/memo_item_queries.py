"""
Memo item queries (owner scope)
"""

from typing import List, Optional

from charmemo.core.errors import ValidationError
from charmemo.core.port import AuthMode, DataClient
from charmemo.core.result import Ok, Result, returns_result
from charmemo.queries.filters import MemoItemFilter, compile_filter
from charmemo.queries.normalize import by_order, parse_record, parse_records
from charmemo.queries.validation import require_id, require_name, require_order, require_version
from charmemo.schemas.memo_item import MemoItemCreate, MemoItemResponse, MemoItemUpdate

ENTITY = "MemoItem"
BY_OWNER_INDEX = "memoItemsByOwner"


def _port(client: DataClient):
    return client.model(ENTITY, AuthMode.USER_POOL)


@returns_result
async def list_memo_items(
    client: DataClient, memo_filter: Optional[MemoItemFilter] = None
) -> Result[List[MemoItemResponse]]:
    """Caller's memo items by order, optionally narrowed by a named filter"""
    filters = compile_filter(memo_filter)
    records = await _port(client).list_by_index(BY_OWNER_INDEX, filters=filters)
    return Ok(by_order(parse_records(MemoItemResponse, records, ENTITY)))


@returns_result
async def get_memo_item(client: DataClient, memo_item_id: str) -> Result[Optional[MemoItemResponse]]:
    require_id(memo_item_id, "memoItemId", ENTITY)
    record = await _port(client).get(memo_item_id)
    return Ok(parse_record(MemoItemResponse, record, ENTITY) if record is not None else None)


@returns_result
async def create_memo_item(client: DataClient, data: MemoItemCreate) -> Result[MemoItemResponse]:
    """Insert a memo item; order must already be resolved"""
    if data.order is None:
        raise ValidationError("order is required", field="order", entity=ENTITY)
    fields = {
        "name": require_name(data.name, entity=ENTITY),
        "order": require_order(data.order, entity=ENTITY),
        "visible": data.visible,
    }
    record = await _port(client).create(fields)
    return Ok(parse_record(MemoItemResponse, record, ENTITY))


@returns_result
async def update_memo_item(
    client: DataClient, memo_item_id: str, data: MemoItemUpdate, expected_version: int
) -> Result[MemoItemResponse]:
    require_id(memo_item_id, "id", ENTITY)
    require_version(expected_version, ENTITY)
    fields = {}
    if data.name is not None:
        fields["name"] = require_name(data.name, entity=ENTITY)
    if data.order is not None:
        fields["order"] = require_order(data.order, entity=ENTITY)
    if data.visible is not None:
        fields["visible"] = data.visible
    record = await _port(client).update(memo_item_id, fields, expected_version)
    return Ok(parse_record(MemoItemResponse, record, ENTITY))


@returns_result
async def delete_memo_item(client: DataClient, memo_item_id: str, expected_version: int) -> Result[MemoItemResponse]:
    """Delete one memo item; its contents are left to the caller"""
    require_id(memo_item_id, "id", ENTITY)
    require_version(expected_version, ENTITY)
    record = await _port(client).delete(memo_item_id, expected_version)
    return Ok(parse_record(MemoItemResponse, record, ENTITY))
