"""
Memo content queries (owner scope)

Per-character reads go through one lookup on the owner partition of the
characterId#memoItemId composite index instead of one query per memo item.
"""

from typing import List, Optional

from charmemo.core.port import AuthMode, DataClient, KeyCondition, composite_key
from charmemo.core.result import Ok, Result, returns_result
from charmemo.queries.normalize import parse_record, parse_records
from charmemo.queries.validation import check_content, require_id, require_key_part, require_version
from charmemo.schemas.memo_content import MemoContentCreate, MemoContentResponse, MemoContentUpdate

ENTITY = "MemoContent"
BY_CHARACTER_INDEX = "memoContentsByOwnerCharacter"
BY_MEMO_ITEM_INDEX = "memoContentsByMemoItem"


def _port(client: DataClient):
    return client.model(ENTITY, AuthMode.USER_POOL)


@returns_result
async def list_memo_contents_by_character(client: DataClient, character_id: str) -> Result[List[MemoContentResponse]]:
    """All of the caller's contents for one character, ascending by composite key"""
    require_key_part(character_id, "characterId", ENTITY)
    records = await _port(client).list_by_index(
        BY_CHARACTER_INDEX,
        sort_key=KeyCondition.begins_with(composite_key(character_id)),
    )
    contents = parse_records(MemoContentResponse, records, ENTITY)
    # begins_with on "id#" cannot match another character, but the key is only a string
    return Ok([c for c in contents if c.character_id == character_id])


@returns_result
async def get_memo_content(
    client: DataClient, character_id: str, memo_item_id: str
) -> Result[Optional[MemoContentResponse]]:
    """Content for one (character, memo item) pair; Ok(None) when none exists yet"""
    require_key_part(character_id, "characterId", ENTITY)
    require_key_part(memo_item_id, "memoItemId", ENTITY)
    records = await _port(client).list_by_index(
        BY_CHARACTER_INDEX,
        sort_key=KeyCondition.eq(composite_key(character_id, memo_item_id)),
        limit=1,
    )
    if not records:
        return Ok(None)
    content = parse_record(MemoContentResponse, records[0], ENTITY)
    if (content.character_id, content.memo_item_id) != (character_id, memo_item_id):
        return Ok(None)
    return Ok(content)


@returns_result
async def get_memo_content_by_id(client: DataClient, memo_content_id: str) -> Result[Optional[MemoContentResponse]]:
    require_id(memo_content_id, "id", ENTITY)
    record = await _port(client).get(memo_content_id)
    return Ok(parse_record(MemoContentResponse, record, ENTITY) if record is not None else None)


@returns_result
async def list_memo_contents_by_memo_item(client: DataClient, memo_item_id: str) -> Result[List[MemoContentResponse]]:
    """Caller's contents for one memo item across every character"""
    require_key_part(memo_item_id, "memoItemId", ENTITY)
    records = await _port(client).list_by_index(BY_MEMO_ITEM_INDEX, key=memo_item_id)
    return Ok(parse_records(MemoContentResponse, records, ENTITY))


@returns_result
async def create_memo_content(client: DataClient, data: MemoContentCreate) -> Result[MemoContentResponse]:
    fields = {
        "characterId": require_key_part(data.character_id, "characterId", ENTITY),
        "memoItemId": require_key_part(data.memo_item_id, "memoItemId", ENTITY),
        "content": check_content(data.content),
    }
    record = await _port(client).create(fields)
    return Ok(parse_record(MemoContentResponse, record, ENTITY))


@returns_result
async def update_memo_content(
    client: DataClient, data: MemoContentUpdate, expected_version: int
) -> Result[MemoContentResponse]:
    require_id(data.id, "id", ENTITY)
    require_version(expected_version, ENTITY)
    record = await _port(client).update(data.id, {"content": check_content(data.content)}, expected_version)
    return Ok(parse_record(MemoContentResponse, record, ENTITY))


@returns_result
async def delete_memo_content(
    client: DataClient, memo_content_id: str, expected_version: int
) -> Result[MemoContentResponse]:
    require_id(memo_content_id, "id", ENTITY)
    require_version(expected_version, ENTITY)
    record = await _port(client).delete(memo_content_id, expected_version)
    return Ok(parse_record(MemoContentResponse, record, ENTITY))
