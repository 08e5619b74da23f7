"""
Memo content service

Wraps the memo content queries into the shapes the memo pages use:
per-character maps keyed by memo item id and update-or-create writes.
"""

from typing import Dict, List, Optional
import logging

from charmemo.core.errors import NotFoundError
from charmemo.core.port import DataClient, composite_key
from charmemo.queries import memo_content_queries, memo_item_queries
from charmemo.queries.filters import VISIBLE_ONLY
from charmemo.schemas.memo_content import (
    CharacterMemoContents,
    MemoContentCreate,
    MemoContentResponse,
    MemoContentUpdate,
    MemoEntry,
)
from charmemo.services.degrade import propagate

logger = logging.getLogger(__name__)


def index_by_memo_item(contents: List[MemoContentResponse]) -> Dict[str, MemoContentResponse]:
    """memo_item_id -> content; the first record wins if the store holds duplicates"""
    indexed: Dict[str, MemoContentResponse] = {}
    for content in contents:
        if content.memo_item_id in indexed:
            logger.warning(
                f"[memo_content_service] duplicate content {content.id} for "
                f"{content.character_id}#{content.memo_item_id}; keeping {indexed[content.memo_item_id].id}"
            )
            continue
        indexed[content.memo_item_id] = content
    return indexed


async def get_memo_contents_by_character(client: DataClient, character_id: str) -> List[MemoContentResponse]:
    return propagate(await memo_content_queries.list_memo_contents_by_character(client, character_id))


async def get_memo_contents_by_item_id(client: DataClient, memo_item_id: str) -> List[MemoContentResponse]:
    return propagate(await memo_content_queries.list_memo_contents_by_memo_item(client, memo_item_id))


async def get_memo_content(
    client: DataClient, character_id: str, memo_item_id: str
) -> Optional[MemoContentResponse]:
    return propagate(await memo_content_queries.get_memo_content(client, character_id, memo_item_id))


async def get_character_memo_contents(client: DataClient, character_id: str) -> CharacterMemoContents:
    """One character's notes keyed by memo item id"""
    contents = await get_memo_contents_by_character(client, character_id)
    return CharacterMemoContents(character_id=character_id, contents=index_by_memo_item(contents))


async def get_memo_entries(client: DataClient, character_id: str, visible_only: bool = True) -> List[MemoEntry]:
    """Memo items in order, each paired with this character's content (or None)"""
    items = propagate(await memo_item_queries.list_memo_items(client, VISIBLE_ONLY if visible_only else None))
    contents = index_by_memo_item(await get_memo_contents_by_character(client, character_id))
    return [MemoEntry(item=item, content=contents.get(item.id)) for item in items]


async def create_memo_content(client: DataClient, data: MemoContentCreate) -> MemoContentResponse:
    return propagate(await memo_content_queries.create_memo_content(client, data))


async def update_memo_content(
    client: DataClient, data: MemoContentUpdate, expected_version: int
) -> MemoContentResponse:
    return propagate(await memo_content_queries.update_memo_content(client, data, expected_version))


async def delete_memo_content(client: DataClient, memo_content_id: str, expected_version: int) -> MemoContentResponse:
    return propagate(await memo_content_queries.delete_memo_content(client, memo_content_id, expected_version))


async def upsert_memo_content(
    client: DataClient,
    character_id: str,
    memo_item_id: str,
    content: Optional[str],
    expected_version: Optional[int] = None,
) -> MemoContentResponse:
    """Write the note for (character, memo item): update the existing record or create the first one

    expected_version, when given, must match the stored record; otherwise the
    version just read is used. A caller holding a version for a record that
    has since been deleted gets NotFoundError instead of a fresh record.
    """
    existing = await get_memo_content(client, character_id, memo_item_id)
    if existing is None and expected_version is not None:
        raise NotFoundError(
            f"memo content {composite_key(character_id, memo_item_id)} no longer exists",
            entity="MemoContent",
        )
    if existing is None:
        return await create_memo_content(
            client, MemoContentCreate(character_id=character_id, memo_item_id=memo_item_id, content=content)
        )
    version = expected_version if expected_version is not None else existing.version
    return await update_memo_content(client, MemoContentUpdate(id=existing.id, content=content), version)


async def delete_memo_contents_by_item_id(client: DataClient, memo_item_id: str) -> int:
    """Delete every content under a memo item; returns how many were deleted"""
    contents = await get_memo_contents_by_item_id(client, memo_item_id)
    for content in contents:
        await delete_memo_content(client, content.id, content.version)
    if contents:
        logger.info(f"[memo_content_service] deleted {len(contents)} content(s) of memo item {memo_item_id}")
    return len(contents)
