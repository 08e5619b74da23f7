"""
Memo item service
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

from charmemo.core.errors import NotFoundError, VersionConflictError
from charmemo.core.port import DataClient
from charmemo.queries import memo_item_queries
from charmemo.queries.filters import VISIBLE_ONLY, MemoItemFilter
from charmemo.schemas.memo_item import MemoItemCreate, MemoItemOrder, MemoItemResponse, MemoItemUpdate
from charmemo.services import memo_content_service
from charmemo.services.degrade import degrade, propagate

logger = logging.getLogger(__name__)


@dataclass
class CascadeDeleteResult:
    item: MemoItemResponse
    deleted_contents: int


def next_order(items: Sequence[MemoItemResponse]) -> int:
    """max(order) + 1, or 0 when there are no items"""
    if not items:
        return 0
    return max(item.order for item in items) + 1


def renumber(items: Sequence[MemoItemResponse]) -> List[MemoItemOrder]:
    """1-based consecutive orders for items in their given sequence"""
    return [MemoItemOrder(id=item.id, order=index, version=item.version) for index, item in enumerate(items, start=1)]


def move_item(items: Sequence[MemoItemResponse], source: int, destination: int) -> List[MemoItemResponse]:
    """Copy of items with the element at source moved to destination"""
    moved = list(items)
    item = moved.pop(source)
    moved.insert(destination, item)
    return moved


async def get_memo_items(
    client: DataClient, visible_only: bool = False, memo_filter: Optional[MemoItemFilter] = None
) -> List[MemoItemResponse]:
    """Caller's memo items by order"""
    if visible_only:
        memo_filter = VISIBLE_ONLY
    return propagate(await memo_item_queries.list_memo_items(client, memo_filter))


async def get_memo_item(client: DataClient, memo_item_id: str) -> Optional[MemoItemResponse]:
    return propagate(await memo_item_queries.get_memo_item(client, memo_item_id))


async def get_next_order(client: DataClient) -> int:
    """Order for a new item; degrades to 0 when the list cannot be loaded"""
    items = degrade(await memo_item_queries.list_memo_items(client), None, "memo item list for next order")
    if items is None:
        return 0
    return next_order(items)


async def create_memo_item(client: DataClient, data: MemoItemCreate) -> MemoItemResponse:
    """Create a memo item, appending it after the existing ones unless order is given"""
    if data.order is None:
        items = propagate(await memo_item_queries.list_memo_items(client))
        data = data.model_copy(update={"order": next_order(items)})
    item = propagate(await memo_item_queries.create_memo_item(client, data))
    logger.info(f"[memo_item_service] created memo item {item.id} at order {item.order}")
    return item


async def update_memo_item(
    client: DataClient, memo_item_id: str, data: MemoItemUpdate, expected_version: int
) -> MemoItemResponse:
    return propagate(await memo_item_queries.update_memo_item(client, memo_item_id, data, expected_version))


async def delete_memo_item(client: DataClient, memo_item_id: str, expected_version: int) -> MemoItemResponse:
    """Delete only the memo item; its contents stay"""
    return propagate(await memo_item_queries.delete_memo_item(client, memo_item_id, expected_version))


async def delete_memo_item_cascade(
    client: DataClient, memo_item_id: str, expected_version: int
) -> CascadeDeleteResult:
    """Delete a memo item together with every memo content written under it

    The item's version is checked before any content is touched; contents go
    first so a failure never leaves contents pointing at a missing item.
    """
    current = propagate(await memo_item_queries.get_memo_item(client, memo_item_id))
    if current is None:
        raise NotFoundError(f"memo item {memo_item_id} not found", entity="MemoItem", record_id=memo_item_id)
    if current.version != expected_version:
        raise VersionConflictError(
            f"memo item {memo_item_id} is at version {current.version}, not {expected_version}",
            entity="MemoItem",
            record_id=memo_item_id,
            expected_version=expected_version,
            actual_version=current.version,
        )

    deleted_contents = await memo_content_service.delete_memo_contents_by_item_id(client, memo_item_id)
    item = propagate(await memo_item_queries.delete_memo_item(client, memo_item_id, expected_version))
    logger.info(f"[memo_item_service] deleted memo item {memo_item_id} and {deleted_contents} content(s)")
    return CascadeDeleteResult(item=item, deleted_contents=deleted_contents)


async def bulk_update_memo_item_order(client: DataClient, orders: Sequence[MemoItemOrder]) -> List[MemoItemResponse]:
    """Apply new orders one item at a time

    Stops at the first failure; updates already applied stay applied.
    """
    updated = []
    for entry in orders:
        updated.append(
            propagate(
                await memo_item_queries.update_memo_item(
                    client, entry.id, MemoItemUpdate(order=entry.order), entry.version
                )
            )
        )
    return updated


async def reorder_memo_items(client: DataClient, items: Sequence[MemoItemResponse]) -> List[MemoItemResponse]:
    """Persist items' sequence as 1-based orders, writing only those that changed"""
    current = {item.id: item for item in items}
    changed = [entry for entry in renumber(items) if current[entry.id].order != entry.order]
    updated = {item.id: item for item in await bulk_update_memo_item_order(client, changed)}
    return [updated.get(item.id, item) for item in items]
