"""
Memo item API router
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from charmemo.api.dependencies import get_owner_client
from charmemo.core.port import DataClient
from charmemo.queries.filters import NameContains, OrderBetween, VisibleOnly
from charmemo.schemas.memo_item import MemoItemCreate, MemoItemOrderUpdate, MemoItemResponse, MemoItemUpdate
from charmemo.services import memo_item_service

router = APIRouter()


@router.get("", response_model=List[MemoItemResponse])
async def list_memo_items(
    visible_only: bool = False,
    order_min: Optional[int] = None,
    order_max: Optional[int] = None,
    name_contains: Optional[str] = None,
    client: DataClient = Depends(get_owner_client),
):
    """Caller's memo items; at most one filter applies"""
    filters = []
    if visible_only:
        filters.append(VisibleOnly())
    if order_min is not None or order_max is not None:
        if order_min is None or order_max is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="order_min and order_max must be given together.",
            )
        filters.append(OrderBetween(order_min, order_max))
    if name_contains:
        filters.append(NameContains(name_contains))
    if len(filters) > 1:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Only one memo item filter can be applied at a time.",
        )
    return await memo_item_service.get_memo_items(client, memo_filter=filters[0] if filters else None)


@router.post("", response_model=MemoItemResponse, status_code=status.HTTP_201_CREATED)
async def create_memo_item(data: MemoItemCreate, client: DataClient = Depends(get_owner_client)):
    return await memo_item_service.create_memo_item(client, data)


@router.put("/order", response_model=List[MemoItemResponse])
async def update_memo_item_order(data: MemoItemOrderUpdate, client: DataClient = Depends(get_owner_client)):
    """Bulk order update after drag and drop"""
    return await memo_item_service.bulk_update_memo_item_order(client, data.items)


@router.get("/{memo_item_id}", response_model=MemoItemResponse)
async def get_memo_item(memo_item_id: str, client: DataClient = Depends(get_owner_client)):
    item = await memo_item_service.get_memo_item(client, memo_item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Memo item not found.")
    return item


@router.patch("/{memo_item_id}", response_model=MemoItemResponse)
async def update_memo_item(
    memo_item_id: str,
    data: MemoItemUpdate,
    expected_version: int = Query(..., ge=1),
    client: DataClient = Depends(get_owner_client),
):
    return await memo_item_service.update_memo_item(client, memo_item_id, data, expected_version)


@router.delete("/{memo_item_id}")
async def delete_memo_item(
    memo_item_id: str,
    expected_version: int = Query(..., ge=1),
    client: DataClient = Depends(get_owner_client),
):
    """Delete a memo item and every note written under it"""
    result = await memo_item_service.delete_memo_item_cascade(client, memo_item_id, expected_version)
    return {"id": result.item.id, "deletedContents": result.deleted_contents}
