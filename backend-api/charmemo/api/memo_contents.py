"""
Memo content API router
"""

from fastapi import APIRouter, Depends, Query
from typing import List

from charmemo.api.dependencies import get_owner_client
from charmemo.core.port import DataClient
from charmemo.schemas.memo_content import (
    CharacterMemoContents,
    MemoContentPatch,
    MemoContentResponse,
    MemoContentUpdate,
    MemoContentUpsert,
    MemoEntry,
)
from charmemo.services import memo_content_service

router = APIRouter()


@router.get("/character/{character_id}", response_model=CharacterMemoContents)
async def get_character_memo_contents(character_id: str, client: DataClient = Depends(get_owner_client)):
    """Caller's notes for one character keyed by memo item id"""
    return await memo_content_service.get_character_memo_contents(client, character_id)


@router.get("/character/{character_id}/entries", response_model=List[MemoEntry])
async def get_memo_entries(
    character_id: str,
    visible_only: bool = True,
    client: DataClient = Depends(get_owner_client),
):
    """Memo items paired with this character's notes"""
    return await memo_content_service.get_memo_entries(client, character_id, visible_only=visible_only)


@router.put("", response_model=MemoContentResponse)
async def upsert_memo_content(data: MemoContentUpsert, client: DataClient = Depends(get_owner_client)):
    """Write the note for a (character, memo item) pair"""
    return await memo_content_service.upsert_memo_content(
        client, data.character_id, data.memo_item_id, data.content, expected_version=data.expected_version
    )


@router.patch("/{memo_content_id}", response_model=MemoContentResponse)
async def update_memo_content(
    memo_content_id: str,
    data: MemoContentPatch,
    expected_version: int = Query(..., ge=1),
    client: DataClient = Depends(get_owner_client),
):
    update = MemoContentUpdate(id=memo_content_id, content=data.content)
    return await memo_content_service.update_memo_content(client, update, expected_version)


@router.delete("/{memo_content_id}")
async def delete_memo_content(
    memo_content_id: str,
    expected_version: int = Query(..., ge=1),
    client: DataClient = Depends(get_owner_client),
):
    await memo_content_service.delete_memo_content(client, memo_content_id, expected_version)
    return {"message": "Memo content deleted."}
