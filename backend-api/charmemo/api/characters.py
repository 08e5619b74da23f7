"""
Character API router
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Dict, List

from charmemo.api.dependencies import get_catalog_client, get_owner_client
from charmemo.core.port import DataClient
from charmemo.schemas.character import CharacterGroup, CharacterResponse
from charmemo.schemas.user_character_setting import UserCharacterSettingResponse, UserCharacterSettingUpdate
from charmemo.services import character_service
from charmemo.services.character_name import DEFAULT_LOCALE, sort_characters_by_name

router = APIRouter()


@router.get("", response_model=List[CharacterResponse])
async def list_characters(
    sort: str = Query("order", pattern="^(order|name)$"),
    locale: str = Query(DEFAULT_LOCALE),
    client: DataClient = Depends(get_catalog_client),
):
    """Character catalog, by order or by localized name"""
    characters = await character_service.fetch_sorted_characters(client)
    if sort == "name":
        characters = sort_characters_by_name(characters, locale)
    return characters


@router.get("/grouped", response_model=Dict[str, List[CharacterResponse]])
async def list_characters_by_category(client: DataClient = Depends(get_owner_client)):
    """Caller's characters bucketed by category"""
    return await character_service.fetch_characters_by_category(client)


@router.get("/groups", response_model=List[CharacterGroup])
async def list_category_groups(client: DataClient = Depends(get_owner_client)):
    """Every category with its characters, empty ones included"""
    return await character_service.fetch_categories_with_characters(client)


@router.get("/{character_id}", response_model=CharacterResponse)
async def get_character(character_id: str, client: DataClient = Depends(get_catalog_client)):
    character = await character_service.get_character(client, character_id)
    if character is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found.")
    return character


@router.put("/{character_id}/setting", response_model=UserCharacterSettingResponse)
async def update_character_setting(
    character_id: str,
    data: UserCharacterSettingUpdate,
    client: DataClient = Depends(get_owner_client),
):
    """Set the caller's category and/or custom order for a character"""
    return await character_service.update_character_setting(client, character_id, data)
