"""
Character category API router
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List

from charmemo.api.dependencies import get_owner_client
from charmemo.core.port import DataClient
from charmemo.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from charmemo.services import category_service

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
async def list_categories(client: DataClient = Depends(get_owner_client)):
    return await category_service.get_categories(client)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, client: DataClient = Depends(get_owner_client)):
    return await category_service.create_category(client, data)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    expected_version: int = Query(..., ge=1),
    client: DataClient = Depends(get_owner_client),
):
    return await category_service.update_category(client, category_id, data, expected_version)


@router.delete("/{category_id}", response_model=CategoryResponse)
async def delete_category(
    category_id: str,
    expected_version: int = Query(..., ge=1),
    client: DataClient = Depends(get_owner_client),
):
    """Delete a category; its characters become uncategorized"""
    return await category_service.delete_category(client, category_id, expected_version)
