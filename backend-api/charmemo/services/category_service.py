"""
Character category service
"""

from typing import List
import logging

from charmemo.core.port import DataClient
from charmemo.queries import category_queries, setting_queries
from charmemo.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from charmemo.services.degrade import propagate

logger = logging.getLogger(__name__)


async def get_categories(client: DataClient) -> List[CategoryResponse]:
    return propagate(await category_queries.list_categories(client))


async def create_category(client: DataClient, data: CategoryCreate) -> CategoryResponse:
    """Create a category, after the existing ones unless order is given"""
    if data.order is None:
        categories = await get_categories(client)
        order = max((c.order for c in categories), default=-1) + 1
        data = data.model_copy(update={"order": order})
    return propagate(await category_queries.create_category(client, data))


async def update_category(
    client: DataClient, category_id: str, data: CategoryUpdate, expected_version: int
) -> CategoryResponse:
    return propagate(await category_queries.update_category(client, category_id, data, expected_version))


async def delete_category(client: DataClient, category_id: str, expected_version: int) -> CategoryResponse:
    """Delete a category; characters assigned to it become uncategorized"""
    category = propagate(await category_queries.delete_category(client, category_id, expected_version))

    settings = propagate(await setting_queries.list_settings(client))
    released = 0
    for setting in settings:
        if setting.category_id == category_id:
            propagate(await setting_queries.update_setting(client, setting.id, {"categoryId": None}, setting.version))
            released += 1
    if released:
        logger.info(f"[category_service] category {category_id} deleted; {released} character(s) now uncategorized")
    return category
