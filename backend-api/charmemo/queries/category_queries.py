"""
Character category queries (owner scope)
"""

from typing import List, Optional

from charmemo.core.errors import ValidationError
from charmemo.core.port import AuthMode, DataClient
from charmemo.core.result import Ok, Result, returns_result
from charmemo.queries.normalize import by_order, parse_record, parse_records
from charmemo.queries.validation import require_id, require_name, require_order, require_version
from charmemo.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate

ENTITY = "Category"
BY_OWNER_INDEX = "categoriesByOwner"


def _port(client: DataClient):
    return client.model(ENTITY, AuthMode.USER_POOL)


@returns_result
async def list_categories(client: DataClient) -> Result[List[CategoryResponse]]:
    records = await _port(client).list_by_index(BY_OWNER_INDEX)
    return Ok(by_order(parse_records(CategoryResponse, records, ENTITY)))


@returns_result
async def get_category(client: DataClient, category_id: str) -> Result[Optional[CategoryResponse]]:
    require_id(category_id, "categoryId", ENTITY)
    record = await _port(client).get(category_id)
    return Ok(parse_record(CategoryResponse, record, ENTITY) if record is not None else None)


@returns_result
async def create_category(client: DataClient, data: CategoryCreate) -> Result[CategoryResponse]:
    if data.order is None:
        raise ValidationError("order is required", field="order", entity=ENTITY)
    fields = {
        "name": require_name(data.name, entity=ENTITY),
        "color": data.color,
        "order": require_order(data.order, entity=ENTITY),
    }
    record = await _port(client).create(fields)
    return Ok(parse_record(CategoryResponse, record, ENTITY))


@returns_result
async def update_category(
    client: DataClient, category_id: str, data: CategoryUpdate, expected_version: int
) -> Result[CategoryResponse]:
    require_id(category_id, "id", ENTITY)
    require_version(expected_version, ENTITY)
    fields = {}
    if data.name is not None:
        fields["name"] = require_name(data.name, entity=ENTITY)
    if data.color is not None:
        fields["color"] = data.color
    if data.order is not None:
        fields["order"] = require_order(data.order, entity=ENTITY)
    record = await _port(client).update(category_id, fields, expected_version)
    return Ok(parse_record(CategoryResponse, record, ENTITY))


@returns_result
async def delete_category(client: DataClient, category_id: str, expected_version: int) -> Result[CategoryResponse]:
    require_id(category_id, "id", ENTITY)
    require_version(expected_version, ENTITY)
    record = await _port(client).delete(category_id, expected_version)
    return Ok(parse_record(CategoryResponse, record, ENTITY))
