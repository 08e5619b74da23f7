"""
Per-user character setting queries (owner scope)
"""

from typing import List, Optional

from charmemo.core.port import AuthMode, DataClient, KeyCondition
from charmemo.core.result import Ok, Result, returns_result
from charmemo.queries.normalize import parse_record, parse_records
from charmemo.queries.validation import require_id, require_version
from charmemo.schemas.user_character_setting import UserCharacterSettingResponse

ENTITY = "UserCharacterSetting"
BY_OWNER_INDEX = "settingsByOwnerCharacter"


def _port(client: DataClient):
    return client.model(ENTITY, AuthMode.USER_POOL)


@returns_result
async def list_settings(client: DataClient) -> Result[List[UserCharacterSettingResponse]]:
    """Every setting the caller has, ascending by character id"""
    records = await _port(client).list_by_index(BY_OWNER_INDEX)
    return Ok(parse_records(UserCharacterSettingResponse, records, ENTITY))


@returns_result
async def get_setting_for_character(
    client: DataClient, character_id: str
) -> Result[Optional[UserCharacterSettingResponse]]:
    require_id(character_id, "characterId", ENTITY)
    records = await _port(client).list_by_index(BY_OWNER_INDEX, sort_key=KeyCondition.eq(character_id), limit=1)
    if not records:
        return Ok(None)
    return Ok(parse_record(UserCharacterSettingResponse, records[0], ENTITY))


@returns_result
async def create_setting(
    client: DataClient, character_id: str, category_id: Optional[str] = None, custom_order: Optional[int] = None
) -> Result[UserCharacterSettingResponse]:
    fields = {
        "characterId": require_id(character_id, "characterId", ENTITY),
        "categoryId": category_id,
        "customOrder": custom_order,
    }
    record = await _port(client).create(fields)
    return Ok(parse_record(UserCharacterSettingResponse, record, ENTITY))


@returns_result
async def update_setting(
    client: DataClient, setting_id: str, fields: dict, expected_version: int
) -> Result[UserCharacterSettingResponse]:
    """fields uses the external names (categoryId, customOrder); None clears a value"""
    require_id(setting_id, "id", ENTITY)
    require_version(expected_version, ENTITY)
    record = await _port(client).update(setting_id, fields, expected_version)
    return Ok(parse_record(UserCharacterSettingResponse, record, ENTITY))


@returns_result
async def delete_setting(
    client: DataClient, setting_id: str, expected_version: int
) -> Result[UserCharacterSettingResponse]:
    require_id(setting_id, "id", ENTITY)
    require_version(expected_version, ENTITY)
    record = await _port(client).delete(setting_id, expected_version)
    return Ok(parse_record(UserCharacterSettingResponse, record, ENTITY))
