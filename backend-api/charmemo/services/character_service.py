"""
Character service - catalog listing, per-user grouping and settings
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging

from charmemo.core.errors import NotFoundError
from charmemo.core.port import DataClient
from charmemo.queries import category_queries, character_queries, setting_queries
from charmemo.queries.normalize import by_order
from charmemo.schemas.category import CategoryResponse
from charmemo.schemas.character import CharacterGroup, CharacterResponse
from charmemo.schemas.user_character_setting import (
    UserCharacterSettingResponse,
    UserCharacterSettingUpdate,
)
from charmemo.services.degrade import degrade, propagate

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


async def fetch_characters(client: DataClient) -> List[CharacterResponse]:
    """Character list for display; a failed load degrades to []"""
    return degrade(await character_queries.list_characters(client), [], "character list")


async def fetch_character(client: DataClient, character_id: str) -> Optional[CharacterResponse]:
    """Single character for display; a failed load degrades to None"""
    return degrade(await character_queries.get_character(client, character_id), None, f"character {character_id}")


async def get_character(client: DataClient, character_id: str) -> Optional[CharacterResponse]:
    return propagate(await character_queries.get_character(client, character_id))


async def fetch_sorted_characters(client: DataClient) -> List[CharacterResponse]:
    """Catalog ascending by order, ties by id; errors propagate"""
    characters = propagate(await character_queries.list_characters(client))
    return by_order(characters)


def effective_order(character: CharacterResponse, setting: Optional[UserCharacterSettingResponse]) -> int:
    """custom_order when the owner set one, else the catalog order"""
    if setting is not None and setting.custom_order is not None:
        return setting.custom_order
    return character.order


def group_characters_by_category(
    characters: Iterable[CharacterResponse],
    categories: Iterable[CategoryResponse],
    settings: Iterable[UserCharacterSettingResponse],
    include_empty: bool = False,
) -> Dict[str, List[CharacterResponse]]:
    """Bucket characters by the owner's category assignment

    Buckets follow category order, "uncategorized" last. Inside a bucket
    characters are ordered by effective order, then id. A setting pointing
    at a category the owner no longer has counts as uncategorized.
    """
    ordered_categories = by_order(categories)
    known = {c.id for c in ordered_categories}
    by_character = {s.character_id: s for s in settings}

    buckets: Dict[str, List[Tuple[int, str, CharacterResponse]]] = {c.id: [] for c in ordered_categories}
    buckets[UNCATEGORIZED] = []
    for character in characters:
        setting = by_character.get(character.id)
        bucket = UNCATEGORIZED
        if setting is not None and setting.category_id in known:
            bucket = setting.category_id
        buckets[bucket].append((effective_order(character, setting), character.id, character))

    grouped: Dict[str, List[CharacterResponse]] = {}
    for key, members in buckets.items():
        if not members and not include_empty:
            continue
        grouped[key] = [c for _, _, c in sorted(members, key=lambda m: (m[0], m[1]))]
    return grouped


async def _load_grouping_inputs(client: DataClient):
    characters = propagate(await character_queries.list_characters(client))
    categories = propagate(await category_queries.list_categories(client))
    settings = propagate(await setting_queries.list_settings(client))
    return characters, categories, settings


async def fetch_characters_by_category(client: DataClient) -> Dict[str, List[CharacterResponse]]:
    """Category id (or "uncategorized") -> that bucket's characters"""
    characters, categories, settings = await _load_grouping_inputs(client)
    return group_characters_by_category(characters, categories, settings)


async def fetch_categories_with_characters(client: DataClient) -> List[CharacterGroup]:
    """Every category (empty ones included) followed by the uncategorized bucket"""
    characters, categories, settings = await _load_grouping_inputs(client)
    grouped = group_characters_by_category(characters, categories, settings, include_empty=True)
    by_id = {c.id: c for c in categories}

    groups = []
    for key, members in grouped.items():
        category = by_id.get(key)
        groups.append(
            CharacterGroup(
                category_id=key,
                name=category.name if category else None,
                color=category.color if category else None,
                characters=members,
            )
        )
    return groups


async def update_character_setting(
    client: DataClient, character_id: str, data: UserCharacterSettingUpdate
) -> UserCharacterSettingResponse:
    """Create or update the owner's setting for one character

    Only fields explicitly present in data are written; an explicit None
    clears the value.
    """
    if propagate(await character_queries.get_character(client, character_id)) is None:
        raise NotFoundError(f"character {character_id} not found", entity="Character", record_id=character_id)

    fields = {}
    if "category_id" in data.model_fields_set:
        if data.category_id is not None:
            category = propagate(await category_queries.get_category(client, data.category_id))
            if category is None:
                raise NotFoundError(
                    f"category {data.category_id} not found", entity="Category", record_id=data.category_id
                )
        fields["categoryId"] = data.category_id
    if "custom_order" in data.model_fields_set:
        fields["customOrder"] = data.custom_order

    existing = propagate(await setting_queries.get_setting_for_character(client, character_id))
    if existing is None:
        setting = propagate(
            await setting_queries.create_setting(
                client,
                character_id,
                category_id=fields.get("categoryId"),
                custom_order=fields.get("customOrder"),
            )
        )
        logger.info(f"[character_service] created setting for character {character_id}")
        return setting
    if not fields:
        return existing
    return propagate(await setting_queries.update_setting(client, existing.id, fields, existing.version))


async def assign_category(
    client: DataClient, character_id: str, category_id: Optional[str]
) -> UserCharacterSettingResponse:
    """Move a character into a category (None = uncategorized)"""
    return await update_character_setting(client, character_id, UserCharacterSettingUpdate(category_id=category_id))


async def set_custom_order(
    client: DataClient, character_id: str, custom_order: Optional[int]
) -> UserCharacterSettingResponse:
    """Override a character's display order (None = back to catalog order)"""
    return await update_character_setting(client, character_id, UserCharacterSettingUpdate(custom_order=custom_order))
