"""
Character catalog queries (API key mode)
"""

from typing import List, Optional
import logging

from charmemo.core.errors import TransportError
from charmemo.core.port import AuthMode, DataClient
from charmemo.core.result import Ok, Result, returns_result
from charmemo.queries.normalize import by_order, parse_record, parse_records
from charmemo.queries.validation import require_id
from charmemo.schemas.character import CharacterResponse

logger = logging.getLogger(__name__)

ENTITY = "Character"


def _port(client: DataClient):
    return client.model(ENTITY, AuthMode.API_KEY)


@returns_result
async def list_characters(client: DataClient) -> Result[List[CharacterResponse]]:
    """Whole catalog, ascending by order then id

    The catalog is seeded before use, so an empty payload is a failure.
    """
    records = await _port(client).list()
    if not records:
        raise TransportError("character catalog is empty", entity=ENTITY, detail="empty")
    characters = by_order(parse_records(CharacterResponse, records, ENTITY))
    logger.info(f"[character_queries] loaded {len(characters)} characters")
    return Ok(characters)


@returns_result
async def get_character(client: DataClient, character_id: str) -> Result[Optional[CharacterResponse]]:
    """Single character; Ok(None) when it does not exist"""
    require_id(character_id, "characterId", ENTITY)
    record = await _port(client).get(character_id)
    if record is None:
        return Ok(None)
    return Ok(parse_record(CharacterResponse, record, ENTITY))
