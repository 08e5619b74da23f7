"""
Schema package - typed entities and write inputs
"""

from .character import CharacterResponse, CharacterGroup
from .category import CategoryCreate, CategoryUpdate, CategoryResponse
from .user_character_setting import UserCharacterSettingUpdate, UserCharacterSettingResponse
from .memo_item import MemoItemCreate, MemoItemUpdate, MemoItemOrderUpdate, MemoItemResponse
from .memo_content import (
    MemoContentCreate,
    MemoContentUpdate,
    MemoContentPatch,
    MemoContentUpsert,
    MemoContentResponse,
    CharacterMemoContents,
    MemoEntry,
)

__all__ = [
    "CharacterResponse",
    "CharacterGroup",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "UserCharacterSettingUpdate",
    "UserCharacterSettingResponse",
    "MemoItemCreate",
    "MemoItemUpdate",
    "MemoItemOrderUpdate",
    "MemoItemResponse",
    "MemoContentCreate",
    "MemoContentUpdate",
    "MemoContentPatch",
    "MemoContentUpsert",
    "MemoContentResponse",
    "CharacterMemoContents",
    "MemoEntry",
]
