"""
Model package
"""

from .character import Character
from .category import Category
from .user_character_setting import UserCharacterSetting
from .memo_item import MemoItem
from .memo_content import MemoContent

__all__ = [
    "Character",
    "Category",
    "UserCharacterSetting",
    "MemoItem",
    "MemoContent",
]
