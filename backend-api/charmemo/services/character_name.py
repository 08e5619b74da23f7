"""
Locale-aware character names

Pure functions; no I/O.
"""

from typing import List, Sequence
import unicodedata

from charmemo.schemas.character import CharacterResponse

DEFAULT_LOCALE = "ja"

# katakana block is hiragana + 0x60
_KATAKANA_START = 0x30A1
_KATAKANA_END = 0x30F6


def _primary_language(locale: str) -> str:
    return (locale or DEFAULT_LOCALE).replace("_", "-").split("-")[0].lower()


def get_character_name(character: CharacterResponse, locale: str) -> str:
    """Localized name for locale, falling back to the default name"""
    language = _primary_language(locale)
    if language == "en":
        return character.name_en or character.name
    if language == "zh":
        return character.name_zh or character.name
    return character.name


def _folded(name: str, locale: str) -> str:
    """NFKC, case-folded; Japanese folds katakana onto hiragana"""
    key = unicodedata.normalize("NFKC", name).casefold()
    if _primary_language(locale) == "ja":
        key = "".join(
            chr(ord(ch) - 0x60) if _KATAKANA_START <= ord(ch) <= _KATAKANA_END else ch
            for ch in key
        )
    return key


def collation_key(name: str, locale: str) -> str:
    """Primary comparison key: folded, with accents and voicing marks stripped"""
    decomposed = unicodedata.normalize("NFD", _folded(name, locale))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def sort_characters_by_name(characters: Sequence[CharacterResponse], locale: str) -> List[CharacterResponse]:
    """New list ordered by localized display name; the input is left untouched"""
    def key(character: CharacterResponse):
        name = get_character_name(character, locale)
        return (collation_key(name, locale), _folded(name, locale), name, character.id)

    return sorted(characters, key=key)
