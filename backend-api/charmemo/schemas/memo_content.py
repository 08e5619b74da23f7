"""
Memo content schemas
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import datetime

from charmemo.schemas.memo_item import MemoItemResponse


class MemoContentCreate(BaseModel):
    """Memo content create request"""
    character_id: str = Field(..., alias="characterId", min_length=1)
    memo_item_id: str = Field(..., alias="memoItemId", min_length=1)
    content: Optional[str] = None

    class Config:
        populate_by_name = True


class MemoContentUpdate(BaseModel):
    """Memo content update request"""
    id: str = Field(..., min_length=1)
    content: Optional[str] = None


class MemoContentPatch(BaseModel):
    """Memo content PATCH body"""
    content: Optional[str] = None


class MemoContentUpsert(BaseModel):
    """Write the note for a (character, memo item) pair, creating it if needed"""
    character_id: str = Field(..., alias="characterId", min_length=1)
    memo_item_id: str = Field(..., alias="memoItemId", min_length=1)
    content: Optional[str] = None
    expected_version: Optional[int] = Field(None, alias="expectedVersion")

    class Config:
        populate_by_name = True


class MemoContentResponse(BaseModel):
    """Owner's memo content"""
    id: str
    character_id: str = Field(..., alias="characterId")
    memo_item_id: str = Field(..., alias="memoItemId")
    content: Optional[str] = None
    owner: Optional[str] = None
    version: int = 1
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class CharacterMemoContents(BaseModel):
    """All of one character's memo contents keyed by memo item id"""
    character_id: str = Field(..., alias="characterId")
    contents: Dict[str, MemoContentResponse]

    class Config:
        populate_by_name = True


class MemoEntry(BaseModel):
    """A visible memo item paired with its content (None when never written)"""
    item: MemoItemResponse
    content: Optional[MemoContentResponse] = None
