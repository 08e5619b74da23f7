"""
Character schemas
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class CharacterResponse(BaseModel):
    """Catalog character"""
    id: str
    name: str
    name_en: Optional[str] = Field(None, alias="nameEn")
    name_zh: Optional[str] = Field(None, alias="nameZh")
    icon: str
    order: int
    version: int = 1
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class CharacterGroup(BaseModel):
    """One category (or the uncategorized bucket) with its characters"""
    category_id: str = Field(..., alias="categoryId")
    name: Optional[str] = None
    color: Optional[str] = None
    characters: List[CharacterResponse]

    class Config:
        populate_by_name = True
