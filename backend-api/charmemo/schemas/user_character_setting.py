"""
Per-user character setting schemas
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class UserCharacterSettingUpdate(BaseModel):
    """Set a character's category and/or custom order; None clears the value"""
    category_id: Optional[str] = Field(None, alias="categoryId")
    custom_order: Optional[int] = Field(None, alias="customOrder")

    class Config:
        populate_by_name = True


class UserCharacterSettingResponse(BaseModel):
    id: str
    character_id: str = Field(..., alias="characterId")
    category_id: Optional[str] = Field(None, alias="categoryId")
    custom_order: Optional[int] = Field(None, alias="customOrder")
    owner: Optional[str] = None
    version: int = 1
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True
