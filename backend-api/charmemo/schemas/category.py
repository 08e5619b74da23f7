"""
Character category schemas
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CategoryCreate(BaseModel):
    """Category create request; order defaults to the next free slot"""
    name: str = Field(..., min_length=1, max_length=50)
    color: Optional[str] = Field(None, max_length=32)
    order: Optional[int] = None


class CategoryUpdate(BaseModel):
    """Category update request"""
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    color: Optional[str] = Field(None, max_length=32)
    order: Optional[int] = None


class CategoryResponse(BaseModel):
    """Owner's character category"""
    id: str
    name: str
    color: Optional[str] = None
    order: int
    owner: Optional[str] = None
    version: int = 1
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True
