"""
Memo item schemas
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class MemoItemCreate(BaseModel):
    """Memo item create request"""
    name: str = Field(..., min_length=1, max_length=50)
    order: Optional[int] = None
    visible: bool = True


class MemoItemUpdate(BaseModel):
    """Memo item update request"""
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    order: Optional[int] = None
    visible: Optional[bool] = None


class MemoItemOrder(BaseModel):
    id: str
    order: int
    version: int


class MemoItemOrderUpdate(BaseModel):
    """Bulk order update (e.g. after drag and drop)"""
    items: List[MemoItemOrder]


class MemoItemResponse(BaseModel):
    """Owner's memo item"""
    id: str
    name: str
    order: int
    visible: bool = True
    owner: Optional[str] = None
    version: int = 1
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True
