"""
Memo content model - note text for one (character, memo item) pair
"""

from sqlalchemy import Column, String, Text, Integer, DateTime, Index, UniqueConstraint, func

from charmemo.core.database import Base
from charmemo.models.character import new_id


class MemoContent(Base):
    """Owner-scoped memo content"""
    __tablename__ = "memo_contents"

    id = Column(String(64), primary_key=True, default=new_id, index=True)
    owner = Column(String(128), nullable=False)
    character_id = Column(String(64), nullable=False)
    memo_item_id = Column(String(64), nullable=False, index=True)
    character_id_memo_item_id = Column(String(160), nullable=False)

    # None means "never written", "" means "written and cleared"
    content = Column(Text, nullable=True)

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("owner", "character_id", "memo_item_id", name="uq_memo_contents_owner_character_item"),
        Index("ix_memo_contents_owner_composite", "owner", "character_id_memo_item_id"),
    )

    def __repr__(self):
        return f"<MemoContent(id={self.id}, character_id={self.character_id}, memo_item_id={self.memo_item_id})>"
