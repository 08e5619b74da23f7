"""
Memo item model - a note field the user defines (e.g. "Punish options")
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Index, func

from charmemo.core.database import Base
from charmemo.models.character import new_id


class MemoItem(Base):
    """Owner-scoped memo item"""
    __tablename__ = "memo_items"

    id = Column(String(64), primary_key=True, default=new_id, index=True)
    owner = Column(String(128), nullable=False)

    name = Column(String(100), nullable=False)
    order = Column(Integer, nullable=False)
    # hidden items keep their contents
    visible = Column(Boolean, nullable=False, default=True)

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_memo_items_owner_order", "owner", "order"),
    )

    def __repr__(self):
        return f"<MemoItem(id={self.id}, name={self.name}, visible={self.visible})>"
