"""
Character category model - user-defined grouping of characters
"""

from sqlalchemy import Column, String, Integer, DateTime, Index, func

from charmemo.core.database import Base
from charmemo.models.character import new_id


class Category(Base):
    """Owner-scoped character category"""
    __tablename__ = "character_categories"

    id = Column(String(64), primary_key=True, default=new_id, index=True)
    owner = Column(String(128), nullable=False)

    name = Column(String(100), nullable=False)
    color = Column(String(32), nullable=True)
    order = Column(Integer, nullable=False)

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_character_categories_owner_order", "owner", "order"),
    )

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name}, order={self.order})>"
