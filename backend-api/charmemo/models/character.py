"""
Character catalog model - shared, read-only to end users
"""

from sqlalchemy import Column, String, Integer, DateTime, func
import uuid

from charmemo.core.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Character(Base):
    """Catalog character"""
    __tablename__ = "characters"

    id = Column(String(64), primary_key=True, default=new_id, index=True)

    name = Column(String(100), nullable=False)
    # localized names; fall back to name when missing
    name_en = Column(String(100), nullable=True)
    name_zh = Column(String(100), nullable=True)

    icon = Column(String(500), nullable=False)
    order = Column(Integer, nullable=False, index=True)

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Character(id={self.id}, name={self.name}, order={self.order})>"
