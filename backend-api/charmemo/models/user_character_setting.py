"""
Per-user character setting - category membership and display order override
"""

from sqlalchemy import Column, String, Integer, DateTime, UniqueConstraint, func

from charmemo.core.database import Base
from charmemo.models.character import new_id


class UserCharacterSetting(Base):
    """Owner's override for one catalog character"""
    __tablename__ = "user_character_settings"

    id = Column(String(64), primary_key=True, default=new_id, index=True)
    owner = Column(String(128), nullable=False)
    character_id = Column(String(64), nullable=False, index=True)

    category_id = Column(String(64), nullable=True)
    custom_order = Column(Integer, nullable=True)

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("owner", "character_id", name="uq_user_character_settings_owner_character"),
    )

    def __repr__(self):
        return f"<UserCharacterSetting(character_id={self.character_id}, category_id={self.category_id})>"
