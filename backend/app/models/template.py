from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID


class Template(Base):
    """Marketplace template: a predefined layout tagged for search"""
    __tablename__ = "templates"

    __table_args__ = (
        Index('ix_templates_category', 'category'),
        Index('ix_templates_created_at', 'created_at'),
    )

    # Integer ids are referenced by the keyword mapping table
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    thumbnail = Column(String(500), nullable=True)
    category = Column(String(100), nullable=False, default="general")
    keywords = Column(JSON, nullable=False, default=list)

    # {"boxes": [{position_x, position_y, width, height, columns, components: [...]}]}
    content = Column(JSON, nullable=True)

    # Set for templates published by a user, NULL for the built-in catalogue
    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    favorites = relationship("Favorite", back_populates="template", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Template {self.id} {self.name}>"
