from sqlalchemy import Column, String, DateTime, Integer
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Image(Base):
    """Uploaded image file referenced by image components"""
    __tablename__ = "images"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    path = Column(String(500), nullable=False)  # Public url
    size = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
