from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Layout(Base):
    """A saved page design: an ordered collection of boxes"""
    __tablename__ = "layouts"

    __table_args__ = (
        Index('ix_layouts_user_created', 'user_id', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    template_id = Column(Integer, ForeignKey("templates.id", ondelete="SET NULL"), nullable=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    content = Column(JSON, nullable=True)  # Snapshot of the template content it was cloned from
    preview = Column(String(500), nullable=True)  # Screenshot url

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="layouts")
    template = relationship("Template")
    boxes = relationship(
        "Box",
        back_populates="layout",
        cascade="all, delete-orphan",
        order_by="Box.sort_order",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Layout {self.id} {self.name}>"


class Box(Base):
    """Positioned grid container holding components"""
    __tablename__ = "boxes"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    layout_id = Column(GUID, ForeignKey("layouts.id", ondelete="CASCADE"), nullable=False, index=True)

    position_x = Column(Integer, nullable=False, default=0)
    position_y = Column(Integer, nullable=False, default=0)
    width = Column(String(32), nullable=False, default="100%")
    height = Column(Integer, nullable=True)
    columns = Column(Integer, nullable=False, default=1)
    sort_order = Column(Integer, nullable=False, default=0)

    layout = relationship("Layout", back_populates="boxes")
    components = relationship(
        "Component",
        back_populates="box",
        cascade="all, delete-orphan",
        order_by="Component.sort_order",
        lazy="selectin",
    )


class Component(Base):
    """Typed UI element inside a box"""
    __tablename__ = "components"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    box_id = Column(GUID, ForeignKey("boxes.id", ondelete="CASCADE"), nullable=False, index=True)

    # Free-form tag: rows written by older editors may carry tags we no longer know
    type = Column(String(50), nullable=False)
    width = Column(String(32), nullable=True)
    height = Column(Integer, nullable=True)
    props = Column(JSON, nullable=False, default=dict)
    column_index = Column(Integer, nullable=False, default=0)
    sort_order = Column(Integer, nullable=False, default=0)

    image_id = Column(GUID, ForeignKey("images.id", ondelete="SET NULL"), nullable=True)

    box = relationship("Box", back_populates="components")
    image = relationship("Image")
