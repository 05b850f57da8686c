# Re-export all models for convenient imports
from app.models.user import User
from app.models.template import Template
from app.models.layout import Layout, Box, Component
from app.models.favorite import Favorite
from app.models.image import Image

__all__ = [
    "User",
    "Template",
    "Layout",
    "Box",
    "Component",
    "Favorite",
    "Image",
]
