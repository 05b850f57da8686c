"""
Storage Module - uploaded image files on local disk
"""

from .image_storage import (
    ImageStorageManager,
    StoredImage,
    get_image_storage,
    UPLOAD_URL_PREFIX,
)

__all__ = [
    "ImageStorageManager",
    "StoredImage",
    "get_image_storage",
    "UPLOAD_URL_PREFIX",
]
