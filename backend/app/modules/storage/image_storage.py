"""
Image Storage Manager - local disk storage for uploaded images

Files live under settings.UPLOAD_DIR with a unique generated name and are
served by the StaticFiles mount at /uploads. The public url of a stored
file is PUBLIC_BASE_URL + /uploads/<name>.
"""

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import aiofiles
import aiofiles.os

from app.core.config import settings
from app.core.exceptions import FileTooLargeError, InvalidFileTypeError, StorageError
from app.core.logging_config import logger

UPLOAD_URL_PREFIX = "/uploads"


@dataclass(frozen=True)
class StoredImage:
    """A file written to the upload directory"""
    name: str
    path: Path
    url: str
    size: int


class ImageStorageManager:
    """Validates and persists uploaded images"""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        allowed_extensions: Optional[List[str]] = None,
        max_size: Optional[int] = None,
        public_base_url: Optional[str] = None,
    ):
        self.base_path = Path(base_path) if base_path else settings.upload_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.allowed_extensions = allowed_extensions or settings.ALLOWED_IMAGE_EXTENSIONS
        self.max_size = max_size or settings.MAX_UPLOAD_SIZE
        self.public_base_url = (public_base_url or settings.PUBLIC_BASE_URL).rstrip("/")

        logger.info(f"ImageStorageManager initialized at {self.base_path}")

    @staticmethod
    def extension_of(filename: Optional[str]) -> str:
        return Path(filename or "").suffix.lower().lstrip(".")

    def validate(self, filename: Optional[str], size: int) -> str:
        """Check extension and size, returning the normalised extension"""
        extension = self.extension_of(filename)
        if extension not in self.allowed_extensions:
            raise InvalidFileTypeError(extension or "unknown", self.allowed_extensions)
        if size > self.max_size:
            raise FileTooLargeError(size, self.max_size)
        return extension

    def url_for(self, name: str) -> str:
        return f"{self.public_base_url}{UPLOAD_URL_PREFIX}/{name}"

    async def save(self, filename: Optional[str], data: bytes) -> StoredImage:
        """Validate and write an image, returning where it landed"""
        extension = self.validate(filename, len(data))
        name = f"{uuid.uuid4().hex}.{extension}"
        path = self.base_path / name

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error(f"Failed to write upload {path}: {e}")
            raise StorageError(f"Could not store file {filename}") from e

        logger.info(
            f"Stored image {name} ({len(data)} bytes)",
            extra={"event_type": "image_stored", "file_size": len(data)},
        )
        return StoredImage(name=name, path=path, url=self.url_for(name), size=len(data))

    async def delete(self, name: str) -> bool:
        """Remove a stored file by name; False when it does not exist"""
        path = self.base_path / Path(name).name
        if not path.exists():
            return False
        await aiofiles.os.remove(path)
        return True


_storage_manager: Optional[ImageStorageManager] = None


def get_image_storage() -> ImageStorageManager:
    """Get the global image storage manager"""
    global _storage_manager

    if _storage_manager is None:
        _storage_manager = ImageStorageManager()

    return _storage_manager
