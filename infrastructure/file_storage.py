# infrastructure/file_storage.py
import asyncio
import logging
from pathlib import Path
from typing import Union

from core.interfaces import IFileStorage

from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

class LocalFileStorage(IFileStorage):
    """Concrete implementation for storing files on the local disk."""

    def __init__(self, base_path: Union[str, Path], url_prefix: str = "/uploads"):
        self.base_path = Path(base_path)
        self.url_prefix = url_prefix.rstrip("/")
        # Create the directory if it doesn't exist
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            logger.info(f"Upload directory ensured at: {self.base_path}")
        except OSError as e:
            logger.error(f"Could not create upload directory at {self.base_path}: {e}")
            raise

    async def save(self, content: bytes, filename: str) -> str:
        """Saves a file to the configured upload directory."""
        file_path = self.base_path / filename
        try:
            await asyncio.to_thread(file_path.write_bytes, content)
            logger.info(f"Successfully saved file to {file_path}")
            return str(file_path)
        except OSError as e:
            logger.error(f"Failed to save file to {file_path}: {e}")
            raise

    def public_url(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"
