"""
Local filesystem storage for uploaded bootcamp photos.
"""

from pathlib import Path
from typing import Optional

from config import FILE_UPLOAD_PATH
from errors import StorageError
from logger import get_logger

logger = get_logger(__name__)


class FileStorage:
    def __init__(self, root_path: str = FILE_UPLOAD_PATH):
        self.root_path = Path(root_path)

    def store(self, data: bytes, filename: str) -> str:
        target = self.root_path / Path(filename).name
        try:
            self.root_path.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.error("file store failed", path=str(target), error=str(exc))
            raise StorageError("Problem with file upload") from exc
        logger.info("file stored", path=str(target), size=len(data))
        return str(target)


_storage: Optional[FileStorage] = None


def get_storage() -> FileStorage:
    global _storage
    if _storage is None:
        _storage = FileStorage()
    return _storage
