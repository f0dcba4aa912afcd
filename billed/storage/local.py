import logging
from pathlib import Path

from billed.storage.base import ReceiptStorage

logger = logging.getLogger(__name__)


def receipt_key(prefix: str, bill_id: str, file_name: str) -> str:
    if prefix:
        return f"{prefix}/{bill_id}/{file_name}"
    return f"{bill_id}/{file_name}"


class LocalReceiptStorage(ReceiptStorage):
    """Receipt images kept under a base directory; locations are absolute paths."""

    def __init__(self, base_dir: str) -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if not path.is_relative_to(self.base_dir.resolve()):
            raise ValueError(f"Receipt key escapes storage directory: {key}")
        return path

    def save(self, key: str, data: bytes, content_type: str = "image/jpeg") -> str:
        path = self._resolve(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Stored receipt %s (%d bytes, %s) at %s", key, len(data), content_type, path)
        return str(path)

    def get(self, key: str) -> bytes:
        path = self._resolve(key)
        logger.debug("Reading receipt %s from %s", key, path)
        return path.read_bytes()

    def delete(self, key: str) -> None:
        path = self._resolve(key)
        path.unlink(missing_ok=True)
        logger.debug("Deleted receipt %s at %s", key, path)
