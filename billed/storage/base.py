from abc import ABC, abstractmethod


class ReceiptStorage(ABC):
    @abstractmethod
    def save(self, key: str, data: bytes, content_type: str = "image/jpeg") -> str:
        """Store a receipt image and return the location recorded on the bill."""
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Read back a stored receipt image."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a stored receipt image; a missing one is not an error."""
        ...
