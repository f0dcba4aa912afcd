from abc import ABC, abstractmethod

from billed.models.bill import Bill
from billed.models.receipt import ReceiptFile, UploadedReceipt


class StoreError(Exception):
    """A bill store request failed. ``status_code`` is set for HTTP status failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BillStore(ABC):
    @abstractmethod
    async def list_bills(self) -> list[Bill]: ...

    @abstractmethod
    async def create_bill_draft(self, file: ReceiptFile, owner_email: str) -> UploadedReceipt:
        """Upload the receipt and create the bill it belongs to; returns its identifiers."""
        ...

    @abstractmethod
    async def update_bill(self, bill_id: str, bill: Bill) -> None: ...

    async def close(self) -> None:
        return None
