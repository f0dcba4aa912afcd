from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from ulid import ULID

from billed.models.bill import Bill, BillStatus
from billed.models.receipt import ReceiptFile, UploadedReceipt
from billed.storage.base import ReceiptStorage
from billed.storage.local import receipt_key
from billed.store.base import BillStore, StoreError

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


class SQLBillStore(BillStore):
    """Bills in a SQL table, receipt images in a ``ReceiptStorage``.

    Queries and file writes run synchronously on the shared connection and
    block the event loop while they do; this backend serves the single-user
    terminal app.  A draft whose row cannot be inserted leaves no file behind.
    """

    def __init__(self, conn: Connection, storage: ReceiptStorage, storage_prefix: str = "") -> None:
        self.conn = conn
        self.storage = storage
        self.storage_prefix = storage_prefix

    @staticmethod
    def _row_to_bill(row: RowMapping) -> Bill:
        return Bill(
            id=row["id"],
            email=row["email"],
            type=row["type"],
            name=row["name"],
            date=row["date"],
            amount=row["amount"],
            vat=row["vat"],
            pct=row["pct"],
            commentary=row["commentary"],
            file_name=row["file_name"],
            file_path=row["file_path"],
            status=row["status"],
            comment_admin=row["comment_admin"],
        )

    async def list_bills(self) -> list[Bill]:
        rows = self.conn.execute(text("SELECT * FROM bills ORDER BY created_at, id")).mappings().fetchall()
        logger.debug("Listed %d bills", len(rows))
        return [self._row_to_bill(row) for row in rows]

    async def create_bill_draft(self, file: ReceiptFile, owner_email: str) -> UploadedReceipt:
        bill_id = str(ULID())
        file_name = file.base_name
        key = receipt_key(self.storage_prefix, bill_id, file_name)
        location = self.storage.save(key, file.data, content_type=file.content_type)

        now = _now()
        try:
            self.conn.execute(
                text(
                    "INSERT INTO bills (id, email, file_name, file_path, status, created_at, updated_at) "
                    "VALUES (:id, :email, :file_name, :file_path, :status, :created_at, :updated_at)"
                ),
                {
                    "id": bill_id,
                    "email": owner_email,
                    "file_name": file_name,
                    "file_path": location,
                    "status": BillStatus.PENDING.value,
                    "created_at": now,
                    "updated_at": now,
                },
            )
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            self.storage.delete(key)
            logger.error("Bill draft insert failed, receipt %s removed", key)
            raise
        logger.info("Bill draft created: id=%s, owner=%s, file=%s", bill_id, owner_email, file_name)
        return UploadedReceipt(id=bill_id, file_name=file_name, file_path=location)

    async def update_bill(self, bill_id: str, bill: Bill) -> None:
        # email and id are fixed at creation
        result = self.conn.execute(
            text(
                "UPDATE bills SET type = :type, name = :name, date = :date, amount = :amount, "
                "vat = :vat, pct = :pct, commentary = :commentary, file_name = :file_name, "
                "file_path = :file_path, status = :status, comment_admin = :comment_admin, "
                "updated_at = :updated_at WHERE id = :id"
            ),
            {
                "type": bill.type,
                "name": bill.name,
                "date": bill.date,
                "amount": bill.amount,
                "vat": bill.vat,
                "pct": bill.pct,
                "commentary": bill.commentary,
                "file_name": bill.file_name,
                "file_path": bill.receipt_location,
                "status": bill.status,
                "comment_admin": bill.comment_admin,
                "updated_at": _now(),
                "id": bill_id,
            },
        )
        if result.rowcount == 0:
            self.conn.rollback()
            raise StoreError(f"Bill {bill_id} not found", status_code=404)
        self.conn.commit()
        logger.info("Bill updated: id=%s, status=%s", bill_id, bill.status)
