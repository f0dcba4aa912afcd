"""Seed the local bill store with demo bills.

Usage:
    BILLED_STORE_BACKEND=local python -m billed.scripts.seed
"""

from __future__ import annotations

import asyncio
import base64

from rich.console import Console
from rich.table import Table

from billed.db import get_connection, initialize_db
from billed.logging import configure_logging, reconfigure
from billed.models.bill import Bill, BillStatus
from billed.models.receipt import ReceiptFile
from billed.settings import settings
from billed.storage.local import LocalReceiptStorage
from billed.store.sqlalchemy import SQLBillStore

console = Console()

DEFAULT_EMAIL = "employee@test.tld"

# 1x1 transparent PNG
PLACEHOLDER_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

# (file name, type, name, date, amount, vat, commentary, status, admin comment)
SAMPLE_BILLS = [
    ("hotel.png", "Hôtel et logement", "encore", "2004-04-04", 400, "80", "séminaire billed", BillStatus.PENDING, "ok"),
    ("train.png", "Transports", "test1", "2001-01-01", 100, "", "plop", BillStatus.REFUSED, "en fait non"),
    ("saas.png", "Services en ligne", "test3", "2003-03-03", 300, "60", "", BillStatus.ACCEPTED, "bon bah d'accord"),
    ("resto.png", "Restaurants et bars", "test2", "2002-02-02", 200, "40", "test2", BillStatus.REFUSED, "pas la bonne facture"),
]


async def seed_bills(store: SQLBillStore, email: str) -> list[Bill]:
    created: list[Bill] = []
    for file_name, expense_type, name, date, amount, vat, commentary, status, comment_admin in SAMPLE_BILLS:
        receipt = ReceiptFile(name=file_name, data=PLACEHOLDER_PNG, content_type="image/png")
        uploaded = await store.create_bill_draft(receipt, email)
        bill = Bill(
            email=email,
            type=expense_type,
            name=name,
            date=date,
            amount=amount,
            vat=vat,
            pct=20,
            commentary=commentary,
            file_name=uploaded.file_name,
            file_path=uploaded.file_path,
            status=status.value,
            comment_admin=comment_admin,
        )
        await store.update_bill(str(uploaded.id), bill)
        bill.id = uploaded.id
        created.append(bill)
    return created


def main() -> None:
    configure_logging()
    initialize_db()
    reconfigure()

    email = settings.user_email or DEFAULT_EMAIL
    store = SQLBillStore(
        get_connection(),
        LocalReceiptStorage(settings.storage_local_path),
        storage_prefix=settings.storage_prefix,
    )
    bills = asyncio.run(seed_bills(store, email))

    table = Table(title=f"Bills seeded for {email}")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Date")
    table.add_column("Status")
    for bill in bills:
        table.add_row(bill.id or "", bill.name, bill.date, bill.status)
    console.print(table)


if __name__ == "__main__":
    main()
