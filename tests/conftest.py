"""Root conftest: in-memory SQLite connection with the bills table, sample data."""

from __future__ import annotations

import pytest
from sqlalchemy import Connection, create_engine, text
from sqlalchemy.engine import Engine

from billed.models.bill import Bill
from billed.models.receipt import ReceiptFile, UploadedReceipt

# Matches Alembic head: 3c9e1f07a2b4 (create bills)
SCHEMA_DDL = """
CREATE TABLE bills (
    id VARCHAR(26) PRIMARY KEY,
    email VARCHAR(255) NOT NULL,
    type VARCHAR(64) NOT NULL DEFAULT '',
    name TEXT NOT NULL DEFAULT '',
    date VARCHAR(10) NOT NULL DEFAULT '',
    amount INTEGER,
    vat VARCHAR(32) NOT NULL DEFAULT '',
    pct INTEGER,
    commentary TEXT NOT NULL DEFAULT '',
    file_name TEXT,
    file_path TEXT,
    status VARCHAR(16) NOT NULL DEFAULT 'pending',
    comment_admin TEXT,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE INDEX ix_bills_email ON bills (email);
"""

# 1x1 PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
    b"\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture()
def db_engine() -> Engine:
    return create_engine("sqlite:///:memory:")


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _sample_bill(**overrides) -> Bill:
    defaults = dict(
        id="47qAXb6fIm2zOKkLzMro",
        email="a@a",
        type="Hôtel et logement",
        name="encore",
        date="2004-04-04",
        amount=400,
        vat="80",
        pct=20,
        commentary="séminaire billed",
        file_name="preview-facture-free-201801-pdf-1.jpg",
        file_url="https://test.storage.tld/v0/b/billable-677b6.a…f-1.jpg",
        status="pending",
        comment_admin="ok",
    )
    defaults.update(overrides)
    return Bill(**defaults)


def _four_bills() -> list[Bill]:
    return [
        _sample_bill(),
        _sample_bill(
            id="BeKy5Mo4jkmdfPGYpTxZ",
            type="Transports",
            name="test1",
            date="2001-01-01",
            amount=100,
            vat="",
            commentary="plop",
            file_name="1592770761.jpeg",
            status="refused",
            comment_admin="en fait non",
        ),
        _sample_bill(
            id="UIUZtnPQvnbFnB0ozvJh",
            type="Services en ligne",
            name="test3",
            date="2003-03-03",
            amount=300,
            vat="60",
            commentary="",
            file_name="facture-client-php-exportee-dans-document-pdf-enregistre-sur-disque-dur.png",
            status="accepted",
            comment_admin="bon bah d'accord",
        ),
        _sample_bill(
            id="qcCK3SzECmaZAGRrHjaC",
            type="Restaurants et bars",
            name="test2",
            date="2002-02-02",
            amount=200,
            vat="40",
            commentary="test2",
            status="refused",
            comment_admin="pas la bonne facture",
        ),
    ]


@pytest.fixture()
def sample_bill():
    return _sample_bill


@pytest.fixture()
def four_bills() -> list[Bill]:
    return _four_bills()


@pytest.fixture()
def png_receipt() -> ReceiptFile:
    return ReceiptFile(name="image.jpg", data=PNG_BYTES, content_type="image/jpeg")


@pytest.fixture()
def uploaded_receipt() -> UploadedReceipt:
    return UploadedReceipt(id="1", file_name="image.jpg", file_path="path/to/image.jpg")
