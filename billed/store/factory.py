import logging

from billed.settings import settings
from billed.store.base import BillStore

logger = logging.getLogger(__name__)


def get_bill_store() -> BillStore | None:
    """Build the configured store. ``None`` when the backend is 'none'."""
    backend = settings.store_backend

    if backend == "none":
        logger.warning("No bill store configured")
        return None

    if backend == "http":
        from billed.store.http import HTTPBillStore

        logger.info("Using bill store: http url=%s", settings.api_url)
        return HTTPBillStore(
            base_url=settings.api_url,
            token=settings.get_api_token(),
            timeout=settings.api_timeout,
        )

    if backend == "local":
        from billed.db import get_connection
        from billed.storage.local import LocalReceiptStorage
        from billed.store.sqlalchemy import SQLBillStore

        logger.info("Using bill store: local db=%s", settings.db_url)
        return SQLBillStore(
            get_connection(),
            LocalReceiptStorage(settings.storage_local_path),
            storage_prefix=settings.storage_prefix,
        )

    raise ValueError(f"Unsupported store backend: {backend}")
