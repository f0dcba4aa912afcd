from __future__ import annotations

import logging

from billed.constants import DEFAULT_LOCALE
from billed.formatters import format_date, format_status
from billed.models.bill import Bill, DisplayBill
from billed.store.base import BillStore

logger = logging.getLogger(__name__)


class BillsService:
    def __init__(self, store: BillStore | None, locale: str = DEFAULT_LOCALE) -> None:
        self.store = store
        self.locale = locale

    def _to_display(self, bill: Bill) -> DisplayBill:
        status = format_status(bill.status, self.locale)
        try:
            date = format_date(bill.date, self.locale)
        except ValueError as exc:
            logger.warning("Bill %s has an unreadable date %r, shown as is: %s", bill.id, bill.date, exc)
            date = bill.date
        return DisplayBill(**bill.model_dump(), display_date=date, display_status=status)

    async def get_bills(self) -> list[DisplayBill]:
        """Fetch the bills in store order, with display date and status."""
        if self.store is None:
            logger.debug("No bill store configured, no bills to list")
            return []
        bills = await self.store.list_bills()
        result = [self._to_display(bill) for bill in bills]
        logger.debug("Listed %d bills", len(result))
        return result
