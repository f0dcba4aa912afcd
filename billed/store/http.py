from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from billed.models.bill import Bill
from billed.models.receipt import ReceiptFile, UploadedReceipt
from billed.store.base import BillStore, StoreError

logger = logging.getLogger(__name__)


def _parse_bill(item: Any) -> Bill | None:
    """Validate one listed record; unreadable fields are left at their defaults."""
    try:
        return Bill.model_validate(item)
    except ValidationError as exc:
        if not isinstance(item, dict):
            logger.warning("Skipping bill record that is not an object: %.200r", item)
            return None
        bad = {err["loc"][0] for err in exc.errors() if err["loc"]}
        logger.warning("Bill %s has unreadable fields %s, left empty", item.get("id"), sorted(map(str, bad)))
    try:
        return Bill.model_validate({key: value for key, value in item.items() if key not in bad})
    except ValidationError:
        logger.warning("Skipping unreadable bill record %s", item.get("id"))
        return None


class HTTPBillStore(BillStore):
    """Client for the Billed REST API."""

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.debug("%s %s -> %d", method, url, status)
            raise StoreError(f"Erreur {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            raise StoreError(f"{method} {url} failed: {exc}") from exc
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            logger.debug("Undecodable body from %s: %.200r", response.request.url, response.text)
            raise StoreError(f"Invalid response from {response.request.url.path}") from exc

    async def list_bills(self) -> list[Bill]:
        response = await self._request("GET", "/bills")
        payload = self._json(response)
        if not isinstance(payload, list):
            raise StoreError("Invalid response from /bills: expected a list")
        bills = [bill for bill in map(_parse_bill, payload) if bill is not None]
        logger.debug("Fetched %d bills", len(bills))
        return bills

    async def create_bill_draft(self, file: ReceiptFile, owner_email: str) -> UploadedReceipt:
        response = await self._request(
            "POST",
            "/bills",
            files={"file": (file.base_name, file.data, file.content_type)},
            data={"email": owner_email},
        )
        try:
            uploaded = UploadedReceipt.model_validate(self._json(response))
        except ValidationError as exc:
            raise StoreError(f"Invalid upload response: {exc.error_count()} errors") from exc
        logger.info("Receipt %s uploaded as bill %s", file.base_name, uploaded.id)
        return uploaded

    async def update_bill(self, bill_id: str, bill: Bill) -> None:
        await self._request("PATCH", f"/bills/{bill_id}", json=bill.to_payload())
        logger.info("Bill %s updated", bill_id)

    async def close(self) -> None:
        await self.client.aclose()
