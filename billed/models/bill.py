from __future__ import annotations

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from billed.forms import parse_int


class BillStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REFUSED = "refused"


class Bill(BaseModel):
    """One expense report, as exchanged with the bill store.

    Field aliases are the store's wire names.  ``status`` stays a plain
    string: stores may return values outside ``BillStatus``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    email: str = ""
    type: str = ""
    name: str = ""
    date: str = ""  # 'YYYY-MM-DD'
    amount: int | None = None
    vat: str = ""
    pct: int | None = None
    commentary: str = ""
    file_name: str | None = Field(default=None, alias="fileName")
    file_path: str | None = Field(default=None, alias="filePath")
    file_url: str | None = Field(default=None, alias="fileUrl")
    status: str = BillStatus.PENDING.value
    comment_admin: str | None = Field(default=None, alias="commentAdmin")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("email", "type", "name", "date", "vat", "commentary", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("amount", "pct", mode="before")
    @classmethod
    def _whole_number(cls, v: Any) -> Any:
        # Stores may send 348.5 or "348"; keep the integer part like the form does.
        if isinstance(v, float) and math.isfinite(v):
            return int(v)
        if isinstance(v, str):
            return parse_int(v)
        return v

    @property
    def receipt_location(self) -> str | None:
        return self.file_path or self.file_url

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the store: wire names, no id, unset file fields dropped."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)


class DisplayBill(Bill):
    display_date: str
    display_status: str
