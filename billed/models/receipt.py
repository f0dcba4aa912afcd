from __future__ import annotations

import re
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from billed.constants import ALLOWED_RECEIPT_EXTENSIONS


def base_name(name: str) -> str:
    """Last component of a file-input value, Windows 'C:\\fakepath\\' paths included."""
    return re.split(r"[\\/]", name)[-1]


def file_extension(name: str) -> str:
    """Text after the last dot of the base name; the whole name when it has no dot."""
    return base_name(name).split(".")[-1]


class ReceiptFile(BaseModel):
    name: str
    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def base_name(self) -> str:
        return base_name(self.name)

    @property
    def extension(self) -> str:
        return file_extension(self.name)

    @property
    def is_allowed(self) -> bool:
        # Case-sensitive: 'JPG' is rejected like the web form does.
        return self.extension in ALLOWED_RECEIPT_EXTENSIONS


class UploadedReceipt(BaseModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("key", "id"))
    file_name: str | None = Field(default=None, validation_alias=AliasChoices("fileName", "file_name"))
    file_path: str | None = Field(default=None, validation_alias=AliasChoices("filePath", "file_path"))
    file_url: str | None = Field(default=None, validation_alias=AliasChoices("fileUrl", "file_url"))

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v
