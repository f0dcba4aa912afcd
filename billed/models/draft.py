from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from billed.models.receipt import UploadedReceipt


class DraftState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    SUBMITTING = "submitting"
    COMMITTED = "committed"
    COMMIT_FAILED = "commit_failed"


class SubmitOutcome(str, Enum):
    NOT_UPLOADED = "not_uploaded"
    INVALID = "invalid"
    SUBMITTED = "submitted"


@dataclass
class BillDraft:
    """The in-memory bill being assembled on the new-bill form."""

    generation: int
    state: DraftState = DraftState.IDLE
    id: str | None = None
    file_name: str | None = None
    file_path: str | None = None
    file_url: str | None = None

    def attach(self, receipt: UploadedReceipt, file_name: str) -> None:
        if self.id is not None:
            raise ValueError(f"Draft {self.generation} already has id {self.id}")
        self.id = receipt.id
        self.file_name = file_name
        self.file_path = receipt.file_path
        self.file_url = receipt.file_url
        self.state = DraftState.UPLOADED
