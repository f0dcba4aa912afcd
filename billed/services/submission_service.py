from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping

from billed.constants import ROUTES_PATH
from billed.forms import (
    FIELD_AMOUNT,
    FIELD_COMMENTARY,
    FIELD_DATE,
    FIELD_NAME,
    FIELD_PCT,
    FIELD_TYPE,
    FIELD_VAT,
    parse_int,
    parse_pct,
)
from billed.indicators import ErrorIndicator
from billed.models.bill import Bill, BillStatus
from billed.models.draft import BillDraft, DraftState, SubmitOutcome
from billed.models.receipt import ReceiptFile
from billed.session import SessionReader
from billed.store.base import BillStore

logger = logging.getLogger(__name__)


class SubmissionCoordinator:
    """Drives the new-bill form: eager receipt upload, then a gated submit.

    The receipt is uploaded as soon as it is selected, which creates the
    bill in the store and assigns its id.  Submitting the form fills in the
    remaining fields on that bill.  Every file selection and every
    ``discard()`` starts a new draft generation; results of uploads started
    for an older draft are dropped.
    """

    def __init__(
        self,
        store: BillStore | None,
        session: SessionReader,
        navigate: Callable[[str], None],
        file_error: ErrorIndicator,
    ) -> None:
        self.store = store
        self.session = session
        self.navigate = navigate
        self.file_error = file_error
        self._generation = 0
        self._pending_writes: set[asyncio.Task[None]] = set()
        self.draft = self._new_draft()

    def _new_draft(self) -> BillDraft:
        self._generation += 1
        return BillDraft(generation=self._generation)

    def _is_current(self, draft: BillDraft) -> bool:
        return draft.generation == self.draft.generation

    @property
    def state(self) -> DraftState:
        return self.draft.state

    def discard(self) -> None:
        """Drop the current draft, e.g. when the user leaves the form."""
        logger.debug("Discarding draft generation=%d state=%s", self.draft.generation, self.draft.state.value)
        self.draft = self._new_draft()

    async def on_file_selected(self, file: ReceiptFile) -> bool:
        """Validate and upload the selected receipt. Returns True once it is attached to the draft."""
        draft = self._new_draft()
        self.draft = draft

        if not file.is_allowed:
            logger.info("Receipt %s rejected: extension %r not allowed", file.base_name, file.extension)
            self.file_error.show()
            return False
        self.file_error.hide()

        if self.store is None:
            logger.warning("No bill store configured, receipt %s not uploaded", file.base_name)
            return False

        email = self.session.get_current_user_email()
        draft.state = DraftState.UPLOADING
        try:
            uploaded = await self.store.create_bill_draft(file, email)
        except Exception:
            logger.exception("Receipt upload failed for %s", file.base_name)
            if self._is_current(draft):
                draft.state = DraftState.IDLE
            return False

        if not self._is_current(draft):
            logger.info(
                "Upload of %s finished for abandoned draft generation=%d, ignoring",
                file.base_name,
                draft.generation,
            )
            return False

        if not uploaded.id or not (uploaded.file_path or uploaded.file_url):
            logger.error("Store returned an incomplete upload result for %s: %r", file.base_name, uploaded)
            draft.state = DraftState.IDLE
            return False

        draft.attach(uploaded, uploaded.file_name or file.base_name)
        logger.info("Receipt %s attached to bill %s", draft.file_name, draft.id)
        return True

    def _build_bill(self, form: Mapping[str, str | None], draft: BillDraft) -> Bill:
        return Bill(
            email=self.session.get_current_user_email(),
            type=form.get(FIELD_TYPE) or "",
            name=(form.get(FIELD_NAME) or "").strip(),
            amount=parse_int(form.get(FIELD_AMOUNT)),
            date=(form.get(FIELD_DATE) or "").strip(),
            vat=form.get(FIELD_VAT) or "",
            pct=parse_pct(form.get(FIELD_PCT)),
            commentary=form.get(FIELD_COMMENTARY) or "",
            file_name=draft.file_name,
            file_path=draft.file_path,
            file_url=draft.file_url,
            status=BillStatus.PENDING.value,
        )

    async def on_submit(self, form: Mapping[str, str | None]) -> SubmitOutcome:
        """Commit the draft with the form values and go back to the bill list.

        The store update runs in the background: navigation happens as soon
        as the update is issued, whatever its outcome.
        """
        draft = self.draft
        if draft.state is not DraftState.UPLOADED:
            logger.info("Submit ignored: receipt not uploaded (state=%s)", draft.state.value)
            return SubmitOutcome.NOT_UPLOADED

        bill = self._build_bill(form, draft)
        if not bill.name or not bill.date or not bill.amount or bill.amount < 0:
            logger.info("Submit refused for bill %s: name, date and amount are required", draft.id)
            return SubmitOutcome.INVALID

        draft.state = DraftState.SUBMITTING
        if self.store is None:
            logger.warning("No bill store configured, bill %s not saved", draft.id)
        else:
            task = asyncio.create_task(self._commit(self.store, draft, bill))
            self._pending_writes.add(task)
            task.add_done_callback(self._pending_writes.discard)

        self.navigate(ROUTES_PATH["Bills"])
        return SubmitOutcome.SUBMITTED

    async def _commit(self, store: BillStore, draft: BillDraft, bill: Bill) -> None:
        try:
            await store.update_bill(str(draft.id), bill)
        except Exception:
            draft.state = DraftState.COMMIT_FAILED
            logger.exception("Failed to save bill %s", draft.id)
            return
        draft.state = DraftState.COMMITTED
        logger.info("Bill %s submitted: name=%s, amount=%s", draft.id, bill.name, bill.amount)

    async def wait_for_pending_writes(self) -> None:
        if self._pending_writes:
            logger.debug("Waiting for %d pending bill writes", len(self._pending_writes))
            await asyncio.gather(*self._pending_writes)
