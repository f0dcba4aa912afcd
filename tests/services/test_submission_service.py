import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from billed.constants import ROUTES_PATH
from billed.indicators import ErrorIndicator
from billed.models.draft import DraftState, SubmitOutcome
from billed.models.receipt import ReceiptFile, UploadedReceipt
from billed.services.submission_service import SubmissionCoordinator
from billed.session import StaticSession
from billed.store.base import StoreError

VALID_FORM = {
    "expense-type": "Restaurants et bars",
    "expense-name": "Test bill",
    "datepicker": "2023-04-01",
    "amount": "50",
    "vat": "10",
    "pct": "20",
    "commentary": "Test commentary",
}


@pytest.fixture()
def store(uploaded_receipt):
    store = MagicMock()
    store.create_bill_draft = AsyncMock(return_value=uploaded_receipt)
    store.update_bill = AsyncMock(return_value=None)
    return store


@pytest.fixture()
def navigate():
    return MagicMock()


@pytest.fixture()
def coordinator(store, navigate):
    return SubmissionCoordinator(store, StaticSession("a@a"), navigate, ErrorIndicator())


async def _uploaded(coordinator, receipt):
    assert await coordinator.on_file_selected(receipt) is True
    return coordinator


class TestOnFileSelected:
    @pytest.mark.parametrize(
        "name",
        ["receipt.pdf", "receipt.gif", "receipt.JPG", "receipt.Png", "receipt", "receipt.jpg.exe", "C:\\fakepath\\scan.txt"],
    )
    async def test_rejects_extension_without_calling_store(self, coordinator, store, name):
        receipt = ReceiptFile(name=name, data=b"data")

        assert await coordinator.on_file_selected(receipt) is False

        store.create_bill_draft.assert_not_called()
        assert coordinator.file_error.visible is True
        assert coordinator.state is DraftState.IDLE

    @pytest.mark.parametrize("name", ["image.jpg", "image.jpeg", "image.png", "C:\\fakepath\\image.png"])
    async def test_uploads_allowed_extension(self, coordinator, store, name):
        coordinator.file_error.show()
        receipt = ReceiptFile(name=name, data=b"img", content_type="image/png")

        assert await coordinator.on_file_selected(receipt) is True

        store.create_bill_draft.assert_awaited_once_with(receipt, "a@a")
        assert coordinator.file_error.visible is False
        assert coordinator.state is DraftState.UPLOADED
        assert coordinator.draft.id == "1"
        assert coordinator.draft.file_name == "image.jpg"
        assert coordinator.draft.file_path == "path/to/image.jpg"

    async def test_upload_rejection_is_logged_and_indicator_untouched(self, coordinator, store, png_receipt, caplog):
        store.create_bill_draft.side_effect = StoreError("Erreur 404", status_code=404)

        with caplog.at_level(logging.ERROR, logger="billed.services.submission_service"):
            assert await coordinator.on_file_selected(png_receipt) is False

        assert "Receipt upload failed for image.jpg" in caplog.text
        assert coordinator.file_error.visible is False
        assert coordinator.state is DraftState.IDLE
        assert coordinator.draft.id is None

    async def test_upload_rejection_does_not_retry(self, coordinator, store, png_receipt):
        store.create_bill_draft.side_effect = StoreError("Erreur 500", status_code=500)

        await coordinator.on_file_selected(png_receipt)

        assert store.create_bill_draft.await_count == 1

    async def test_file_name_falls_back_to_selected_file(self, coordinator, store, png_receipt):
        store.create_bill_draft.return_value = UploadedReceipt(id="k1", file_url="https://files.tld/k1.jpg")

        await coordinator.on_file_selected(png_receipt)

        assert coordinator.draft.file_name == "image.jpg"
        assert coordinator.draft.file_url == "https://files.tld/k1.jpg"
        assert coordinator.draft.file_path is None

    async def test_incomplete_upload_result_is_a_failure(self, coordinator, store, png_receipt):
        store.create_bill_draft.return_value = UploadedReceipt(id="k1", file_name="image.jpg")

        assert await coordinator.on_file_selected(png_receipt) is False

        assert coordinator.state is DraftState.IDLE
        assert coordinator.draft.id is None

    async def test_without_store(self, navigate, png_receipt):
        coordinator = SubmissionCoordinator(None, StaticSession("a@a"), navigate, ErrorIndicator())

        assert await coordinator.on_file_selected(png_receipt) is False
        assert coordinator.state is DraftState.IDLE

    async def test_new_selection_replaces_previous_upload(self, coordinator, store, png_receipt):
        await coordinator.on_file_selected(png_receipt)
        first_generation = coordinator.draft.generation
        store.create_bill_draft.return_value = UploadedReceipt(id="2", file_name="other.png", file_path="p/other.png")

        await coordinator.on_file_selected(ReceiptFile(name="other.png", data=b"x"))

        assert coordinator.draft.generation > first_generation
        assert coordinator.draft.id == "2"

    async def test_invalid_selection_after_upload_blocks_submit(self, coordinator, store, png_receipt, navigate):
        await coordinator.on_file_selected(png_receipt)

        await coordinator.on_file_selected(ReceiptFile(name="notes.txt", data=b"x"))
        outcome = await coordinator.on_submit(VALID_FORM)

        assert outcome is SubmitOutcome.NOT_UPLOADED
        store.update_bill.assert_not_called()
        navigate.assert_not_called()


class TestAbandonedUpload:
    async def test_result_for_discarded_draft_is_ignored(self, coordinator, store, png_receipt, uploaded_receipt):
        release = asyncio.Event()

        async def slow_upload(file, email):
            await release.wait()
            return uploaded_receipt

        store.create_bill_draft.side_effect = slow_upload

        upload = asyncio.create_task(coordinator.on_file_selected(png_receipt))
        await asyncio.sleep(0)
        assert coordinator.state is DraftState.UPLOADING

        coordinator.discard()
        release.set()

        assert await upload is False
        assert coordinator.state is DraftState.IDLE
        assert coordinator.draft.id is None

    async def test_failure_for_discarded_draft_does_not_touch_current(self, coordinator, store, png_receipt):
        release = asyncio.Event()

        async def failing_upload(file, email):
            await release.wait()
            raise StoreError("Erreur 500", status_code=500)

        store.create_bill_draft.side_effect = failing_upload

        upload = asyncio.create_task(coordinator.on_file_selected(png_receipt))
        await asyncio.sleep(0)
        coordinator.discard()
        current = coordinator.draft
        release.set()

        assert await upload is False
        assert coordinator.draft is current
        assert current.state is DraftState.IDLE


class TestOnSubmit:
    async def test_noop_without_upload(self, coordinator, store, navigate):
        outcome = await coordinator.on_submit(VALID_FORM)

        assert outcome is SubmitOutcome.NOT_UPLOADED
        store.update_bill.assert_not_called()
        navigate.assert_not_called()

    async def test_noop_while_upload_in_flight(self, coordinator, store, navigate, png_receipt, uploaded_receipt):
        release = asyncio.Event()

        async def slow_upload(file, email):
            await release.wait()
            return uploaded_receipt

        store.create_bill_draft.side_effect = slow_upload
        upload = asyncio.create_task(coordinator.on_file_selected(png_receipt))
        await asyncio.sleep(0)

        outcome = await coordinator.on_submit(VALID_FORM)

        assert outcome is SubmitOutcome.NOT_UPLOADED
        navigate.assert_not_called()
        release.set()
        await upload

    @pytest.mark.parametrize(
        "overrides",
        [
            {"expense-name": ""},
            {"expense-name": "   "},
            {"datepicker": ""},
            {"amount": ""},
            {"amount": "abc"},
            {"amount": "0"},
            {"amount": "-10"},
        ],
    )
    async def test_noop_when_required_field_missing(self, coordinator, store, navigate, png_receipt, overrides):
        await _uploaded(coordinator, png_receipt)

        outcome = await coordinator.on_submit({**VALID_FORM, **overrides})
        await coordinator.wait_for_pending_writes()

        assert outcome is SubmitOutcome.INVALID
        store.update_bill.assert_not_called()
        navigate.assert_not_called()
        assert coordinator.state is DraftState.UPLOADED

    async def test_submits_pending_bill_and_navigates(self, coordinator, store, navigate, png_receipt):
        await _uploaded(coordinator, png_receipt)

        outcome = await coordinator.on_submit(VALID_FORM)
        navigate.assert_called_once_with(ROUTES_PATH["Bills"])
        await coordinator.wait_for_pending_writes()

        assert outcome is SubmitOutcome.SUBMITTED
        store.update_bill.assert_awaited_once()
        bill_id, bill = store.update_bill.await_args.args
        assert bill_id == "1"
        assert bill.to_payload() == {
            "email": "a@a",
            "type": "Restaurants et bars",
            "name": "Test bill",
            "date": "2023-04-01",
            "amount": 50,
            "vat": "10",
            "pct": 20,
            "commentary": "Test commentary",
            "fileName": "image.jpg",
            "filePath": "path/to/image.jpg",
            "status": "pending",
        }
        assert coordinator.state is DraftState.COMMITTED

    async def test_vat_is_kept_verbatim(self, coordinator, store, png_receipt):
        await _uploaded(coordinator, png_receipt)

        await coordinator.on_submit({**VALID_FORM, "vat": " 10,5 "})
        await coordinator.wait_for_pending_writes()

        assert store.update_bill.await_args.args[1].vat == " 10,5 "

    @pytest.mark.parametrize(("raw", "expected"), [("", 20), (None, 20), ("abc", 20), ("0", 20), ("15", 15), ("7.5", 7)])
    async def test_pct_default(self, coordinator, store, png_receipt, raw, expected):
        await _uploaded(coordinator, png_receipt)

        await coordinator.on_submit({**VALID_FORM, "pct": raw})
        await coordinator.wait_for_pending_writes()

        assert store.update_bill.await_args.args[1].pct == expected

    async def test_amount_uses_leading_integer(self, coordinator, store, png_receipt):
        await _uploaded(coordinator, png_receipt)

        await coordinator.on_submit({**VALID_FORM, "amount": "348.90"})
        await coordinator.wait_for_pending_writes()

        assert store.update_bill.await_args.args[1].amount == 348

    async def test_email_read_from_session_at_submit(self, store, navigate, png_receipt):
        session = MagicMock()
        session.get_current_user_email.return_value = "employee@test.tld"
        coordinator = SubmissionCoordinator(store, session, navigate, ErrorIndicator())
        await _uploaded(coordinator, png_receipt)

        await coordinator.on_submit(VALID_FORM)
        await coordinator.wait_for_pending_writes()

        assert store.update_bill.await_args.args[1].email == "employee@test.tld"
        assert session.get_current_user_email.call_count == 2

    async def test_commit_failure_still_navigates(self, coordinator, store, navigate, png_receipt, caplog):
        store.update_bill.side_effect = StoreError("Erreur 500", status_code=500)
        await _uploaded(coordinator, png_receipt)

        with caplog.at_level(logging.ERROR, logger="billed.services.submission_service"):
            outcome = await coordinator.on_submit(VALID_FORM)
            await coordinator.wait_for_pending_writes()

        assert outcome is SubmitOutcome.SUBMITTED
        navigate.assert_called_once_with(ROUTES_PATH["Bills"])
        assert coordinator.state is DraftState.COMMIT_FAILED
        assert "Failed to save bill 1" in caplog.text

    async def test_navigation_does_not_wait_for_update(self, coordinator, store, navigate, png_receipt):
        release = asyncio.Event()

        async def slow_update(bill_id, bill):
            await release.wait()

        store.update_bill.side_effect = slow_update
        await _uploaded(coordinator, png_receipt)

        await coordinator.on_submit(VALID_FORM)

        navigate.assert_called_once_with(ROUTES_PATH["Bills"])
        assert coordinator.state is DraftState.SUBMITTING
        release.set()
        await coordinator.wait_for_pending_writes()
        assert coordinator.state is DraftState.COMMITTED

    async def test_second_submit_is_ignored(self, coordinator, store, navigate, png_receipt):
        await _uploaded(coordinator, png_receipt)

        await coordinator.on_submit(VALID_FORM)
        outcome = await coordinator.on_submit(VALID_FORM)
        await coordinator.wait_for_pending_writes()

        assert outcome is SubmitOutcome.NOT_UPLOADED
        assert store.update_bill.await_count == 1
        assert navigate.call_count == 1

    async def test_without_store_navigates_without_write(self, navigate, png_receipt, uploaded_receipt):
        coordinator = SubmissionCoordinator(None, StaticSession("a@a"), navigate, ErrorIndicator())
        coordinator.draft.attach(uploaded_receipt, "image.jpg")

        outcome = await coordinator.on_submit(VALID_FORM)

        assert outcome is SubmitOutcome.SUBMITTED
        navigate.assert_called_once_with(ROUTES_PATH["Bills"])


class TestDiscard:
    async def test_discard_starts_fresh_draft(self, coordinator, png_receipt):
        await _uploaded(coordinator, png_receipt)
        generation = coordinator.draft.generation

        coordinator.discard()

        assert coordinator.draft.generation == generation + 1
        assert coordinator.state is DraftState.IDLE
        assert coordinator.draft.id is None

    async def test_wait_for_pending_writes_without_writes(self, coordinator):
        await coordinator.wait_for_pending_writes()
