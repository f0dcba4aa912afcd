from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path

import questionary
from rich.console import Console

from billed.cli.router import Router
from billed.constants import ALLOWED_RECEIPT_EXTENSIONS, EXPENSE_TYPES, ROUTES_PATH
from billed.forms import (
    FIELD_AMOUNT,
    FIELD_COMMENTARY,
    FIELD_DATE,
    FIELD_NAME,
    FIELD_PCT,
    FIELD_TYPE,
    FIELD_VAT,
)
from billed.models.draft import SubmitOutcome
from billed.models.receipt import ReceiptFile
from billed.services.submission_service import SubmissionCoordinator

logger = logging.getLogger(__name__)

console = Console()


def load_receipt(path: str) -> ReceiptFile:
    file_path = Path(path).expanduser()
    content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return ReceiptFile(name=file_path.name, data=file_path.read_bytes(), content_type=content_type)


async def _select_receipt(coordinator: SubmissionCoordinator) -> asyncio.Task[bool] | None:
    """Ask for the receipt until one passes the format check; its upload runs in the background."""
    while True:
        path = await questionary.path("Justificatif (jpg, jpeg ou png) :").ask_async()
        if not path:
            return None
        try:
            receipt = load_receipt(path)
        except OSError as exc:
            console.print(f"[red]Impossible de lire {path} : {exc.strerror}[/red]")
            continue

        upload = asyncio.create_task(coordinator.on_file_selected(receipt))
        # The format check runs before the first await of on_file_selected.
        await asyncio.sleep(0)
        if coordinator.file_error.visible:
            console.print(f"[red]Formats acceptés : {', '.join(ALLOWED_RECEIPT_EXTENSIONS)}.[/red]")
            continue
        return upload


async def _ask_fields(previous: dict[str, str]) -> dict[str, str] | None:
    expense_type = await questionary.select(
        "Type de dépense",
        choices=EXPENSE_TYPES,
        default=previous.get(FIELD_TYPE) or None,
    ).ask_async()
    if expense_type is None:
        return None

    form = {FIELD_TYPE: expense_type}
    prompts = [
        (FIELD_NAME, "Nom de la dépense :"),
        (FIELD_DATE, "Date (AAAA-MM-JJ) :"),
        (FIELD_AMOUNT, "Montant TTC :"),
        (FIELD_VAT, "TVA :"),
        (FIELD_PCT, "% TVA (20 par défaut) :"),
        (FIELD_COMMENTARY, "Commentaire :"),
    ]
    for key, message in prompts:
        form[key] = await questionary.text(message, default=previous.get(key, "")).ask_async() or ""
    return form


def _leave(coordinator: SubmissionCoordinator, router: Router) -> None:
    coordinator.discard()
    router.navigate(ROUTES_PATH["Bills"])


async def new_bill_page(coordinator: SubmissionCoordinator, router: Router) -> None:
    coordinator.discard()
    coordinator.file_error.hide()
    console.print()
    console.print("[bold]Envoyer une note de frais[/bold]", style="cyan")

    upload = await _select_receipt(coordinator)
    if upload is None:
        _leave(coordinator, router)
        return

    form: dict[str, str] = {}
    while True:
        answers = await _ask_fields(form)
        if answers is None:
            _leave(coordinator, router)
            return
        form = answers

        if not upload.done():
            console.print("[dim]Envoi du justificatif en cours…[/dim]")
        await upload

        outcome = await coordinator.on_submit(form)
        if outcome is SubmitOutcome.SUBMITTED:
            console.print("[green]Note de frais envoyée.[/green]")
            return
        if outcome is SubmitOutcome.INVALID:
            console.print("[red]Le nom, la date et le montant sont obligatoires.[/red]")
            continue

        console.print("[red]Le justificatif n'a pas pu être envoyé, sélectionnez-le à nouveau.[/red]")
        upload = await _select_receipt(coordinator)
        if upload is None:
            _leave(coordinator, router)
            return
