from __future__ import annotations

import logging

import questionary
from rich.console import Console
from rich.table import Table

from billed.cli.router import Router
from billed.constants import ROUTES_PATH
from billed.models.bill import DisplayBill
from billed.services.bills_service import BillsService
from billed.store.base import StoreError

logger = logging.getLogger(__name__)

console = Console()

NEW_BILL = "Nouvelle note de frais"
VIEW_RECEIPT = "Voir un justificatif"
REFRESH = "Actualiser"
RETRY = "Réessayer"
BACK = "Retour"
QUIT = "Quitter"


def anti_chrono(bills: list[DisplayBill]) -> list[DisplayBill]:
    """Most recent first, on the stored 'YYYY-MM-DD' date."""
    return sorted(bills, key=lambda b: b.date, reverse=True)


def format_amount(amount: int | None) -> str:
    if amount is None:
        return ""
    return f"{amount} €"


def build_bills_table(bills: list[DisplayBill]) -> Table:
    table = Table(title="Mes notes de frais")
    table.add_column("Type")
    table.add_column("Nom")
    table.add_column("Date")
    table.add_column("Montant", justify="right")
    table.add_column("Statut", justify="center")
    for bill in bills:
        table.add_row(bill.type, bill.name, bill.display_date, format_amount(bill.amount), bill.display_status)
    return table


async def _show_receipt(bills: list[DisplayBill]) -> None:
    labels = {f"{i} - {bill.name} ({bill.display_date})": bill for i, bill in enumerate(bills, 1)}
    choice = await questionary.select("Justificatif de :", choices=[*labels, BACK]).ask_async()
    bill = labels.get(choice or BACK)
    if bill is None:
        return
    location = bill.receipt_location
    if not location:
        console.print("[yellow]Aucun justificatif pour cette note de frais.[/yellow]")
        return
    console.print(f"  Fichier : {bill.file_name or ''}")
    console.print(f"  Lien : {location}")


async def _error_page(error: StoreError, router: Router) -> None:
    console.print()
    console.print("[bold red]Erreur[/bold red]")
    console.print(f"  {error}")
    choice = await questionary.select("Que faire ?", choices=[RETRY, QUIT]).ask_async()
    if choice != RETRY:
        router.navigate(ROUTES_PATH["Login"])


async def bills_page(bills_service: BillsService, router: Router) -> None:
    try:
        bills = await bills_service.get_bills()
    except StoreError as exc:
        logger.error("Could not load bills: %s", exc)
        await _error_page(exc, router)
        return

    bills = anti_chrono(bills)
    console.print()
    if bills:
        console.print(build_bills_table(bills))
    else:
        console.print("[dim]Aucune note de frais.[/dim]")

    choices = [NEW_BILL, VIEW_RECEIPT, REFRESH, QUIT] if bills else [NEW_BILL, REFRESH, QUIT]
    choice = await questionary.select("Mes notes de frais", choices=choices).ask_async()

    if choice == NEW_BILL:
        router.navigate(ROUTES_PATH["NewBill"])
    elif choice == VIEW_RECEIPT:
        await _show_receipt(bills)
    elif choice is None or choice == QUIT:
        router.navigate(ROUTES_PATH["Login"])
