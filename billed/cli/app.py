import questionary
from rich.console import Console

from billed.cli.bills_view import bills_page
from billed.cli.new_bill_view import new_bill_page
from billed.cli.router import Router
from billed.constants import ROUTES_PATH
from billed.indicators import ErrorIndicator
from billed.services.bills_service import BillsService
from billed.services.submission_service import SubmissionCoordinator
from billed.session import StaticSession
from billed.settings import settings
from billed.store.factory import get_bill_store

console = Console()


async def main_menu() -> None:
    email = settings.user_email or await questionary.text("Adresse e-mail :").ask_async()
    if not email:
        return

    store = get_bill_store()
    router = Router()
    bills_service = BillsService(store, locale=settings.locale)
    coordinator = SubmissionCoordinator(store, StaticSession(email), router.navigate, ErrorIndicator())

    console.print()
    console.print(f"[bold]Billed[/bold] · {email}", style="cyan")

    try:
        while router.current != ROUTES_PATH["Login"]:
            if router.current == ROUTES_PATH["NewBill"]:
                await new_bill_page(coordinator, router)
            else:
                await bills_page(bills_service, router)
        console.print("[bold]Au revoir ![/bold]")
    finally:
        await coordinator.wait_for_pending_writes()
        if store is not None:
            await store.close()
