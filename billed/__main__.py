import asyncio

from billed.cli.app import main_menu
from billed.db import close_connection, initialize_db
from billed.logging import configure_logging, reconfigure
from billed.settings import settings


def main() -> None:
    configure_logging()
    local = settings.store_backend == "local"
    if local:
        initialize_db()
        # Alembic's fileConfig replaces the root logger configuration
        reconfigure()
    try:
        asyncio.run(main_menu())
    finally:
        if local:
            close_connection()


if __name__ == "__main__":
    main()
