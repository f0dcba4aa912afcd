import logging
import sys

from billed.settings import settings

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Per-request and per-revision chatter; the store and db modules log what matters.
QUIET_LOGGERS = ("httpx", "httpcore", "alembic.runtime.migration")


def configure_logging() -> None:
    """Send log records to stderr so they stay out of the interactive prompts.

    Call once at startup, and again through ``reconfigure()`` after
    ``initialize_db()``: Alembic's ``fileConfig`` replaces the root handlers.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)

    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    quiet_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


reconfigure = configure_logging
