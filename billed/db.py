import logging
import os
from pathlib import Path
from typing import Any

from alembic.config import Config
from sqlalchemy import Connection, create_engine, make_url
from sqlalchemy.engine import Engine

from alembic import command
from billed.settings import settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_connection: Connection | None = None


def _engine_options(db_url: str) -> dict[str, Any]:
    """SQLite (the default) needs its directory to exist; server databases get pool health checks."""
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True, "pool_recycle": 1800}
    if url.database and url.database != ":memory:":
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return {}


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(settings.db_url, **_engine_options(settings.db_url))
        logger.info("Database engine created for %s", make_url(settings.db_url).render_as_string(hide_password=True))
    return _engine


def get_connection() -> Connection:
    """Return the process-wide connection used by the local bill store."""
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
        logger.debug("Bill store connection opened")
    return _connection


def close_connection() -> None:
    global _connection
    if _connection is not None:
        _connection.close()
        _connection = None
        logger.debug("Bill store connection closed")


def _get_alembic_config() -> Config:
    """Alembic config for the bills migrations, whatever the working directory."""
    project_root = os.path.dirname(os.path.dirname(__file__))
    ini_path = os.path.join(project_root, "alembic.ini")
    if not os.path.exists(ini_path):
        ini_path = os.path.join(os.getcwd(), "alembic.ini")
    cfg = Config(ini_path)
    cfg.set_main_option("script_location", os.path.join(project_root, "alembic"))
    return cfg


def initialize_db() -> None:
    """Bring the local bills database to the latest revision."""
    logger.info("Running Alembic migrations")
    cfg = _get_alembic_config()
    command.upgrade(cfg, "head")
    logger.info("Migrations complete")
