"""Apply the data room schema through Alembic."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from .session import DATABASE_URL

LOGGER = logging.getLogger(__name__)

DATAROOM_DIR = Path(__file__).resolve().parents[3]


def _alembic_config() -> Config:
    config = Config(str(DATAROOM_DIR / "alembic.ini"))
    # env.py leaves the host application's logging alone when this is False.
    config.attributes["configure_logger"] = False
    config.set_main_option("script_location", str(DATAROOM_DIR / "migrations"))
    # ConfigParser interpolation treats '%' specially (URL-encoded passwords).
    config.set_main_option("sqlalchemy.url", DATABASE_URL.replace("%", "%%"))
    return config


def upgrade_database(revision: str = "head") -> None:
    LOGGER.info("Upgrading data room schema to %s", revision)
    command.upgrade(_alembic_config(), revision)


__all__ = ["DATAROOM_DIR", "upgrade_database"]
