"""Locating and opening the bizdocs SQLite store."""

import logging
import os
from pathlib import Path
from typing import Optional

from bizdocs.database.sqlalchemy_db import SQLAlchemyDatabase

log = logging.getLogger("bizdocs.database")

DB_PATH_ENV = "BIZDOCS_DB_PATH"
DEFAULT_DB_FILE = Path("~/.bizdocs/bizdocs.db")


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the store file: the argument, then BIZDOCS_DB_PATH, then ~/.bizdocs/bizdocs.db.

    A leading "~" is expanded and the parent directory is created, so a
    fresh path can be passed on the command line.
    """
    chosen = database_path or os.environ.get(DB_PATH_ENV) or DEFAULT_DB_FILE
    path = Path(chosen).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open the quotation and proposal store in a SQLite file.

    Args:
        database_path: Store file; see resolve_database_path for the fallbacks

    Returns:
        SQLAlchemyDatabase bound to that file
    """
    path = resolve_database_path(database_path)
    log.debug("Using quotation store at %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
