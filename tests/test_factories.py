"""Tests for locating the SQLite store."""

from pathlib import Path

from bizdocs.database.factories import create_sqlite_database, resolve_database_path
from bizdocs.database.sqlalchemy_db import SQLAlchemyDatabase


def test_explicit_path_wins(tmp_path, monkeypatch):
    """Test that the argument overrides BIZDOCS_DB_PATH."""
    monkeypatch.setenv("BIZDOCS_DB_PATH", str(tmp_path / "env.db"))
    assert resolve_database_path(str(tmp_path / "arg.db")) == tmp_path / "arg.db"


def test_env_path(tmp_path, monkeypatch):
    """Test BIZDOCS_DB_PATH and creation of its parent directory."""
    target = tmp_path / "nested" / "store.db"
    monkeypatch.setenv("BIZDOCS_DB_PATH", str(target))

    assert resolve_database_path() == target
    assert target.parent.is_dir()


def test_default_path_under_home(tmp_path, monkeypatch):
    """Test the ~/.bizdocs default with a leading tilde expanded."""
    monkeypatch.delenv("BIZDOCS_DB_PATH", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    path = resolve_database_path()

    assert path == Path(tmp_path) / ".bizdocs" / "bizdocs.db"
    assert path.parent.is_dir()


def test_create_sqlite_database(tmp_path):
    """Test that the store opens and works in a new directory."""
    db = create_sqlite_database(str(tmp_path / "data" / "bizdocs.db"))
    db.connect()
    db.initialize_schema()
    try:
        assert isinstance(db, SQLAlchemyDatabase)
        assert db.list_quotations() == []
    finally:
        db.disconnect()
