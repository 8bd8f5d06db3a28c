"""
Shared fixtures: every test gets its own SQLite file and data directory.
"""

import sqlite3

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from config.settings import Settings
from database.session import build_engine, build_session_factory
from database.store import CredentialStore


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'login.db'}",
        data_dir=str(tmp_path / "data"),
        bcrypt_rounds=4,
        create_tables=True,
    )


@pytest.fixture
def client(settings):
    from main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def db_rows(tmp_path):
    """Read the users table straight from the SQLite file."""

    def _rows(username=None):
        conn = sqlite3.connect(tmp_path / "login.db")
        try:
            conn.row_factory = sqlite3.Row
            if username is None:
                return conn.execute("SELECT * FROM users").fetchall()
            return conn.execute(
                "SELECT * FROM users WHERE username = ?", (username,)
            ).fetchall()
        finally:
            conn.close()

    return _rows


@pytest_asyncio.fixture
async def store(settings):
    engine = build_engine(settings.database_url)
    credential_store = CredentialStore(engine, build_session_factory(engine))
    await credential_store.create_tables()
    yield credential_store
    await credential_store.close()
