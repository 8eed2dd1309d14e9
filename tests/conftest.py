import asyncio
import os
import tempfile

import pytest

# Settings are read at import time, so the environment goes first
_TMP = tempfile.mkdtemp(prefix="baytkom-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP}/test.db"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["CLEANUP_INTERVAL_MINUTES"] = "0"
os.environ["VAPID_PUBLIC_KEY"] = ""
os.environ["VAPID_PRIVATE_KEY"] = ""
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin1234"
os.environ["LOCAL_TIMEZONE"] = "Asia/Kuwait"

from fastapi.testclient import TestClient  # noqa: E402

ADMIN = ("admin", "admin1234")


def login(client: TestClient, username: str, password: str) -> dict:
    res = client.post("/api/auth/login", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    return res.json()


@pytest.fixture
def app():
    from baytkom.db import drop_db_and_tables
    from baytkom.main import app as fastapi_app

    asyncio.run(drop_db_and_tables())
    return fastapi_app


@pytest.fixture
def client(app):
    """Admin session; entering the context runs startup (tables + default admin)."""
    with TestClient(app) as c:
        login(c, *ADMIN)
        yield c


@pytest.fixture
def make_user(client):
    def _make(username: str, role: str = "household", password: str = "secret123", **flags) -> dict:
        res = client.post(
            "/api/admin/create-user",
            json={"username": username, "password": password, "role": role, "display_name": username.title(), **flags},
        )
        assert res.status_code == 200, res.text
        return res.json()

    return _make


@pytest.fixture
def client_for(app, client):
    """Separate cookie jar logged in as another user."""
    clients = []

    def _client(username: str, password: str = "secret123") -> TestClient:
        c = TestClient(app)
        login(c, username, password)
        clients.append(c)
        return c

    yield _client
    for c in clients:
        c.close()


@pytest.fixture
def with_db():
    """Run `fn(db)` against a fresh AsyncSession and return its result."""
    from baytkom.db import async_session

    def _run(fn):
        async def _inner():
            async with async_session() as db:
                return await fn(db)

        return asyncio.run(_inner())

    return _run


@pytest.fixture
def fresh_db():
    from baytkom.db import create_db_and_tables, drop_db_and_tables

    async def _reset():
        await drop_db_and_tables()
        await create_db_and_tables()

    asyncio.run(_reset())
