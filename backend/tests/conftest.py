"""
Pytest configuration for backend tests.

Forces AnyIO onto the asyncio backend and wires the FastAPI app to a
per-test JSON file and a simulated Telegram bot service.
"""
import json

import httpx
import pytest
from httpx import ASGITransport

from student_records.database import get_store, get_verifier
from student_records.main import app
from student_records.services.record_store import RecordStore
from student_records.services.verification import VerificationCoordinator

BOT_URL = "http://bot.test"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def students_file(tmp_path):
    return tmp_path / "data" / "students.json"


@pytest.fixture
def store(students_file):
    return RecordStore(students_file)


class FakeBot:
    """
    Stand-in for the Telegram bot service.

    Tests set `reply` to (status, body) or to an exception instance;
    every request is recorded in `calls` as (path, json_body).
    """

    def __init__(self):
        self.reply = (200, {"success": True})
        self.calls = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.url.path, json.loads(request.content)))
        if isinstance(self.reply, Exception):
            raise self.reply
        status, body = self.reply
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
def verifier(bot):
    return VerificationCoordinator(BOT_URL, transport=httpx.MockTransport(bot.handler))


@pytest.fixture
async def client(store, verifier):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_verifier] = lambda: verifier
    try:
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.clear()
