"""Test configuration for Takeoff."""

from __future__ import annotations

import asyncio
import inspect
import json
import sys
from pathlib import Path
from typing import Generator

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from takeoff.config import reset_settings_cache  # noqa: E402
from takeoff.database import reset_database_state  # noqa: E402
from takeoff.llm_client import AIProvider, LLMClient, LLMRequest  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Provide isolated configuration for each test."""

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("MAX_UPLOAD_SIZE", str(64 * 1024))
    monkeypatch.setenv("CLAUDE_API_KEY", "sk-test-claude")
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini")
    monkeypatch.setenv("DEFAULT_PROVIDER", "claude")
    reset_settings_cache()
    reset_database_state()
    yield
    reset_settings_cache()
    reset_database_state()


class MockLLM(LLMClient):
    """Mock LLM client with a simple FIFO response queue shared by both providers."""

    def __init__(self) -> None:
        super().__init__(
            {AIProvider.CLAUDE: self._dispatch, AIProvider.GEMINI: self._dispatch}
        )
        self._queue: list[str | Exception] = []
        self.requests: list[LLMRequest] = []

    def enqueue(self, response: str | Exception) -> None:
        self._queue.append(response)

    async def _dispatch(self, request: LLMRequest) -> str:
        self.requests.append(request)
        if not self._queue:
            raise RuntimeError("MockLLM was called without a queued response")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def mock_llm() -> MockLLM:
    return MockLLM()


@pytest.fixture()
def client(mock_llm: MockLLM) -> Generator[TestClient, None, None]:
    """Return a test client whose provider calls go to ``mock_llm``."""

    from takeoff.app import app
    from takeoff.routers.extraction import get_llm_client

    app.dependency_overrides[get_llm_client] = lambda: mock_llm
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_llm_client, None)


def make_item(**overrides: str) -> dict[str, str]:
    item = {
        "itemType": "HVAC Equipment",
        "quantity": "2 EA",
        "modelNumber": "RTU-5",
        "specReference": "23 74 13",
        "pageReference": "M-101",
        "dimensions": "5 TON, 460V/3PH",
        "mountingType": "Roof curb",
        "additionalNotes": "N/A",
    }
    item.update(overrides)
    return item


def make_payload(items: list[dict[str, str]] | None = None) -> dict:
    items = [make_item()] if items is None else items
    return {
        "summary": "Mechanical equipment schedule with rooftop units",
        "totalItemsFound": len(items),
        "documentType": "Equipment Schedule",
        "extractedItems": items,
        "recommendations": ["Confirm curb dimensions with the roofing contractor"],
    }


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def valid_payload() -> dict:
    return make_payload()


@pytest.fixture
def valid_answer(valid_payload: dict) -> str:
    return json.dumps(valid_payload, indent=2)


def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        loop = asyncio.new_event_loop()
        try:
            signature = inspect.signature(pyfuncitem.obj)
            kwargs = {
                name: pyfuncitem.funcargs[name]
                for name in signature.parameters
                if name in pyfuncitem.funcargs
            }
            loop.run_until_complete(pyfuncitem.obj(**kwargs))
        finally:
            loop.close()
        return True
    return None
