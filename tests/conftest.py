from __future__ import annotations

import io
import json
import logging
from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import get_settings
from app.main import app
from app.observability.logging import configure_logging


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HOST", "PORT", "LOG_LEVEL", "LOG_JSON", "HEAVY_COMPUTATION_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def log_stream() -> io.StringIO:
    # Every test logs into its own buffer, so nothing reaches stdout.
    stream = io.StringIO()
    configure_logging(logging.INFO, json_logs=True, stream=stream, force=True)
    # httpx logs each test request at INFO after the request context is gone.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return stream


@pytest.fixture
def read_logs(log_stream: io.StringIO) -> Callable[[], list[dict]]:
    def _read() -> list[dict]:
        return [json.loads(line) for line in log_stream.getvalue().splitlines() if line.strip()]

    return _read


@pytest.fixture
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
