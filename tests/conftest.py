"""Shared test fixtures for cepbot."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# ---------------------------------------------------------------------------
# Shared helpers (plain functions, not fixtures; importable by test files)
# ---------------------------------------------------------------------------


def fake_response(status: int = 200, body: Any = None) -> MagicMock:
    """aiohttp-style response. ``body`` may be a str (raw) or JSON-able."""
    text = body if isinstance(body, str) else ("" if body is None else json.dumps(body))
    resp = MagicMock()
    resp.status = status
    resp.text = AsyncMock(return_value=text)
    resp.json = AsyncMock(side_effect=lambda *_a, **_k: json.loads(text) if text else None)
    return resp


def mock_aiohttp_session(module: str, responses: list[Any]):
    """Patch ``<module>.aiohttp.ClientSession`` with canned responses.

    ``responses`` is consumed in request order; each item is either a
    ``(status, body)`` tuple or an exception to raise from the request.
    Returns ``(patcher, calls)`` where ``calls`` records every request as a
    namespace with ``method``, ``url`` and ``kwargs``.
    """
    queue = list(responses)
    calls: list[SimpleNamespace] = []

    @asynccontextmanager
    async def _request(method: str, url: str, **kwargs: Any):
        calls.append(SimpleNamespace(method=method, url=url, kwargs=kwargs))
        item = queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        status, body = item
        yield fake_response(status, body)

    session = MagicMock()
    session.request = _request
    session.get = lambda url, **kwargs: _request("GET", url, **kwargs)

    @asynccontextmanager
    async def _session_ctx(*_args: Any, **_kwargs: Any):
        yield session

    return patch(f"{module}.aiohttp.ClientSession", _session_ctx), calls


# ---------------------------------------------------------------------------
# Autouse fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Every test starts booting, uncached, and with default settings.

    Env vars that would leak operator config into Settings are removed.
    """
    from cepbot.api.fetch import reset_cached_auth
    from cepbot.config import reset_settings
    from cepbot.server_state import server_health
    from cepbot.tools import customer_id_cache

    for var in ("CEPBOT_DEFAULT_REGION", "CEPBOT_GCLOUD__ADC_PATH", "CEPBOT_GCLOUD__BIN"):
        monkeypatch.delenv(var, raising=False)

    reset_settings()
    reset_cached_auth()
    server_health.reset()
    customer_id_cache.clear()
    yield
    reset_settings()
    reset_cached_auth()
    server_health.reset()
    customer_id_cache.clear()


@pytest.fixture
def adc_file(tmp_path, monkeypatch):
    """Write an ADC file under tmp_path and point settings at it."""
    from cepbot.config import reset_settings

    path = tmp_path / "application_default_credentials.json"
    monkeypatch.setenv("CEPBOT_GCLOUD__ADC_PATH", str(path))
    reset_settings()

    def _write(data: dict[str, Any]):
        path.write_text(json.dumps(data))
        return path

    return _write
