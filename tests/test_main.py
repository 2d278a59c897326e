"""Tests for the startup wiring in cepbot.__main__."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from cepbot import __main__ as entry
from cepbot.bootstrap import BootstrapFailure, BootstrapSuccess
from cepbot.config import reset_settings
from cepbot.errors import gcloud_missing_error
from cepbot.server_state import Degraded, Healthy, get_server_state
from cepbot.tools import customer_id_cache


def _startup(result):
    return (
        patch("cepbot.__main__.bootstrap", AsyncMock(return_value=result)),
        patch("cepbot.__main__.run_server", AsyncMock()),
    )


class TestStartup:
    @pytest.mark.asyncio
    async def test_success_marks_healthy_and_seeds_customer_id(self):
        boot, serve = _startup(
            BootstrapSuccess(project_id="my-project", region="us-central1", customer_id="C012345")
        )
        with boot, serve as run_mock:
            await entry._main()

        assert get_server_state() == Healthy("my-project", "us-central1")
        assert customer_id_cache.get() == "C012345"
        run_mock.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_marks_degraded_and_still_serves(self):
        error = gcloud_missing_error("not found")
        progress = []
        boot, serve = _startup(BootstrapFailure(error=error))
        with (
            boot,
            serve as run_mock,
            patch("cepbot.__main__.create_progress_logger", return_value=progress.append),
        ):
            await entry._main()

        assert get_server_state() == Degraded(error)
        assert customer_id_cache.get() is None
        run_mock.assert_awaited_once()
        assert progress[-1].data == "cepbot MCP server running in DEGRADED mode on stdio"
        assert progress[-1].level == "warn"


class TestStartupLogLevel:
    @pytest.mark.asyncio
    async def test_env_level_kept_when_settings_unset(self, monkeypatch):
        monkeypatch.delenv("CEPBOT_LOGGING__LEVEL", raising=False)
        reset_settings()
        boot, serve = _startup(BootstrapSuccess(project_id="p", region="r"))
        with boot, serve, patch("cepbot.__main__.set_level") as set_level:
            await entry._main()

        set_level.assert_not_called()

    @pytest.mark.asyncio
    async def test_settings_level_applied(self, monkeypatch):
        monkeypatch.setenv("CEPBOT_LOGGING__LEVEL", "debug")
        reset_settings()
        boot, serve = _startup(BootstrapSuccess(project_id="p", region="r"))
        with boot, serve, patch("cepbot.__main__.set_level") as set_level:
            await entry._main()

        set_level.assert_called_once_with("DEBUG")


def test_main_exits_nonzero_on_fatal_error():
    with (
        patch("cepbot.__main__._main", AsyncMock(side_effect=RuntimeError("boom"))),
        pytest.raises(SystemExit) as excinfo,
    ):
        entry.main()
    assert excinfo.value.code == 1
