"""Tests for quota project resolution."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cepbot.gcp import GCPEnvironment
from cepbot.quota import resolve_quota_project


def _patches(*, adc=None, gcloud_project=None, set_quota=None, create=None):
    return (
        patch("cepbot.quota.gcloud.get_quota_project", AsyncMock(return_value=adc)),
        patch("cepbot.quota.gcloud.get_gcloud_project", AsyncMock(return_value=gcloud_project)),
        patch("cepbot.quota.gcloud.set_quota_project", set_quota or AsyncMock()),
        patch("cepbot.quota.projects.create_project", create or AsyncMock()),
    )


@pytest.mark.asyncio
async def test_gcp_environment_wins():
    adc, cfg, set_quota, create = _patches(adc="adc-proj")
    with adc as adc_mock, cfg, set_quota, create as create_mock:
        result = await resolve_quota_project(GCPEnvironment("gce-proj", "europe-west4"))

    assert result.ok
    assert (result.project_id, result.region) == ("gce-proj", "europe-west4")
    adc_mock.assert_not_awaited()
    create_mock.assert_not_awaited()


@pytest.mark.asyncio
async def test_adc_quota_project_with_default_region():
    adc, cfg, set_quota, create = _patches(adc="adc-proj", gcloud_project="cfg-proj")
    with adc, cfg as cfg_mock, set_quota, create:
        result = await resolve_quota_project(None)

    assert result.ok
    assert (result.project_id, result.region) == ("adc-proj", "us-central1")
    cfg_mock.assert_not_awaited()


@pytest.mark.asyncio
async def test_default_region_is_configurable(monkeypatch):
    from cepbot.config import reset_settings

    monkeypatch.setenv("CEPBOT_DEFAULT_REGION", "europe-west1")
    reset_settings()
    adc, cfg, set_quota, create = _patches(adc="adc-proj")
    with adc, cfg, set_quota, create:
        result = await resolve_quota_project(None)

    assert result.region == "europe-west1"


@pytest.mark.asyncio
async def test_gcloud_config_project_is_persisted():
    adc, cfg, set_quota, create = _patches(gcloud_project="cfg-proj")
    with adc, cfg, set_quota as set_mock, create:
        result = await resolve_quota_project(None)

    assert result.ok
    assert result.project_id == "cfg-proj"
    set_mock.assert_awaited_once_with("cfg-proj")


@pytest.mark.asyncio
async def test_persist_failure_is_only_a_warning():
    progress = MagicMock()
    failing = AsyncMock(side_effect=RuntimeError("read-only file"))
    adc, cfg, set_quota, create = _patches(gcloud_project="cfg-proj", set_quota=failing)
    with adc, cfg, set_quota, create:
        result = await resolve_quota_project(None, progress)

    assert result.ok
    assert result.project_id == "cfg-proj"
    levels = [c.args[0].level for c in progress.call_args_list]
    assert "warn" in levels


@pytest.mark.asyncio
async def test_creates_project_when_nothing_found():
    created = AsyncMock(return_value="mcp-bat-cat")
    adc, cfg, set_quota, create = _patches(create=created)
    with adc, cfg, set_quota as set_mock, create:
        result = await resolve_quota_project(None)

    assert result.ok
    assert result.project_id == "mcp-bat-cat"
    set_mock.assert_awaited_once_with("mcp-bat-cat")


@pytest.mark.asyncio
async def test_creation_failure_is_reported():
    failing = AsyncMock(side_effect=RuntimeError("billing disabled"))
    adc, cfg, set_quota, create = _patches(create=failing)
    with adc, cfg, set_quota, create:
        result = await resolve_quota_project(None)

    assert not result.ok
    assert result.reason == "Failed to create quota project: billing disabled"
