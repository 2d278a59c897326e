"""Tests for ADC verification and token scope introspection."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import aiohttp
import pytest
from conftest import mock_aiohttp_session

from cepbot.auth import verify_adc_credentials, verify_token_scopes

_MODULE = "cepbot.auth"


class TestVerifyAdcCredentials:
    @pytest.mark.asyncio
    async def test_returns_token(self):
        creds = MagicMock()
        with (
            patch("cepbot.auth.load_adc_credentials", return_value=creds),
            patch("cepbot.auth.refresh_access_token", return_value="ya29.token"),
        ):
            result = await verify_adc_credentials()

        assert result.ok
        assert result.token == "ya29.token"

    @pytest.mark.asyncio
    async def test_missing_token_is_failure(self):
        with (
            patch("cepbot.auth.load_adc_credentials", return_value=MagicMock()),
            patch("cepbot.auth.refresh_access_token", return_value=None),
        ):
            result = await verify_adc_credentials()

        assert not result.ok
        assert result.reason == "ADC produced no access token"

    @pytest.mark.asyncio
    async def test_provider_error_is_failure(self):
        error = RuntimeError("Could not automatically determine credentials")
        with patch("cepbot.auth.load_adc_credentials", side_effect=error):
            result = await verify_adc_credentials()

        assert not result.ok
        assert "Could not automatically determine credentials" in result.reason
        assert result.cause is error


class TestVerifyTokenScopes:
    @pytest.mark.asyncio
    async def test_all_required_granted(self):
        patcher, calls = mock_aiohttp_session(_MODULE, [(200, {"scope": "a b c"})])
        with patcher:
            result = await verify_token_scopes("tok", ["a", "b"])

        assert result.ok
        assert result.source == "tokeninfo"
        assert result.granted == ["a", "b", "c"]
        assert result.missing == []
        assert calls[0].kwargs["params"] == {"access_token": "tok"}

    @pytest.mark.asyncio
    async def test_reports_missing_scopes(self):
        patcher, _ = mock_aiohttp_session(_MODULE, [(200, {"scope": "a"})])
        with patcher:
            result = await verify_token_scopes("tok", ["a", "b", "c"])

        assert not result.ok
        assert result.missing == ["b", "c"]

    @pytest.mark.asyncio
    async def test_network_error_fails_open(self):
        patcher, _ = mock_aiohttp_session(_MODULE, [aiohttp.ClientConnectionError("down")])
        with patcher:
            result = await verify_token_scopes("tok", ["a"])

        assert result.ok
        assert result.source == "unavailable"
        assert result.granted == []
        assert result.missing == []

    @pytest.mark.asyncio
    async def test_non_2xx_fails_open(self):
        patcher, _ = mock_aiohttp_session(_MODULE, [(400, {"error": "invalid_token"})])
        with patcher:
            result = await verify_token_scopes("tok", ["a"])

        assert result.ok
        assert result.source == "unavailable"
