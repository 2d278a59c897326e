"""Tests for Settings loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cepbot.config import GcloudConfig, HttpConfig, Settings, get_settings, reset_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("CEPBOT_LOGGING__LEVEL", raising=False)
    s = Settings()
    assert s.logging.level is None
    assert s.gcloud.bin == "gcloud"
    assert s.gcloud.adc_path is None
    assert s.default_region == "us-central1"
    assert s.server.name == "cepbot"


def test_nested_env_override(monkeypatch):
    monkeypatch.setenv("CEPBOT_HTTP__TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("CEPBOT_LOGGING__LEVEL", "debug")
    s = Settings()
    assert s.http.timeout_seconds == 5.0
    assert s.logging.level == "DEBUG"


def test_adc_path_is_expanded(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert GcloudConfig(adc_path="~/adc.json").adc_path == str(tmp_path / "adc.json")


def test_timeouts_must_be_positive():
    with pytest.raises(ValidationError):
        HttpConfig(timeout_seconds=0)


def test_unknown_sub_model_keys_rejected():
    with pytest.raises(ValidationError):
        GcloudConfig(binary="gcloud")


def test_singleton_reset():
    first = get_settings()
    assert get_settings() is first
    reset_settings()
    assert get_settings() is not first
