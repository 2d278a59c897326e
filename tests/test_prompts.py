"""Tests for slash-command prompts."""

from __future__ import annotations

import pytest

from cepbot import prompts
from cepbot.prompts.content import (
    HEALTH_CHECK_STEPS,
    NOISE_STEPS,
    PERSONA,
    SUB_COMMAND_HINT,
    build_prompt_result,
)


def test_all_prompts_listed():
    assert [p.name for p in prompts.all_prompts()] == [
        "cep",
        "cep:diagnose",
        "cep:maturity",
        "cep:noise",
    ]


def test_single_user_message_with_persona():
    result = build_prompt_result("Do the thing.")

    assert len(result.messages) == 1
    message = result.messages[0]
    assert message.role == "user"
    assert message.content.text == f"{PERSONA}\n\nDo the thing."


def test_cep_appends_sub_command_hint():
    text = prompts.get_prompt("cep").messages[0].content.text
    assert text == f"{PERSONA}\n\n{HEALTH_CHECK_STEPS}{SUB_COMMAND_HINT}"
    assert "/cep:maturity" in text


def test_noise_prompt():
    text = prompts.get_prompt("cep:noise").messages[0].content.text
    assert text.endswith(NOISE_STEPS)
    assert "/cep:maturity" not in text


def test_diagnose_prompt_mentions_every_read_tool():
    text = prompts.get_prompt("cep:diagnose").messages[0].content.text
    for tool in (
        "list_org_units",
        "list_dlp_rules",
        "list_customer_profiles",
        "count_browser_versions",
        "get_connector_policy",
    ):
        assert f"`{tool}`" in text


def test_unknown_prompt():
    with pytest.raises(ValueError, match="Unknown prompt"):
        prompts.get_prompt("cep:nope")
