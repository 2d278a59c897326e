"""Slash-command prompts: cep, cep:diagnose, cep:maturity, cep:noise."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from mcp.types import GetPromptResult, Prompt

from cepbot.prompts.content import (
    DIAGNOSE_INSTRUCTIONS,
    HEALTH_CHECK_STEPS,
    MATURITY_STEPS,
    NOISE_STEPS,
    SUB_COMMAND_HINT,
    build_prompt_result,
)


@dataclass(frozen=True)
class PromptEntry:
    definition: Prompt
    build: Callable[[], GetPromptResult]


def _entry(name: str, title: str, description: str, instructions: str) -> PromptEntry:
    return PromptEntry(
        definition=Prompt(name=name, title=title, description=description, arguments=[]),
        build=lambda: build_prompt_result(instructions),
    )


_PROMPTS: dict[str, PromptEntry] = {
    entry.definition.name: entry
    for entry in (
        _entry(
            "cep",
            "Chrome Enterprise Premium",
            "Run Chrome Enterprise Premium diagnostics immediately on invocation.",
            HEALTH_CHECK_STEPS + SUB_COMMAND_HINT,
        ),
        _entry(
            "cep:diagnose",
            "Diagnose Environment",
            "Plan and execute a parallel health check of the Chrome Enterprise environment.",
            DIAGNOSE_INSTRUCTIONS,
        ),
        _entry(
            "cep:maturity",
            "DLP Maturity Assessment",
            "Assess the DLP maturity of the user's environment.",
            MATURITY_STEPS,
        ),
        _entry(
            "cep:noise",
            "DLP Noise Analysis",
            "Analyze DLP rule noise and false positive rates.",
            NOISE_STEPS,
        ),
    )
}


def all_prompts() -> list[Prompt]:
    return [entry.definition for entry in _PROMPTS.values()]


def get_prompt(name: str) -> GetPromptResult:
    """Build the named prompt. Raises ValueError for an unknown name."""
    entry = _PROMPTS.get(name)
    if entry is None:
        raise ValueError(f"Unknown prompt: {name}")
    return entry.build()
