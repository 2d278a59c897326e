"""Fallback project creation with pronounceable generated ids."""

from __future__ import annotations

import random

from cepbot import clients
from cepbot.constants import PROJECT_ID_CONSONANTS, PROJECT_ID_VOWELS


def _cvc() -> str:
    return (
        random.choice(PROJECT_ID_CONSONANTS)
        + random.choice(PROJECT_ID_VOWELS)
        + random.choice(PROJECT_ID_CONSONANTS)
    )


def generate_project_id() -> str:
    """GCP-compliant id of the form ``mcp-cvc-cvc``."""
    return f"mcp-{_cvc()}-{_cvc()}"


async def create_project(
    project_id: str | None = None,
    parent: str | None = None,
    access_token: str | None = None,
) -> str:
    """Create a project, generating an id when none is given. Returns the id."""
    return await clients.create_project(
        project_id or generate_project_id(), parent=parent, access_token=access_token
    )
