"""Shared input-schema fragments and request helpers for tool handlers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cepbot.constants import ORG_UNIT_ID_PREFIX

CUSTOMER_ID: dict[str, Any] = {
    "type": "string",
    "description": "The Chrome customer ID (e.g. C012345)",
}

ORG_UNIT_ID: dict[str, Any] = {
    "type": "string",
    "description": "The ID of the organizational unit.",
}

ORG_UNIT_ID_OPTIONAL: dict[str, Any] = {
    "type": "string",
    "description": "The ID of the organizational unit to filter results.",
}


def object_schema(
    properties: dict[str, dict[str, Any]],
    required: list[str] | None = None,
) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def described(fragment: dict[str, Any], description: str) -> dict[str, Any]:
    """Copy of a shared fragment with a tool-specific description."""
    return {**fragment, "description": description}


def get_auth_token(headers: Mapping[str, str] | None) -> str | None:
    """Bearer token from an ``Authorization: Bearer <token>`` header."""
    if not headers:
        return None
    authorization = headers.get("authorization")
    if not authorization:
        return None
    parts = authorization.split(" ")
    return parts[1] if len(parts) > 1 else None


def validate_and_get_org_unit_id(org_unit_id: str) -> str:
    """Strip the ``id:`` prefix the Admin console shows on org unit ids."""
    if org_unit_id.startswith(ORG_UNIT_ID_PREFIX):
        return org_unit_id[len(ORG_UNIT_ID_PREFIX) :]
    return org_unit_id
