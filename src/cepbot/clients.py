"""Low-level GCP REST operations.

Service Usage state checks and enablement (with long-running operation
polling) and project creation via Cloud Resource Manager.
"""

from __future__ import annotations

import asyncio
from typing import Any

from cepbot.api.fetch import google_fetch
from cepbot.constants import (
    CLOUD_RESOURCE_MANAGER_BASE_URL,
    POLL_INTERVAL_SECONDS,
    POLL_MAX_ATTEMPTS,
    SERVICE_USAGE_BASE_URL,
)


class OperationTimeoutError(TimeoutError):
    """A long-running operation did not finish within the poll cap."""


async def poll_operation(operation_url: str, access_token: str | None = None) -> dict[str, Any]:
    """Poll a long-running operation until ``done``.

    Polls every POLL_INTERVAL_SECONDS, at most POLL_MAX_ATTEMPTS times.
    """
    for _ in range(POLL_MAX_ATTEMPTS):
        op = await google_fetch(operation_url, access_token=access_token) or {}
        if op.get("done"):
            return op
        await asyncio.sleep(POLL_INTERVAL_SECONDS)

    raise OperationTimeoutError(f"Operation timed out after {POLL_MAX_ATTEMPTS} polls")


async def get_service_state(project_id: str, api: str, access_token: str | None = None) -> str:
    """Enablement state of ``api`` on the project (e.g. ENABLED, DISABLED)."""
    url = f"{SERVICE_USAGE_BASE_URL}/projects/{project_id}/services/{api}"
    result = await google_fetch(url, access_token=access_token) or {}
    return str(result.get("state", "STATE_UNSPECIFIED"))


async def enable_service(project_id: str, api: str, access_token: str | None = None) -> None:
    """Enable ``api`` on the project and wait for the operation to finish."""
    url = f"{SERVICE_USAGE_BASE_URL}/projects/{project_id}/services/{api}:enable"
    op = await google_fetch(url, access_token=access_token, body={}, method="POST") or {}

    if op.get("name") and not op.get("done"):
        await poll_operation(f"{SERVICE_USAGE_BASE_URL}/{op['name']}", access_token)


async def create_project(
    project_id: str,
    parent: str | None = None,
    access_token: str | None = None,
) -> str:
    """Create a GCP project and return its id."""
    body = {"projectId": project_id}
    if parent:
        body["parent"] = parent

    op = await google_fetch(
        f"{CLOUD_RESOURCE_MANAGER_BASE_URL}/projects",
        access_token=access_token,
        body=body,
        method="POST",
    ) or {}

    if op.get("name") and not op.get("done"):
        op = await google_fetch(
            f"{CLOUD_RESOURCE_MANAGER_BASE_URL}/{op['name']}", access_token=access_token
        ) or {}

    return (op.get("response") or {}).get("projectId") or project_id
