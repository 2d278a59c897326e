"""GCP environment detection via the instance metadata server.

Best effort: off GCP the probe fails fast and the caller falls back to
local configuration.
"""

from __future__ import annotations

from dataclasses import dataclass

import aiohttp

from cepbot.config import get_settings
from cepbot.constants import GCP_METADATA_BASE_URL

_METADATA_HEADERS = {"Metadata-Flavor": "Google"}
_PROJECT_PATH = "/computeMetadata/v1/project/project-id"
_REGION_PATH = "/computeMetadata/v1/instance/region"


@dataclass(frozen=True)
class GCPEnvironment:
    project: str
    region: str


async def _fetch_metadata(session: aiohttp.ClientSession, path: str) -> str:
    async with session.get(f"{GCP_METADATA_BASE_URL}{path}", headers=_METADATA_HEADERS) as resp:
        if resp.status >= 400:
            raise RuntimeError(f"Metadata request failed with status {resp.status}")
        return await resp.text()


def parse_region(region_path: str) -> str:
    """``projects/123/regions/us-central1`` → ``us-central1``.

    A value without ``/`` is returned unchanged.
    """
    return region_path.rsplit("/", 1)[-1]


async def check_gcp() -> GCPEnvironment | None:
    """Project and region from the metadata server, or None.

    Both probes must succeed with a non-empty body; there is no partial result.
    """
    timeout = aiohttp.ClientTimeout(total=get_settings().http.metadata_timeout_seconds)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            project_id = (await _fetch_metadata(session, _PROJECT_PATH)).strip()
            region_path = (await _fetch_metadata(session, _REGION_PATH)).strip()
    except Exception:
        return None

    if not project_id or not region_path:
        return None
    return GCPEnvironment(project=project_id, region=parse_region(region_path))
