"""Chrome Management API: browser version counts and customer profiles."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from cepbot.api.fetch import google_fetch
from cepbot.constants import CHROME_MANAGEMENT_BASE_URL


async def count_browser_versions(
    customer_id: str,
    org_unit_id: str | None = None,
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    url = (
        f"{CHROME_MANAGEMENT_BASE_URL}/customers/{quote(customer_id, safe='')}"
        "/reports:countChromeVersions"
    )
    params = {"orgUnitId": org_unit_id} if org_unit_id else None
    result = await google_fetch(url, access_token=access_token, params=params) or {}
    return result.get("browserVersions") or []


async def list_customer_profiles(
    customer_id: str,
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    url = f"{CHROME_MANAGEMENT_BASE_URL}/customers/{quote(customer_id, safe='')}/profiles"
    result = await google_fetch(url, access_token=access_token) or {}
    return result.get("profiles") or []
