"""Cloud Identity policies API: DLP rule CRUD and URL list creation."""

from __future__ import annotations

from typing import Any

from cepbot.api.fetch import google_fetch
from cepbot.constants import CLOUD_IDENTITY_BASE_URL

_POLICIES_URL = f"{CLOUD_IDENTITY_BASE_URL}/policies"

_DLP_SETTING_FILTERS: dict[str, str] = {
    "detector": 'setting.type.matches("settings/detector.*")',
    "rule": 'setting.type == "settings/rule.dlp"',
}


def _org_unit_policy(customer_id: str, org_unit_id: str, value: dict[str, Any]) -> dict[str, Any]:
    return {
        "customer": f"customers/{customer_id}",
        "orgUnit": f"orgunits/{org_unit_id}",
        "setting": {"value": value},
    }


async def create_dlp_rule(
    customer_id: str,
    org_unit_id: str,
    rule_config: dict[str, Any],
    validate_only: bool = False,
    access_token: str | None = None,
) -> dict[str, Any]:
    """Create a DLP rule on an org unit; ``validate_only`` performs a dry run."""
    params = {"validateOnly": "true"} if validate_only else None
    return await google_fetch(
        _POLICIES_URL,
        access_token=access_token,
        body=_org_unit_policy(customer_id, org_unit_id, rule_config),
        params=params,
    ) or {}


async def delete_dlp_rule(policy_name: str, access_token: str | None = None) -> None:
    """Permanently delete a DLP rule by resource name (``policies/...``)."""
    await google_fetch(
        f"{CLOUD_IDENTITY_BASE_URL}/{policy_name}", access_token=access_token, method="DELETE"
    )


async def list_dlp_policies(
    policy_type: str = "rule",
    customer_id: str | None = None,
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    """DLP rules or detectors, optionally restricted to one customer."""
    parts: list[str] = []
    if customer_id:
        parts.append(f'customer == "customers/{customer_id}"')
    if setting_filter := _DLP_SETTING_FILTERS.get(policy_type):
        parts.append(setting_filter)

    params = {"filter": " && ".join(parts)} if parts else None
    result = await google_fetch(_POLICIES_URL, access_token=access_token, params=params) or {}
    return result.get("policies") or []


async def create_url_list(
    customer_id: str,
    org_unit_id: str,
    url_list_config: dict[str, Any],
    access_token: str | None = None,
) -> dict[str, Any]:
    return await google_fetch(
        _POLICIES_URL,
        access_token=access_token,
        body=_org_unit_policy(customer_id, org_unit_id, url_list_config),
    ) or {}
