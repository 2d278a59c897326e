"""Chrome Policy API: resolves Enterprise Connector policies for an org unit."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from cepbot.api.fetch import google_fetch
from cepbot.constants import CHROME_POLICY_BASE_URL

# User-facing connector names → policy schema ids.
CONNECTOR_POLICY_FILTERS: dict[str, str] = {
    "ON_BULK_DATA_ENTRY": "chrome.users.EnterpriseConnectors.OnBulkDataEntry",
    "ON_FILE_ATTACHED": "chrome.users.EnterpriseConnectors.OnFileAttached",
    "ON_FILE_DOWNLOADED": "chrome.users.EnterpriseConnectors.OnFileDownloaded",
    "ON_PRINT": "chrome.users.EnterpriseConnectors.OnPrint",
    "ON_SECURITY_EVENT": "chrome.users.EnterpriseConnectors.OnSecurityEvent",
}

# Matches every connector policy in one call.
CONNECTOR_WILDCARD = "chrome.users.EnterpriseConnectors.*"


async def get_connector_policy(
    customer_id: str,
    org_unit_id: str,
    policy_schema_filter: str,
    access_token: str | None = None,
) -> dict[str, Any]:
    url = f"{CHROME_POLICY_BASE_URL}/customers/{quote(customer_id, safe='')}/policies:resolve"
    body = {
        "policySchemaFilter": policy_schema_filter,
        "policyTargetKey": {"targetResource": f"orgunits/{org_unit_id}"},
    }
    return await google_fetch(url, access_token=access_token, body=body) or {}
