"""Admin SDK: customer lookup, Chrome activity reports, org units."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from cepbot.api.fetch import google_fetch
from cepbot.constants import ADMIN_BASE_URL, error_message
from cepbot.logger import logger


@dataclass(frozen=True)
class Customer:
    id: str
    kind: str | None = None


async def get_customer_id(access_token: str | None = None) -> Customer | None:
    """Customer record for the authenticated domain.

    Returns None on any failure (most commonly a caller without admin rights).
    """
    try:
        result = await google_fetch(
            f"{ADMIN_BASE_URL}/admin/directory/v1/customers/my_customer",
            access_token=access_token,
        )
    except Exception as exc:
        logger.debug("Customer lookup failed", err=error_message(exc))
        return None

    if not isinstance(result, dict) or not result.get("id"):
        return None
    return Customer(id=result["id"], kind=result.get("kind"))


async def list_chrome_activities(
    user_key: str = "all",
    *,
    customer_id: str | None = None,
    event_name: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
    max_results: int | None = None,
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    """Chrome browser activity events from the Reports API."""
    params: dict[str, str] = {}
    if customer_id:
        params["customerId"] = customer_id
    if event_name:
        params["eventName"] = event_name
    if start_time:
        params["startTime"] = start_time
    if end_time:
        params["endTime"] = end_time
    if max_results:
        params["maxResults"] = str(max_results)

    url = (
        f"{ADMIN_BASE_URL}/admin/reports/v1/activity/users/"
        f"{quote(user_key, safe='')}/applications/chrome"
    )
    result = await google_fetch(url, access_token=access_token, params=params or None) or {}
    return result.get("items") or []


async def list_org_units(
    customer_id: str | None = None,
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    """All organizational units for the customer (``my_customer`` by default)."""
    customer = quote(customer_id or "my_customer", safe="")
    url = f"{ADMIN_BASE_URL}/admin/directory/v1/customer/{customer}/orgunits"
    result = await google_fetch(url, access_token=access_token, params={"type": "all"}) or {}
    return result.get("organizationUnits") or []
