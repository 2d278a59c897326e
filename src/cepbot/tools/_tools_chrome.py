"""Chrome Management and Chrome Policy tools: count_browser_versions,
list_customer_profiles, get_connector_policy."""

from __future__ import annotations

import json

from mcp.types import Tool, ToolAnnotations

from cepbot.api import chrome_management, chrome_policy
from cepbot.api.fetch import GoogleApiError
from cepbot.tools._guarded import Params, guarded_tool_call
from cepbot.tools._registry import ToolContent, ToolContext, ToolEntry, register, text_result
from cepbot.tools._schemas import (
    CUSTOMER_ID,
    ORG_UNIT_ID,
    ORG_UNIT_ID_OPTIONAL,
    described,
    object_schema,
)

# -- count_browser_versions ----------------------------------------------------


def _count_browser_versions_definition() -> Tool:
    return Tool(
        name="count_browser_versions",
        description="Counts Chrome browser versions reported by devices.",
        inputSchema=object_schema(
            {"customerId": CUSTOMER_ID, "orgUnitId": ORG_UNIT_ID_OPTIONAL}
        ),
        annotations=ToolAnnotations(
            title="Count Browser Versions",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True,
        ),
    )


async def _count_browser_versions_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    customer_id = params.get("customerId")
    versions = await chrome_management.count_browser_versions(
        customer_id or "", params.get("orgUnitId"), ctx.auth_token
    )
    if not versions:
        return text_result(f"No browser versions found for customer {customer_id}.")

    lines = [
        f"- {v.get('version')} ({v.get('count')} devices) - {v.get('releaseChannel') or 'unknown'}"
        for v in versions
    ]
    return text_result(f"Browser versions for customer {customer_id}:\n" + "\n".join(lines))


# -- list_customer_profiles ----------------------------------------------------


def _list_customer_profiles_definition() -> Tool:
    return Tool(
        name="list_customer_profiles",
        description="Lists all customer browser profiles for a given customer.",
        inputSchema=object_schema({"customerId": CUSTOMER_ID}),
        annotations=ToolAnnotations(
            title="List Customer Profiles",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True,
        ),
    )


async def _list_customer_profiles_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    customer_id = params.get("customerId")
    profiles = await chrome_management.list_customer_profiles(customer_id or "", ctx.auth_token)
    if not profiles:
        return text_result(f"No profiles found for customer {customer_id}.")
    return text_result(
        f"Browser profiles for customer {customer_id}:\n"
        + json.dumps(profiles, separators=(",", ":"), ensure_ascii=False)
    )


# -- get_connector_policy ------------------------------------------------------

_CONNECTOR_CHOICES = ["ALL", *chrome_policy.CONNECTOR_POLICY_FILTERS]


def _get_connector_policy_definition() -> Tool:
    return Tool(
        name="get_connector_policy",
        description=(
            "Retrieves the configuration status for Chrome Enterprise connectors. "
            "Pass a specific policy name to check one connector, or 'ALL' to fetch "
            "all connector policies in a single call. Returns the resolved policy "
            "configuration or indicates when no policy is configured."
        ),
        inputSchema=object_schema(
            {
                "customerId": CUSTOMER_ID,
                "orgUnitId": described(
                    ORG_UNIT_ID, "The ID of the organizational unit to filter results."
                ),
                "policy": {
                    "type": "string",
                    "enum": _CONNECTOR_CHOICES,
                    "description": (
                        "The connector policy to check. Use 'ALL' to fetch every connector "
                        "policy in one call (recommended for health checks)."
                    ),
                },
            },
            required=["orgUnitId", "policy"],
        ),
        annotations=ToolAnnotations(
            title="Get Connector Policy",
            readOnlyHint=True,
            destructiveHint=False,
            openWorldHint=True,
        ),
    )


def connector_schema_filter(policy: str) -> str:
    """Policy schema filter for a connector choice (``ALL`` → wildcard)."""
    if policy == "ALL":
        return chrome_policy.CONNECTOR_WILDCARD
    return chrome_policy.CONNECTOR_POLICY_FILTERS[policy]


async def _get_connector_policy_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    schema_filter = connector_schema_filter(params["policy"])
    not_configured = (
        f"No connector policies configured for this organizational unit (filter: {schema_filter})."
    )
    try:
        policies = await chrome_policy.get_connector_policy(
            params.get("customerId") or "",
            params["orgUnitId"],
            schema_filter,
            ctx.auth_token,
        )
    except GoogleApiError as exc:
        if exc.status == 404:
            return text_result(not_configured)
        raise

    if not policies.get("resolvedPolicies"):
        return text_result(not_configured)
    return text_result("Connector policy:\n" + json.dumps(policies, indent=2, ensure_ascii=False))


# -- registration --------------------------------------------------------------

register(
    "count_browser_versions",
    ToolEntry(
        definition=_count_browser_versions_definition,
        handler=guarded_tool_call(_count_browser_versions_handle),
    ),
)
register(
    "list_customer_profiles",
    ToolEntry(
        definition=_list_customer_profiles_definition,
        handler=guarded_tool_call(_list_customer_profiles_handle),
    ),
)
register(
    "get_connector_policy",
    ToolEntry(
        definition=_get_connector_policy_definition,
        handler=guarded_tool_call(_get_connector_policy_handle),
    ),
)
