"""Admin SDK tools: get_customer_id, list_org_units, get_chrome_activity_log,
analyze_chrome_logs_for_risky_activity."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

from mcp.types import EmbeddedResource, TextContent, TextResourceContents, Tool, ToolAnnotations

from cepbot.api import admin_sdk
from cepbot.tools._guarded import Params, guarded_tool_call
from cepbot.tools._registry import ToolContent, ToolContext, ToolEntry, register, text_result
from cepbot.tools._schemas import CUSTOMER_ID, object_schema

_ACTIVITY_LOOKBACK = timedelta(days=10)

_USER_KEY = {
    "type": "string",
    "default": "all",
    "description": 'The user key to get activities for. Use "all" for all users.',
}


def _iso_now(offset: timedelta = timedelta(0)) -> str:
    """UTC timestamp in RFC 3339 with millisecond precision and a ``Z`` suffix."""
    stamp = datetime.now(UTC) - offset
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# -- get_customer_id -----------------------------------------------------------


def _get_customer_id_definition() -> Tool:
    return Tool(
        name="get_customer_id",
        description=(
            "Gets the customer ID for the authenticated user. All other tools "
            "that require a customer ID should get it using this tool instead "
            "of asking the user for it."
        ),
        inputSchema=object_schema({}),
        annotations=ToolAnnotations(
            title="Get Customer ID",
            readOnlyHint=True,
            destructiveHint=False,
            openWorldHint=True,
        ),
    )


async def _get_customer_id_handle(_params: Params, ctx: ToolContext) -> list[ToolContent]:
    customer = await admin_sdk.get_customer_id(ctx.auth_token)
    if not customer:
        return text_result("Could not retrieve customer ID.")
    return text_result(f"Customer ID: {customer.id}")


# -- list_org_units ------------------------------------------------------------


def _list_org_units_definition() -> Tool:
    return Tool(
        name="list_org_units",
        description=(
            "Lists all organizational units for a given customer. This tool should "
            "be used whenever another tool requires an org unit ID. It provides users "
            "with a list of organizational unit names, so they do not need to "
            "manually search for the org unit ID."
        ),
        inputSchema=object_schema({"customerId": CUSTOMER_ID}),
        annotations=ToolAnnotations(
            title="List Org Units",
            readOnlyHint=True,
            destructiveHint=False,
            openWorldHint=True,
        ),
    )


async def _list_org_units_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    org_units = await admin_sdk.list_org_units(params.get("customerId"), ctx.auth_token)
    if not org_units:
        return text_result("No organizational units found for the specified criteria.")

    lines = [
        f"- {ou.get('name')} [{ou.get('orgUnitId')}] ({ou.get('orgUnitPath')})" for ou in org_units
    ]
    return [
        TextContent(
            type="text",
            text=f"Organizational Units ({len(org_units)}):\n" + "\n".join(lines),
        ),
        EmbeddedResource(
            type="resource",
            resource=TextResourceContents(
                uri="https://admin.google.com/ac/orgunits",
                mimeType="application/json",
                text=json.dumps(org_units, indent=2, ensure_ascii=False),
            ),
        ),
    ]


# -- get_chrome_activity_log ---------------------------------------------------


def _get_chrome_activity_log_definition() -> Tool:
    return Tool(
        name="get_chrome_activity_log",
        description=(
            "Gets a log of Chrome browser activity for a given user. By default, it "
            "retrieves events from the last 10 days unless a specific start time is "
            "provided. Do not prompt users for additional inputs; use the defaults "
            "if no values are provided."
        ),
        inputSchema=object_schema(
            {
                "customerId": CUSTOMER_ID,
                "userKey": _USER_KEY,
                "eventName": {
                    "type": "string",
                    "description": "The name of the event to filter by.",
                },
                "startTime": {
                    "type": "string",
                    "description": (
                        "The start time of the range to get activities for (RFC3339 "
                        "timestamp). Defaults to 10 days ago if not specified."
                    ),
                },
                "endTime": {
                    "type": "string",
                    "description": (
                        "The end time of the range to get activities for (RFC3339 "
                        "timestamp). Defaults to now."
                    ),
                },
                "maxResults": {
                    "type": "number",
                    "description": "The maximum number of results to return.",
                },
            }
        ),
        annotations=ToolAnnotations(
            title="Get Chrome Activity Log",
            readOnlyHint=True,
            destructiveHint=False,
            openWorldHint=True,
        ),
    )


def _default_time_range(params: Params) -> Params:
    return {
        **params,
        "endTime": params.get("endTime") or _iso_now(),
        "startTime": params.get("startTime") or _iso_now(_ACTIVITY_LOOKBACK),
    }


async def _get_chrome_activity_log_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    max_results = params.get("maxResults")
    activities = await admin_sdk.list_chrome_activities(
        params.get("userKey") or "all",
        customer_id=params.get("customerId"),
        event_name=params.get("eventName"),
        start_time=params.get("startTime"),
        end_time=params.get("endTime"),
        max_results=int(max_results) if max_results else None,
        access_token=ctx.auth_token,
    )
    if not activities:
        return text_result("No Chrome activity found for the specified criteria.")
    return text_result(
        "Chrome activity:\n" + json.dumps(activities, indent=2, ensure_ascii=False)
    )


# -- analyze_chrome_logs_for_risky_activity ------------------------------------


def _analyze_chrome_logs_definition() -> Tool:
    return Tool(
        name="analyze_chrome_logs_for_risky_activity",
        description="Analyzes Chrome activity logs for risky behavior.",
        inputSchema=object_schema(
            {
                "customerId": CUSTOMER_ID,
                "userKey": _USER_KEY,
                "startTime": {
                    "type": "string",
                    "description": (
                        "The start time of the range to get activities for (RFC3339 timestamp)."
                    ),
                },
                "endTime": {
                    "type": "string",
                    "description": (
                        "The end time of the range to get activities for (RFC3339 timestamp)."
                    ),
                },
            }
        ),
        annotations=ToolAnnotations(
            title="Analyze Chrome Logs",
            readOnlyHint=True,
            destructiveHint=False,
            openWorldHint=True,
        ),
    )


async def _analyze_chrome_logs_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    activities = await admin_sdk.list_chrome_activities(
        params.get("userKey") or "all",
        customer_id=params.get("customerId"),
        start_time=params.get("startTime"),
        end_time=params.get("endTime"),
        access_token=ctx.auth_token,
    )
    if not activities:
        return text_result("No Chrome activity found for the specified criteria.")
    return text_result(json.dumps(activities, separators=(",", ":"), ensure_ascii=False))


# -- registration --------------------------------------------------------------

register(
    "get_customer_id",
    ToolEntry(
        definition=_get_customer_id_definition,
        handler=guarded_tool_call(_get_customer_id_handle, skip_auto_resolve=True),
    ),
)
register(
    "list_org_units",
    ToolEntry(
        definition=_list_org_units_definition,
        handler=guarded_tool_call(_list_org_units_handle),
    ),
)
register(
    "get_chrome_activity_log",
    ToolEntry(
        definition=_get_chrome_activity_log_definition,
        handler=guarded_tool_call(_get_chrome_activity_log_handle, transform=_default_time_range),
    ),
)
register(
    "analyze_chrome_logs_for_risky_activity",
    ToolEntry(
        definition=_analyze_chrome_logs_definition,
        handler=guarded_tool_call(_analyze_chrome_logs_handle),
    ),
)
