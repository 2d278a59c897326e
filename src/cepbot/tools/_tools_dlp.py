"""Cloud Identity DLP tools: list_dlp_rules, create_dlp_rule, create_url_list,
delete_dlp_rule.

Rules created here are tagged with a robot prefix in their display name and
are limited to AUDIT and WARN actions; BLOCK is rejected before any API call.
"""

from __future__ import annotations

import json
from typing import Any

from mcp.types import Tool, ToolAnnotations

from cepbot.api import cloud_identity
from cepbot.constants import CHROME_DLP_TRIGGERS
from cepbot.tools._guarded import Params, guarded_tool_call
from cepbot.tools._registry import ToolContent, ToolContext, ToolEntry, register, text_result
from cepbot.tools._schemas import CUSTOMER_ID, ORG_UNIT_ID, described, object_schema

_SUPPORTED_TRIGGERS = frozenset(CHROME_DLP_TRIGGERS.values())

DISPLAY_NAME_PREFIX = "\U0001f916 "


def _pretty(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


# -- list_dlp_rules ------------------------------------------------------------


def _list_dlp_rules_definition() -> Tool:
    return Tool(
        name="list_dlp_rules",
        description=(
            "Lists all DLP rules or detectors for a given customer. The tool returns "
            "rules with multiple attributes, parse them and return names, summarize "
            "the action."
        ),
        inputSchema=object_schema(
            {
                "customerId": CUSTOMER_ID,
                "type": {
                    "type": "string",
                    "enum": ["rule", "detector"],
                    "description": (
                        'Filter by policy type. Defaults to "rule". Set to "detector" '
                        "to list detectors."
                    ),
                },
            }
        ),
        annotations=ToolAnnotations(
            title="List DLP Rules",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True,
        ),
    )


def has_chrome_trigger(policy: dict[str, Any]) -> bool:
    """True when any of the policy's triggers is a Chrome DLP trigger."""
    triggers = ((policy.get("setting") or {}).get("value") or {}).get("triggers")
    if not isinstance(triggers, list):
        return False
    return any(trigger in _SUPPORTED_TRIGGERS for trigger in triggers)


async def _list_dlp_rules_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    policy_type = params.get("type") or "rule"
    policies = await cloud_identity.list_dlp_policies(
        policy_type, params.get("customerId"), ctx.auth_token
    )
    chrome_policies = [p for p in policies if has_chrome_trigger(p)]
    if not chrome_policies:
        return text_result(f"No DLP {policy_type}s found with supported triggers.")
    return text_result(f"DLP {policy_type}:\n{_pretty(chrome_policies)}")


# -- create_dlp_rule -----------------------------------------------------------


def _create_dlp_rule_definition() -> Tool:
    return Tool(
        name="create_dlp_rule",
        description=(
            "Creates a new Chrome DLP rule for a specific Organizational Unit. Supports "
            "a validate_only mode to test rule creation without saving the rule."
        ),
        inputSchema=object_schema(
            {
                "customerId": CUSTOMER_ID,
                "orgUnitId": described(ORG_UNIT_ID, "The target Organizational Unit ID"),
                "displayName": {"type": "string", "description": "Name of the rule"},
                "description": {"type": "string", "description": "Description of the rule"},
                "triggers": {
                    "type": "array",
                    "items": {"type": "string", "enum": list(CHROME_DLP_TRIGGERS)},
                    "description": "List of simplified triggers.",
                },
                "condition": {
                    "type": "string",
                    "description": (
                        "CEL condition string (e.g. \"all_content.contains('confidential')\")"
                    ),
                },
                "action": {
                    "type": "string",
                    "enum": ["BLOCK", "WARN", "AUDIT"],
                    "description": "Action to take when the rule is triggered",
                },
                "state": {
                    "type": "string",
                    "enum": ["ACTIVE", "INACTIVE"],
                    "description": "Rule state (defaults to ACTIVE)",
                },
                "customMessage": {
                    "type": "string",
                    "description": (
                        "Custom message to display to the user when the rule is triggered."
                    ),
                },
                "watermarkMessage": {
                    "type": "string",
                    "description": "Watermark message to display when the rule is triggered.",
                },
                "blockScreenshot": {
                    "type": "boolean",
                    "description": "Whether to block screenshots when the rule is triggered.",
                },
                "saveContent": {
                    "type": "boolean",
                    "description": "Whether to save the content that triggered the rule.",
                },
                "validateOnly": {
                    "type": "boolean",
                    "description": "If true, the request is validated but not created.",
                },
            },
            required=["orgUnitId", "displayName", "triggers", "condition", "action"],
        ),
        annotations=ToolAnnotations(
            title="Create DLP Rule",
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
    )


def _prefix_display_name(params: Params) -> Params:
    return {**params, "displayName": f"{DISPLAY_NAME_PREFIX}{params.get('displayName')}"}


def _reject_block_action(params: Params) -> None:
    if params.get("action") == "BLOCK":
        raise ValueError(
            'Creating DLP rules in "BLOCK" mode is not permitted. '
            'Supported actions are "AUDIT" and "WARN".'
        )


def build_chrome_action(params: Params) -> dict[str, Any]:
    """``action.chromeAction`` body for a WARN or AUDIT rule."""
    action = params.get("action")
    if action == "AUDIT":
        return {"auditOnly": {}}
    if action != "WARN":
        raise ValueError(
            f'Unsupported action: {action}. Supported actions are "AUDIT" and "WARN".'
        )

    action_params: dict[str, Any] = {}
    if params.get("customMessage"):
        action_params["customEndUserMessage"] = {
            "unsafeHtmlMessageBody": params["customMessage"],
        }
    if params.get("watermarkMessage"):
        action_params["watermarkMessage"] = params["watermarkMessage"]
    if params.get("blockScreenshot"):
        action_params["blockScreenshot"] = True
    if params.get("saveContent"):
        action_params["saveContent"] = True
    return {"warnUser": {"actionParams": action_params} if action_params else {}}


async def _create_dlp_rule_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    rule_config: dict[str, Any] = {
        "displayName": params["displayName"],
        "description": params.get("description"),
        "triggers": [CHROME_DLP_TRIGGERS[t] for t in params["triggers"]],
        "condition": params["condition"],
        "state": params.get("state"),
        "action": {"chromeAction": build_chrome_action(params)},
    }
    rule_config = {k: v for k, v in rule_config.items() if v is not None}

    validate_only = bool(params.get("validateOnly"))
    created = await cloud_identity.create_dlp_rule(
        params.get("customerId") or "",
        params["orgUnitId"],
        rule_config,
        validate_only,
        ctx.auth_token,
    )
    if validate_only:
        return text_result("DLP rule validation successful. The rule was not created.")
    return text_result(
        f"Successfully created DLP rule: {created.get('name')}\n\nDetails:\n{_pretty(created)}"
    )


# -- create_url_list -----------------------------------------------------------


def _create_url_list_definition() -> Tool:
    return Tool(
        name="create_url_list",
        description="Creates a new URL list.",
        inputSchema=object_schema(
            {
                "customerId": CUSTOMER_ID,
                "orgUnitId": described(
                    ORG_UNIT_ID, "The ID of the organizational unit to filter results."
                ),
                "displayName": {
                    "type": "string",
                    "description": "The display name for the URL list.",
                },
                "urls": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "A list of URLs to include in the list.",
                },
            },
            required=["orgUnitId", "displayName", "urls"],
        ),
        annotations=ToolAnnotations(
            title="Create URL List",
            readOnlyHint=False,
            destructiveHint=False,
            openWorldHint=True,
        ),
    )


async def _create_url_list_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    created = await cloud_identity.create_url_list(
        params.get("customerId") or "",
        params["orgUnitId"],
        {"display_name": params["displayName"], "urls": params["urls"]},
        ctx.auth_token,
    )
    return text_result(
        f"Successfully created URL list: {created.get('name')}\n\nDetails:\n{_pretty(created)}"
    )


# -- delete_dlp_rule -----------------------------------------------------------


def _delete_dlp_rule_definition() -> Tool:
    return Tool(
        name="delete_dlp_rule",
        description="Deletes a Chrome DLP rule.",
        inputSchema=object_schema(
            {
                "policyName": {
                    "type": "string",
                    "description": (
                        "The name of the policy to delete (e.g. policies/akajj264aovytg7aau)"
                    ),
                },
            },
            required=["policyName"],
        ),
        annotations=ToolAnnotations(
            title="Delete DLP Rule",
            readOnlyHint=False,
            destructiveHint=True,
            openWorldHint=True,
        ),
    )


async def _delete_dlp_rule_handle(params: Params, ctx: ToolContext) -> list[ToolContent]:
    policy_name = params["policyName"]
    await cloud_identity.delete_dlp_rule(policy_name, ctx.auth_token)
    return text_result(f"Successfully deleted DLP rule: {policy_name}")


# -- registration --------------------------------------------------------------

register(
    "list_dlp_rules",
    ToolEntry(
        definition=_list_dlp_rules_definition,
        handler=guarded_tool_call(_list_dlp_rules_handle),
    ),
)
register(
    "create_dlp_rule",
    ToolEntry(
        definition=_create_dlp_rule_definition,
        handler=guarded_tool_call(
            _create_dlp_rule_handle,
            transform=_prefix_display_name,
            validate=_reject_block_action,
        ),
    ),
)
register(
    "create_url_list",
    ToolEntry(
        definition=_create_url_list_definition,
        handler=guarded_tool_call(_create_url_list_handle),
    ),
)
register(
    "delete_dlp_rule",
    ToolEntry(
        definition=_delete_dlp_rule_definition,
        handler=guarded_tool_call(_delete_dlp_rule_handle, skip_auto_resolve=True),
    ),
)
