"""Guarded tool execution.

Every tool except ``retry_bootstrap`` runs through ``guarded_tool_call``,
which:

1. Blocks the call while the server is degraded, returning the stored
   bootstrap error without invoking the handler.
2. Caches a caller-supplied ``customerId``, or auto-resolves one (cache
   first, then a single Admin SDK lookup) unless the tool opts out.
3. Strips the ``id:`` prefix from ``orgUnitId``, then applies the tool's
   own transform and validation.
4. Converts any exception into an ``Error: <message>`` result.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from cepbot.api import admin_sdk
from cepbot.constants import error_message
from cepbot.errors import format_degraded_mode_error
from cepbot.logger import logger
from cepbot.server_state import Degraded, get_server_state
from cepbot.tools._registry import ToolContext, ToolHandler, ToolResult, tool_error
from cepbot.tools._schemas import validate_and_get_org_unit_id

Params = dict[str, Any]


class CustomerIdCache:
    """Holds the resolved Workspace customer id for the server lifetime."""

    def __init__(self) -> None:
        self._value: str | None = None

    def get(self) -> str | None:
        return self._value

    def set(self, customer_id: str) -> None:
        self._value = customer_id

    def clear(self) -> None:
        self._value = None


customer_id_cache = CustomerIdCache()


async def _resolve_customer_id(ctx: ToolContext) -> str | None:
    cached = customer_id_cache.get()
    if cached:
        return cached

    customer = await admin_sdk.get_customer_id(ctx.auth_token)
    if customer and customer.id:
        customer_id_cache.set(customer.id)
        return customer.id

    logger.debug("Customer ID auto-resolve failed, continuing without it")
    return None


def _common_transform(params: Params) -> Params:
    if params.get("orgUnitId"):
        params["orgUnitId"] = validate_and_get_org_unit_id(params["orgUnitId"])
    return params


def guarded_tool_call(
    handler: Callable[[Params, ToolContext], Any],
    *,
    skip_auto_resolve: bool = False,
    transform: Callable[[Params], Params] | None = None,
    validate: Callable[[Params], None] | None = None,
) -> ToolHandler:
    """Wrap ``handler`` with the degraded-mode gate and parameter plumbing."""

    async def _call(arguments: Params, ctx: ToolContext) -> ToolResult:
        state = get_server_state()
        if isinstance(state, Degraded):
            return tool_error(format_degraded_mode_error(state.error))

        params = dict(arguments)
        try:
            if params.get("customerId"):
                customer_id_cache.set(params["customerId"])
            elif not skip_auto_resolve and params.get("customerId") is None:
                resolved = await _resolve_customer_id(ctx)
                if resolved:
                    params["customerId"] = resolved

            params = _common_transform(params)
            if transform:
                params = transform(params)
            if validate:
                validate(params)

            return await handler(params, ctx)
        except Exception as exc:
            return tool_error(f"Error: {error_message(exc)}")

    return _call
