"""retry_bootstrap: re-runs bootstrap to leave degraded mode.

Registered without ``guarded_tool_call`` so it stays callable while the
server is degraded.
"""

from __future__ import annotations

from mcp.types import CallToolResult, Tool, ToolAnnotations

from cepbot.api.fetch import reset_cached_auth, set_fallback_quota_project
from cepbot.bootstrap import bootstrap
from cepbot.errors import format_degraded_mode_error
from cepbot.logger import logger
from cepbot.progress import ProgressMessage, create_mcp_logger, create_progress_logger
from cepbot.server_state import set_server_degraded, set_server_healthy
from cepbot.tools._guarded import Params, customer_id_cache
from cepbot.tools._registry import (
    ToolContent,
    ToolContext,
    ToolEntry,
    register,
    text_result,
    tool_error,
)

_LOGGER_NAME = "retry-bootstrap"


def _retry_bootstrap_definition() -> Tool:
    return Tool(
        name="retry_bootstrap",
        description=(
            "Re-runs the server bootstrap sequence. Call this after the user has fixed "
            "credentials, installed gcloud, or resolved other setup issues. This tool "
            "is always available, even when the server is in degraded mode."
        ),
        inputSchema={"type": "object", "properties": {}},
        annotations=ToolAnnotations(
            title="Retry Bootstrap",
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
    )


async def retry_bootstrap(
    _params: Params, ctx: ToolContext
) -> list[ToolContent] | CallToolResult:
    if ctx.session is not None:
        progress = create_mcp_logger(ctx.session, _LOGGER_NAME)
    else:
        progress = create_progress_logger(_LOGGER_NAME)

    progress(ProgressMessage("Clearing cached credentials...", "info"))
    reset_cached_auth()
    progress(ProgressMessage("Clearing cached customer ID...", "info"))
    customer_id_cache.clear()
    progress(ProgressMessage("Re-running bootstrap sequence...", "info"))

    result = await bootstrap(progress)
    if not result.ok:
        set_server_degraded(result.error)
        logger.warning("Retry bootstrap failed", error_type=result.error.type)
        return tool_error(f"Bootstrap failed again.\n\n{format_degraded_mode_error(result.error)}")

    set_fallback_quota_project(result.project_id)
    set_server_healthy(result.project_id, result.region)
    if result.customer_id:
        customer_id_cache.set(result.customer_id)
    logger.info("Retry bootstrap succeeded", project_id=result.project_id)
    return text_result(
        "Bootstrap succeeded. The server is now fully operational. All tools are available."
    )


register(
    "retry_bootstrap",
    ToolEntry(definition=_retry_bootstrap_definition, handler=retry_bootstrap),
)
