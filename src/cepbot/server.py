"""MCP server setup: tools, prompts, and logging over stdio.

Tools and prompts come from their registries; this module only adapts the
low-level ``mcp.server.Server`` handlers to them.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, GetPromptResult, LoggingLevel, Prompt, TextContent, Tool

from cepbot import prompts
from cepbot.config import get_settings
from cepbot.logger import logger
from cepbot.tools import all_tools, get_handler
from cepbot.tools._registry import ToolContent, ToolContext
from cepbot.tools._schemas import get_auth_token

server = Server(get_settings().server.name)

_PY_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "alert": logging.CRITICAL,
    "emergency": logging.CRITICAL,
}


def _tool_context() -> ToolContext:
    """Auth token and session for the request currently being handled."""
    try:
        ctx = server.request_context
    except LookupError:
        return ToolContext()
    headers = getattr(ctx.request, "headers", None)
    return ToolContext(auth_token=get_auth_token(headers), session=ctx.session)


@server.list_tools()
async def list_tools() -> list[Tool]:
    return all_tools()


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[ToolContent] | CallToolResult:
    handler = get_handler(name)
    if handler:
        return await handler(arguments or {}, _tool_context())
    return [TextContent(type="text", text=f"Unknown tool: {name}")]


@server.list_prompts()
async def list_prompts() -> list[Prompt]:
    return prompts.all_prompts()


@server.get_prompt()
async def get_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
    return prompts.get_prompt(name)


@server.set_logging_level()
async def set_logging_level(level: LoggingLevel) -> None:
    logging.getLogger().setLevel(_PY_LEVELS.get(level, logging.INFO))
    logger.info("Log level changed by client", level=level)


async def run_server() -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
