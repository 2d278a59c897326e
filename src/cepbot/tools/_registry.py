"""Tool registry for the cepbot MCP server."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from mcp.types import CallToolResult, EmbeddedResource, TextContent, Tool

ToolContent = TextContent | EmbeddedResource
ToolResult = Sequence[ToolContent] | CallToolResult


@dataclass(frozen=True)
class ToolContext:
    """Per-call context handed to every tool handler.

    ``auth_token`` is the bearer token from the request's Authorization
    header (None over stdio). ``session`` is the MCP session, used to send
    log notifications back to the client.
    """

    auth_token: str | None = None
    session: Any | None = None


ToolHandler = Callable[[dict[str, Any], ToolContext], Awaitable[ToolResult]]


@dataclass
class ToolEntry:
    """A registered tool with its definition and handler."""

    definition: Callable[[], Tool]
    handler: ToolHandler


_TOOLS: dict[str, ToolEntry] = {}


def register(name: str, entry: ToolEntry) -> None:
    """Register a tool by name."""
    _TOOLS[name] = entry


def all_tools() -> list[Tool]:
    return [entry.definition() for entry in _TOOLS.values()]


def get_handler(name: str) -> ToolHandler | None:
    """Look up the handler for a tool name."""
    entry = _TOOLS.get(name)
    return entry.handler if entry else None


def text_result(text: str) -> list[ToolContent]:
    return [TextContent(type="text", text=text)]


def tool_error(msg: str) -> CallToolResult:
    """Return an MCP error result with a text message."""
    return CallToolResult(
        content=[TextContent(type="text", text=msg)],
        isError=True,
    )
