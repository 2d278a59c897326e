"""Tests for the MCP server handlers."""

from __future__ import annotations

import pytest

from cepbot import server


@pytest.mark.asyncio
async def test_list_tools_comes_from_registry():
    tools = await server.list_tools()
    assert "retry_bootstrap" in {t.name for t in tools}


@pytest.mark.asyncio
async def test_unknown_tool():
    result = await server.call_tool("does_not_exist", {})
    assert result[0].text == "Unknown tool: does_not_exist"


@pytest.mark.asyncio
async def test_prompts_exposed():
    assert {p.name for p in await server.list_prompts()} >= {"cep", "cep:noise"}
    result = await server.get_prompt("cep:maturity", None)
    assert "DLP maturity assessment" in result.messages[0].content.text


def test_tool_context_outside_request():
    ctx = server._tool_context()
    assert ctx.auth_token is None
    assert ctx.session is None
