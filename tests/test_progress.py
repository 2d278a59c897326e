"""Tests for the progress sinks."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cepbot.progress import ProgressMessage, create_mcp_logger, create_progress_logger


def test_progress_logger_maps_levels():
    bound = MagicMock()
    with patch("cepbot.progress.logger") as log:
        log.bind.return_value = bound
        emit = create_progress_logger("server")
        emit(ProgressMessage("hello"))
        emit(ProgressMessage("careful", "warn"))
        emit(ProgressMessage("broken", "error"))

    log.bind.assert_called_once_with(tag="server")
    bound.info.assert_called_once_with("hello")
    bound.warning.assert_called_once_with("careful")
    bound.error.assert_called_once_with("broken")


@pytest.mark.asyncio
async def test_mcp_logger_sends_notifications():
    session = MagicMock()
    session.send_log_message = AsyncMock()
    emit = create_mcp_logger(session, "retry-bootstrap")

    emit(ProgressMessage("step", "warn"))
    await asyncio.sleep(0)

    session.send_log_message.assert_awaited_once_with(
        level="warning", data="step", logger="retry-bootstrap"
    )


@pytest.mark.asyncio
async def test_mcp_logger_swallows_send_failures():
    session = MagicMock()
    session.send_log_message = AsyncMock(side_effect=RuntimeError("closed"))
    emit = create_mcp_logger(session, "x")

    emit(ProgressMessage("step"))
    await asyncio.sleep(0)

    session.send_log_message.assert_awaited_once()


def test_mcp_logger_without_loop_logs_locally():
    session = MagicMock()
    emit = create_mcp_logger(session, "x")
    with patch("cepbot.progress.logger") as log:
        emit(ProgressMessage("offline"))
    log.info.assert_called_once()
    session.send_log_message.assert_not_called()
