"""Progress reporting for bootstrap and API enablement.

The orchestrator only ever calls a ``ProgressCallback``. Two sinks exist:
``create_progress_logger`` (structlog on stderr, used before the MCP
session is connected) and ``create_mcp_logger`` (MCP ``notifications/message``,
used from inside a tool call).
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from cepbot.logger import logger

ProgressLevel = Literal["info", "warn", "error"]


@dataclass(frozen=True)
class ProgressMessage:
    data: str
    level: ProgressLevel = "info"


ProgressCallback = Callable[[ProgressMessage], None]

_SYSLOG_LEVEL: dict[ProgressLevel, str] = {
    "info": "info",
    "warn": "warning",
    "error": "error",
}

# In-flight log notification tasks.
_pending_sends: set[asyncio.Task[None]] = set()


def noop_progress(_message: ProgressMessage) -> None:
    return None


def create_progress_logger(tag: str) -> ProgressCallback:
    """Sink that writes progress through the structlog logger (stderr)."""
    log = logger.bind(tag=tag)

    def _emit(message: ProgressMessage) -> None:
        getattr(log, _SYSLOG_LEVEL[message.level])(message.data)

    return _emit


def create_mcp_logger(session: Any, logger_name: str) -> ProgressCallback:
    """Sink that sends progress as MCP logging notifications on ``session``.

    Sends are scheduled on the running loop; a failed send is logged locally
    and never raised back into the caller.
    """

    async def _send(message: ProgressMessage) -> None:
        try:
            await session.send_log_message(
                level=_SYSLOG_LEVEL[message.level],
                data=message.data,
                logger=logger_name,
            )
        except Exception as exc:
            logger.debug("MCP log notification failed", err=str(exc), data=message.data)

    def _emit(message: ProgressMessage) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.info(message.data, tag=logger_name, level_hint=message.level)
            return
        task = loop.create_task(_send(message))
        _pending_sends.add(task)
        task.add_done_callback(_pending_sends.discard)

    return _emit
