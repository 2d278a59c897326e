"""Structured logging singleton for the MCP server.

Reads os.environ directly and initializes before pydantic Settings, so
bootstrap progress stays visible when config loading fails. Everything
goes to stderr: stdout carries the MCP stdio transport.

Environment:
    CEPBOT_LOG_LEVEL (or LOG_LEVEL): initial level, default INFO.
    CEPBOT_LOG_FORMAT: ``console`` (default) or ``json`` for MCP hosts
        that capture stderr into their own log files.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

# Chatty at INFO during token refresh and session setup.
_QUIET_LOGGERS = ("google.auth", "urllib3", "mcp.server.lowlevel.server")


def _env_level() -> int:
    name = os.environ.get("CEPBOT_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or "INFO"
    return getattr(logging, name.upper(), logging.INFO)


def _renderer() -> structlog.types.Processor:
    if os.environ.get("CEPBOT_LOG_FORMAT", "").lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _setup_logging() -> structlog.stdlib.BoundLogger:
    # Configure stdlib root logger first so structlog's filter_by_level works
    logging.basicConfig(level=_env_level(), format="%(message)s", stream=sys.stderr)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("cepbot")


logger = _setup_logging()


def set_level(level_name: str) -> None:
    """Apply a log level resolved after startup (Settings or the MCP client)."""
    logging.getLogger().setLevel(getattr(logging, level_name.upper(), logging.INFO))


def _uncaught_exception_handler(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_tb: object,
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)  # type: ignore[arg-type]
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_tb))
    sys.exit(1)


sys.excepthook = _uncaught_exception_handler
