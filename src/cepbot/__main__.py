"""Entry point: bootstrap, set server health, then serve MCP over stdio."""

from __future__ import annotations

import asyncio
import sys

from cepbot.bootstrap import bootstrap
from cepbot.config import get_settings
from cepbot.constants import error_message
from cepbot.logger import logger, set_level
from cepbot.progress import ProgressMessage, create_progress_logger
from cepbot.server import run_server
from cepbot.server_state import set_server_degraded, set_server_healthy
from cepbot.tools import register_tools


async def _main() -> None:
    level = get_settings().logging.level
    if level:
        set_level(level)
    progress = create_progress_logger("server")

    result = await bootstrap(progress)
    if result.ok:
        set_server_healthy(result.project_id, result.region)
    else:
        logger.error("Bootstrap failed", problem=result.error.problem, error_type=result.error.type)
        set_server_degraded(result.error)

    register_tools(result.customer_id if result.ok else None)

    progress(
        ProgressMessage("cepbot MCP server running on stdio", "info")
        if result.ok
        else ProgressMessage("cepbot MCP server running in DEGRADED mode on stdio", "warn")
    )
    await run_server()


def main() -> None:
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        logger.critical("Fatal error", err=error_message(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
