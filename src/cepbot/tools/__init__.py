"""MCP tool definitions.

Importing this package registers every tool in the registry.
"""

from __future__ import annotations

# Import tool modules to trigger self-registration
import cepbot.tools._tools_admin  # noqa: F401
import cepbot.tools._tools_chrome  # noqa: F401
import cepbot.tools._tools_dlp  # noqa: F401
import cepbot.tools._tools_recovery  # noqa: F401
from cepbot.tools._guarded import customer_id_cache
from cepbot.tools._registry import all_tools, get_handler


def register_tools(customer_id: str | None = None) -> None:
    """Seed the customer id cache from bootstrap.

    Tool definitions register on import; this only carries bootstrap state
    into the tools.
    """
    if customer_id:
        customer_id_cache.set(customer_id)


__all__ = ["all_tools", "customer_id_cache", "get_handler", "register_tools"]
