"""cepbot: MCP server for Chrome Enterprise Premium administration."""

__version__ = "0.1.0"
