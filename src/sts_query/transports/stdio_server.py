# STS Query Client
# File: transports/stdio_server.py
# Version: v2

"""STDIO entrypoint for the STS MCP server.

This is the script behind the ``sts-query-mcp`` console command.

It:

- configures logging to stderr (stdout carries the MCP protocol),
- creates a FastMCP server,
- registers the STS tools, and
- runs the built-in stdio transport.
"""

from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from ..config import StsConfig
from ..tools import tasks


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    cfg = StsConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    mcp = FastMCP("sts-query-mcp")

    tasks.register_tools(mcp)

    # Let FastMCP handle stdio + event loop setup.
    mcp.run()


if __name__ == "__main__":
    main()
