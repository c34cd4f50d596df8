# STS Query Client
# File: tools/__init__.py
# Version: v1

"""MCP tools exposing the STS catalog and the generic invoke entry point."""

from __future__ import annotations

from .tasks import register_tools

__all__ = ["register_tools"]
