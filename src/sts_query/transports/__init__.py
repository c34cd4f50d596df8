# STS Query Client
# File: transports/__init__.py
# Version: v1

"""Runnable MCP transports."""
