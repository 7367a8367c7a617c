"""MCP (Model Context Protocol) server module for URA travel queries.

This module provides an MCP server that exposes the multi-stop common trip
query through the Model Context Protocol.
"""

from .server import UraMCPServer, main

__all__ = ["UraMCPServer", "main"]
