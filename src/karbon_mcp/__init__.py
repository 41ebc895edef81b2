"""
Karbon MCP - Karbon Practice Management MCP Server

An MCP server exposing read-only client and work item lookups against the Karbon API.
"""

__version__ = "0.1.0"

from karbon_mcp.config import KarbonAPIConfig, KarbonConfig
from karbon_mcp.server import call_tool, create_karbon_server, main

__all__ = ["create_karbon_server", "call_tool", "main", "KarbonConfig", "KarbonAPIConfig", "__version__"]
