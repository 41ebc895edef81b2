"""Karbon MCP MCPB entry point — standalone server for Claude Desktop extension"""

import os
import sys

# Add src to path so we can import karbon_mcp package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from karbon_mcp.server import main

if __name__ == "__main__":
    main(
        karbon_bearer_token=os.getenv("KARBON_BEARER_TOKEN"),
        karbon_access_key=os.getenv("KARBON_ACCESS_KEY"),
        namespace=os.getenv("KARBON_NAMESPACE", ""),
        log_level=os.getenv("KARBON_LOG_LEVEL", "INFO"),
    )
