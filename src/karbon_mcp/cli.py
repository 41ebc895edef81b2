"""Karbon MCP CLI entry point"""

import logging
import os

from karbon_mcp.config import DEFAULT_BASE_URL
from karbon_mcp.server import main as server_main

logger = logging.getLogger("Karbon_MCP")


def main() -> None:
    """CLI entry point: reads env vars and starts the server."""
    log_level = os.getenv("KARBON_LOG_LEVEL", "INFO")
    logging.basicConfig(level=getattr(logging, log_level.upper()))

    logger.info("Starting Karbon MCP - Karbon practice management MCP server")

    server_main(
        transport=os.getenv("KARBON_TRANSPORT", "stdio"),
        karbon_bearer_token=os.getenv("KARBON_BEARER_TOKEN"),
        karbon_access_key=os.getenv("KARBON_ACCESS_KEY"),
        base_url=os.getenv("KARBON_BASE_URL", DEFAULT_BASE_URL),
        namespace=os.getenv("KARBON_NAMESPACE", ""),
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
