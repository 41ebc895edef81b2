"""Karbon MCP server: creates FastMCP and registers all tool modules"""

import logging
from typing import Any, Awaitable, Callable, Dict, Literal, Optional

from fastmcp.server import FastMCP
from fastmcp.tools.tool import ToolResult

from karbon_mcp.client import KarbonClient
from karbon_mcp.config import DEFAULT_BASE_URL, KarbonAPIConfig, KarbonConfig
from karbon_mcp.errors import MethodNotFound
from karbon_mcp.middleware import ToolCallGuard
from karbon_mcp.tools.clients import (
    handle_get_client_by_id,
    handle_search_clients,
    register_client_tools,
)
from karbon_mcp.tools.work_items import (
    handle_get_work_item_by_id,
    handle_get_work_items,
    register_work_item_tools,
)

logger = logging.getLogger("Karbon_MCP")

SERVER_NAME = "karbon-server"

ToolHandler = Callable[[KarbonClient, Any], Awaitable[ToolResult]]

TOOL_HANDLERS: Dict[str, ToolHandler] = {
    "get_client_by_id": handle_get_client_by_id,
    "search_clients": handle_search_clients,
    "get_work_items": handle_get_work_items,
    "get_work_item_by_id": handle_get_work_item_by_id,
}


async def call_tool(client: KarbonClient, name: str, arguments: Any) -> ToolResult:
    """Dispatch a tool call by name"""
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        raise MethodNotFound(f"Unknown tool: {name}")
    return await handler(client, arguments)


def _format_namespace(namespace: str) -> str:
    """Format namespace with trailing dash if needed"""
    if namespace:
        return namespace if namespace.endswith("-") else namespace + "-"
    return ""


def create_karbon_server(config: KarbonConfig, client: Optional[KarbonClient] = None) -> FastMCP:
    """Create the Karbon MCP server with all tool modules registered"""
    logging.basicConfig(level=getattr(logging, config.log_level.upper()))

    ns = _format_namespace(config.namespace)
    mcp = FastMCP(SERVER_NAME, middleware=[ToolCallGuard(ns)])
    client = client or KarbonClient(config.api)

    register_client_tools(mcp, ns, client)
    register_work_item_tools(mcp, ns, client)

    @mcp.prompt("client_work_review")
    def client_work_review() -> str:
        """Guided workflow for reviewing a client's engagement in Karbon"""
        return (
            "I want to review a client's work in Karbon. Please help me:\n"
            f"1. Use {ns}search_clients with the client's name or email to find them\n"
            f"2. Use {ns}get_client_by_id with the matching key and its type "
            "(Contact, Organization or ClientGroup) to see their details and client team\n"
            f"3. Use {ns}get_work_items with that client key to list their work, most recent first\n"
            f"4. Use {ns}get_work_item_by_id to drill into any work item that needs attention\n\n"
            "NOTES:\n"
            "- Search returns at most 100 results per client type; narrow the term if needed\n"
            "- Work items can also be filtered by work type (e.g., Tax, Payroll) and title\n"
            "- All tools are read-only\n\n"
            "Which client should we start with?"
        )

    return mcp


def main(
    transport: Literal["stdio", "sse", "http"] = "stdio",
    karbon_bearer_token: Optional[str] = None,
    karbon_access_key: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
    namespace: str = "",
    log_level: str = "INFO",
    host: str = "127.0.0.1",
    port: int = 8000,
    path: str = "/mcp/",
) -> None:
    """Main entry point for the Karbon MCP server"""
    if not karbon_bearer_token or not karbon_access_key:
        raise ValueError("KARBON_BEARER_TOKEN and KARBON_ACCESS_KEY environment variables are required")

    config = KarbonConfig(
        api=KarbonAPIConfig(
            bearer_token=karbon_bearer_token,
            access_key=karbon_access_key,
            base_url=base_url,
        ),
        namespace=namespace,
        log_level=log_level,
    )

    logger.info("Starting Karbon MCP server")
    logger.info(f"Karbon API: {base_url}")

    mcp = create_karbon_server(config)
    if transport == "stdio":
        mcp.run()
    else:
        mcp.run(transport=transport, host=host, port=port, path=path)


if __name__ == "__main__":
    import os
    main(
        karbon_bearer_token=os.getenv("KARBON_BEARER_TOKEN"),
        karbon_access_key=os.getenv("KARBON_ACCESS_KEY"),
        base_url=os.getenv("KARBON_BASE_URL", DEFAULT_BASE_URL),
        namespace=os.getenv("KARBON_NAMESPACE", ""),
        log_level=os.getenv("KARBON_LOG_LEVEL", "INFO"),
    )
