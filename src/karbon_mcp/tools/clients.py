"""Client lookup and cross-entity client search tools"""

import asyncio
import logging
from typing import Any, Literal, Optional, Union

from pydantic import Field
from fastmcp.server import FastMCP
from fastmcp.tools.tool import ToolResult
from mcp.types import ToolAnnotations

from karbon_mcp.client import KarbonClient
from karbon_mcp.formatting import collection_values, text_result
from karbon_mcp.odata import client_lookup_query, client_search_queries
from karbon_mcp.validation import present_arguments, require_args

logger = logging.getLogger("Karbon_MCP")


async def handle_get_client_by_id(client: KarbonClient, arguments: Any) -> ToolResult:
    args = require_args("get_client_by_id", arguments)
    client_data = await client.get(client_lookup_query(args))
    return text_result({"client_type": args.client_type, "client_data": client_data})


async def handle_search_clients(client: KarbonClient, arguments: Any) -> ToolResult:
    """Search Contacts, Organizations and ClientGroups in parallel.

    A failing sub-search contributes an empty list; the aggregate never fails because of one.
    """
    args = require_args("search_clients", arguments)
    queries = client_search_queries(args)
    payloads = await asyncio.gather(
        *(client.get_or_default(query, {"value": []}) for query in queries.values())
    )
    found = {name: collection_values(payload) for name, payload in zip(queries, payloads)}

    return text_result({
        "search_term": args.search_term,
        "total_results": sum(len(items) for items in found.values()),
        "contacts": found["contacts"],
        "organizations": found["organizations"],
        "client_groups": found["client_groups"],
    })


def register_client_tools(mcp: FastMCP, namespace_prefix: str, client: KarbonClient):
    """Register client lookup and search tools"""

    @mcp.tool(
        name=f"{namespace_prefix}get_client_by_id",
        annotations=ToolAnnotations(
            title="Get Client by ID",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True
        )
    )
    async def get_client_by_id(
        client_id: str = Field(..., description="The Karbon-generated client key/ID"),
        client_type: Literal["Contact", "Organization", "ClientGroup"] = Field(
            ..., description="The type of client to retrieve"
        ),
    ) -> ToolResult:
        """Get detailed information about a specific client by their ID.
        Contacts include business cards and client team, Organizations additionally
        include their contacts, and Client Groups include their business card and team."""
        return await handle_get_client_by_id(
            client, present_arguments(client_id=client_id, client_type=client_type)
        )

    @mcp.tool(
        name=f"{namespace_prefix}search_clients",
        annotations=ToolAnnotations(
            title="Search Clients",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True
        )
    )
    async def search_clients(
        search_term: str = Field(..., description="Search term to find clients (name, email, etc.)"),
        max_results: Optional[Union[int, float]] = Field(
            None, description="Maximum number of results to return per client type (default: 50, max: 100)"
        ),
    ) -> ToolResult:
        """Search for clients across all types (Contacts, Organizations, Client Groups)
        by name, email, or other criteria. Contacts and Organizations match on full name
        or email address, Client Groups on full name."""
        return await handle_search_clients(
            client, present_arguments(search_term=search_term, max_results=max_results)
        )
