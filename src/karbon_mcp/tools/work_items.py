"""Work item listing and lookup tools"""

import logging
from typing import Any, Optional, Union

from pydantic import Field
from fastmcp.server import FastMCP
from fastmcp.tools.tool import ToolResult
from mcp.types import ToolAnnotations

from karbon_mcp.client import KarbonClient
from karbon_mcp.formatting import collection_values, text_result
from karbon_mcp.odata import work_item_lookup_query, work_items_query
from karbon_mcp.validation import present_arguments, require_args

logger = logging.getLogger("Karbon_MCP")


async def handle_get_work_items(client: KarbonClient, arguments: Any) -> ToolResult:
    args = require_args("get_work_items", arguments)
    payload = await client.get(work_items_query(args))
    work_items = collection_values(payload)
    odata_count = payload.get("@odata.count") if isinstance(payload, dict) else None

    return text_result({
        # Only the filters the caller supplied; absent ones are left out
        "filters_applied": present_arguments(
            client_key=args.client_key,
            work_type=args.work_type,
            title_filter=args.title_filter,
        ),
        "total_results": odata_count or len(work_items),
        "work_items": work_items,
    })


async def handle_get_work_item_by_id(client: KarbonClient, arguments: Any) -> ToolResult:
    args = require_args("get_work_item_by_id", arguments)
    work_item_data = await client.get(work_item_lookup_query(args))
    return text_result({"work_item_key": args.work_item_key, "work_item_data": work_item_data})


def register_work_item_tools(mcp: FastMCP, namespace_prefix: str, client: KarbonClient):
    """Register work item tools"""

    @mcp.tool(
        name=f"{namespace_prefix}get_work_items",
        annotations=ToolAnnotations(
            title="Get Work Items",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True
        )
    )
    async def get_work_items(
        client_key: Optional[str] = Field(None, description="Filter by specific client key (optional)"),
        work_type: Optional[str] = Field(None, description='Filter by work type (e.g., "Payroll", "Tax") (optional)'),
        title_filter: Optional[str] = Field(None, description="Filter by work item title (partial match) (optional)"),
        max_results: Optional[Union[int, float]] = Field(
            None, description="Maximum number of results to return (default: 100, max: 100)"
        ),
    ) -> ToolResult:
        """Get work items with optional filtering by client, work type, or title.
        Results are ordered by start date, most recent first."""
        return await handle_get_work_items(
            client,
            present_arguments(
                client_key=client_key,
                work_type=work_type,
                title_filter=title_filter,
                max_results=max_results,
            ),
        )

    @mcp.tool(
        name=f"{namespace_prefix}get_work_item_by_id",
        annotations=ToolAnnotations(
            title="Get Work Item by ID",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True
        )
    )
    async def get_work_item_by_id(
        work_item_key: str = Field(..., description="The Karbon-generated work item key/ID")
    ) -> ToolResult:
        """Get detailed information about a specific work item by its ID."""
        return await handle_get_work_item_by_id(
            client, present_arguments(work_item_key=work_item_key)
        )
