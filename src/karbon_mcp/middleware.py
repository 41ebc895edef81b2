"""Tool call guard: resolve the tool and validate its arguments before FastMCP does"""

import logging

import mcp.types as mt
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools.tool import ToolResult

from karbon_mcp.errors import MethodNotFound
from karbon_mcp.validation import TOOL_ARGUMENTS, require_args

logger = logging.getLogger("Karbon_MCP")


class ToolCallGuard(Middleware):
    """Reject unknown tool names and malformed arguments on the served surface.

    FastMCP coerces arguments against the tool signature ("500" -> 500, True -> 1), so the
    strict per-tool records are applied here first. Unknown names raise MethodNotFound
    instead of FastMCP's own lookup error.
    """

    def __init__(self, namespace_prefix: str = ""):
        self.namespace_prefix = namespace_prefix

    def _tool_name(self, name: str):
        if not name.startswith(self.namespace_prefix):
            return None
        return name[len(self.namespace_prefix):]

    async def on_call_tool(
        self,
        context: MiddlewareContext[mt.CallToolRequestParams],
        call_next: CallNext[mt.CallToolRequestParams, ToolResult],
    ) -> ToolResult:
        name = context.message.name
        tool_name = self._tool_name(name)
        if tool_name not in TOOL_ARGUMENTS:
            logger.warning(f"Call to unknown tool {name!r}")
            raise MethodNotFound(f"Unknown tool: {name}")

        arguments = context.message.arguments
        require_args(tool_name, {} if arguments is None else arguments)
        return await call_next(context)
