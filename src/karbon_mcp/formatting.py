"""Response envelopes: every tool answers with one JSON text block"""

import json
from typing import Any, List

from fastmcp.tools.tool import ToolResult, TextContent


def text_result(envelope: dict) -> ToolResult:
    """Serialize a result envelope as a single pretty-printed text content block"""
    text = json.dumps(envelope, indent=2, ensure_ascii=False)
    return ToolResult(content=[TextContent(type="text", text=text)])


def collection_values(payload: Any) -> List[Any]:
    """The ``value`` list of an OData collection response, or [] if there is none"""
    if isinstance(payload, dict):
        return payload.get("value") or []
    return []
