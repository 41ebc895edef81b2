"""Protocol error taxonomy and upstream failure classification"""

import logging
from typing import Optional

import httpx
from fastmcp.exceptions import ToolError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    ErrorData,
)

logger = logging.getLogger("Karbon_MCP")

AUTH_FAILED_MESSAGE = "Karbon API authentication failed. Please check your credentials."


class KarbonToolError(ToolError):
    """Tool failure carrying a JSON-RPC error code"""
    code: int = INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_error_data(self) -> ErrorData:
        return ErrorData(code=self.code, message=self.message)


class InvalidParams(KarbonToolError):
    code = INVALID_PARAMS


class InvalidRequest(KarbonToolError):
    code = INVALID_REQUEST


class InternalError(KarbonToolError):
    code = INTERNAL_ERROR


class MethodNotFound(KarbonToolError):
    code = METHOD_NOT_FOUND


def _upstream_detail(response: httpx.Response, *path: str) -> Optional[str]:
    """Dig a message string out of a JSON error body, if there is one"""
    try:
        data = response.json()
    except ValueError:
        return None
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    if isinstance(data, str) and data:
        return data
    return None


def normalize_error(exc: Exception) -> KarbonToolError:
    """Classify a transport or HTTP failure into a protocol error.

    Errors that are already classified pass through unchanged. Rate limiting and
    authentication failures are internal errors, a missing resource is an invalid
    request, and anything else is an internal error carrying the upstream detail.
    """
    if isinstance(exc, KarbonToolError):
        return exc

    response = exc.response if isinstance(exc, httpx.HTTPStatusError) else None
    status = response.status_code if response is not None else None

    if status == 429:
        detail = _upstream_detail(response, "message") or str(exc)
        error = InternalError(f"Karbon API rate limit exceeded: {detail}")
    elif status == 401:
        error = InternalError(AUTH_FAILED_MESSAGE)
    elif status == 404:
        detail = _upstream_detail(response, "error", "message") or str(exc)
        error = InvalidRequest(f"Resource not found: {detail}")
    else:
        detail = None
        if response is not None:
            detail = _upstream_detail(response, "error", "message")
        error = InternalError(f"Karbon API error: {detail or str(exc) or type(exc).__name__}")

    logger.error(error.message)
    return error
