"""Tool argument validation: strict, per-operation argument records"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from karbon_mcp.errors import InvalidParams

logger = logging.getLogger("Karbon_MCP")

ClientType = Literal["Contact", "Organization", "ClientGroup"]
Number = Union[int, float]

DEFAULT_SEARCH_RESULTS = 50
DEFAULT_WORK_ITEM_RESULTS = 100


class _ToolArgs(BaseModel):
    # Strict: no "5" -> 5 or True -> 1 coercion; unknown keys are ignored
    model_config = ConfigDict(strict=True, frozen=True)


class GetClientArgs(_ToolArgs):
    client_id: str = Field(..., min_length=1)
    client_type: ClientType


class SearchClientsArgs(_ToolArgs):
    search_term: str
    max_results: Number = DEFAULT_SEARCH_RESULTS


class GetWorkItemsArgs(_ToolArgs):
    client_key: Optional[str] = None
    work_type: Optional[str] = None
    title_filter: Optional[str] = None
    max_results: Number = DEFAULT_WORK_ITEM_RESULTS


class GetWorkItemByIdArgs(_ToolArgs):
    work_item_key: str = Field(..., min_length=1)


@dataclass(frozen=True)
class ValidationFailure:
    """Why an argument payload was rejected"""
    reason: str


ArgsT = TypeVar("ArgsT", bound=_ToolArgs)


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "arguments"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def validate_args(model: Type[ArgsT], arguments: Any) -> Union[ArgsT, ValidationFailure]:
    """Validate an untyped argument payload into ``model``, or explain the rejection"""
    if not isinstance(arguments, dict):
        return ValidationFailure(f"arguments must be an object, got {type(arguments).__name__}")
    # Explicit nulls count as absent, the same as an omitted key
    present = {key: value for key, value in arguments.items() if value is not None}
    try:
        return model.model_validate(present)
    except ValidationError as e:
        return ValidationFailure(_describe(e))


def present_arguments(**kwargs: Any) -> dict:
    """Build an argument payload from keyword values, dropping the unset ones"""
    return {key: value for key, value in kwargs.items() if value is not None}


# tool name -> (argument record, usage message reported on rejection)
TOOL_ARGUMENTS: Dict[str, Tuple[Type[_ToolArgs], str]] = {
    "get_client_by_id": (
        GetClientArgs,
        "Invalid arguments for get_client_by_id. "
        "Required: client_id (string), client_type (Contact|Organization|ClientGroup)",
    ),
    "search_clients": (
        SearchClientsArgs,
        "Invalid arguments for search_clients. "
        "Required: search_term (string), optional: max_results (number)",
    ),
    "get_work_items": (
        GetWorkItemsArgs,
        "Invalid arguments for get_work_items. "
        "All parameters are optional: client_key, work_type, title_filter, max_results",
    ),
    "get_work_item_by_id": (
        GetWorkItemByIdArgs,
        "Invalid arguments for get_work_item_by_id. Required: work_item_key (string)",
    ),
}


def require_args(tool_name: str, arguments: Any) -> _ToolArgs:
    """Validate the arguments of a known tool, raising InvalidParams on rejection"""
    model, usage = TOOL_ARGUMENTS[tool_name]
    args = validate_args(model, arguments)
    if isinstance(args, ValidationFailure):
        logger.debug(f"{tool_name} rejected: {args.reason}")
        raise InvalidParams(usage)
    return args
