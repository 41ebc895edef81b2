"""Query builder: translate validated tool arguments into Karbon's OData query dialect"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from karbon_mcp.validation import (
    GetClientArgs,
    GetWorkItemByIdArgs,
    GetWorkItemsArgs,
    Number,
    SearchClientsArgs,
)

MAX_PAGE_SIZE = 100

# client_type -> (collection path, $expand clause)
CLIENT_ENDPOINTS: Mapping[str, Tuple[str, str]] = MappingProxyType({
    "Contact": ("/Contacts", "BusinessCards,ClientTeam"),
    "Organization": ("/Organizations", "BusinessCards,ClientTeam,Contacts"),
    "ClientGroup": ("/ClientGroups", "BusinessCard,ClientTeam"),
})


@dataclass(frozen=True)
class RemoteQuery:
    """A single GET against the Karbon API: path plus read-only query parameters"""
    path: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


def clamp_page_size(max_results: Number) -> Number:
    """Cap a requested page size at MAX_PAGE_SIZE. There is no lower bound."""
    return min(max_results, MAX_PAGE_SIZE)


def odata_literal(value: str) -> str:
    """Quote a caller-supplied value as an OData string literal.

    The value is interpolated verbatim: embedded quotes are NOT escaped. Every filter
    built by this module goes through here, so escaping only needs to change in one place.
    """
    return f"'{value}'"


def contains(field_name: str, value: str) -> str:
    return f"contains({field_name}, {odata_literal(value)})"


def eq(field_name: str, value: str) -> str:
    return f"{field_name} eq {odata_literal(value)}"


def client_lookup_query(args: GetClientArgs) -> RemoteQuery:
    """Endpoint and expansions for a single client, keyed by its type"""
    collection, expand = CLIENT_ENDPOINTS[args.client_type]
    return RemoteQuery(path=f"{collection}/{args.client_id}", params={"$expand": expand})


def client_search_queries(args: SearchClientsArgs) -> Dict[str, RemoteQuery]:
    """One search query per client kind, keyed by the result list it fills"""
    term = args.search_term
    limit = clamp_page_size(args.max_results)
    name_or_email = f"({contains('FullName', term)}) or ({contains('EmailAddress', term)})"
    return {
        "contacts": RemoteQuery(
            path="/Contacts",
            params={"$filter": name_or_email, "$expand": "BusinessCards", "$top": limit},
        ),
        "organizations": RemoteQuery(
            path="/Organizations",
            params={"$filter": name_or_email, "$expand": "BusinessCards", "$top": limit},
        ),
        "client_groups": RemoteQuery(
            path="/ClientGroups",
            params={"$filter": contains("FullName", term), "$expand": "BusinessCard", "$top": limit},
        ),
    }


def work_items_filter(args: GetWorkItemsArgs) -> str:
    """Conjunctive $filter over client key, work type and title, in that order.

    Returns an empty string when no filter field is set.
    """
    clauses = []
    if args.client_key:
        clauses.append(eq("ClientKey", args.client_key))
    if args.work_type:
        clauses.append(eq("WorkType", args.work_type))
    if args.title_filter:
        clauses.append(f"({contains('Title', args.title_filter)})")
    return " and ".join(clauses)


def work_items_query(args: GetWorkItemsArgs) -> RemoteQuery:
    params: Dict[str, Any] = {
        "$top": clamp_page_size(args.max_results),
        "$orderby": "StartDate desc",
    }
    odata_filter = work_items_filter(args)
    if odata_filter:
        params["$filter"] = odata_filter
    return RemoteQuery(path="/WorkItems", params=params)


def work_item_lookup_query(args: GetWorkItemByIdArgs) -> RemoteQuery:
    return RemoteQuery(path=f"/WorkItems/{args.work_item_key}")
