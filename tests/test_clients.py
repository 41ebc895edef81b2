import httpx
import pytest

from conftest import payload
from karbon_mcp.errors import InternalError, InvalidParams, InvalidRequest
from karbon_mcp.tools.clients import handle_get_client_by_id, handle_search_clients


@pytest.mark.asyncio
@pytest.mark.parametrize("client_type,path,expand", [
    ("Contact", "/v3/Contacts/C1", "BusinessCards,ClientTeam"),
    ("Organization", "/v3/Organizations/C1", "BusinessCards,ClientTeam,Contacts"),
    ("ClientGroup", "/v3/ClientGroups/C1", "BusinessCard,ClientTeam"),
])
async def test_get_client_by_id_selects_endpoint(make_client, ok, client_type, path, expand):
    client, transport = make_client(ok({"ClientKey": "C1", "FullName": "Jane Doe"}))

    result = await handle_get_client_by_id(client, {"client_id": "C1", "client_type": client_type})

    assert transport.paths == [path]
    assert transport.requests[0].url.params["$expand"] == expand
    assert payload(result) == {
        "client_type": client_type,
        "client_data": {"ClientKey": "C1", "FullName": "Jane Doe"},
    }


@pytest.mark.asyncio
async def test_requests_carry_credentials(make_client, ok):
    client, transport = make_client(ok({}))

    await handle_get_client_by_id(client, {"client_id": "C1", "client_type": "Contact"})

    headers = transport.requests[0].headers
    assert headers["Authorization"] == "Bearer test-token"
    assert headers["AccessKey"] == "test-access-key"
    assert headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_get_client_by_id_rejects_lowercase_type(make_client, ok):
    client, transport = make_client(ok({}))

    with pytest.raises(InvalidParams, match="client_type"):
        await handle_get_client_by_id(client, {"client_id": "C1", "client_type": "contact"})
    assert transport.requests == []


@pytest.mark.asyncio
async def test_get_client_by_id_not_found(make_client):
    client, _ = make_client(
        lambda request: httpx.Response(404, json={"error": {"message": "Contact not found"}})
    )

    with pytest.raises(InvalidRequest, match="Resource not found: Contact not found"):
        await handle_get_client_by_id(client, {"client_id": "nope", "client_type": "Contact"})


@pytest.mark.asyncio
async def test_get_client_by_id_rate_limited(make_client):
    client, transport = make_client(
        lambda request: httpx.Response(429, json={"message": "Slow down"})
    )

    with pytest.raises(InternalError, match="rate limit"):
        await handle_get_client_by_id(client, {"client_id": "C1", "client_type": "Organization"})
    # no retry
    assert len(transport.requests) == 1


def _search_responder(failing_path=None):
    bodies = {
        "/v3/Contacts": {"value": [{"ContactKey": "K1"}, {"ContactKey": "K2"}]},
        "/v3/Organizations": {"value": [{"OrganizationKey": "O1"}]},
        "/v3/ClientGroups": {"value": [{"ClientGroupKey": "G1"}]},
    }

    def respond(request):
        if request.url.path == failing_path:
            return httpx.Response(500, json={"error": {"message": "boom"}})
        return httpx.Response(200, json=bodies[request.url.path])
    return respond


@pytest.mark.asyncio
async def test_search_clients_fans_out_to_all_types(make_client):
    client, transport = make_client(_search_responder())

    result = payload(await handle_search_clients(client, {"search_term": "acme"}))

    assert sorted(transport.paths) == ["/v3/ClientGroups", "/v3/Contacts", "/v3/Organizations"]
    assert {request.url.params["$top"] for request in transport.requests} == {"50"}
    assert list(result) == ["search_term", "total_results", "contacts", "organizations", "client_groups"]
    assert result["search_term"] == "acme"
    assert result["total_results"] == 4
    assert len(result["contacts"]) == 2


@pytest.mark.asyncio
async def test_search_clients_clamps_max_results(make_client):
    client, transport = make_client(_search_responder())

    await handle_search_clients(client, {"search_term": "acme", "max_results": 500})

    assert {request.url.params["$top"] for request in transport.requests} == {"100"}


@pytest.mark.asyncio
async def test_search_clients_survives_failed_sub_search(make_client):
    client, _ = make_client(_search_responder(failing_path="/v3/Contacts"))

    result = payload(await handle_search_clients(client, {"search_term": "acme"}))

    assert result["contacts"] == []
    assert result["organizations"] == [{"OrganizationKey": "O1"}]
    assert result["client_groups"] == [{"ClientGroupKey": "G1"}]
    assert result["total_results"] == 2


@pytest.mark.asyncio
async def test_search_clients_survives_every_sub_search_failing(make_client):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, transport = make_client(refuse)

    result = payload(await handle_search_clients(client, {"search_term": "acme"}))

    assert len(transport.requests) == 3
    assert result["total_results"] == 0
    assert result["contacts"] == result["organizations"] == result["client_groups"] == []


@pytest.mark.asyncio
async def test_search_clients_tolerates_missing_value(make_client, ok):
    client, _ = make_client(ok({"@odata.context": "x"}))

    result = payload(await handle_search_clients(client, {"search_term": "acme"}))

    assert result["total_results"] == 0


@pytest.mark.asyncio
async def test_search_clients_rejects_string_max_results(make_client, ok):
    client, transport = make_client(ok({"value": []}))

    with pytest.raises(InvalidParams, match="search_clients"):
        await handle_search_clients(client, {"search_term": "acme", "max_results": "10"})
    assert transport.requests == []


@pytest.mark.asyncio
async def test_get_client_by_id_unusable_url_is_internal_error(make_client, ok):
    client, transport = make_client(ok({}))

    with pytest.raises(InternalError, match="Karbon API error"):
        await handle_get_client_by_id(client, {"client_id": "a\x00b", "client_type": "Contact"})
    assert transport.requests == []


@pytest.mark.asyncio
async def test_search_fallbacks_are_fresh_per_call(make_client, monkeypatch):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = make_client(refuse)
    defaults = []
    get_or_default = client.get_or_default

    async def recording(query, default):
        defaults.append(default)
        return await get_or_default(query, default)

    monkeypatch.setattr(client, "get_or_default", recording)

    await handle_search_clients(client, {"search_term": "acme"})
    await handle_search_clients(client, {"search_term": "acme"})

    assert len(defaults) == 6
    assert len({id(default) for default in defaults}) == 6
    assert all(default == {"value": []} for default in defaults)
