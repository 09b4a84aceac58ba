import asyncio
import json

import httpx
import pytest

from app.core.errors import RemoteError
from app.models.entity import EntityKind
from app.services.remote_entity import RemoteEntityClient


def make_client(handler, token="secret"):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteEntityClient("https://api.example.com/", api_token=token, http_client=http_client)


class TestRemoteEntityClient:

    @pytest.mark.asyncio
    async def test_get_sends_graphql_query(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"part": {"id": "p-1", "name": "Bracket"}}})

        client = make_client(handler)
        part = await client.get(EntityKind.PART, "p-1")

        assert part == {"id": "p-1", "name": "Bracket"}
        assert seen["url"] == "https://api.example.com/graphql"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["variables"] == {"id": "p-1"}
        assert "part(id: $id)" in seen["body"]["query"]

    @pytest.mark.asyncio
    async def test_create_order_uses_mutation(self):
        def handler(request):
            body = json.loads(request.content)
            assert body["query"].startswith("mutation CreateOrder")
            return httpx.Response(200, json={"data": {"createOrder": {"id": "o-9", **body["variables"]["input"]}}})

        client = make_client(handler)
        order = await client.create(EntityKind.ORDER, {"customer_id": "c-1", "items": [{"part_id": "p-1"}]})
        assert order["id"] == "o-9"
        assert order["customer_id"] == "c-1"

    @pytest.mark.asyncio
    async def test_list_declares_filters(self):
        def handler(request):
            body = json.loads(request.content)
            assert body["variables"] == {"status": "open", "page": 2, "perPage": 10}
            assert "$status: String" in body["query"]
            assert "$perPage: Int" in body["query"]
            return httpx.Response(200, json={"data": {"orders": [{"id": "o-1"}]}})

        client = make_client(handler)
        orders = await client.list(EntityKind.ORDER, {"status": "open", "sort": ""}, page=2, per_page=10)
        assert orders == [{"id": "o-1"}]

    @pytest.mark.asyncio
    async def test_non_success_status_includes_body(self):
        client = make_client(lambda request: httpx.Response(502, text="upstream down"))
        with pytest.raises(RemoteError) as exc:
            await client.get(EntityKind.SUPPLIER, "s-1")
        assert exc.value.status_code == 502
        assert "upstream down" in str(exc.value)

    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        client = make_client(lambda request: httpx.Response(200, json={"errors": [{"message": "bad id"}]}))
        with pytest.raises(RemoteError, match="GraphQL error: bad id"):
            await client.get(EntityKind.BOM, "b-1")

    @pytest.mark.asyncio
    async def test_graphql_errors_as_plain_strings(self):
        client = make_client(lambda request: httpx.Response(200, json={"errors": ["boom"]}))
        with pytest.raises(RemoteError, match="GraphQL error: boom"):
            await client.get(EntityKind.PART, "p-1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        [1, 2],
        {"data": [1]},
        {"data": {"part": "oops"}},
        {"data": {"part": [{"id": "p-1"}]}},
    ])
    async def test_malformed_json_shapes_raise_remote_error(self, body):
        client = make_client(lambda request: httpx.Response(200, json=body))
        with pytest.raises(RemoteError):
            await client.get(EntityKind.PART, "p-1")

    @pytest.mark.asyncio
    async def test_create_with_non_object_entity(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": {"createOrder": "o-9"}}))
        with pytest.raises(RemoteError, match="createOrder"):
            await client.create(EntityKind.ORDER, {"customer_id": "c-1", "items": [{"part_id": "p-1"}]})

    @pytest.mark.asyncio
    async def test_list_with_non_list_result(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": {"orders": {"id": "o-1"}}}))
        with pytest.raises(RemoteError, match="orders"):
            await client.list(EntityKind.ORDER)

    @pytest.mark.asyncio
    async def test_missing_entity(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": {"inventoryItem": None}}))
        with pytest.raises(RemoteError, match="not found"):
            await client.get(EntityKind.INVENTORY_ITEM, "i-1")

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(RemoteError, match="connection refused"):
            await client.get(EntityKind.PART, "p-1")

    @pytest.mark.asyncio
    async def test_cancellation_aborts_request(self):
        started = asyncio.Event()

        async def handler(request):
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200, json={"data": {"part": {"id": "late"}}})

        client = make_client(handler)
        task = asyncio.create_task(client.get(EntityKind.PART, "p-1"))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
