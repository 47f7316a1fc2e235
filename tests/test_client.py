import json

import httpx
import pytest

from livedrop.client import StorefrontClient
from livedrop.errors import NetworkError, ServerError
from livedrop.models import ProductCreate, SellerCreate, StreamCreate


@pytest.mark.anyio
async def test_create_and_list_resources(client, backend):
    seller = await client.create_seller(SellerCreate(name="Demo Seller", email="s@example.com"))
    assert seller.id == "1"
    product = await client.create_product(
        ProductCreate(title="T-Shirt", price=20, seller_id=seller.id)
    )
    assert product.in_stock is True
    assert product.seller_id == seller.id

    assert [s.id for s in await client.list_sellers()] == [seller.id]
    assert [p.id for p in await client.list_products(seller.id)] == [product.id]
    assert await client.list_products("999") == []


@pytest.mark.anyio
async def test_stream_round_trip_and_active_filter(client, backend):
    seller = await client.create_seller(SellerCreate(name="A", email="a@example.com"))
    product = await client.create_product(
        ProductCreate(title="Mug", price=8, seller_id=seller.id)
    )
    stream = await client.create_stream(
        StreamCreate(
            seller_id=seller.id,
            product_ids=[product.id],
            discount_percent=25,
            duration_seconds=300,
        )
    )
    fetched = await client.get_stream(stream.id)
    assert fetched.title == "Live Drop"
    assert fetched.active is True
    assert fetched.end_time is not None and fetched.end_time.tzinfo is not None

    backend.state.store.streams[int(stream.id)]["active"] = False
    assert await client.list_streams(active=True) == []
    assert [s.id for s in await client.list_streams(active=False)] == [stream.id]
    assert len(await client.list_streams()) == 1


@pytest.mark.anyio
async def test_non_2xx_uses_body_text(client):
    with pytest.raises(ServerError) as exc:
        await client.get_stream("42")
    assert exc.value.status_code == 404
    assert str(exc.value) == "Stream not found"


@pytest.mark.anyio
async def test_empty_error_body_gets_status_message():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    async with StorefrontClient("http://test", transport=transport) as c:
        with pytest.raises(ServerError) as exc:
            await c.list_sellers()
    assert exc.value.message == "Request failed: 503"


@pytest.mark.anyio
async def test_transport_failure_is_network_error():
    def _offline(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with StorefrontClient("http://test", transport=httpx.MockTransport(_offline)) as c:
        with pytest.raises(NetworkError) as exc:
            await c.get_stream("1")
    assert "connection refused" in exc.value.message


@pytest.mark.anyio
async def test_requests_send_json_and_query_params():
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with StorefrontClient("http://test/", transport=httpx.MockTransport(_handler)) as c:
        await c.list_streams(active=True)
        await c.list_products()

    assert str(seen[0].url) == "http://test/api/streams?active=true"
    assert seen[0].headers["content-type"] == "application/json"
    assert str(seen[1].url) == "http://test/api/products"


@pytest.mark.anyio
async def test_malformed_success_body_is_server_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
    async with StorefrontClient("http://test", transport=transport) as c:
        with pytest.raises(ServerError):
            await c.get_stream("1")

    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, content=json.dumps({"title": "no id"}))
    )
    async with StorefrontClient("http://test", transport=transport) as c:
        with pytest.raises(ServerError):
            await c.get_stream("1")


def test_base_url_defaults_to_settings(monkeypatch):
    from livedrop.config import get_settings

    monkeypatch.setenv("BACKEND_URL", "http://shop.internal:9000/")
    get_settings.cache_clear()
    try:
        c = StorefrontClient()
        assert c.base_url == "http://shop.internal:9000"
    finally:
        get_settings.cache_clear()
