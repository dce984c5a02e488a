"""Tests for the ExchangeRate-API client against an in-process aiohttp server."""

from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp import test_utils

from config import Settings
from rate_fetcher import UpstreamHTTPError, build_pair_url, fetch_pair_conversion


@asynccontextmanager
async def upstream(handler):
    app = web.Application()
    app.router.add_get("/v6/{key}/pair/{from_code}/{to_code}/{amount}", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield Settings(base_url=str(server.make_url("/v6")), api_key="test-key")
    finally:
        await server.close()


def test_build_pair_url():
    settings = Settings(base_url="https://v6.example.test/v6/", api_key="abc")
    assert (
        build_pair_url(settings, "USD", "EUR", 100)
        == "https://v6.example.test/v6/abc/pair/USD/EUR/100"
    )


@pytest.mark.asyncio
async def test_returns_payload_on_success():
    seen = {}

    async def handler(request):
        seen.update(request.match_info)
        return web.json_response({"result": "success", "conversion_result": 91.2})

    async with upstream(handler) as settings:
        data = await fetch_pair_conversion(settings, "USD", "EUR", 100)

    assert data == {"result": "success", "conversion_result": 91.2}
    assert seen == {"key": "test-key", "from_code": "USD", "to_code": "EUR", "amount": "100"}


@pytest.mark.asyncio
async def test_error_status_carries_decoded_body():
    async def handler(request):
        return web.json_response({"result": "error", "error-type": "invalid-key"}, status=403)

    async with upstream(handler) as settings:
        with pytest.raises(UpstreamHTTPError) as exc_info:
            await fetch_pair_conversion(settings, "USD", "EUR", 100)

    assert exc_info.value.status == 403
    assert exc_info.value.payload == {"result": "error", "error-type": "invalid-key"}


@pytest.mark.asyncio
async def test_error_status_with_non_json_body():
    async def handler(request):
        return web.Response(text="<html>Bad Gateway</html>", status=502)

    async with upstream(handler) as settings:
        with pytest.raises(UpstreamHTTPError) as exc_info:
            await fetch_pair_conversion(settings, "USD", "EUR", 100)

    assert exc_info.value.status == 502
    assert exc_info.value.payload is None


@pytest.mark.asyncio
async def test_success_status_with_non_json_body_raises_value_error():
    async def handler(request):
        return web.Response(text="not json")

    async with upstream(handler) as settings:
        with pytest.raises(ValueError):
            await fetch_pair_conversion(settings, "USD", "EUR", 100)
