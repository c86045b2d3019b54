import asyncio
import base64
import json

import httpx
import pytest

from conftest import TEST_KEY_ID, TEST_SECRET
from collection_server.errors import ProviderError
from collection_server.services.razorpay_service import (
    create_razorpay_order,
    to_minor_units,
)


def call_with(handler, amount=20):
    async def run():
        transport = httpx.MockTransport(handler)
        async with httpx.AsyncClient(transport=transport) as client:
            return await create_razorpay_order(amount, client=client)

    return asyncio.run(run())


def test_to_minor_units():
    assert to_minor_units(10) == 1000
    assert to_minor_units(15.5) == 1550
    assert to_minor_units(0.1 + 0.2) == 30


def test_order_request_shape(razorpay_env):
    captured = {}

    def handler(request):
        captured["request"] = request
        return httpx.Response(200, json={"id": "order_ABC", "amount": 2000})

    order = call_with(handler, amount=20)

    assert order["id"] == "order_ABC"
    request = captured["request"]
    assert request.method == "POST"
    assert request.url.path.endswith("/orders")
    body = json.loads(request.content)
    assert body["amount"] == 2000
    assert body["currency"] == "INR"
    assert body["receipt"].startswith("receipt_")
    expected_auth = base64.b64encode(f"{TEST_KEY_ID}:{TEST_SECRET}".encode()).decode()
    assert request.headers["Authorization"] == f"Basic {expected_auth}"


def test_error_status_raises_provider_error(razorpay_env):
    def handler(request):
        return httpx.Response(400, json={"error": {"description": "bad amount"}})

    with pytest.raises(ProviderError) as exc_info:
        call_with(handler)
    assert exc_info.value.message == "Razorpay order creation failed"
    assert exc_info.value.status_code == 502


def test_transport_error_raises_provider_error(razorpay_env):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError):
        call_with(handler)


def test_response_without_id_raises_provider_error(razorpay_env):
    def handler(request):
        return httpx.Response(200, json={"status": "created"})

    with pytest.raises(ProviderError):
        call_with(handler)


def test_non_json_response_raises_provider_error(razorpay_env):
    def handler(request):
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(ProviderError):
        call_with(handler)
