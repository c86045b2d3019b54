"""Outbound calls to the Razorpay Orders API."""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from collection_server.config import (
    RAZORPAY_API_URL,
    RAZORPAY_CURRENCY,
    RAZORPAY_TIMEOUT,
    razorpay_credentials,
)
from collection_server.errors import ProviderError


def to_minor_units(amount: float) -> int:
    """Rupees → paise."""
    return int(round(amount * 100))


async def create_razorpay_order(
    amount: float, client: Optional[httpx.AsyncClient] = None
) -> Dict[str, Any]:
    """Create a provider order for ``amount`` and return Razorpay's JSON.

    ``client`` lets callers supply their own ``httpx.AsyncClient``; otherwise
    a short-lived one is opened for this request.
    """
    key_id, secret = razorpay_credentials()
    payload = {
        "amount": to_minor_units(amount),
        "currency": RAZORPAY_CURRENCY,
        "receipt": f"receipt_{int(time.time() * 1000)}",
    }

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=RAZORPAY_TIMEOUT)
    try:
        resp = await client.post(
            f"{RAZORPAY_API_URL}/orders", json=payload, auth=(key_id, secret)
        )
    except httpx.HTTPError as e:
        logging.exception("Razorpay order request failed")
        raise ProviderError("Razorpay order creation failed") from e
    finally:
        if owns_client:
            await client.aclose()

    if not resp.is_success:
        logging.error(
            "Razorpay order creation failed: status=%s body=%s",
            resp.status_code,
            resp.text[:500],
        )
        raise ProviderError("Razorpay order creation failed")

    try:
        order = resp.json()
    except ValueError as e:
        raise ProviderError("Razorpay order creation failed") from e

    if not isinstance(order, dict) or not order.get("id"):
        logging.error("Razorpay returned an order without id: %s", order)
        raise ProviderError("Razorpay order creation failed")

    return order
