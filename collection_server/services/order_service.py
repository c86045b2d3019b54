"""Validation and provider-order creation for ``/create-order``."""

import logging
import math
import re
from typing import Any, Dict, Optional

import httpx

from collection_server.config import MIN_ORDER_AMOUNT, razorpay_credentials
from collection_server.errors import ValidationError
from collection_server.services.razorpay_service import create_razorpay_order

MOBILE_RE = re.compile(r"[0-9]{10}")


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    # номер телефона иногда присылают числом
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return ""


def validate_order_request(
    name: Any, mobile: Any, address: Any, amount: Any
) -> Dict[str, Any]:
    """Check the order fields in order and return them normalised.

    Raises :class:`ValidationError` with reason ``missing_field``,
    ``invalid_mobile`` or ``invalid_amount`` on the first failing rule.
    """
    name, mobile, address = _text(name), _text(mobile), _text(address)
    if not name or not mobile or not address:
        raise ValidationError("All fields are required", reason="missing_field")

    if not MOBILE_RE.fullmatch(mobile):
        raise ValidationError("Invalid mobile number", reason="invalid_mobile")

    # Сумма в целых рупиях: 20 и 20.0 допустимы, 20.5, NaN и Infinity нет
    if (
        isinstance(amount, bool)
        or not isinstance(amount, (int, float))
        or (
            isinstance(amount, float)
            and not (math.isfinite(amount) and amount.is_integer())
        )
        or amount < MIN_ORDER_AMOUNT
    ):
        raise ValidationError(
            f"Invalid amount. Minimum amount is ₹{MIN_ORDER_AMOUNT}",
            reason="invalid_amount",
        )

    return {
        "name": name,
        "mobile": mobile,
        "address": address,
        "amount": int(amount),
    }


async def create_order(
    name: Any,
    mobile: Any,
    address: Any,
    amount: Any,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """Validate the request and mint a Razorpay order for ``amount``.

    Returns ``{"order_id", "amount", "key"}``: the provider order handle, the
    amount as requested and the public key the checkout widget needs.
    Nothing is written locally.
    """
    fields = validate_order_request(name, mobile, address, amount)
    key_id, _ = razorpay_credentials()

    order = await create_razorpay_order(fields["amount"], client=client)
    logging.info(
        "Razorpay order %s created for amount=%s", order["id"], fields["amount"]
    )
    return {"order_id": order["id"], "amount": fields["amount"], "key": key_id}
