"""Payment verification and the ledger of committed payments.

A payment is recorded in two steps:

1. the Razorpay signature is checked; a mismatch rejects the request and
   nothing is written;
2. one transaction increments ``counter.total_orders``, reads the new value
   back as the order number and inserts the payment record with it. Any
   failure rolls the whole transaction back.

The increment is the first statement of the transaction, so it takes the
write lock on the counter row before anything is read. A concurrent
verification waits for that lock and therefore always sees the committed
value of the one before it; order numbers stay unique and contiguous.
"""

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from collection_server.config import razorpay_credentials
from collection_server.db.session import WRITE_LOCK_OPTIONS
from collection_server.errors import StorageError, VerificationError
from collection_server.models.counter import COUNTER_ID, Counter
from collection_server.models.payment import Payment


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``"{order_id}|{payment_id}"`` keyed with ``secret``."""
    msg = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), msg, hashlib.sha256).hexdigest()


def verify_signature(
    order_id: Any, payment_id: Any, signature: Any, secret: str
) -> bool:
    if not all(isinstance(v, str) and v for v in (order_id, payment_id, signature)):
        return False
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected, signature)


def _driver_message(exc: SQLAlchemyError) -> str:
    return str(getattr(exc, "orig", None) or exc)


async def record_payment(
    db: AsyncSession,
    *,
    name: Any,
    mobile: Any,
    address: Any,
    amount: Any,
    razorpay_order_id: str,
    razorpay_payment_id: str,
) -> int:
    """Advance the counter and insert the payment in one transaction.

    Returns the order number assigned to the payment. Raises
    :class:`StorageError` after rolling back if any step fails.
    """
    try:
        async with db.begin():
            await db.connection(execution_options=WRITE_LOCK_OPTIONS)
            result = await db.execute(
                update(Counter)
                .where(Counter.id == COUNTER_ID)
                .values(total_orders=Counter.total_orders + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise StorageError("Database error: counter row is missing")

            result = await db.execute(
                select(Counter.total_orders).where(Counter.id == COUNTER_ID)
            )
            order_number = result.scalar_one()

            db.add(
                Payment(
                    order_number=order_number,
                    name=name,
                    mobile=mobile,
                    address=address,
                    amount=amount,
                    razorpay_order_id=razorpay_order_id,
                    razorpay_payment_id=razorpay_payment_id,
                )
            )
            await db.flush()
    except SQLAlchemyError as e:
        logging.exception(
            "Ledger transaction rolled back for payment %s", razorpay_payment_id
        )
        raise StorageError(f"Database error: {_driver_message(e)}") from e

    return order_number


async def verify_and_record(
    db: AsyncSession,
    order_id: Any,
    payment_id: Any,
    signature: Any,
    name: Any,
    mobile: Any,
    address: Any,
    amount: Any,
    secret: Optional[str] = None,
) -> int:
    """Check the payment signature, then record the payment.

    ``secret`` defaults to the configured ``RZP_SECRET``.
    """
    if secret is None:
        _, secret = razorpay_credentials()

    if not verify_signature(order_id, payment_id, signature, secret):
        logging.warning(
            "Rejected payment %s for order %s: signature mismatch",
            payment_id,
            order_id,
        )
        raise VerificationError("Invalid payment signature")

    order_number = await record_payment(
        db,
        name=name,
        mobile=mobile,
        address=address,
        amount=amount,
        razorpay_order_id=order_id,
        razorpay_payment_id=payment_id,
    )
    logging.info("Payment %s recorded as order #%s", payment_id, order_number)
    return order_number


@dataclass
class LedgerAudit:
    total_orders: int
    record_count: int
    max_order_number: int
    missing: List[int] = field(default_factory=list)
    duplicates: List[int] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return (
            not self.missing
            and not self.duplicates
            and self.record_count == self.total_orders
            and self.max_order_number == self.total_orders
        )


async def audit_ledger(db: AsyncSession) -> LedgerAudit:
    """Compare the counter with the stored order numbers.

    The ledger is consistent when the order numbers are exactly
    ``1..total_orders``.
    """
    result = await db.execute(
        select(Counter.total_orders).where(Counter.id == COUNTER_ID)
    )
    total_orders = result.scalar_one_or_none() or 0

    result = await db.execute(select(Payment.order_number).order_by(Payment.order_number))
    numbers = list(result.scalars().all())

    seen = set()
    duplicates = []
    for n in numbers:
        if n in seen and n not in duplicates:
            duplicates.append(n)
        seen.add(n)

    return LedgerAudit(
        total_orders=total_orders,
        record_count=len(numbers),
        max_order_number=numbers[-1] if numbers else 0,
        missing=[n for n in range(1, total_orders + 1) if n not in seen],
        duplicates=duplicates,
    )
