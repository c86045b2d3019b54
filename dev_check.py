"""Simple debug script to inspect the counter and recorded payments asynchronously."""

import asyncio
from sqlalchemy import select

from collection_server.db.session import SessionLocal
from collection_server.models.payment import Payment
from collection_server.services.ledger_service import audit_ledger


async def main() -> None:
    async with SessionLocal() as db:
        payments = (
            await db.execute(select(Payment).order_by(Payment.order_number))
        ).scalars().all()
        audit = await audit_ledger(db)

    for p in payments:
        print(f"#{p.order_number} {p.name} {p.mobile} ₹{p.amount} {p.razorpay_payment_id}")
    print(f"Counter: {audit.total_orders}, records: {audit.record_count}")
    if audit.is_consistent:
        print("✅ Ledger is consistent")
    else:
        print(f"❌ Missing: {audit.missing}, duplicates: {audit.duplicates}")


if __name__ == "__main__":
    asyncio.run(main())
