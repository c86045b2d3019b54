"""Quote engine: the amount the next payer is asked for."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from collection_server.config import UNIT_PRICE
from collection_server.models.counter import COUNTER_ID, Counter


async def get_total_orders(db: AsyncSession) -> int:
    result = await db.execute(
        select(Counter.total_orders).where(Counter.id == COUNTER_ID)
    )
    total = result.scalar_one_or_none()
    return total or 0


async def get_next_amount(db: AsyncSession, unit_price: int = UNIT_PRICE) -> int:
    """Return ``(total_orders + 1) * unit_price``.

    Read on every call: a verification committed between two quotes must
    move the price. The quote does not reserve the number.
    """
    total_orders = await get_total_orders(db)
    return (total_orders + 1) * unit_price
