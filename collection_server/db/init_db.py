"""Create the schema and the single counter row.

Run as ``python -m collection_server.db.init_db``; the API does the same on
startup.
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from collection_server.db.base_class import Base
from collection_server.db.session import DATABASE_URL, SessionLocal, engine
from collection_server.models.counter import COUNTER_ID, Counter
from collection_server.models import payment  # noqa: F401  registers the table


async def init_models(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_counter(db: AsyncSession) -> Counter:
    """Insert ``counter(id=1, total_orders=0)`` unless it already exists."""
    result = await db.execute(select(Counter).filter_by(id=COUNTER_ID))
    counter = result.scalars().first()
    if counter:
        await db.commit()
        return counter

    counter = Counter(id=COUNTER_ID, total_orders=0)
    db.add(counter)
    try:
        await db.commit()
    except IntegrityError:
        # Другой экземпляр сервиса успел создать строку раньше
        await db.rollback()
        logging.info("Counter row was created concurrently; using existing row")
        result = await db.execute(select(Counter).filter_by(id=COUNTER_ID))
        counter = result.scalars().one()
        await db.commit()
    else:
        logging.info("Counter row initialised with total_orders=0")
    return counter


async def main() -> None:
    print(f"🗂 Используется база данных: {DATABASE_URL}")
    await init_models(engine)
    async with SessionLocal() as session:
        counter = await ensure_counter(session)
    print(f"✅ Схема готова, total_orders={counter.total_orders}")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
