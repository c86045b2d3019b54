import asyncio

from sqlalchemy import update

from conftest import TEST_SECRET, setup_test_db
from collection_server.db.session import WRITE_LOCK_OPTIONS
from collection_server.models.counter import Counter
from collection_server.services.ledger_service import compute_signature, verify_and_record
from collection_server.services.quote_service import get_next_amount, get_total_orders


async def commit_payment(SessionLocal, n):
    order_id, payment_id = f"order_{n}", f"pay_{n}"
    async with SessionLocal() as db:
        await verify_and_record(
            db,
            order_id,
            payment_id,
            compute_signature(order_id, payment_id, TEST_SECRET),
            f"Payer {n}",
            "9876543210",
            "Addr",
            10 * n,
            secret=TEST_SECRET,
        )


async def quote(SessionLocal, **kwargs):
    async with SessionLocal() as db:
        return await get_next_amount(db, **kwargs)


def test_fresh_counter_quotes_one_unit(test_db):
    engine, SessionLocal = test_db
    assert asyncio.run(quote(SessionLocal)) == 10


def test_quote_follows_committed_verifications(test_db):
    engine, SessionLocal = test_db

    async def scenario():
        quotes = [await quote(SessionLocal)]
        for n in range(1, 4):
            await commit_payment(SessionLocal, n)
            quotes.append(await quote(SessionLocal))
        return quotes

    assert asyncio.run(scenario()) == [10, 20, 30, 40]


def test_quote_does_not_reserve_a_number(test_db):
    engine, SessionLocal = test_db

    async def scenario():
        first = await quote(SessionLocal)
        second = await quote(SessionLocal)
        async with SessionLocal() as db:
            total = await get_total_orders(db)
        return first, second, total

    assert asyncio.run(scenario()) == (10, 10, 0)


def test_custom_unit_price(test_db):
    engine, SessionLocal = test_db

    async def scenario():
        await commit_payment(SessionLocal, 1)
        return await quote(SessionLocal, unit_price=25)

    assert asyncio.run(scenario()) == 50


def test_missing_counter_row_quotes_as_zero(tmp_path):
    engine, SessionLocal = setup_test_db(tmp_path / "empty.db", with_counter=False)
    assert asyncio.run(quote(SessionLocal)) == 10


def test_quote_is_not_blocked_by_open_ledger_transaction(test_db):
    engine, SessionLocal = test_db

    async def scenario():
        async with SessionLocal() as writer:
            async with writer.begin():
                await writer.connection(execution_options=WRITE_LOCK_OPTIONS)
                await writer.execute(
                    update(Counter).values(total_orders=Counter.total_orders + 1)
                )
                # запись ещё не закоммичена: котировка видит прежнее значение
                during = await asyncio.wait_for(quote(SessionLocal), timeout=2)
        after = await quote(SessionLocal)
        return during, after

    assert asyncio.run(scenario()) == (10, 20)
