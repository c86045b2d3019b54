import asyncio
import sys
from pathlib import Path

import pytest
from sqlalchemy.pool import NullPool

sys.path.append(str(Path(__file__).resolve().parents[1]))

from collection_server.db.init_db import ensure_counter, init_models
from collection_server.db.session import build_engine, build_sessionmaker

TEST_KEY_ID = "rzp_test_key"
TEST_SECRET = "test_secret"


def setup_test_db(db_path, with_counter=True):
    """File-backed SQLite so that concurrent sessions share one database."""
    engine = build_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    TestingSessionLocal = build_sessionmaker(engine)

    async def init():
        await init_models(engine)
        if with_counter:
            async with TestingSessionLocal() as db:
                await ensure_counter(db)

    asyncio.run(init())
    return engine, TestingSessionLocal


@pytest.fixture
def test_db(tmp_path):
    return setup_test_db(tmp_path / "payments.db")


@pytest.fixture
def razorpay_env(monkeypatch):
    monkeypatch.setenv("RZP_KEY_ID", TEST_KEY_ID)
    monkeypatch.setenv("RZP_SECRET", TEST_SECRET)
