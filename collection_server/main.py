import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from collection_server.api import payment_router
from collection_server.api.errors import install_error_handlers
from collection_server.config import CORS_ALLOW_ORIGINS, LOG_LEVEL
from collection_server.db.init_db import ensure_counter, init_models
from collection_server.db.session import SessionLocal, engine

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Таблицы и строка счётчика должны существовать до первого запроса
    await init_models(engine)
    async with SessionLocal() as db:
        counter = await ensure_counter(db)
    logging.info("Payment API started, total_orders=%s", counter.total_orders)
    yield
    await engine.dispose()


app = FastAPI(title="Payment collection API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

install_error_handlers(app)
app.include_router(payment_router.router, prefix="/api")
