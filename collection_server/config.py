"""Environment-driven settings shared by the API and the services."""

import os
from pathlib import Path

from dotenv import load_dotenv

from collection_server.errors import ConfigurationError

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

DATABASE_URL = os.getenv(
    "DATABASE_URL", f"sqlite+aiosqlite:///{BASE_DIR / 'db' / 'database.db'}"
)

# Шаг ценовой лестницы: k-й платёж стоит k * UNIT_PRICE
UNIT_PRICE = int(os.getenv("UNIT_PRICE", "10"))
MIN_ORDER_AMOUNT = UNIT_PRICE

RAZORPAY_API_URL = os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com/v1")
RAZORPAY_CURRENCY = os.getenv("RAZORPAY_CURRENCY", "INR")
RAZORPAY_TIMEOUT = float(os.getenv("RAZORPAY_TIMEOUT", "15"))

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def razorpay_credentials() -> tuple[str, str]:
    """Return ``(key_id, secret)``; credentials are read on every call."""
    key_id = (os.getenv("RZP_KEY_ID") or "").strip()
    secret = (os.getenv("RZP_SECRET") or "").strip()
    if not key_id or not secret:
        raise ConfigurationError(
            "Razorpay credentials are not configured "
            "(set RZP_KEY_ID and RZP_SECRET)."
        )
    return key_id, secret
