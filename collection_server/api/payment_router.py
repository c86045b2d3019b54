# collection_server/api/payment_router.py

from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from collection_server.db.session import SessionLocal
from collection_server.errors import ValidationError
from collection_server.services import ledger_service, order_service, quote_service

router = APIRouter()


async def get_db():
    async with SessionLocal() as db:
        yield db


class VerifyPaymentData(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    name: Optional[str] = None
    # как и в create-order, номер может прийти числом
    mobile: Optional[Union[str, int]] = None
    address: Optional[str] = None
    amount: Optional[int] = None

    @field_validator("mobile")
    @classmethod
    def mobile_as_text(cls, value):
        return value if value is None else str(value)


# ---------- СЛЕДУЮЩАЯ СУММА ----------
@router.get("/next-amount")
async def next_amount(db: AsyncSession = Depends(get_db)):
    """Сумма для следующего платежа: (total_orders + 1) * UNIT_PRICE."""
    amount = await quote_service.get_next_amount(db)
    return {"nextAmount": amount}


# ---------- СОЗДАНИЕ ЗАКАЗА ----------
@router.post("/create-order", status_code=status.HTTP_201_CREATED)
async def create_order(request: Request):
    """
    Создаёт заказ в Razorpay и возвращает данные для checkout.
    Тело запроса:
    {
      "name": "Ravi",
      "mobile": "9876543210",
      "address": "12 MG Road",
      "amount": 10
    }
    """
    # Тело читаем как есть: amount должен быть именно числом, без приведения типов
    try:
        body: Any = await request.json()
    except ValueError:
        raise ValidationError("Invalid request body")
    if not isinstance(body, dict):
        raise ValidationError("Invalid request body")

    return await order_service.create_order(
        body.get("name"),
        body.get("mobile"),
        body.get("address"),
        body.get("amount"),
    )


# ---------- ПРОВЕРКА ПЛАТЕЖА ----------
@router.post("/verify-payment")
async def verify_payment(data: VerifyPaymentData, db: AsyncSession = Depends(get_db)):
    order_number = await ledger_service.verify_and_record(
        db,
        data.razorpay_order_id,
        data.razorpay_payment_id,
        data.razorpay_signature,
        data.name,
        data.mobile,
        data.address,
        data.amount,
    )
    return {"status": "success", "orderNumber": order_number}
