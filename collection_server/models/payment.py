from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, UniqueConstraint
from collection_server.db.base_class import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    # Порядковый номер: запись с order_number = k создана k-й успешной верификацией
    order_number = Column(Integer, nullable=False, index=True)

    name = Column(Text, nullable=False)
    mobile = Column(String, nullable=False)
    address = Column(Text, nullable=False)
    amount = Column(Integer, nullable=False)

    # Идентификаторы заказа и платежа в Razorpay
    razorpay_order_id = Column(String(64), nullable=False)
    razorpay_payment_id = Column(String(64), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("order_number", name="uq_payments_order_number"),
    )
