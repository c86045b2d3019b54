from sqlalchemy import CheckConstraint, Column, Integer

from collection_server.db.base_class import Base

# Счётчик один на всю систему, строка с id=1
COUNTER_ID = 1


class Counter(Base):
    """Number of payments that passed verification and were committed.

    Only the ledger transaction may change ``total_orders``; it grows by
    exactly one per committed payment record.
    """

    __tablename__ = "counter"

    id = Column(Integer, primary_key=True)
    total_orders = Column(Integer, nullable=False, default=0, server_default="0")

    __table_args__ = (
        CheckConstraint("total_orders >= 0", name="ck_counter_total_orders_non_negative"),
    )
