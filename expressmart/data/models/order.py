import secrets
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Numeric, JSON, Uuid
from sqlalchemy.orm import relationship

from expressmart.data.database import Base


def _order_number() -> str:
    return f"EXM-{datetime.now(timezone.utc):%Y%m%d}-{secrets.token_hex(3).upper()}"


class OrderModel(Base):
    __tablename__ = "express_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number = Column(String, nullable=False, unique=True, default=_order_number)
    user_id = Column(Uuid, nullable=False, index=True)
    vendor = Column(String, nullable=False)

    status = Column(String, nullable=False, default="confirmed")  # confirmed, processing, shipped, delivered, cancelled
    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping_fee = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)

    customer = Column(JSON, nullable=False)
    shipping_address = Column(JSON, nullable=False)

    payment_method = Column(String, nullable=False)
    payment_status = Column(String, nullable=False)
    payment_reference = Column(String, nullable=False, index=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship("OrderItemModel", back_populates="order", cascade="all, delete-orphan")
