import uuid

from sqlalchemy import Column, Integer, ForeignKey, String, Numeric, Uuid
from sqlalchemy.orm import relationship

from expressmart.data.database import Base


class OrderItemModel(Base):
    """Snapshot produktu z chwili zakupu, bez powiązania z aktualnym wierszem produktu."""

    __tablename__ = "express_order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("express_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, nullable=False)

    title = Column(String, nullable=False)
    thumbnail = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    size = Column(String, nullable=True)
    color = Column(String, nullable=True)

    order = relationship("OrderModel", back_populates="items")
