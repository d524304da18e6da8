import uuid

from sqlalchemy import Column, Integer, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from expressmart.data.database import Base


class CartItemModel(Base):
    __tablename__ = "express_cart_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cart_id = Column(Uuid, ForeignKey("express_carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey("express_products.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    size = Column(String, nullable=True)
    color = Column(String, nullable=True)

    cart = relationship("CartModel", back_populates="items")
    product = relationship("ProductModel", lazy="joined")
