import uuid

from sqlalchemy import Column, String, Numeric, JSON, Uuid

from expressmart.data.database import Base


class ProductModel(Base):
    __tablename__ = "express_products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    thumbnail = Column(String, nullable=True)
    images = Column(JSON, nullable=False, default=list)
