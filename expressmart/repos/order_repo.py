# expressmart/repos/order_repo.py
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from expressmart.data.models.order import OrderModel
from expressmart.data.models.order_item import OrderItemModel


class OrderRepo:
    """
    Repo nie commituje - granica transakcji należy do OrderService.
    """

    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_items(self, items: List[OrderItemModel]) -> List[OrderItemModel]:
        self.db.add_all(items)
        self.db.flush()
        return items

    def get_order(self, order_id: UUID) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)
