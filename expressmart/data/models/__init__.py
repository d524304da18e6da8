#import wszystkich modeli żeby SQLAlchemy je zarejestrował w base metadata

from expressmart.data.models.product import ProductModel
from expressmart.data.models.cart import CartModel
from expressmart.data.models.cart_item import CartItemModel
from expressmart.data.models.order import OrderModel
from expressmart.data.models.order_item import OrderItemModel
from expressmart.data.models.device_token import DeviceTokenModel
from expressmart.data.models.notification_log import NotificationLogModel

__all__ = [
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "DeviceTokenModel",
    "NotificationLogModel",
]
