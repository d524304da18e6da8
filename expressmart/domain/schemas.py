# expressmart/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# kwoty jako liczby w JSON, tak jak oczekuje aplikacja mobilna
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class OrderDataIn(BaseModel):
    """Dane zamówienia przekazywane przez aplikację mobilną."""

    model_config = ConfigDict(populate_by_name=True)

    shipping_address: Optional[Dict[str, Any]] = Field(None, alias="shippingAddress")
    shipping_fee: Optional[Decimal] = Field(None, alias="shippingFee", ge=0)


class PaymentVerifyIn(BaseModel):
    """Body POST /payment. Brak reference jest błędem walidacji serwisu, nie 422."""

    model_config = ConfigDict(populate_by_name=True)

    reference: Optional[str] = None
    order_data: OrderDataIn = Field(default_factory=OrderDataIn, alias="orderData")


class AuthenticatedUser(BaseModel):
    id: UUID
    email: Optional[str] = None


class OrderItemOut(BaseModel):
    id: UUID
    order_id: UUID
    product_id: UUID
    title: str
    thumbnail: Optional[str] = None
    quantity: int
    price: Money
    total: Money
    size: Optional[str] = None
    color: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: UUID
    order_number: str
    user_id: UUID
    vendor: str
    status: str
    subtotal: Money
    shipping_fee: Money
    total: Money
    currency: str
    customer: Dict[str, Any]
    shipping_address: Dict[str, Any]
    payment_method: str
    payment_status: str
    payment_reference: str
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


AppType = Literal["customer", "seller", "admin", "all"]
NotificationType = Literal["order", "chat", "promotion", "system", "status", "general"]


class AndroidOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    channel_id: Optional[str] = Field(None, alias="channelId")
    priority: Optional[Literal["high", "normal"]] = None
    sound: Optional[str] = None
    click_action: Optional[str] = Field(None, alias="clickAction")


class IosOptions(BaseModel):
    sound: Optional[str] = None
    badge: Optional[int] = None
    category: Optional[str] = None


class WebOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    icon: Optional[str] = None
    click_action: Optional[str] = Field(None, alias="clickAction")
    require_interaction: Optional[bool] = Field(None, alias="requireInteraction")


class NotificationPayload(BaseModel):
    """Payload wysyłki push. Jeden z celów: token, tokens, userId(s) albo topic."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[UUID] = Field(None, alias="userId")
    user_ids: Optional[List[UUID]] = Field(None, alias="userIds")
    token: Optional[str] = None
    tokens: Optional[List[str]] = None
    topic: Optional[str] = None
    app_type: Optional[AppType] = Field(None, alias="appType")

    title: Optional[str] = None
    body: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")

    data: Dict[str, str] = Field(default_factory=dict)
    notification_type: Optional[NotificationType] = Field(None, alias="notificationType")

    android: Optional[AndroidOptions] = None
    ios: Optional[IosOptions] = None
    web: Optional[WebOptions] = None


class DeviceTokenIn(BaseModel):
    fcm_token: str = Field(..., min_length=1)
    device_platform: Optional[Literal["android", "ios", "web"]] = None
    app_type: Literal["customer", "seller", "admin"] = "customer"
    device_name: Optional[str] = Field(None, max_length=200)


class DeviceTokenOut(BaseModel):
    id: UUID
    user_id: UUID
    fcm_token: str
    device_platform: Optional[str] = None
    app_type: str
    device_name: Optional[str] = None
    is_active: bool
    last_used_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
