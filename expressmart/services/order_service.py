# expressmart/services/order_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Tuple

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expressmart.data.models.cart_item import CartItemModel
from expressmart.data.models.order import OrderModel
from expressmart.data.models.order_item import OrderItemModel
from expressmart.domain.errors import (
    AuthenticationError,
    ErrorKind,
    OrderFinalizationError,
    PaystackError,
)
from expressmart.domain.schemas import AuthenticatedUser, OrderOut, PaymentVerifyIn
from expressmart.repos.cart_repo import CartRepo
from expressmart.repos.order_repo import OrderRepo
from expressmart.services.auth_service import AuthService
from expressmart.services.notification_service import NotificationService
from expressmart.services.paystack_client import PaystackClient
from expressmart.utils.settings import Settings
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)

VENDOR = "ExpressMart"
ORDER_STATUS = "confirmed"
CURRENCY = "GHS"
PAYMENT_METHOD = "paystack"
PAYMENT_STATUS = "success"


def compute_order_totals(
    items: Iterable[CartItemModel], shipping_fee: Decimal | None = None
) -> Tuple[Decimal, Decimal, Decimal]:
    """(subtotal, shipping_fee, total); brak shipping_fee liczy się jako 0."""
    subtotal = sum(
        (Decimal(i.quantity) * Decimal(str(i.product.price)) for i in items),
        Decimal("0"),
    )
    fee = Decimal(str(shipping_fee)) if shipping_fee is not None else Decimal("0")
    return subtotal, fee, subtotal + fee


def _db_message(e: SQLAlchemyError) -> str:
    return str(getattr(e, "orig", None) or e)


class OrderService:
    """
    Finalizacja zamówienia po płatności Paystack.
    Każdy krok przerywa flow wyjątkiem OrderFinalizationError.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        paystack_client: PaystackClient | None = None,
        auth_service: AuthService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.settings = settings
        self.cart_repo = CartRepo(db)
        self.order_repo = OrderRepo(db)
        self.paystack_client = paystack_client
        self.auth_service = auth_service or AuthService(settings)
        self.notification_service = notification_service or NotificationService()

    def finalize_payment(self, payload: PaymentVerifyIn, authorization: str | None) -> dict:
        """
        Use Case: Weryfikacja płatności i utworzenie zamówienia z koszyka.

        1. Sprawdza konfigurację i dane wejściowe
        2. Weryfikuje płatność w Paystack
        3. Uwierzytelnia wywołującego
        4. Pobiera koszyk i jego pozycje
        5. Tworzy zamówienie + pozycje w jednej transakcji, czyści koszyk
        6. Wysyła powiadomienie (async)
        """
        if not self.settings.paystack_secret_key:
            raise OrderFinalizationError(ErrorKind.CONFIGURATION, "Paystack secret key not configured")

        reference = (payload.reference or "").strip()
        if not reference:
            raise OrderFinalizationError(ErrorKind.VALIDATION, "Payment reference is required")

        shipping_address = payload.order_data.shipping_address
        if not shipping_address:
            raise OrderFinalizationError(ErrorKind.VALIDATION, "Shipping address is required")

        logger.info(f"Verifying payment {reference}")
        payment_info = self._verify_payment(reference)
        logger.info(f"Payment {reference} verified")

        user = self._authenticate(authorization)
        logger.info(f"User authenticated: {user.id}")

        try:
            cart = self.cart_repo.get_cart_by_user(user.id)
        except SQLAlchemyError as e:
            logger.error(f"Cart lookup error for user {user.id}: {e}")
            raise OrderFinalizationError(ErrorKind.STORAGE, "Cart not found") from e
        if not cart:
            raise OrderFinalizationError(ErrorKind.STORAGE, "Cart not found")

        try:
            cart_items = self.cart_repo.get_cart_items_with_products(cart.id)
        except SQLAlchemyError as e:
            logger.error(f"Cart items lookup error for cart {cart.id}: {e}")
            raise OrderFinalizationError(ErrorKind.STORAGE, "Cart is empty") from e
        if not cart_items:
            raise OrderFinalizationError(ErrorKind.STORAGE, "Cart is empty")

        logger.info(f"Found {len(cart_items)} cart items in cart {cart.id}")

        subtotal, shipping_fee, total = compute_order_totals(
            cart_items, payload.order_data.shipping_fee
        )
        logger.info(f"Order totals: subtotal={subtotal} shipping_fee={shipping_fee} total={total}")

        order = self._persist_order(
            user=user,
            cart_id=cart.id,
            cart_items=cart_items,
            reference=reference,
            shipping_address=shipping_address,
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            total=total,
        )

        self._notify(order)

        return {
            "order": OrderOut.model_validate(order).model_dump(mode="json"),
            "paymentInfo": payment_info,
        }

    def _verify_payment(self, reference: str) -> dict:
        client = self.paystack_client or PaystackClient(
            secret_key=self.settings.paystack_secret_key,
            base_url=self.settings.paystack_base_url,
            timeout=self.settings.paystack_timeout,
        )
        try:
            return client.verify_transaction(reference)
        except PaystackError as e:
            raise OrderFinalizationError(ErrorKind.UPSTREAM_GATEWAY, str(e)) from e
        except requests.RequestException as e:
            logger.error(f"Paystack unreachable for {reference}: {e}")
            raise OrderFinalizationError(ErrorKind.UPSTREAM_GATEWAY, "Payment verification failed") from e

    def _authenticate(self, authorization: str | None) -> AuthenticatedUser:
        try:
            return self.auth_service.resolve_user(authorization)
        except AuthenticationError as e:
            raise OrderFinalizationError(ErrorKind.AUTHENTICATION, "Authentication required") from e

    def _persist_order(
        self,
        user: AuthenticatedUser,
        cart_id,
        cart_items,
        reference: str,
        shipping_address: dict,
        subtotal: Decimal,
        shipping_fee: Decimal,
        total: Decimal,
    ) -> OrderModel:
        # zamówienie i pozycje w jednej transakcji - nie ma zamówienia bez pozycji
        try:
            order = self.order_repo.add_order(
                OrderModel(
                    user_id=user.id,
                    vendor=VENDOR,
                    status=ORDER_STATUS,
                    subtotal=subtotal,
                    shipping_fee=shipping_fee,
                    total=total,
                    currency=CURRENCY,
                    customer={
                        "name": shipping_address.get("full_name"),
                        "email": user.email,
                        "phone": shipping_address.get("phone"),
                    },
                    shipping_address=shipping_address,
                    payment_method=PAYMENT_METHOD,
                    payment_status=PAYMENT_STATUS,
                    payment_reference=reference,
                    paid_at=datetime.now(timezone.utc),
                )
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order creation error: {e}")
            raise OrderFinalizationError(
                ErrorKind.STORAGE, f"Order creation failed: {_db_message(e)}"
            ) from e

        try:
            self.order_repo.add_order_items(
                [
                    OrderItemModel(
                        order_id=order.id,
                        product_id=item.product.id,
                        title=item.product.title,
                        thumbnail=item.product.thumbnail or next(iter(item.product.images or []), None),
                        quantity=item.quantity,
                        price=item.product.price,
                        total=Decimal(item.quantity) * Decimal(str(item.product.price)),
                        size=item.size,
                        color=item.color,
                    )
                    for item in cart_items
                ]
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order items error, order rolled back: {e}")
            raise OrderFinalizationError(
                ErrorKind.STORAGE, f"Order items creation failed: {_db_message(e)}"
            ) from e

        # czyszczenie koszyka w savepoincie - porażka nie cofa zamówienia
        try:
            with self.db.begin_nested():
                cleared = self.cart_repo.clear_cart(cart_id)
            logger.info(f"Cart {cart_id} cleared ({cleared} items)")
        except SQLAlchemyError as e:
            logger.warning(f"Failed to clear cart {cart_id}: {e}")

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order commit error: {e}")
            raise OrderFinalizationError(
                ErrorKind.STORAGE, f"Order creation failed: {_db_message(e)}"
            ) from e

        self.db.refresh(order)
        logger.info(f"Order {order.order_number} created from cart {cart_id}")
        return order

    def _notify(self, order: OrderModel):
        try:
            self.notification_service.send_order_notification(
                user_id=order.user_id,
                order_id=order.id,
                order_number=order.order_number,
                status=order.status,
            )
        except Exception as e:
            logger.warning(f"Failed to schedule notification for order {order.order_number}: {e}")
