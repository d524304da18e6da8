# expressmart/services/notification_service.py
from expressmart.celery_worker import celery_app
from expressmart.data.database import SessionLocal
from expressmart.domain.schemas import AndroidOptions, NotificationPayload
from expressmart.services.push_service import PushNotificationService
from expressmart.utils.settings import get_settings
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_STATUS_MESSAGES = {
    "confirmed": ("Order Confirmed! 🎉", "Your order #{number} has been confirmed."),
    "processing": ("Order Processing", "Your order #{number} is being prepared."),
    "shipped": ("Order Shipped! 📦", "Your order #{number} is on its way!"),
    "delivered": ("Order Delivered! ✅", "Your order #{number} has been delivered."),
    "cancelled": ("Order Cancelled", "Your order #{number} has been cancelled."),
}


def order_status_message(status: str, order_number: str) -> tuple[str, str]:
    if status in ORDER_STATUS_MESSAGES:
        title, body = ORDER_STATUS_MESSAGES[status]
        return title, body.format(number=order_number)
    return "Order Update", f"Your order #{order_number} status: {status}"


class NotificationService:
    """
    Serwis do wysyłania powiadomień o zamówieniach.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id, order_id, order_number: str, status: str = "confirmed"):
        send_order_notification_task.delay(str(user_id), str(order_id), order_number, status)


@celery_app.task(name="expressmart.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_id: str, order_number: str, status: str):
    """
    Celery task - push do aktywnych urządzeń klienta.
    """
    title, body = order_status_message(status, order_number)
    payload = NotificationPayload(
        user_id=user_id,
        app_type="customer",
        title=title,
        body=body,
        data={"orderId": order_id, "status": status, "screen": "OrderDetail"},
        notification_type="order",
        android=AndroidOptions(channel_id="orders"),
    )

    db = SessionLocal()
    try:
        result = PushNotificationService(db, get_settings()).send(payload)
    finally:
        db.close()

    logger.info(f"[NOTIFICATION] User {user_id}: order {order_number} {status} -> sent={result.get('sent', 0)}")
    return {"user_id": user_id, "order_id": order_id, "status": status, "sent": result.get("sent", 0)}
