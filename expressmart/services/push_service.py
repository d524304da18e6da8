# expressmart/services/push_service.py
import json
from datetime import datetime, timezone
from typing import Dict, List
from uuid import UUID

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError
from sqlalchemy.orm import Session

from expressmart.data.models.notification_log import NotificationLogModel
from expressmart.domain.schemas import NotificationPayload
from expressmart.repos.device_token_repo import DeviceTokenRepo
from expressmart.repos.notification_log_repo import NotificationLogRepo
from expressmart.utils.settings import Settings
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)

_APP_NAME = "expressmart-fcm"
_INVALID_TOKEN_MARKERS = ("not registered", "invalid registration")


class PushConfigurationError(Exception):
    pass


def get_firebase_app(settings: Settings) -> firebase_admin.App:
    """Leniwa inicjalizacja aplikacji Firebase z klucza konta serwisowego (JSON w env)."""
    try:
        return firebase_admin.get_app(_APP_NAME)
    except ValueError:
        pass

    if not settings.fcm_service_account_key:
        raise PushConfigurationError("FCM_SERVICE_ACCOUNT_KEY not configured")

    cred = credentials.Certificate(json.loads(settings.fcm_service_account_key))
    return firebase_admin.initialize_app(
        cred, {"projectId": settings.fcm_project_id}, name=_APP_NAME
    )


def _message_data(payload: NotificationPayload) -> Dict[str, str]:
    return {
        **payload.data,
        "notificationType": payload.notification_type or "general",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def build_message(token: str, payload: NotificationPayload) -> messaging.Message:
    android = payload.android
    ios = payload.ios
    web = payload.web

    return messaging.Message(
        token=token,
        notification=messaging.Notification(
            title=payload.title,
            body=payload.body,
            image=payload.image_url,
        ),
        data=_message_data(payload),
        android=messaging.AndroidConfig(
            priority=(android and android.priority) or "high",
            notification=messaging.AndroidNotification(
                channel_id=(android and android.channel_id) or "default",
                sound=(android and android.sound) or "default",
                click_action=android.click_action if android else None,
            ),
        ),
        apns=messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    alert=messaging.ApsAlert(title=payload.title, body=payload.body),
                    sound=(ios and ios.sound) or "default",
                    badge=ios.badge if ios else None,
                    category=ios.category if ios else None,
                )
            )
        ),
        webpush=messaging.WebpushConfig(
            notification=messaging.WebpushNotification(
                icon=(web and web.icon) or "/icon-192x192.png",
                require_interaction=bool(web and web.require_interaction),
            ),
            fcm_options=(
                messaging.WebpushFCMOptions(link=web.click_action)
                if web and web.click_action
                else None
            ),
        ),
    )


def build_topic_message(topic: str, payload: NotificationPayload) -> messaging.Message:
    return messaging.Message(
        topic=topic,
        notification=messaging.Notification(
            title=payload.title,
            body=payload.body,
            image=payload.image_url,
        ),
        data=_message_data(payload),
    )


def _is_invalid_token(exc: Exception) -> bool:
    if isinstance(exc, messaging.UnregisteredError):
        return True
    text = str(exc).lower()
    return any(marker in text for marker in _INVALID_TOKEN_MARKERS)


class PushNotificationService:
    """
    Wysyłka FCM do tokenów, użytkowników albo topicu.
    Każda próba jest logowana w express_notification_logs.
    """

    def __init__(self, db: Session, settings: Settings, app: firebase_admin.App | None = None):
        self.settings = settings
        self.token_repo = DeviceTokenRepo(db)
        self.log_repo = NotificationLogRepo(db)
        self._app = app

    @property
    def app(self) -> firebase_admin.App:
        if self._app is None:
            self._app = get_firebase_app(self.settings)
        return self._app

    def _send(self, message: messaging.Message) -> dict:
        try:
            message_id = messaging.send(message, app=self.app)
            return {"success": True, "messageId": message_id}
        except (FirebaseError, ValueError) as e:
            return {"success": False, "error": str(e), "_exc": e}

    def _log(self, payload: NotificationPayload, result: dict, token: str | None = None, user_id: UUID | None = None):
        self.log_repo.add_log(
            NotificationLogModel(
                recipient_user_id=user_id,
                recipient_token=token,
                title=payload.title,
                body=payload.body,
                data=payload.data or None,
                notification_type=payload.notification_type,
                status="sent" if result["success"] else "failed",
                error_message=result.get("error"),
                fcm_response={k: v for k, v in result.items() if not k.startswith("_")},
            )
        )

    def send(self, payload: NotificationPayload) -> dict:
        if not self.settings.fcm_project_id:
            raise PushConfigurationError("FCM_PROJECT_ID not configured")

        tokens: List[str] = []
        token_owners: Dict[str, UUID] = {}

        if payload.token:
            tokens = [payload.token]
        elif payload.tokens:
            tokens = list(payload.tokens)
        elif payload.user_id or payload.user_ids:
            user_ids = [payload.user_id] if payload.user_id else payload.user_ids
            for device_token in self.token_repo.get_active_tokens(user_ids, payload.app_type):
                tokens.append(device_token.fcm_token)
                token_owners.setdefault(device_token.fcm_token, device_token.user_id)
        elif payload.topic:
            return self.send_to_topic(payload.topic, payload)

        if not tokens:
            return {"success": False, "error": "No valid tokens found", "sent": 0, "failed": 0}

        results = [self._send_to_token(token, payload, token_owners.get(token)) for token in tokens]
        sent = sum(1 for r in results if r["success"])

        logger.info(f"Push '{payload.title}': {sent}/{len(results)} delivered")

        return {
            "success": True,
            "total": len(results),
            "sent": sent,
            "failed": len(results) - sent,
            "results": results,
        }

    def send_to_topic(self, topic: str, payload: NotificationPayload) -> dict:
        result = self._send(build_topic_message(topic, payload))
        self._log(payload, result)
        result.pop("_exc", None)
        return result

    def _send_to_token(self, token: str, payload: NotificationPayload, user_id: UUID | None) -> dict:
        result = self._send(build_message(token, payload))
        self._log(payload, result, token=token, user_id=user_id)

        exc = result.pop("_exc", None)
        if exc is not None:
            logger.warning(f"FCM delivery failed for token {token[:12]}...: {exc}")
            if _is_invalid_token(exc):
                self.token_repo.deactivate_token(token)
                logger.info(f"Deactivated invalid token {token[:12]}...")

        return {"token": token, **result}
