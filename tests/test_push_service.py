import uuid
from dataclasses import replace
from unittest.mock import MagicMock

import pytest
from firebase_admin import messaging
from sqlalchemy import select

from expressmart.data.models import DeviceTokenModel, NotificationLogModel
from expressmart.domain.schemas import AndroidOptions, IosOptions, NotificationPayload, WebOptions
from expressmart.services.push_service import (
    PushConfigurationError,
    PushNotificationService,
    build_message,
)

SEND = "expressmart.services.push_service.messaging.send"


@pytest.fixture
def service(db_session, settings):
    return PushNotificationService(db_session, settings, app=MagicMock())


@pytest.fixture
def customer_id():
    return uuid.uuid4()


@pytest.fixture
def device_tokens(db_session, customer_id):
    tokens = [
        DeviceTokenModel(user_id=customer_id, fcm_token="tok-phone", app_type="customer", is_active=True),
        DeviceTokenModel(user_id=customer_id, fcm_token="tok-seller", app_type="seller", is_active=True),
        DeviceTokenModel(user_id=customer_id, fcm_token="tok-old", app_type="customer", is_active=False),
    ]
    db_session.add_all(tokens)
    db_session.commit()
    return tokens


def _logs(db):
    return db.execute(select(NotificationLogModel)).scalars().all()


def test_build_message_defaults():
    message = build_message("tok", NotificationPayload(title="Hi", body="There", data={"k": "v"}))

    assert message.token == "tok"
    assert message.notification.title == "Hi"
    assert message.data["k"] == "v"
    assert message.data["notificationType"] == "general"
    assert "timestamp" in message.data
    assert message.android.priority == "high"
    assert message.android.notification.channel_id == "default"
    assert message.android.notification.sound == "default"
    assert message.apns.payload.aps.sound == "default"
    assert message.webpush.notification.icon == "/icon-192x192.png"
    assert message.webpush.fcm_options is None


def test_build_message_platform_options():
    payload = NotificationPayload(
        title="Sale",
        body="50% off",
        image_url="https://cdn.test/sale.png",
        notification_type="promotion",
        android=AndroidOptions(channel_id="promotions", priority="normal", click_action="OPEN"),
        ios=IosOptions(badge=3, category="promo"),
        web=WebOptions(click_action="https://shop.test/sale", require_interaction=True),
    )

    message = build_message("tok", payload)

    assert message.notification.image == "https://cdn.test/sale.png"
    assert message.data["notificationType"] == "promotion"
    assert message.android.priority == "normal"
    assert message.android.notification.channel_id == "promotions"
    assert message.android.notification.click_action == "OPEN"
    assert message.apns.payload.aps.badge == 3
    assert message.apns.payload.aps.category == "promo"
    assert message.webpush.notification.require_interaction is True
    assert message.webpush.fcm_options.link == "https://shop.test/sale"


def test_send_to_explicit_tokens(service, db_session, mocker):
    send = mocker.patch(SEND, side_effect=["projects/p/messages/1", "projects/p/messages/2"])

    result = service.send(NotificationPayload(tokens=["a", "b"], title="T", body="B"))

    assert result["success"] is True
    assert result["total"] == 2
    assert result["sent"] == 2
    assert result["failed"] == 0
    assert result["results"][0] == {"token": "a", "success": True, "messageId": "projects/p/messages/1"}
    assert send.call_count == 2
    assert [log.status for log in _logs(db_session)] == ["sent", "sent"]


def test_send_to_user_uses_active_tokens_of_app_type(service, db_session, device_tokens, customer_id, mocker):
    send = mocker.patch(SEND, return_value="projects/p/messages/1")

    result = service.send(NotificationPayload(user_id=customer_id, app_type="customer", title="T", body="B"))

    assert [r["token"] for r in result["results"]] == ["tok-phone"]
    assert send.call_count == 1
    log = _logs(db_session)[0]
    assert log.recipient_user_id == customer_id
    assert log.recipient_token == "tok-phone"


def test_send_to_user_all_app_types(service, device_tokens, customer_id, mocker):
    mocker.patch(SEND, return_value="id")

    result = service.send(NotificationPayload(user_ids=[customer_id], app_type="all", title="T", body="B"))

    assert sorted(r["token"] for r in result["results"]) == ["tok-phone", "tok-seller"]


def test_unregistered_token_is_deactivated(service, db_session, device_tokens, customer_id, mocker):
    mocker.patch(SEND, side_effect=messaging.UnregisteredError("Requested entity was not found."))

    result = service.send(NotificationPayload(user_id=customer_id, app_type="customer", title="T", body="B"))

    assert result["sent"] == 0
    assert result["failed"] == 1
    assert result["results"][0]["success"] is False
    db_session.expire_all()
    phone = db_session.execute(select(DeviceTokenModel).where(DeviceTokenModel.fcm_token == "tok-phone")).scalar_one()
    assert phone.is_active is False
    assert _logs(db_session)[0].status == "failed"


def test_other_failures_keep_token_active(service, db_session, device_tokens, customer_id, mocker):
    mocker.patch(SEND, side_effect=ValueError("Malformed message"))

    result = service.send(NotificationPayload(user_id=customer_id, app_type="customer", title="T", body="B"))

    assert result["results"][0]["error"] == "Malformed message"
    db_session.expire_all()
    phone = db_session.execute(select(DeviceTokenModel).where(DeviceTokenModel.fcm_token == "tok-phone")).scalar_one()
    assert phone.is_active is True


def test_no_tokens_found(service, mocker):
    send = mocker.patch(SEND)

    result = service.send(NotificationPayload(user_id=uuid.uuid4(), title="T", body="B"))

    assert result == {"success": False, "error": "No valid tokens found", "sent": 0, "failed": 0}
    send.assert_not_called()


def test_send_to_topic(service, db_session, mocker):
    send = mocker.patch(SEND, return_value="projects/p/messages/9")

    result = service.send(NotificationPayload(topic="promotions", title="T", body="B"))

    assert result == {"success": True, "messageId": "projects/p/messages/9"}
    assert send.call_args.args[0].topic == "promotions"
    log = _logs(db_session)[0]
    assert log.recipient_token is None
    assert log.status == "sent"


def test_missing_project_id(db_session, settings):
    service = PushNotificationService(db_session, replace(settings, fcm_project_id=None), app=MagicMock())

    with pytest.raises(PushConfigurationError):
        service.send(NotificationPayload(token="a", title="T", body="B"))


def test_missing_service_account_key(db_session, settings, mocker):
    mocker.patch("expressmart.services.push_service.firebase_admin.get_app", side_effect=ValueError("no app"))
    service = PushNotificationService(db_session, settings)

    with pytest.raises(PushConfigurationError, match="FCM_SERVICE_ACCOUNT_KEY"):
        service.send(NotificationPayload(token="a", title="T", body="B"))
