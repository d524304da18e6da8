# expressmart/diagnostics/fcm_debug.py
from typing import Optional

from expressmart.diagnostics.device import (
    AndroidImportance,
    NotificationChannel,
    NotificationDevice,
)
from expressmart.utils.settings import Settings
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)

ANDROID = "android"
NATIVE_TOKEN_TYPE = "fcm"


def _preview(token: Optional[str]) -> str:
    return f"{(token or '')[:50]}..."


def debug_android_fcm(device: NotificationDevice, settings: Settings) -> Optional[str]:
    """
    Diagnostyka pobierania tokena push na Androidzie.

    Najpierw natywny token FCM, potem token Expo jako fallback.
    Nigdy nie rzuca - każdy błąd jest logowany i kończy się zwrotem None.
    """
    logger.info("=== Android FCM debug start ===")
    logger.info(f"Platform: {device.platform}")
    logger.info(f"Device model: {device.model_name}")
    logger.info(f"Is physical device: {device.is_device}")

    if device.platform != ANDROID:
        logger.info("Not Android platform")
        return None

    if not device.is_device:
        logger.info("Not a physical device - FCM won't work in emulator")
        return None

    project_id = settings.expo_project_id
    logger.info(f"EAS project ID: {project_id}")
    logger.info(f"Firebase project ID: {settings.firebase_project_id}")

    try:
        existing_status = device.get_permissions()
        logger.info(f"Existing permission status: {existing_status}")

        if existing_status != "granted":
            status = device.request_permissions()
            logger.info(f"New permission status: {status}")

            if status != "granted":
                logger.warning("Permissions not granted")
                return None
    except Exception as e:
        logger.error(f"Permission check failed: {e}")
        return None

    logger.info("Trying device push token (native FCM)...")
    try:
        device_token = device.get_device_push_token()
        logger.info(f"Device token type: {device_token.type}")
        logger.info(f"Device token: {_preview(device_token.data)}")

        if device_token.type == NATIVE_TOKEN_TYPE:
            logger.info("Valid FCM token obtained")
            return device_token.data
        logger.warning(f"Not an FCM token, got: {device_token.type}")
    except Exception as e:
        logger.error(f"Device token failed: {e}")

    logger.info("Trying Expo push token...")
    try:
        expo_token = device.get_expo_push_token(project_id)
        logger.info(f"Expo token: {_preview(expo_token.data)}")
        return expo_token.data
    except Exception as e:
        logger.error(f"Expo token failed: {e}")

    logger.error("All token methods failed")
    return None


def setup_test_channel(device: NotificationDevice) -> Optional[bool]:
    if device.platform != ANDROID:
        return None

    logger.info("Testing Android notification channels...")
    try:
        device.set_notification_channel(
            NotificationChannel(
                id="test-channel",
                name="Test Channel",
                importance=AndroidImportance.HIGH,
                vibration_pattern=[0, 250, 250, 250],
                light_color="#FF231F7C",
                sound="default",
            )
        )
        channels = device.get_notification_channels()
        logger.info(f"Available channels: {[c.id for c in channels]}")
        return True
    except Exception as e:
        logger.error(f"Channel setup failed: {e}")
        return False


def send_test_notification(device: NotificationDevice) -> None:
    if device.platform != ANDROID:
        return

    try:
        device.schedule_notification(
            content={
                "title": "FCM Test 🔔",
                "body": "This is a local test notification",
                "data": {"test": True},
            },
            trigger={"seconds": 1},
        )
        logger.info("Local test notification scheduled")
    except Exception as e:
        logger.error(f"Test notification failed: {e}")
