# expressmart/api/routers/notifications.py
from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from expressmart.api.routers.payments import CORS_HEADERS
from expressmart.data.database import get_db
from expressmart.domain.errors import AuthenticationError
from expressmart.domain.schemas import (
    AuthenticatedUser,
    DeviceTokenIn,
    DeviceTokenOut,
    NotificationPayload,
)
from expressmart.repos.device_token_repo import DeviceTokenRepo
from expressmart.services.auth_service import AuthService
from expressmart.services.push_service import PushNotificationService
from expressmart.utils.settings import Settings, get_settings
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_service(db: Session, settings: Settings):
    return PushNotificationService(db=db, settings=settings)


def get_current_user(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> AuthenticatedUser:
    try:
        return AuthService(settings).resolve_user(authorization)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.options("/send")
def send_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/send")
def send_notification(
    payload: NotificationPayload,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Wysyła push do token/tokens, userId/userIds (aktywne tokeny) albo topicu.
    """
    if not settings.fcm_project_id:
        logger.error("FCM_PROJECT_ID not configured")
        return JSONResponse(
            {"success": False, "error": "FCM_PROJECT_ID not configured"},
            status_code=500,
            headers=CORS_HEADERS,
        )

    if not payload.title or not payload.body:
        return JSONResponse(
            {"error": "title and body are required"}, status_code=400, headers=CORS_HEADERS
        )

    svc = get_service(db, settings)
    try:
        result = svc.send(payload)
    except Exception as e:
        logger.error(f"Error sending push notification (requested by {user.id}): {e}")
        return JSONResponse(
            {"success": False, "error": str(e)}, status_code=500, headers=CORS_HEADERS
        )

    return JSONResponse(result, headers=CORS_HEADERS)


@router.post("/device-tokens", response_model=DeviceTokenOut)
def register_device_token(
    payload: DeviceTokenIn,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    token = DeviceTokenRepo(db).upsert_token(
        user_id=user.id,
        fcm_token=payload.fcm_token,
        device_platform=payload.device_platform,
        app_type=payload.app_type,
        device_name=payload.device_name,
    )
    logger.info(f"Device token registered for user {user.id}")
    return token


@router.delete("/device-tokens/{fcm_token}", status_code=204)
def unregister_device_token(
    fcm_token: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = DeviceTokenRepo(db).deactivate_token(fcm_token, user_id=user.id)
    if not updated:
        raise HTTPException(status_code=404, detail="Device token not found")
