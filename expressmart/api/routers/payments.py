# expressmart/api/routers/payments.py
from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from expressmart.data.database import get_db
from expressmart.domain.errors import OrderFinalizationError
from expressmart.domain.schemas import PaymentVerifyIn
from expressmart.services.order_service import OrderService
from expressmart.utils.settings import Settings, get_settings
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["payments"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_service(db: Session, settings: Settings):
    return OrderService(db=db, settings=settings)


@router.options("/payment")
def payment_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/payment")
def verify_payment(
    payload: PaymentVerifyIn,
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Weryfikuje płatność Paystack i tworzy zamówienie z koszyka użytkownika.
    Każdy błąd -> 400 {success: false, error, errorKind}.
    """
    svc = get_service(db, settings)
    try:
        data = svc.finalize_payment(payload, authorization)
    except OrderFinalizationError as e:
        logger.error(f"Payment finalization failed [{e.kind.value}]: {e.message}")
        return JSONResponse(e.to_response(), status_code=400, headers=CORS_HEADERS)
    except Exception as e:
        logger.error(f"Unexpected payment finalization error: {e}")
        return JSONResponse(
            {"success": False, "error": str(e)}, status_code=400, headers=CORS_HEADERS
        )

    return JSONResponse({"success": True, "data": data}, headers=CORS_HEADERS)
