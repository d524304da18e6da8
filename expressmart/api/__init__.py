# expressmart/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from expressmart.api.routers import health, notifications, payments
from expressmart.domain.errors import ErrorKind
from expressmart.utils.settings import get_settings
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)


async def _payment_validation_handler(request: Request, exc: RequestValidationError):
    # /payment zawsze odpowiada {success, error} z 400, również dla złego body
    if request.url.path != "/payment":
        return await request_validation_exception_handler(request, exc)

    logger.error(f"Invalid payment request body: {exc.errors()}")
    return JSONResponse(
        {
            "success": False,
            "error": "Invalid request body",
            "errorKind": ErrorKind.VALIDATION.value,
        },
        status_code=400,
        headers=payments.CORS_HEADERS,
    )


def create_app() -> FastAPI:
    app = FastAPI(title="ExpressMart Backend", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
    app.add_exception_handler(RequestValidationError, _payment_validation_handler)

    app.include_router(health.router)
    app.include_router(payments.router)
    app.include_router(notifications.router)

    return app
