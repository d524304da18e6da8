# expressmart/domain/errors.py
from enum import Enum


class ErrorKind(str, Enum):
    """Kategorie błędów flow finalizacji zamówienia."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    UPSTREAM_GATEWAY = "upstream_gateway"
    STORAGE = "storage"


class OrderFinalizationError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)

    def to_response(self) -> dict:
        return {
            "success": False,
            "error": self.message,
            "errorKind": self.kind.value,
        }


class AuthenticationError(Exception):
    pass


class PaystackError(Exception):
    """Bramka odpowiedziała, ale transakcja nie jest potwierdzona."""

    def __init__(self, message: str, payload: dict | None = None):
        self.payload = payload or {}
        super().__init__(message)
