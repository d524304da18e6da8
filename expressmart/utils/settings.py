# expressmart/utils/settings.py
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


@dataclass(frozen=True)
class Settings:
    """
    Konfiguracja serwisu budowana raz przy starcie i wstrzykiwana przez Depends.
    Testy podmieniają get_settings zamiast modyfikować os.environ.
    """

    database_url: str = "sqlite:///./expressmart.db"
    celery_broker_url: str = "redis://redis:6379/1"
    celery_result_backend: str = "redis://redis:6379/2"

    paystack_secret_key: str | None = None
    paystack_base_url: str = "https://api.paystack.co"
    paystack_timeout: int = 10

    jwt_secret: str | None = None
    jwt_audience: str = "authenticated"
    jwt_algorithm: str = "HS256"

    fcm_project_id: str | None = None
    fcm_service_account_key: str | None = None

    expo_project_id: str | None = None
    firebase_project_id: str | None = None

    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        redis_url = os.getenv("REDIS_URL", "redis://redis:6379/0")
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./expressmart.db"),
            celery_broker_url=os.getenv("CELERY_BROKER_URL", redis_url),
            celery_result_backend=os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2"),
            paystack_secret_key=os.getenv("PAYSTACK_SECRET_KEY") or None,
            paystack_base_url=os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co"),
            paystack_timeout=int(os.getenv("PAYSTACK_TIMEOUT", 10)),
            jwt_secret=os.getenv("SUPABASE_JWT_SECRET") or None,
            jwt_audience=os.getenv("JWT_AUDIENCE", "authenticated"),
            fcm_project_id=os.getenv("FCM_PROJECT_ID") or None,
            fcm_service_account_key=os.getenv("FCM_SERVICE_ACCOUNT_KEY") or None,
            expo_project_id=os.getenv("EXPO_PROJECT_ID") or None,
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            cors_origins=_split(os.getenv("CORS_ORIGINS", "*")),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
