# expressmart/celery_worker.py
from celery import Celery

from expressmart.utils.settings import get_settings

settings = get_settings()

celery_app = Celery(
    "expressmart",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "expressmart.services.notification_service",
)

celery_app.conf.timezone = "UTC"
