import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, JSON, Uuid

from expressmart.data.database import Base


class NotificationLogModel(Base):
    __tablename__ = "express_notification_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipient_user_id = Column(Uuid, nullable=True, index=True)
    recipient_token = Column(String, nullable=True)
    title = Column(String, nullable=False)
    body = Column(String, nullable=False)
    data = Column(JSON, nullable=True)
    notification_type = Column(String, nullable=True)
    status = Column(String, nullable=False)  # sent, failed
    error_message = Column(String, nullable=True)
    fcm_response = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
