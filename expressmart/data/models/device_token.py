import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, DateTime, UniqueConstraint, Uuid

from expressmart.data.database import Base


class DeviceTokenModel(Base):
    __tablename__ = "express_device_tokens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    fcm_token = Column(String, nullable=False, index=True)
    device_platform = Column(String, nullable=True)  # android, ios, web
    app_type = Column(String, nullable=False, default="customer")  # customer, seller, admin
    device_name = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_used_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("user_id", "fcm_token", name="u_user_fcm_token"),)
