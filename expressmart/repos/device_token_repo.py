# expressmart/repos/device_token_repo.py
from datetime import datetime, timezone
from typing import List
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from expressmart.data.models.device_token import DeviceTokenModel


class DeviceTokenRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_active_tokens(self, user_ids: List[UUID], app_type: str | None = None) -> List[DeviceTokenModel]:
        query = select(DeviceTokenModel).where(
            DeviceTokenModel.user_id.in_(user_ids),
            DeviceTokenModel.is_active.is_(True),
        )
        if app_type and app_type != "all":
            query = query.where(DeviceTokenModel.app_type == app_type)
        return list(self.db.execute(query).scalars().all())

    def upsert_token(
        self,
        user_id: UUID,
        fcm_token: str,
        device_platform: str | None,
        app_type: str,
        device_name: str | None,
    ) -> DeviceTokenModel:
        existing = self.db.execute(
            select(DeviceTokenModel).where(
                DeviceTokenModel.user_id == user_id,
                DeviceTokenModel.fcm_token == fcm_token,
            )
        ).scalar_one_or_none()

        token = existing or DeviceTokenModel(user_id=user_id, fcm_token=fcm_token)
        token.device_platform = device_platform
        token.app_type = app_type
        token.device_name = device_name or "Unknown Device"
        token.is_active = True
        token.last_used_at = datetime.now(timezone.utc)

        self.db.add(token)
        self.db.commit()
        self.db.refresh(token)
        return token

    def deactivate_token(self, fcm_token: str, user_id: UUID | None = None) -> int:
        stmt = update(DeviceTokenModel).where(DeviceTokenModel.fcm_token == fcm_token)
        if user_id is not None:
            stmt = stmt.where(DeviceTokenModel.user_id == user_id)
        result = self.db.execute(stmt.values(is_active=False))
        self.db.commit()
        return result.rowcount
