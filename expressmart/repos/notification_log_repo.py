# expressmart/repos/notification_log_repo.py
from sqlalchemy.orm import Session

from expressmart.data.models.notification_log import NotificationLogModel


class NotificationLogRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_log(self, log: NotificationLogModel) -> NotificationLogModel:
        self.db.add(log)
        self.db.commit()
        return log
