# expressmart/diagnostics/device.py
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional


class AndroidImportance(IntEnum):
    UNSPECIFIED = -1000
    NONE = 0
    MIN = 1
    LOW = 2
    DEFAULT = 3
    HIGH = 4
    MAX = 5


@dataclass
class PushToken:
    type: str  # "fcm", "apns", "expo"...
    data: str


@dataclass
class NotificationChannel:
    id: str
    name: str
    importance: AndroidImportance = AndroidImportance.DEFAULT
    vibration_pattern: List[int] = field(default_factory=list)
    light_color: Optional[str] = None
    sound: Optional[str] = None


class NotificationDevice(ABC):
    """
    Dostęp do możliwości urządzenia (platforma, uprawnienia, tokeny push).
    Implementacja zależy od runtime'u, w testach podstawiany fake.
    """

    platform: str
    model_name: Optional[str] = None
    is_device: bool = True

    @abstractmethod
    def get_permissions(self) -> str:
        """Status uprawnień: "granted", "denied" albo "undetermined"."""

    @abstractmethod
    def request_permissions(self) -> str: ...

    @abstractmethod
    def get_device_push_token(self) -> PushToken: ...

    @abstractmethod
    def get_expo_push_token(self, project_id: Optional[str]) -> PushToken: ...

    @abstractmethod
    def set_notification_channel(self, channel: NotificationChannel) -> None: ...

    @abstractmethod
    def get_notification_channels(self) -> List[NotificationChannel]: ...

    @abstractmethod
    def schedule_notification(self, content: Dict[str, Any], trigger: Dict[str, Any]) -> str: ...
