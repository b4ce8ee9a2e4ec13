"""通知機能のドメインモデル"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """通知タイプ"""

    INFO = "info"  # 情報
    SUCCESS = "success"  # 成功
    WARNING = "warning"  # 警告
    ERROR = "error"  # エラー


@dataclass
class NotificationMessage:
    """ユーザーに表示する非ブロッキングな通知（トースト）"""

    message: str  # メッセージ本文
    notification_type: NotificationType = NotificationType.INFO
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)  # 追加のメタデータ

    @property
    def emoji(self) -> str:
        """通知タイプに応じた絵文字を返す"""
        emoji_map = {
            NotificationType.INFO: "ℹ️",
            NotificationType.SUCCESS: "✅",
            NotificationType.WARNING: "⚠️",
            NotificationType.ERROR: "❌",
        }
        return emoji_map.get(self.notification_type, "📢")

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.notification_type.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
