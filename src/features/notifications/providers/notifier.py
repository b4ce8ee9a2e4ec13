"""通知プロバイダー"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from ....shared.logging.config import get_logger
from ..domain.models import NotificationMessage, NotificationType

logger = get_logger(__name__)

_LOG_LEVELS = {
    NotificationType.INFO: logging.INFO,
    NotificationType.SUCCESS: logging.INFO,
    NotificationType.WARNING: logging.WARNING,
    NotificationType.ERROR: logging.WARNING,
}


class AbstractNotifier(ABC):
    """通知プロバイダーの抽象基底クラス"""

    @abstractmethod
    def send(self, message: NotificationMessage) -> None:
        """通知メッセージを送信"""
        pass

    def notify(
        self,
        text: str,
        notification_type: NotificationType = NotificationType.INFO,
        **metadata: Any,
    ) -> NotificationMessage:
        message = NotificationMessage(
            message=text, notification_type=notification_type, metadata=metadata
        )
        self.send(message)
        return message

    def success(self, text: str, **metadata: Any) -> NotificationMessage:
        return self.notify(text, NotificationType.SUCCESS, **metadata)

    def error(self, text: str, **metadata: Any) -> NotificationMessage:
        return self.notify(text, NotificationType.ERROR, **metadata)


class LoggingNotifier(AbstractNotifier):
    """通知をログに出力するだけのプロバイダー（CLI用）"""

    def send(self, message: NotificationMessage) -> None:
        logger.log(
            _LOG_LEVELS.get(message.notification_type, logging.INFO),
            f"{message.emoji} {message.message}",
        )


class InMemoryNotifier(AbstractNotifier):
    """
    通知をメモリに溜めるプロバイダー

    UI層（またはAPIレスポンス）が drain() で取り出して表示する。
    """

    def __init__(self) -> None:
        self.messages: list[NotificationMessage] = []

    def send(self, message: NotificationMessage) -> None:
        logger.debug(f"Notification queued: {message.notification_type.value} {message.message}")
        self.messages.append(message)

    def drain(self) -> list[NotificationMessage]:
        """溜まった通知を取り出してクリア"""
        messages, self.messages = self.messages, []
        return messages

    @property
    def texts(self) -> list[str]:
        return [m.message for m in self.messages]
