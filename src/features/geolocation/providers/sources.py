"""現在地の取得元（端末の位置情報機能）"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from ....shared.logging.config import get_logger
from ..domain.models import (
    GeolocationErrorCode,
    GeolocationFailure,
    GeolocationOptions,
    Position,
)

logger = get_logger(__name__)

SuccessCallback = Callable[[Position], None]
ErrorCallback = Callable[[GeolocationFailure], None]


class GeolocationSource(ABC):
    """
    端末の位置情報機能の抽象基底クラス

    ブラウザのGeolocation APIと同じく、結果はコールバックで返す。
    呼び出し側は GeolocationService を通して結果型に変換して使う。
    """

    @property
    def is_supported(self) -> bool:
        """位置情報機能が使えるか"""
        return True

    @abstractmethod
    def get_current_position(
        self,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
        options: GeolocationOptions,
    ) -> None:
        """
        現在地を1回だけ取得

        Args:
            on_success: 取得成功時のコールバック
            on_error: 取得失敗時のコールバック
            options: 取得オプション
        """
        pass


class StaticGeolocationSource(GeolocationSource):
    """
    固定の位置（またはエラー）を返す取得元

    クライアントから送られた端末座標をサーバー側で扱う場合や、CLIで使用する。
    """

    def __init__(
        self,
        position: Optional[Position] = None,
        error_code: Optional[GeolocationErrorCode] = None,
        message: str = "",
    ) -> None:
        """
        Args:
            position: 返す位置
            error_code: positionがない場合に返すエラー（未指定ならPOSITION_UNAVAILABLE）
            message: エラーの詳細
        """
        self.position = position
        self.error_code = error_code
        self.message = message

    def get_current_position(
        self,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
        options: GeolocationOptions,
    ) -> None:
        if self.position is not None and self.error_code is None:
            on_success(self.position)
            return

        code = self.error_code or GeolocationErrorCode.POSITION_UNAVAILABLE
        logger.debug(f"Static geolocation source failing with {code.value}")
        on_error(GeolocationFailure(code=code, message=self.message))


class UnsupportedGeolocationSource(GeolocationSource):
    """位置情報機能がない環境"""

    @property
    def is_supported(self) -> bool:
        return False

    def get_current_position(
        self,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
        options: GeolocationOptions,
    ) -> None:
        on_error(
            GeolocationFailure(
                code=GeolocationErrorCode.UNSUPPORTED,
                message="Geolocation is not available in this environment",
            )
        )
