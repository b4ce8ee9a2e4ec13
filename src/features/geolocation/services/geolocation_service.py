"""現在地取得サービス（コールバックAPIを結果型に変換）"""

import threading
from typing import Optional

from ....shared.logging.config import get_logger
from ..domain.models import (
    GeolocationErrorCode,
    GeolocationFailure,
    GeolocationOptions,
    GeolocationResult,
    Position,
)
from ..providers.sources import GeolocationSource

logger = get_logger(__name__)


class GeolocationService:
    """
    現在地取得サービス

    コールバック形式の GeolocationSource を呼び出し、
    タイムアウト付きで GeolocationResult を返す。最初に届いた結果だけを採用する。
    """

    def __init__(
        self,
        source: Optional[GeolocationSource],
        options: Optional[GeolocationOptions] = None,
    ) -> None:
        """
        Args:
            source: 位置情報の取得元（Noneの場合は非対応扱い）
            options: 取得オプション（デフォルト: 高精度、10秒、キャッシュなし）
        """
        self.source = source
        self.options = options or GeolocationOptions()

    @property
    def is_supported(self) -> bool:
        return self.source is not None and self.source.is_supported

    def get_current_position(self) -> GeolocationResult:
        """
        現在地を取得（ブロッキング、最大 options.timeout 秒）

        Returns:
            GeolocationResult: 位置または失敗原因
        """
        if not self.is_supported:
            return GeolocationResult.error(
                GeolocationErrorCode.UNSUPPORTED, "No geolocation source available"
            )

        done = threading.Event()
        lock = threading.Lock()
        outcome: dict[str, GeolocationResult] = {}

        def settle(result: GeolocationResult) -> None:
            with lock:
                if done.is_set():
                    return
                outcome["result"] = result
                done.set()

        def on_success(position: Position) -> None:
            settle(GeolocationResult.success(position))

        def on_error(failure: GeolocationFailure) -> None:
            settle(GeolocationResult(failure=failure))

        try:
            self.source.get_current_position(on_success, on_error, self.options)  # type: ignore[union-attr]
        except Exception as e:
            logger.error(f"Geolocation source raised: {e}", exc_info=True)
            settle(GeolocationResult.error(GeolocationErrorCode.UNKNOWN, str(e)))

        if not done.wait(self.options.timeout):
            settle(
                GeolocationResult.error(
                    GeolocationErrorCode.TIMEOUT,
                    f"No position within {self.options.timeout}s",
                )
            )

        return outcome["result"]
