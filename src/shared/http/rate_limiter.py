"""レート制限ユーティリティ（Nominatim利用規約対応）"""

import threading
import time
from typing import Optional

from ..logging.config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    最小リクエスト間隔を保証するレート制限

    Nominatimの利用規約（最大1リクエスト/秒）を守るため、
    前回のリクエストからの経過時間が足りない場合は待機する。
    プロバイダーはスレッド経由で呼ばれるため、ロックで保護する。
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        requests_per_second: Optional[float] = None,
    ):
        """
        Args:
            min_interval: リクエスト間の最小間隔（秒）
            requests_per_second: 秒あたりの最大リクエスト数（設定時はmin_intervalを上書き、0以下で無効）
        """
        if requests_per_second is not None:
            self.min_interval = 1.0 / requests_per_second if requests_per_second > 0 else 0.0
        else:
            self.min_interval = max(min_interval, 0.0)

        self.last_request_time: Optional[float] = None
        self._lock = threading.Lock()

        logger.debug(f"RateLimiter initialized: min_interval={self.min_interval:.2f}s")

    def wait(self) -> None:
        """前回のリクエストからの経過時間を考慮して必要な分だけスリープ"""
        if self.min_interval <= 0:
            return

        with self._lock:
            current_time = time.monotonic()

            if self.last_request_time is not None:
                elapsed = current_time - self.last_request_time
                if elapsed < self.min_interval:
                    sleep_duration = self.min_interval - elapsed
                    logger.debug(f"Rate limiting: sleeping for {sleep_duration:.2f}s")
                    time.sleep(sleep_duration)

            self.last_request_time = time.monotonic()
