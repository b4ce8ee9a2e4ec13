"""デバウンスと世代カウンター"""

import asyncio
from typing import Awaitable, Callable, Optional

from ....shared.logging.config import get_logger

logger = get_logger(__name__)

DebouncedCall = Callable[[int], Awaitable[None]]


class DebounceController:
    """
    最後の入力から一定時間後に処理を実行するデバウンス

    スケジュールのたびに世代を進め、保留中の処理はキャンセルする。
    処理側は is_current(generation) で自分の結果がまだ有効かを確認する。
    イベントループ上から呼び出すこと。
    """

    def __init__(self, delay: float = 0.3) -> None:
        """
        Args:
            delay: 待機時間（秒）
        """
        self.delay = delay
        self.generation = 0
        self._pending: Optional[asyncio.Task] = None

    @property
    def pending(self) -> Optional[asyncio.Task]:
        """保留中（待機中または実行中）のタスク"""
        if self._pending is not None and self._pending.done():
            self._pending = None
        return self._pending

    def schedule(self, call: DebouncedCall) -> int:
        """
        処理を予約

        Args:
            call: 世代番号を受け取るコルーチン関数

        Returns:
            int: 予約した処理の世代
        """
        self.invalidate()
        generation = self.generation
        self._pending = asyncio.get_running_loop().create_task(self._run(generation, call))
        return generation

    def invalidate(self) -> None:
        """保留中の処理をキャンセルし、実行中の処理の結果も無効にする"""
        self.generation += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    async def _run(self, generation: int, call: DebouncedCall) -> None:
        await asyncio.sleep(self.delay)
        if not self.is_current(generation):
            return
        await call(generation)
