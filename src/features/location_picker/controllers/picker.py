"""ロケーションピッカー（入力・候補・地図・親フォームの整合を保つコントローラー）"""

import asyncio
from typing import Any, Callable, Optional

from ....shared.exceptions.errors import MapLoadError
from ....shared.logging.config import get_logger
from ...geocoding.domain.enums import LocationType
from ...geocoding.domain.models import Coordinate, LocationData, SuggestionRecord
from ...geocoding.services.coordinate_resolver import CoordinateResolver
from ...geolocation.domain.models import GeolocationErrorCode, GeolocationFailure
from ...geolocation.services.geolocation_service import GeolocationService
from ...notifications.providers.notifier import AbstractNotifier
from .. import messages
from ..map.map_surface import MapSurface, PinMovedCallback
from .debounce import DebounceController

logger = get_logger(__name__)

ChangeCallback = Callable[[LocationData], None]
MapFactory = Callable[[Optional[Coordinate], PinMovedCallback], MapSurface]


class LocationPicker:
    """
    ロケーションピッカー

    親フォームが位置情報を所有する制御コンポーネント。自身では何も保存せず、
    変更はすべて on_change で親に通知する。
    状態の変更は1つのイベントループ上でのみ行い、ブロッキングなプロバイダー呼び出しは
    asyncio.to_thread で実行する。
    """

    def __init__(
        self,
        resolver: CoordinateResolver,
        on_change: ChangeCallback,
        notifier: AbstractNotifier,
        value: Optional[LocationData] = None,
        location_type: LocationType = LocationType.PHYSICAL,
        map_factory: Optional[MapFactory] = None,
        geolocation: Optional[GeolocationService] = None,
        debounce_seconds: float = 0.3,
    ) -> None:
        """
        Args:
            resolver: 座標の解決に使うリゾルバー（チェーンも保持）
            on_change: 位置情報が変わるたびに呼ばれる親フォームのコールバック
            notifier: トースト通知
            value: 親フォームの既存の値
            location_type: 開催形態（onlineの場合は地図・候補なし）
            map_factory: 地図の生成関数（Noneの場合は地図なし）
            geolocation: 現在地取得サービス
            debounce_seconds: 候補検索のデバウンス時間（秒）
        """
        self.resolver = resolver
        self.chain = resolver.chain
        self.on_change = on_change
        self.notifier = notifier
        self.location_type = location_type
        self.map_factory = map_factory
        self.geolocation = geolocation

        self.location = value or LocationData()
        self.query = self.location.address
        self.suggestions: list[SuggestionRecord] = []
        self.show_suggestions = False
        self.is_searching = False
        self.map: Optional[MapSurface] = None
        self.is_mounted = False

        self._debounce = DebounceController(debounce_seconds)
        self._pin_generation = 0
        self._tasks: set[asyncio.Task] = set()

    def mount(self) -> None:
        """マウント（オンライン以外なら地図を生成）"""
        self.is_mounted = True
        if self.location_type != LocationType.ONLINE:
            self._create_map()

    def unmount(self) -> None:
        """アンマウント（保留中の処理をキャンセルし、地図を破棄）"""
        self._debounce.invalidate()
        self._pin_generation += 1
        for task in list(self._tasks):
            task.cancel()
        self._teardown_map()
        self.is_mounted = False
        logger.debug("LocationPicker unmounted")

    def set_location_type(self, location_type: LocationType) -> None:
        """開催形態を切り替える（地図の生成・破棄を伴う）"""
        if location_type == self.location_type:
            return

        self.location_type = location_type
        if location_type == LocationType.ONLINE:
            self._debounce.invalidate()
            self._clear_suggestions()
            self._teardown_map()
        elif self.is_mounted:
            self._create_map()

    async def wait_idle(self) -> None:
        """保留中のデバウンス・解決処理がすべて終わるまで待つ"""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            debounced = self._debounce.pending
            if debounced is not None:
                pending.append(debounced)
            if not pending:
                return

            results = await asyncio.gather(*pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    raise result

    def type_text(self, text: str) -> None:
        """
        キー入力

        表示テキストは即座に更新する。オンラインの場合はそのまま親に通知し、
        それ以外は座標をクリアして通知したうえで候補検索をデバウンス予約する。
        """
        self.query = text

        self._emit(LocationData(address=text))
        if self.location_type == LocationType.ONLINE:
            return

        if not self.chain.is_searchable(text):
            self._debounce.invalidate()
            self._clear_suggestions()
            return

        self._debounce.schedule(lambda generation: self._fetch_suggestions(generation, text))

    def focus(self) -> None:
        """入力欄にフォーカス（既存の候補があれば再表示）"""
        if self.suggestions:
            self.show_suggestions = True

    def escape(self) -> None:
        """Escapeキー（候補を閉じるだけ）"""
        self.show_suggestions = False

    async def submit(self) -> Optional[LocationData]:
        """
        Enterキー

        候補があれば先頭を選択し、なければ入力テキストをそのまま解決する。
        """
        if self.location_type == LocationType.ONLINE:
            return None

        if self.suggestions:
            return await self.select_suggestion(self.suggestions[0])

        self._debounce.invalidate()
        self.show_suggestions = False

        text = self.query.strip()
        if not text:
            return None

        location = await self._run_blocking(self.resolver.resolve_text, text)
        if location is None:
            self.notifier.error(messages.LOCATION_NOT_FOUND)
            return None

        self._commit(location)
        self.notifier.success(messages.LOCATION_FOUND)
        return location

    async def select_suggestion(self, suggestion: SuggestionRecord) -> Optional[LocationData]:
        """
        候補を選択

        保留中の候補検索をキャンセルして候補を閉じ、座標に解決して親に通知する。
        解決できない場合は通知を出し、確定済みの位置情報は変更しない。
        """
        self._debounce.invalidate()
        self.query = suggestion.display_name
        self._clear_suggestions()

        location = await self._run_blocking(self.resolver.resolve_suggestion, suggestion)
        if location is None:
            self.notifier.error(messages.LOCATION_NOT_FOUND)
            return None

        self._commit(location)
        self.notifier.success(messages.LOCATION_SELECTED)
        return location

    async def move_pin(self, lat: float, lng: float) -> Optional[LocationData]:
        """
        ピンを移動（座標は即座に反映し、住所は逆ジオコーディングで補完）

        Returns:
            Optional[LocationData]: 補完後の位置情報（補完できない場合はNone）
        """
        self._pin_generation += 1
        generation = self._pin_generation

        self._emit(LocationData(address=self.query, lat=lat, lng=lng))
        if self.map is not None:
            self.map.set_position(Coordinate(lat=lat, lng=lng))

        resolved = await self._run_blocking(self.resolver.reverse, lat, lng)

        if generation != self._pin_generation:
            logger.debug(f"Dropping stale reverse geocode for ({lat}, {lng})")
            return None

        if resolved is None:
            logger.info(f"No address found for pin at ({lat}, {lng})")
            return None

        self.query = resolved.address
        self._emit(resolved)
        return resolved

    async def use_current_location(self) -> bool:
        """
        現在地を使う

        端末の位置情報を取得し、ピン移動と同じ経路で住所を補完する。
        失敗時は原因ごとのメッセージを通知し、詳細はログにのみ出す。

        Returns:
            bool: 現在地を取得できたか
        """
        if self.location_type == LocationType.ONLINE:
            return False

        if self.geolocation is None or not self.geolocation.is_supported:
            self.notifier.error(messages.GEOLOCATION_UNSUPPORTED)
            return False

        result = await self._run_blocking(self.geolocation.get_current_position)

        position = result.position
        if position is None:
            failure = result.failure or GeolocationFailure(code=GeolocationErrorCode.UNKNOWN)
            logger.error(f"Geolocation error: code={failure.code.value}, message={failure.message}")
            self.notifier.error(messages.geolocation_error_message(failure.code))
            return False

        self.notifier.success(messages.LOCATION_DETECTED)
        await self.move_pin(position.lat, position.lng)
        return True

    def snapshot(self) -> dict[str, Any]:
        """UI描画用の現在の状態"""
        return {
            "query": self.query,
            "location_type": self.location_type.value,
            "location": self.location.to_dict(),
            "suggestions": [s.to_dict() for s in self.suggestions],
            "show_suggestions": self.show_suggestions and bool(self.suggestions),
            "is_searching": self.is_searching,
            "map": self.map.to_leaflet_config() if self.map is not None else None,
        }

    async def _fetch_suggestions(self, generation: int, text: str) -> None:
        self.is_searching = True
        try:
            results = await asyncio.to_thread(self.chain.suggest, text)
        finally:
            self.is_searching = False

        if not self._debounce.is_current(generation):
            logger.debug(f"Dropping stale suggestions for: {text}")
            return

        self.suggestions = results
        self.show_suggestions = bool(results)

    async def _run_blocking(self, func: Callable[..., Any], *args: Any) -> Any:
        """ブロッキング処理をスレッドで実行（検索中フラグを立てる）"""
        task = asyncio.ensure_future(asyncio.to_thread(func, *args))
        self._tasks.add(task)
        self.is_searching = True
        try:
            return await task
        finally:
            self.is_searching = False
            self._tasks.discard(task)

    def _on_pin_moved(self, lat: float, lng: float) -> None:
        """地図からのコールバック（ループ上で逆ジオコーディングを予約）"""
        task = asyncio.get_running_loop().create_task(self.move_pin(lat, lng))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _commit(self, location: LocationData) -> None:
        self._emit(location)
        if self.map is not None and location.coordinate is not None:
            self.map.set_position(location.coordinate)

    def _emit(self, location: LocationData) -> None:
        self.location = location
        self.on_change(location)

    def _clear_suggestions(self) -> None:
        self.suggestions = []
        self.show_suggestions = False

    def _create_map(self) -> None:
        if self.map is not None or self.map_factory is None:
            return
        try:
            self.map = self.map_factory(self.location.coordinate, self._on_pin_moved)
        except MapLoadError as e:
            logger.error(f"Failed to initialize map: {e}")
            self.notifier.error(messages.MAP_LOAD_FAILED)
            self.map = None

    def _teardown_map(self) -> None:
        if self.map is not None:
            self.map.remove()
            self.map = None
