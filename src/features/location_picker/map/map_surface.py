"""ドラッグ可能なピンを持つ地図の状態モデル"""
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ....shared.logging.config import get_logger
from ...geocoding.domain.models import Coordinate

logger = get_logger(__name__)

PinMovedCallback = Callable[[float, float], None]

TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)
MAX_ZOOM = 19

# ジャカルタ中心
DEFAULT_CENTER = Coordinate(lat=-6.2088, lng=106.8456)
DEFAULT_ZOOM = 10
PINNED_ZOOM = 15


@dataclass
class MapView:
    """地図の表示範囲"""

    center: Coordinate
    zoom: int


class MapSurface:
    """
    地図インスタンス

    マウントごとに1回だけ生成し、座標が変わってもマーカーと表示範囲を更新するだけで
    作り直さない（ユーザーのパン・ズーム状態を保つため）。
    ピンのドラッグ・地図クリックは on_pin_moved に通知される。
    """

    def __init__(
        self,
        initial: Optional[Coordinate],
        on_pin_moved: PinMovedCallback,
        default_center: Coordinate = DEFAULT_CENTER,
        default_zoom: int = DEFAULT_ZOOM,
        pinned_zoom: int = PINNED_ZOOM,
    ) -> None:
        """
        Args:
            initial: 初期座標（Noneの場合はデフォルト中心を低ズームで表示）
            on_pin_moved: ピン移動時のコールバック
            default_center: 座標未設定時の中心
            default_zoom: 座標未設定時のズーム
            pinned_zoom: ピン設定時のズーム
        """
        self.on_pin_moved = on_pin_moved
        self.pinned_zoom = pinned_zoom
        self.is_removed = False

        center = initial or default_center
        self.has_precise_pin = initial is not None
        self.view = MapView(center=center, zoom=pinned_zoom if initial else default_zoom)
        self.marker = center

        logger.debug(f"Map created at {center.to_tuple()} zoom={self.view.zoom}")

    def drag_marker(self, lat: float, lng: float) -> None:
        """マーカーのドラッグ終了"""
        self._move_pin(lat, lng, "dragend")

    def click(self, lat: float, lng: float) -> None:
        """地図上のクリック"""
        self._move_pin(lat, lng, "click")

    def pan(self, center: Coordinate, zoom: Optional[int] = None) -> None:
        """ユーザー操作によるパン・ズーム（マーカーは動かさない）"""
        if self.is_removed:
            return
        self.view = MapView(center=center, zoom=self.view.zoom if zoom is None else zoom)

    def set_position(self, coordinate: Coordinate) -> None:
        """外部からの座標変更を反映（コールバックは呼ばない）"""
        if self.is_removed:
            return
        self.marker = coordinate
        self.view = MapView(center=coordinate, zoom=self.pinned_zoom)
        self.has_precise_pin = True

    def remove(self) -> None:
        """地図を破棄"""
        self.is_removed = True
        logger.debug("Map removed")

    def to_leaflet_config(self) -> dict[str, Any]:
        """フロントエンドのLeafletに渡す設定"""
        return {
            "tileUrl": TILE_URL,
            "attribution": TILE_ATTRIBUTION,
            "maxZoom": MAX_ZOOM,
            "center": [self.view.center.lat, self.view.center.lng],
            "zoom": self.view.zoom,
            "marker": {
                "position": [self.marker.lat, self.marker.lng],
                "draggable": True,
                "precise": self.has_precise_pin,
            },
        }

    def _move_pin(self, lat: float, lng: float, event: str) -> None:
        if self.is_removed:
            logger.debug(f"Ignoring {event} on removed map")
            return

        self.set_position(Coordinate(lat=lat, lng=lng))
        self.on_pin_moved(lat, lng)
