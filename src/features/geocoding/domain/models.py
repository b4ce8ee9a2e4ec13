"""ジオコーディング機能のドメインモデル"""
from dataclasses import dataclass, field
from typing import Any, Optional

from ....shared.exceptions.errors import ValidationError
from .enums import ProviderName


@dataclass(frozen=True)
class Coordinate:
    """緯度・経度のペア"""

    lat: float  # 緯度
    lng: float  # 経度

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.lat, self.lng)


@dataclass
class LocationData:
    """
    フォームが保持する位置情報

    緯度・経度は両方設定されているか、両方Noneのどちらか。
    オンライン開催の場合、addressはミーティングURLやプラットフォーム名。
    """

    address: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.lat is None) != (self.lng is None):
            raise ValidationError(
                f"lat and lng must both be set or both be None (lat={self.lat}, lng={self.lng})"
            )

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if not self.has_coordinates:
            return None
        return Coordinate(self.lat, self.lng)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        """親フォームへ渡す辞書に変換（city/countryはNoneなら省略）"""
        data: dict[str, Any] = {
            "address": self.address,
            "lat": self.lat,
            "lng": self.lng,
        }
        if self.city is not None:
            data["city"] = self.city
        if self.country is not None:
            data["country"] = self.country
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocationData":
        """辞書から生成（lngの代わりにlonも受け付ける）"""
        lat = data.get("lat")
        lng = data.get("lng", data.get("lon"))
        return cls(
            address=data.get("address") or "",
            lat=float(lat) if lat is not None else None,
            lng=float(lng) if lng is not None else None,
            city=data.get("city"),
            country=data.get("country"),
        )


@dataclass
class SuggestionRecord:
    """
    入力中に表示する住所・場所の候補

    座標（lat/lon）か、詳細取得用のplace_idのどちらかを必ず持つ。
    """

    display_name: str
    provider: ProviderName
    lat: Optional[str] = None  # プロバイダーが返す文字列のまま保持
    lon: Optional[str] = None
    address: dict[str, Any] = field(default_factory=dict)  # 構造化住所
    place_id: Optional[str] = None  # Google Places の place_id
    main_text: Optional[str] = None
    secondary_text: Optional[str] = None
    types: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)  # OSM key/value など

    def __post_init__(self) -> None:
        if not self.display_name:
            raise ValidationError("Suggestion must have a display name")
        if (self.lat is None or self.lon is None) and not self.place_id:
            raise ValidationError(
                f"Suggestion '{self.display_name}' has neither coordinates nor a place id"
            )

    @property
    def has_coordinates(self) -> bool:
        """数値として解釈できる座標を持つか"""
        if self.lat is None or self.lon is None:
            return False
        try:
            float(self.lat)
            float(self.lon)
        except ValueError:
            return False
        return True

    @property
    def title(self) -> str:
        """候補リストの1行目"""
        return self.main_text or self.display_name.split(",")[0].strip()

    @property
    def subtitle(self) -> str:
        """候補リストの2行目"""
        return self.secondary_text or self.display_name

    def to_dict(self) -> dict[str, Any]:
        return {
            "display_name": self.display_name,
            "title": self.title,
            "subtitle": self.subtitle,
            "lat": self.lat,
            "lon": self.lon,
            "address": self.address,
            "place_id": self.place_id,
            "provider": self.provider.value,
        }


@dataclass
class StandardizedLocation:
    """
    ユーザー・イベント・コミュニティ共通の保存形式

    推薦ロジックで都市を突き合わせるため、都市名は英語で統一する。
    """

    city: str
    place_id: str  # OpenStreetMap の place_id
    lat: float
    lon: float
    display_name: str
    full_address: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "city": self.city,
            "placeId": self.place_id,
            "lat": self.lat,
            "lon": self.lon,
            "displayName": self.display_name,
            "fullAddress": self.full_address,
            "country": self.country,
        }


@dataclass
class GeocodeResult:
    """サーバー側ジオコーディングの結果"""

    success: bool
    data: Optional[StandardizedLocation] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: StandardizedLocation) -> "GeocodeResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "GeocodeResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data.to_dict()
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class LegacyLocation:
    """移行前の位置情報形式（lngを使用、都市名の言語が不統一）"""

    address: Optional[str] = None
    city: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    country: Optional[str] = None
