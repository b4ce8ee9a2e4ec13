"""位置情報の共通ヘルパー（都市名抽出・距離計算・移行処理）"""
import math
from typing import Any, Optional

from .models import LegacyLocation, StandardizedLocation

EARTH_RADIUS_KM = 6371.0

# OSM系プロバイダーの住所コンポーネントから都市名を探す順序
OSM_CITY_KEYS = ("city", "town", "village", "municipality")


def extract_osm_city(address: Optional[dict[str, Any]], *extra_keys: str) -> str:
    """
    Nominatim/Photonの構造化住所から都市名を取り出す

    Args:
        address: 構造化住所
        extra_keys: 追加で探すキー（例: "county"）

    Returns:
        str: 都市名（見つからない場合は空文字）
    """
    if not address:
        return ""
    for key in OSM_CITY_KEYS + extra_keys:
        value = address.get(key)
        if value:
            return str(value)
    return ""


def extract_google_component(
    components: Optional[list[dict[str, Any]]], *types: str
) -> str:
    """
    Googleのaddress_componentsから指定タイプのlong_nameを取り出す

    Args:
        components: address_components
        types: いずれかに一致すればよいタイプ（例: "locality"）
    """
    for component in components or []:
        component_types = component.get("types", [])
        if any(t in component_types for t in types):
            return component.get("long_name", "")
    return ""


def extract_google_city(components: Optional[list[dict[str, Any]]]) -> str:
    return extract_google_component(components, "locality", "administrative_area_level_2")


def extract_google_country(components: Optional[list[dict[str, Any]]]) -> str:
    return extract_google_component(components, "country")


def distance_km(location1: StandardizedLocation, location2: StandardizedLocation) -> float:
    """2地点間の距離（km、ハーバーサイン公式）"""
    d_lat = math.radians(location2.lat - location1.lat)
    d_lon = math.radians(location2.lon - location1.lon)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(location1.lat))
        * math.cos(math.radians(location2.lat))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_same_city(
    location1: Optional[StandardizedLocation],
    location2: Optional[StandardizedLocation],
) -> bool:
    """
    2つの位置情報が同じ都市かどうか

    place_idが両方にあればそれで比較し、なければ正規化した都市名で比較する。
    """
    if not location1 or not location2:
        return False

    if location1.place_id and location2.place_id:
        return location1.place_id == location2.place_id

    return location1.city.strip().lower() == location2.city.strip().lower()


def to_standardized_location(
    result: dict[str, Any], full_address: Optional[str] = None
) -> StandardizedLocation:
    """
    /api/locations/search の検索結果を保存形式に変換

    Args:
        result: id, name, display_name, lat, lon を持つ検索結果
        full_address: ユーザーが入力した住所（任意）
    """
    display_name = result.get("display_name", "")
    country = display_name.split(",")[-1].strip() if display_name else None
    return StandardizedLocation(
        city=result.get("name", ""),
        place_id=str(result.get("id", "")),
        lat=float(result["lat"]),
        lon=float(result["lon"]),
        display_name=display_name,
        full_address=full_address or display_name,
        country=country,
    )


def migrate_legacy_location(legacy: LegacyLocation) -> Optional[StandardizedLocation]:
    """
    旧形式の位置情報を保存形式に変換

    都市名・座標のいずれかが欠けている場合はNone。
    place_idは空のままなので、後で逆ジオコーディングで補完する。
    """
    if not legacy.city or not legacy.lat or not legacy.lng:
        return None

    return StandardizedLocation(
        city=legacy.city,
        place_id="",
        lat=legacy.lat,
        lon=legacy.lng,
        display_name=legacy.address or f"{legacy.city}, {legacy.country or ''}",
        full_address=legacy.address,
        country=legacy.country,
    )
