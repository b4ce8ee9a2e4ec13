"""サーバー側のジオコーディングサービス（保存形式の位置情報を扱う）"""

import math
import time
from typing import Any, Optional, Union

from tqdm import tqdm

from ....shared.exceptions.errors import LocationServiceError
from ....shared.logging.config import get_logger
from ..domain.geo import extract_osm_city, migrate_legacy_location
from ..domain.models import GeocodeResult, LegacyLocation, StandardizedLocation
from ..providers.nominatim_provider import NominatimProvider

logger = get_logger(__name__)

LocationInput = Union[str, dict[str, Any], None]


def _is_valid_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


class GeocodingService:
    """
    ジオコーディングサービス

    ユーザー・イベント・コミュニティに保存する位置情報（StandardizedLocation）を
    Nominatimで生成・検証する。都市名は推薦ロジックで突き合わせるため英語で取得する。
    """

    def __init__(self, nominatim: NominatimProvider, delay_between_requests: float = 0.0) -> None:
        """
        Args:
            nominatim: Nominatimプロバイダー
            delay_between_requests: バッチ処理時のリクエスト間の遅延（秒）
        """
        self.nominatim = nominatim
        self.delay_between_requests = delay_between_requests

        logger.info(f"GeocodingService initialized: delay={delay_between_requests}s")

    def search_locations(self, query: str, limit: int = 5) -> list[dict[str, Any]]:
        """
        都市・場所を検索（/api/locations/search 用）

        Returns:
            list[dict[str, Any]]: id, name, display_name, lat, lon を持つ検索結果
        """
        if not query or len(query.strip()) < 2:
            return []

        try:
            results = self.nominatim.search(query.strip(), limit)
        except LocationServiceError as e:
            logger.error(f"Location search failed for {query}: {e}")
            return []

        locations = []
        for result in results:
            address = result.get("address") or {}
            name = extract_osm_city(address, "county") or result.get("name", "")
            if not name:
                continue
            locations.append(
                {
                    "id": str(result.get("place_id", "")),
                    "name": name,
                    "display_name": result.get("display_name", ""),
                    "lat": str(result.get("lat", "")),
                    "lon": str(result.get("lon", "")),
                }
            )
        return locations

    def geocode_address(self, address: Optional[str]) -> GeocodeResult:
        """
        住所・都市名を座標に変換（前方ジオコーディング）

        Args:
            address: 住所または都市名

        Returns:
            GeocodeResult: 成功時はStandardizedLocationを含む
        """
        if not address or len(address.strip()) < 2:
            return GeocodeResult.fail("Address must be at least 2 characters")

        try:
            results = self.nominatim.search(address.strip(), 1)
        except LocationServiceError as e:
            logger.error(f"Geocoding failed for {address}: {e}")
            return GeocodeResult.fail("Geocoding service unavailable")

        if not results:
            return GeocodeResult.fail("Location not found")

        result = results[0]
        components = result.get("address") or {}
        city = extract_osm_city(components, "county") or result.get("name", "")
        if not city:
            return GeocodeResult.fail("Could not determine city name")

        try:
            lat = float(result["lat"])
            lon = float(result["lon"])
        except (KeyError, TypeError, ValueError):
            logger.error(f"Geocoding result without coordinates for {address}: {result}")
            return GeocodeResult.fail("Failed to geocode address")

        return GeocodeResult.ok(
            StandardizedLocation(
                city=city,
                place_id=str(result.get("place_id") or ""),
                lat=lat,
                lon=lon,
                display_name=result.get("display_name", ""),
                full_address=result.get("display_name") or address,
                country=components.get("country", ""),
            )
        )

    def reverse_geocode(self, lat: Any, lon: Any) -> GeocodeResult:
        """
        座標を住所に変換（逆ジオコーディング）

        Args:
            lat: 緯度
            lon: 経度

        Returns:
            GeocodeResult: 成功時はStandardizedLocationを含む
        """
        if not _is_valid_number(lat) or not _is_valid_number(lon):
            return GeocodeResult.fail("Invalid coordinates")
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            return GeocodeResult.fail("Invalid coordinates")

        try:
            data = self.nominatim.reverse(lat, lon)
        except LocationServiceError as e:
            logger.error(f"Reverse geocoding failed for ({lat}, {lon}): {e}")
            return GeocodeResult.fail("Reverse geocoding service unavailable")

        if not data:
            return GeocodeResult.fail("No address found for coordinates")

        components = data["address"]
        city = extract_osm_city(components, "county")
        if not city:
            return GeocodeResult.fail("Could not determine city name")

        try:
            result_lat = float(data.get("lat", lat))
            result_lon = float(data.get("lon", lon))
        except (TypeError, ValueError):
            result_lat, result_lon = float(lat), float(lon)

        return GeocodeResult.ok(
            StandardizedLocation(
                city=city,
                place_id=str(data.get("place_id") or ""),
                lat=result_lat,
                lon=result_lon,
                display_name=data.get("display_name", ""),
                full_address=data.get("display_name", ""),
                country=components.get("country", ""),
            )
        )

    def validate_and_enrich_location(self, location: LocationInput) -> GeocodeResult:
        """
        位置情報を検証し、不足分をジオコーディングで補完

        - 文字列: 前方ジオコーディング
        - 座標なし: fullAddress / city / displayName を前方ジオコーディング
        - 都市名なし: 逆ジオコーディング
        - それ以外: 欠けている表示用フィールドを埋めて返す
        """
        if not location:
            return GeocodeResult.fail("No location provided")

        if isinstance(location, str):
            return self.geocode_address(location)

        lat = location.get("lat")
        lon = location.get("lon")
        if not _is_valid_number(lat) or not _is_valid_number(lon):
            address = (
                location.get("fullAddress")
                or location.get("city")
                or location.get("displayName")
            )
            if not address:
                return GeocodeResult.fail("No valid address or city to geocode")
            return self.geocode_address(address)

        city = (location.get("city") or "").strip()
        if not city:
            return self.reverse_geocode(lat, lon)

        country = location.get("country") or ""
        fallback_label = f"{city}, {country}" if country else city
        display_name = location.get("displayName") or fallback_label

        return GeocodeResult.ok(
            StandardizedLocation(
                city=city,
                place_id=location.get("placeId") or "",
                lat=float(lat),
                lon=float(lon),
                display_name=display_name,
                full_address=location.get("fullAddress") or location.get("displayName") or fallback_label,
                country=country,
            )
        )

    def migrate_location(self, legacy: LegacyLocation) -> GeocodeResult:
        """
        旧形式の位置情報を保存形式に移行

        座標・都市名が揃っていれば変換し、place_idを逆ジオコーディングで補完する。
        欠けている場合は validate_and_enrich_location で補完を試みる。
        """
        standardized = migrate_legacy_location(legacy)
        if standardized is None:
            return self.validate_and_enrich_location(
                {
                    "fullAddress": legacy.address,
                    "city": legacy.city,
                    "lat": legacy.lat,
                    "lon": legacy.lng,
                    "country": legacy.country,
                }
            )

        if not standardized.place_id:
            reverse = self.reverse_geocode(standardized.lat, standardized.lon)
            if reverse.success and reverse.data:
                standardized.place_id = reverse.data.place_id
            else:
                logger.warning(
                    f"Could not backfill place id for {standardized.city}: {reverse.error}"
                )

        return GeocodeResult.ok(standardized)

    def migrate_batch(
        self, locations: list[LegacyLocation], show_progress: bool = True
    ) -> tuple[list[GeocodeResult], dict[str, int]]:
        """
        複数の旧形式位置情報をバッチ移行

        Args:
            locations: 旧形式の位置情報リスト
            show_progress: プログレスバーを表示するか

        Returns:
            tuple[list[GeocodeResult], dict[str, int]]: 各結果と集計（成功数、失敗数）
        """
        results: list[GeocodeResult] = []
        success_count = 0
        failure_count = 0

        logger.info(f"Starting location migration: {len(locations)} locations")

        iterator = tqdm(locations, desc="Migrating locations") if show_progress else locations

        for legacy in iterator:
            result = self.migrate_location(legacy)
            results.append(result)

            if result.success:
                success_count += 1
            else:
                failure_count += 1
                logger.warning(f"Failed to migrate {legacy}: {result.error}")

            if self.delay_between_requests > 0:
                time.sleep(self.delay_between_requests)

        stats = {
            "success": success_count,
            "failure": failure_count,
            "total": len(locations),
        }

        logger.info(
            f"Location migration completed: {success_count} success, {failure_count} failure"
        )

        return results, stats
