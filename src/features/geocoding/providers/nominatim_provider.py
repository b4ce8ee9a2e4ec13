"""Nominatim（OpenStreetMap）による最小構成のジオコーダー"""
from typing import Any, Optional

from ....shared.exceptions.errors import ProviderResponseError
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger
from ..domain.enums import ProviderName
from ..domain.geo import extract_osm_city
from ..domain.models import LocationData, SuggestionRecord
from .base import AbstractLocationProvider

logger = get_logger(__name__)


class NominatimProvider(AbstractLocationProvider):
    """
    Nominatim API プロバイダー

    チェーンの最後の砦であり、逆ジオコーディングを提供する唯一のプロバイダー。
    利用規約に従い、RateLimiterでリクエスト間隔を空ける。
    """

    name = ProviderName.NOMINATIM
    supports_reverse = True

    def __init__(
        self,
        http_client: HTTPClient,
        base_url: str = "https://nominatim.openstreetmap.org",
        rate_limiter: Optional[RateLimiter] = None,
        language: str = "en",
    ) -> None:
        """
        Args:
            http_client: HTTPクライアント
            base_url: NominatimのベースURL
            rate_limiter: レート制限（Noneの場合は1リクエスト/秒）
            language: 結果の言語（accept-language）
        """
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter(requests_per_second=1.0)
        self.language = language

    def search(self, query: str, limit: int = 5) -> list[dict[str, Any]]:
        """
        /search を呼び出して生の結果を返す

        Raises:
            HTTPError: リクエスト失敗時
            ProviderResponseError: レスポンスが配列でない場合
        """
        self.rate_limiter.wait()
        data = self.http_client.get_json(
            f"{self.base_url}/search",
            params={
                "format": "json",
                "q": query,
                "limit": limit,
                "addressdetails": 1,
                "extratags": 1,
                "accept-language": self.language,
            },
        )
        if not isinstance(data, list):
            raise ProviderResponseError(f"Unexpected Nominatim search response: {type(data).__name__}")

        logger.debug(f"Nominatim returned {len(data)} results for: {query}")
        return data[:limit]

    def reverse(self, lat: float, lng: float) -> Optional[dict[str, Any]]:
        """
        /reverse を呼び出して生の結果を返す（住所がない場合はNone）

        Raises:
            HTTPError: リクエスト失敗時
            ProviderResponseError: レスポンスがオブジェクトでない場合
        """
        self.rate_limiter.wait()
        data = self.http_client.get_json(
            f"{self.base_url}/reverse",
            params={
                "format": "json",
                "lat": lat,
                "lon": lng,
                "addressdetails": 1,
                "accept-language": self.language,
            },
        )
        if not isinstance(data, dict):
            raise ProviderResponseError(f"Unexpected Nominatim reverse response: {type(data).__name__}")

        # 海上などでは {"error": "Unable to geocode"} が返る
        if not data.get("address"):
            logger.debug(f"No address for coordinates: ({lat}, {lng})")
            return None

        return data

    def suggest(self, query: str, limit: int = 5) -> list[SuggestionRecord]:
        suggestions = []
        for result in self.search(query, limit):
            if not isinstance(result, dict):
                raise ProviderResponseError(f"Unexpected Nominatim result: {type(result).__name__}")
            if not result.get("display_name") or result.get("lat") is None or result.get("lon") is None:
                logger.debug(f"Skipping incomplete Nominatim result: {result.get('place_id')}")
                continue

            lat, lng = self._coordinates(result)
            suggestions.append(
                SuggestionRecord(
                    display_name=str(result["display_name"]),
                    provider=self.name,
                    lat=str(lat),
                    lon=str(lng),
                    address=self._address(result),
                    extra={
                        "osm_type": result.get("osm_type"),
                        "osm_key": result.get("class"),
                        "osm_value": result.get("type"),
                    },
                )
            )
        return suggestions

    def resolve(self, text: str) -> Optional[LocationData]:
        results = self.search(text, 1)
        if not results:
            return None

        result = results[0]
        if not isinstance(result, dict):
            raise ProviderResponseError(f"Unexpected Nominatim result: {type(result).__name__}")

        lat, lng = self._coordinates(result)
        address = self._address(result)
        return LocationData(
            address=result.get("display_name") or text,
            lat=lat,
            lng=lng,
            city=extract_osm_city(address),
            country=address.get("country", ""),
        )

    def reverse_resolve(self, lat: float, lng: float) -> Optional[LocationData]:
        data = self.reverse(lat, lng)
        if data is None:
            return None

        address = self._address(data)
        return LocationData(
            address=data.get("display_name", ""),
            lat=lat,
            lng=lng,
            city=extract_osm_city(address),
            country=address.get("country", ""),
        )

    @staticmethod
    def _coordinates(result: dict[str, Any]) -> tuple[float, float]:
        try:
            return float(result["lat"]), float(result["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderResponseError(f"Nominatim result without coordinates: {e}") from e

    @staticmethod
    def _address(result: dict[str, Any]) -> dict[str, Any]:
        address = result.get("address") or {}
        if not isinstance(address, dict):
            raise ProviderResponseError(f"Unexpected Nominatim address: {type(address).__name__}")
        return address
