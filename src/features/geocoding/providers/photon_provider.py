"""Photon（komoot）による候補検索"""
from typing import Any, Optional

from ....shared.exceptions.errors import ProviderResponseError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ....shared.utils.text import first_non_empty, join_non_empty
from ..domain.enums import ProviderName
from ..domain.models import LocationData, SuggestionRecord
from .base import AbstractLocationProvider

logger = get_logger(__name__)


class PhotonProvider(AbstractLocationProvider):
    """
    Photon API プロバイダー

    APIキー不要で、Nominatimよりオートコンプリート向き。
    結果はGeoJSONのFeatureで、座標は [経度, 緯度] の順。
    """

    name = ProviderName.PHOTON

    def __init__(
        self,
        http_client: HTTPClient,
        base_url: str = "https://photon.komoot.io",
        language: str = "en",
    ) -> None:
        """
        Args:
            http_client: HTTPクライアント
            base_url: PhotonのベースURL
            language: 結果の言語
        """
        self.http_client = http_client
        self.search_url = f"{base_url.rstrip('/')}/api/"
        self.language = language

    def suggest(self, query: str, limit: int = 5) -> list[SuggestionRecord]:
        return [self._to_suggestion(feature) for feature in self._search(query, limit)]

    def resolve(self, text: str) -> Optional[LocationData]:
        features = self._search(text, 1)
        if not features:
            return None

        suggestion = self._to_suggestion(features[0])
        return LocationData(
            address=suggestion.display_name,
            lat=float(suggestion.lat),  # type: ignore[arg-type]
            lng=float(suggestion.lon),  # type: ignore[arg-type]
            city=suggestion.address.get("city", ""),
            country=suggestion.address.get("country", ""),
        )

    def _search(self, query: str, limit: int) -> list[dict[str, Any]]:
        """
        Photon検索APIを呼び出してFeatureのリストを返す

        Raises:
            HTTPError: リクエスト失敗時
            ProviderResponseError: レスポンスがGeoJSONでない場合
        """
        data = self.http_client.get_json(
            self.search_url,
            params={"q": query, "limit": limit, "lang": self.language},
        )
        if not isinstance(data, dict):
            raise ProviderResponseError(f"Unexpected Photon response type: {type(data).__name__}")

        features = data.get("features") or []
        if not isinstance(features, list):
            raise ProviderResponseError(f"Unexpected Photon features type: {type(features).__name__}")
        logger.debug(f"Photon returned {len(features)} features for: {query}")
        return features[:limit]

    def _to_suggestion(self, feature: dict[str, Any]) -> SuggestionRecord:
        """
        GeoJSON Feature を候補に変換

        Raises:
            ProviderResponseError: Featureの形式が不正、または座標が数値でない場合
        """
        try:
            props = feature.get("properties") or {}
            if not isinstance(props, dict):
                raise TypeError(f"properties is {type(props).__name__}")
            lon, lat = (float(v) for v in feature["geometry"]["coordinates"][:2])
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ProviderResponseError(f"Malformed Photon feature: {e}") from e

        city = first_non_empty(props.get("city"), props.get("locality"))
        display_name = join_non_empty(
            [props.get("name"), props.get("street"), city, props.get("country")]
        )

        # 名前がない場合は OSM のタグで代用
        if not display_name and props.get("osm_value"):
            osm_key = props.get("osm_key")
            display_name = f"{props['osm_value']}" + (f" ({osm_key})" if osm_key else "")

        return SuggestionRecord(
            display_name=display_name or "Unknown location",
            provider=self.name,
            lat=str(lat),
            lon=str(lon),
            address={
                "city": city,
                "country": props.get("country", ""),
                "street": props.get("street", ""),
                "name": props.get("name", ""),
            },
            extra={
                "osm_type": props.get("osm_type"),
                "osm_key": props.get("osm_key"),
                "osm_value": props.get("osm_value"),
            },
        )
