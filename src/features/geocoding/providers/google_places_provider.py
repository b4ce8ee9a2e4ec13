"""Google Maps Platform（Places Autocomplete / Place Details / Geocoding）実装"""
from typing import Any, Optional

import googlemaps

from ....shared.exceptions.errors import ConfigurationError, GeocodingError, ProviderResponseError
from ....shared.logging.config import get_logger
from ..domain.enums import ProviderName
from ..domain.geo import extract_google_city, extract_google_country
from ..domain.models import LocationData, SuggestionRecord
from .base import AbstractLocationProvider

logger = get_logger(__name__)

DETAIL_FIELDS = ["geometry", "formatted_address", "address_component", "name"]


class GooglePlacesProvider(AbstractLocationProvider):
    """
    Google Maps Platform を使った商用プロバイダー

    APIキーがある場合のみチェーンの先頭に置かれる。
    逆ジオコーディングは提供しない（地図操作はNominatimで処理する）。
    """

    name = ProviderName.GOOGLE_PLACES
    supports_details = True
    supports_reverse = False

    def __init__(self, api_key: str, timeout: float = 10, language: Optional[str] = "en") -> None:
        """
        Args:
            api_key: Google Maps API キー
            timeout: リクエストタイムアウト（秒）
            language: 結果の言語

        Raises:
            ConfigurationError: クライアントの初期化に失敗した場合
        """
        self.language = language
        try:
            self.client = googlemaps.Client(key=api_key, timeout=timeout)
            logger.info("GooglePlacesProvider initialized")
        except Exception as e:
            raise ConfigurationError(f"Failed to initialize Google Maps client: {e}") from e

    def suggest(self, query: str, limit: int = 5) -> list[SuggestionRecord]:
        """
        Places Autocomplete で候補を取得

        Raises:
            GeocodingError: APIリクエストに失敗した場合
        """
        try:
            logger.debug(f"Google autocomplete: {query}")
            predictions = self.client.places_autocomplete(query, language=self.language)
        except googlemaps.exceptions.ApiError as e:
            raise GeocodingError(f"Google Maps API error: {e}") from e
        except googlemaps.exceptions.TransportError as e:
            raise GeocodingError(f"Google Maps transport error: {e}") from e
        except Exception as e:
            raise GeocodingError(f"Unexpected error during autocomplete: {e}") from e

        suggestions = []
        try:
            for prediction in (predictions or [])[:limit]:
                description = prediction.get("description")
                place_id = prediction.get("place_id")
                if not description or not place_id:
                    logger.debug(f"Skipping incomplete prediction: {prediction}")
                    continue

                formatting = prediction.get("structured_formatting") or {}
                suggestions.append(
                    SuggestionRecord(
                        display_name=description,
                        provider=self.name,
                        place_id=place_id,
                        main_text=formatting.get("main_text"),
                        secondary_text=formatting.get("secondary_text"),
                        types=list(prediction.get("types") or []),
                    )
                )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ProviderResponseError(f"Malformed Google autocomplete response: {e}") from e

        return suggestions

    def details(self, place_id: str) -> Optional[LocationData]:
        """
        Place Details で座標と整形済み住所を取得

        Raises:
            GeocodingError: APIリクエストに失敗した場合
        """
        try:
            logger.debug(f"Google place details: {place_id}")
            response = self.client.place(place_id, fields=DETAIL_FIELDS, language=self.language)
        except googlemaps.exceptions.ApiError as e:
            raise GeocodingError(f"Google Maps API error: {e}") from e
        except googlemaps.exceptions.TransportError as e:
            raise GeocodingError(f"Google Maps transport error: {e}") from e
        except Exception as e:
            raise GeocodingError(f"Unexpected error during place details: {e}") from e

        place = response.get("result") if isinstance(response, dict) else None
        if not place:
            logger.warning(f"No place details for: {place_id}")
            return None
        if not isinstance(place, dict):
            raise ProviderResponseError(f"Malformed Google place details: {type(place).__name__}")

        return self._to_location(place, fallback_address=place.get("name", ""))

    def resolve(self, text: str) -> Optional[LocationData]:
        """
        Geocoding API で住所を解決

        Raises:
            GeocodingError: APIリクエストに失敗した場合
        """
        try:
            logger.debug(f"Google geocoding: {text}")
            results = self.client.geocode(text, language=self.language)
        except googlemaps.exceptions.ApiError as e:
            raise GeocodingError(f"Google Maps API error: {e}") from e
        except googlemaps.exceptions.TransportError as e:
            raise GeocodingError(f"Google Maps transport error: {e}") from e
        except Exception as e:
            raise GeocodingError(f"Unexpected error during geocoding: {e}") from e

        if not results:
            logger.debug(f"No geocoding results for address: {text}")
            return None
        if not isinstance(results, list):
            raise ProviderResponseError(f"Malformed Google geocoding response: {type(results).__name__}")

        return self._to_location(results[0], fallback_address=text)

    def _to_location(self, result: dict[str, Any], fallback_address: str) -> Optional[LocationData]:
        """
        GeocodingResult / PlaceResult を LocationData に変換

        Raises:
            ProviderResponseError: 結果の形式が不正な場合
        """
        try:
            location = result.get("geometry", {}).get("location", {})
            lat = location.get("lat")
            lng = location.get("lng")

            if lat is None or lng is None:
                logger.warning(f"Invalid Google result (missing lat/lng): {fallback_address}")
                return None

            components = result.get("address_components") or []
            return LocationData(
                address=result.get("formatted_address") or fallback_address,
                lat=float(lat),
                lng=float(lng),
                city=extract_google_city(components),
                country=extract_google_country(components),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ProviderResponseError(f"Malformed Google place result: {e}") from e
