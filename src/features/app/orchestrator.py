"""位置情報サービスのオーケストレーター"""

from typing import Optional

from ...infrastructure.config.settings import Settings
from ...shared.exceptions.errors import ConfigurationError
from ...shared.http.client import HTTPClient
from ...shared.http.rate_limiter import RateLimiter
from ...shared.logging.config import get_logger
from ..geocoding.domain.enums import LocationType
from ..geocoding.domain.models import Coordinate, LocationData
from ..geocoding.providers.base import AbstractLocationProvider
from ..geocoding.providers.google_places_provider import GooglePlacesProvider
from ..geocoding.providers.nominatim_provider import NominatimProvider
from ..geocoding.providers.photon_provider import PhotonProvider
from ..geocoding.services.coordinate_resolver import CoordinateResolver
from ..geocoding.services.geocoding_service import GeocodingService
from ..geocoding.services.provider_chain import ProviderChain
from ..geolocation.domain.models import GeolocationOptions
from ..geolocation.providers.sources import GeolocationSource
from ..geolocation.services.geolocation_service import GeolocationService
from ..location_picker import messages
from ..location_picker.controllers.picker import ChangeCallback, LocationPicker
from ..location_picker.map.map_surface import MapSurface, PinMovedCallback
from ..notifications.providers.notifier import AbstractNotifier, LoggingNotifier

logger = get_logger(__name__)


class LocationOrchestrator:
    """
    位置情報サービスのオーケストレーター

    各Featureを統合し、依存性注入を行う。
    プロバイダー（商用クライアントを含む）は起動時に1回だけ初期化する。
    """

    def __init__(
        self,
        settings: Settings,
        notifier: Optional[AbstractNotifier] = None,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            settings: アプリケーション設定
            notifier: 起動時の通知先（Noneの場合はログ出力）
            http_client: HTTPクライアント（Noneの場合は設定から作成）
        """
        self.settings = settings
        self.notifier = notifier or LoggingNotifier()

        self.http_client = http_client or HTTPClient(
            timeout=settings.http_timeout,
            max_retries=settings.http_retry,
            user_agent=settings.http_user_agent,
            accept_language=settings.http_accept_language,
        )

        # プロバイダーを初期化（優先順: Google -> Photon -> Nominatim）
        self.nominatim = NominatimProvider(
            self.http_client,
            base_url=settings.nominatim_base_url,
            rate_limiter=RateLimiter(requests_per_second=settings.nominatim_requests_per_second),
            language=settings.http_accept_language,
        )
        self.photon = PhotonProvider(
            self.http_client,
            base_url=settings.photon_base_url,
            language=settings.http_accept_language,
        )
        self.google = self._create_google_provider()

        providers: list[AbstractLocationProvider] = [self.photon, self.nominatim]
        if self.google is not None:
            providers.insert(0, self.google)

        self.chain = ProviderChain(
            providers,
            suggestion_limit=settings.suggestion_limit,
            min_query_length=settings.min_query_length,
        )
        self.resolver = CoordinateResolver(self.chain)
        self.geocoding_service = GeocodingService(self.nominatim)

        logger.info("LocationOrchestrator initialized")

    def create_map(
        self, initial: Optional[Coordinate], on_pin_moved: PinMovedCallback
    ) -> MapSurface:
        """設定に従って地図を生成"""
        return MapSurface(
            initial,
            on_pin_moved,
            default_center=Coordinate(
                lat=self.settings.default_center_lat,
                lng=self.settings.default_center_lng,
            ),
            default_zoom=self.settings.default_zoom,
            pinned_zoom=self.settings.pinned_zoom,
        )

    def create_geolocation_service(
        self, source: Optional[GeolocationSource]
    ) -> GeolocationService:
        """設定のタイムアウトで現在地取得サービスを生成（キャッシュ位置は使わない）"""
        return GeolocationService(
            source,
            GeolocationOptions(
                enable_high_accuracy=True,
                timeout=self.settings.geolocation_timeout,
                maximum_age=0.0,
            ),
        )

    def create_picker(
        self,
        on_change: ChangeCallback,
        value: Optional[LocationData] = None,
        location_type: LocationType = LocationType.PHYSICAL,
        geolocation_source: Optional[GeolocationSource] = None,
        notifier: Optional[AbstractNotifier] = None,
    ) -> LocationPicker:
        """
        ロケーションピッカーを生成

        Args:
            on_change: 親フォームのコールバック
            value: 親フォームの既存の値
            location_type: 開催形態
            geolocation_source: 端末の位置情報機能
            notifier: ピッカーのトースト通知先（Noneの場合はオーケストレーターの通知先）
        """
        return LocationPicker(
            resolver=self.resolver,
            on_change=on_change,
            notifier=notifier or self.notifier,
            value=value,
            location_type=location_type,
            map_factory=self.create_map,
            geolocation=self.create_geolocation_service(geolocation_source),
            debounce_seconds=self.settings.debounce_seconds,
        )

    def close(self) -> None:
        """リソースをクリーンアップ"""
        self.chain.close()
        self.http_client.close()
        logger.info("LocationOrchestrator closed")

    def _create_google_provider(self) -> Optional[GooglePlacesProvider]:
        """Google Placesプロバイダーを作成（未設定・失敗時はNone）"""
        if not self.settings.google_places_configured:
            logger.info("Google Maps API key not set, using Photon/Nominatim only")
            return None

        try:
            return GooglePlacesProvider(
                self.settings.google_maps_api_key or "",
                timeout=self.settings.http_timeout,
                language=self.settings.http_accept_language,
            )
        except ConfigurationError as e:
            logger.error(f"Failed to initialize Google Places provider: {e}")
            self.notifier.error(messages.SEARCH_DEGRADED)
            return None
