"""アプリケーション設定（Pydantic Settings）"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="connectspace-locations",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # Google Maps Platform（任意）
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Google Maps API Key。未設定の場合はPhoton/Nominatimのみを使用",
    )
    google_places_enabled: bool = Field(
        default=True,
        description="APIキーがある場合にGoogle Placesを使用するか",
    )

    # Open providers
    photon_base_url: str = Field(
        default="https://photon.komoot.io",
        description="PhotonのベースURL",
    )
    nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="NominatimのベースURL",
    )
    nominatim_requests_per_second: float = Field(
        default=1.0,
        description="Nominatimへの最大リクエスト数（リクエスト/秒、0で無制限）",
    )

    # HTTP
    http_user_agent: str = Field(
        default="ConnectSpace/1.0",
        description="外部APIに送るUser-Agent",
    )
    http_accept_language: str = Field(
        default="en",
        description="外部APIに送るAccept-Language（都市名を英語で統一するため）",
    )
    http_timeout: float = Field(
        default=10.0,
        description="HTTPリクエストのタイムアウト（秒）",
    )
    http_retry: int = Field(
        default=2,
        description="HTTPリクエストのリトライ回数",
    )

    # Location picker
    suggestion_limit: int = Field(
        default=5,
        description="候補の最大件数",
    )
    min_query_length: int = Field(
        default=2,
        description="候補検索を行う最小文字数",
    )
    debounce_seconds: float = Field(
        default=0.3,
        description="最後の入力から候補検索までの待機時間（秒）",
    )
    geolocation_timeout: float = Field(
        default=10.0,
        description="現在地取得のタイムアウト（秒）",
    )
    default_center_lat: float = Field(
        default=-6.2088,
        description="座標未設定時の地図中心（緯度、ジャカルタ）",
    )
    default_center_lng: float = Field(
        default=106.8456,
        description="座標未設定時の地図中心（経度、ジャカルタ）",
    )
    default_zoom: int = Field(
        default=10,
        description="座標未設定時のズームレベル",
    )
    pinned_zoom: int = Field(
        default=15,
        description="ピン設定時のズームレベル",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # HTTP server
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )

    @property
    def google_places_configured(self) -> bool:
        """Google Placesを使用できる設定かどうか"""
        return bool(self.google_maps_api_key) and self.google_places_enabled
