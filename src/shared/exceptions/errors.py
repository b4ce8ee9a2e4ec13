"""カスタム例外定義"""


class LocationServiceError(Exception):
    """位置情報サービス基底例外"""

    pass


class HTTPError(LocationServiceError):
    """HTTP関連のエラー"""

    pass


class ProviderResponseError(LocationServiceError):
    """プロバイダーのレスポンス形式エラー"""

    pass


class GeocodingError(LocationServiceError):
    """ジオコーディングエラー"""

    pass


class ConfigurationError(LocationServiceError):
    """設定エラー"""

    pass


class ValidationError(LocationServiceError):
    """バリデーションエラー"""

    pass


class MapLoadError(LocationServiceError):
    """地図ライブラリの読み込みエラー"""

    pass
