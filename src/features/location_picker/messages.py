"""ロケーションピッカーがユーザーに表示するメッセージ"""
from ..geolocation.domain.models import GeolocationErrorCode

LOCATION_SELECTED = "Location selected!"
LOCATION_FOUND = "Location found!"
LOCATION_DETECTED = "Location detected!"
LOCATION_NOT_FOUND = "Location not found. Please try a different address."
MAP_LOAD_FAILED = "Failed to load map library"
SEARCH_DEGRADED = "Failed to load location search. Using basic search instead."

GEOLOCATION_UNSUPPORTED = "Geolocation is not supported on this device"
GEOLOCATION_PERMISSION_DENIED = (
    "Location access denied. Please enable location permissions in your settings."
)
GEOLOCATION_POSITION_UNAVAILABLE = (
    "Location information is unavailable. Please try searching for a location instead."
)
GEOLOCATION_TIMEOUT = "Location request timed out. Please try again."
GEOLOCATION_UNKNOWN = "Unable to get your location. Please try searching for a location instead."

_GEOLOCATION_MESSAGES = {
    GeolocationErrorCode.PERMISSION_DENIED: GEOLOCATION_PERMISSION_DENIED,
    GeolocationErrorCode.POSITION_UNAVAILABLE: GEOLOCATION_POSITION_UNAVAILABLE,
    GeolocationErrorCode.TIMEOUT: GEOLOCATION_TIMEOUT,
    GeolocationErrorCode.UNSUPPORTED: GEOLOCATION_UNSUPPORTED,
}


def geolocation_error_message(code: GeolocationErrorCode) -> str:
    """失敗原因ごとのメッセージ（技術的な詳細は含めない）"""
    return _GEOLOCATION_MESSAGES.get(code, GEOLOCATION_UNKNOWN)
