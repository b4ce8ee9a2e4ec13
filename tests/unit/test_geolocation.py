"""現在地取得サービスのテスト"""

import threading

from src.features.geolocation.domain.models import (
    GeolocationErrorCode,
    GeolocationOptions,
    Position,
)
from src.features.geolocation.providers.sources import (
    GeolocationSource,
    StaticGeolocationSource,
    UnsupportedGeolocationSource,
)
from src.features.geolocation.services.geolocation_service import GeolocationService
from src.features.location_picker import messages


class SilentSource(GeolocationSource):
    """コールバックを呼ばない取得元（タイムアウト用）"""

    def get_current_position(self, on_success, on_error, options) -> None:
        pass


class LateSource(GeolocationSource):
    """別スレッドから成功とエラーを続けて返す取得元"""

    def get_current_position(self, on_success, on_error, options) -> None:
        def run() -> None:
            on_success(Position(lat=-6.2, lng=106.8))
            on_error(None)

        threading.Thread(target=run).start()


class BrokenSource(GeolocationSource):
    def get_current_position(self, on_success, on_error, options) -> None:
        raise RuntimeError("sensor crashed")


def test_static_position() -> None:
    service = GeolocationService(StaticGeolocationSource(Position(lat=-6.2088, lng=106.8456)))

    result = service.get_current_position()

    assert result.ok
    assert result.position is not None
    assert result.position.lat == -6.2088


def test_permission_denied() -> None:
    service = GeolocationService(
        StaticGeolocationSource(error_code=GeolocationErrorCode.PERMISSION_DENIED, message="User denied")
    )

    result = service.get_current_position()

    assert not result.ok
    assert result.failure is not None
    assert result.failure.code == GeolocationErrorCode.PERMISSION_DENIED


def test_timeout() -> None:
    """時間内に応答がなければ TIMEOUT"""
    service = GeolocationService(SilentSource(), GeolocationOptions(timeout=0.05))

    result = service.get_current_position()

    assert result.failure is not None
    assert result.failure.code == GeolocationErrorCode.TIMEOUT


def test_first_result_wins() -> None:
    """最初に届いた結果だけを採用する"""
    service = GeolocationService(LateSource(), GeolocationOptions(timeout=1.0))

    result = service.get_current_position()

    assert result.ok


def test_source_exception_becomes_unknown() -> None:
    service = GeolocationService(BrokenSource())

    result = service.get_current_position()

    assert result.failure is not None
    assert result.failure.code == GeolocationErrorCode.UNKNOWN


def test_unsupported() -> None:
    assert not GeolocationService(None).is_supported
    service = GeolocationService(UnsupportedGeolocationSource())

    result = service.get_current_position()

    assert not service.is_supported
    assert result.failure is not None
    assert result.failure.code == GeolocationErrorCode.UNSUPPORTED


def test_error_messages_are_distinct() -> None:
    """失敗原因ごとに異なるメッセージを表示する"""
    codes = list(GeolocationErrorCode)
    texts = {messages.geolocation_error_message(code) for code in codes}

    assert len(texts) == len(codes)
    assert messages.geolocation_error_message(
        GeolocationErrorCode.PERMISSION_DENIED
    ) != messages.geolocation_error_message(GeolocationErrorCode.TIMEOUT)
