"""ユニットテスト共通のフィクスチャ"""

import time
from typing import Any, Optional

import pytest

from src.features.geocoding.domain.enums import ProviderName
from src.features.geocoding.domain.models import LocationData, SuggestionRecord
from src.features.geocoding.providers.base import AbstractLocationProvider
from src.features.geocoding.services.coordinate_resolver import CoordinateResolver
from src.features.geocoding.services.provider_chain import ProviderChain
from src.features.location_picker.controllers.picker import LocationPicker
from src.features.location_picker.map.map_surface import MapSurface
from src.features.notifications.providers.notifier import InMemoryNotifier


class FakeProvider(AbstractLocationProvider):
    """呼び出しを記録するテスト用プロバイダー"""

    def __init__(
        self,
        name: ProviderName,
        suggestions: Optional[list[SuggestionRecord]] = None,
        location: Optional[LocationData] = None,
        details_location: Optional[LocationData] = None,
        reverse_location: Optional[LocationData] = None,
        error: Optional[Exception] = None,
        supports_details: bool = False,
        supports_reverse: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.suggestions = suggestions or []
        self.location = location
        self.details_location = details_location
        self.reverse_location = reverse_location
        self.error = error
        self.supports_details = supports_details
        self.supports_reverse = supports_reverse
        self.delay = delay
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    def calls_of(self, operation: str) -> list[Any]:
        return [args for op, args in self.calls if op == operation]

    def _record(self, operation: str, args: Any) -> None:
        self.calls.append((operation, args))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error

    def suggest(self, query: str, limit: int = 5) -> list[SuggestionRecord]:
        self._record("suggest", query)
        return list(self.suggestions)

    def resolve(self, text: str) -> Optional[LocationData]:
        self._record("resolve", text)
        return self.location

    def details(self, place_id: str) -> Optional[LocationData]:
        self._record("details", place_id)
        return self.details_location

    def reverse_resolve(self, lat: float, lng: float) -> Optional[LocationData]:
        self._record("reverse", (lat, lng))
        return self.reverse_location

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_provider():
    """FakeProvider クラスを返す"""
    return FakeProvider


@pytest.fixture
def notifier() -> InMemoryNotifier:
    return InMemoryNotifier()


@pytest.fixture
def monas_suggestion() -> SuggestionRecord:
    return SuggestionRecord(
        display_name="Monas, Gambir, Jakarta, Indonesia",
        provider=ProviderName.PHOTON,
        lat="-6.1754",
        lon="106.8272",
        address={"city": "Jakarta", "country": "Indonesia"},
    )


@pytest.fixture
def make_picker(notifier: InMemoryNotifier):
    """
    プロバイダーを受け取ってピッカーを作るファクトリ

    Returns:
        (picker, emitted) のタプルを返す関数
    """

    def factory(providers: list[AbstractLocationProvider], with_map: bool = True, **kwargs: Any):
        emitted: list[LocationData] = []
        chain = ProviderChain(providers)
        picker = LocationPicker(
            resolver=CoordinateResolver(chain),
            on_change=emitted.append,
            notifier=notifier,
            map_factory=kwargs.pop("map_factory", MapSurface if with_map else None),
            debounce_seconds=kwargs.pop("debounce_seconds", 0.01),
            **kwargs,
        )
        return picker, emitted

    return factory
