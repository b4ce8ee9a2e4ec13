"""地図モデルとデバウンスのテスト"""

import asyncio

from src.features.geocoding.domain.models import Coordinate
from src.features.location_picker.controllers.debounce import DebounceController
from src.features.location_picker.map.map_surface import (
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    PINNED_ZOOM,
    MapSurface,
)


def test_map_without_coordinates_uses_default_center() -> None:
    """座標がない場合はジャカルタを低ズームで表示"""
    surface = MapSurface(None, lambda lat, lng: None)

    assert surface.view.center == DEFAULT_CENTER
    assert surface.view.zoom == DEFAULT_ZOOM
    assert not surface.has_precise_pin


def test_map_with_coordinates_zooms_in() -> None:
    surface = MapSurface(Coordinate(48.8584, 2.2945), lambda lat, lng: None)

    config = surface.to_leaflet_config()

    assert config["zoom"] == PINNED_ZOOM
    assert config["marker"]["position"] == [48.8584, 2.2945]
    assert config["marker"]["draggable"]
    assert config["maxZoom"] == 19


def test_map_drag_and_click_notify() -> None:
    """ドラッグ・クリックでピンが移動し、コールバックが呼ばれる"""
    moved = []
    surface = MapSurface(None, lambda lat, lng: moved.append((lat, lng)))

    surface.drag_marker(-6.1754, 106.8272)
    surface.click(-6.2, 106.85)

    assert moved == [(-6.1754, 106.8272), (-6.2, 106.85)]
    assert surface.marker == Coordinate(-6.2, 106.85)
    assert surface.has_precise_pin


def test_map_set_position_does_not_notify() -> None:
    """外部からの座標変更ではコールバックを呼ばない"""
    moved = []
    surface = MapSurface(None, lambda lat, lng: moved.append((lat, lng)))

    surface.set_position(Coordinate(-6.1754, 106.8272))

    assert moved == []
    assert surface.view.zoom == PINNED_ZOOM


def test_removed_map_ignores_events() -> None:
    moved = []
    surface = MapSurface(None, lambda lat, lng: moved.append((lat, lng)))

    surface.remove()
    surface.click(1.0, 2.0)

    assert moved == []


def test_debounce_runs_only_last_call() -> None:
    """連続した予約は最後の1回だけ実行される"""
    calls = []

    async def scenario() -> None:
        debounce = DebounceController(delay=0.02)

        async def record(generation: int, text: str) -> None:
            calls.append((generation, text))

        for text in ["Ja", "Jak", "Jaka"]:
            debounce.schedule(lambda generation, text=text: record(generation, text))
        await debounce.pending

    asyncio.run(scenario())

    assert len(calls) == 1
    assert calls[0][1] == "Jaka"


def test_debounce_invalidate_marks_stale() -> None:
    """invalidate 後は古い世代の結果を捨てられる"""

    async def scenario() -> tuple[bool, bool]:
        debounce = DebounceController(delay=10)
        generation = debounce.schedule(lambda generation: asyncio.sleep(0))
        before = debounce.is_current(generation)
        debounce.invalidate()
        return before, debounce.is_current(generation)

    before, after = asyncio.run(scenario())

    assert before
    assert not after


def test_user_pan_is_kept_until_next_position_update() -> None:
    """パン・ズームはマーカーを動かさず、次の座標更新まで保持される"""
    moved = []
    surface = MapSurface(Coordinate(-6.1754, 106.8272), lambda lat, lng: moved.append((lat, lng)))

    surface.pan(Coordinate(-6.3, 106.9), zoom=12)

    assert surface.view.center == Coordinate(-6.3, 106.9)
    assert surface.view.zoom == 12
    assert surface.marker == Coordinate(-6.1754, 106.8272)
    assert moved == []

    surface.pan(Coordinate(-6.0, 107.0))
    assert surface.view.zoom == 12

    surface.set_position(Coordinate(48.8584, 2.2945))
    assert surface.view.center == Coordinate(48.8584, 2.2945)
    assert surface.view.zoom == PINNED_ZOOM


def test_removed_map_ignores_pan() -> None:
    surface = MapSurface(None, lambda lat, lng: None)
    surface.remove()

    surface.pan(Coordinate(0.0, 0.0), zoom=3)

    assert surface.view.center == DEFAULT_CENTER
    assert surface.view.zoom == DEFAULT_ZOOM
