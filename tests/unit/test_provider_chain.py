"""プロバイダーチェーンと座標リゾルバーのテスト"""

from unittest.mock import MagicMock

from src.features.geocoding.domain.enums import ProviderName
from src.features.geocoding.domain.models import LocationData, SuggestionRecord
from src.features.geocoding.providers.nominatim_provider import NominatimProvider
from src.features.geocoding.providers.photon_provider import PhotonProvider
from src.features.geocoding.services.coordinate_resolver import CoordinateResolver
from src.features.geocoding.services.provider_chain import ProviderChain
from src.shared.exceptions.errors import GeocodingError, HTTPError
from src.shared.http.rate_limiter import RateLimiter

JAKARTA = LocationData(
    address="Jakarta, Indonesia", lat=-6.2088, lng=106.8456, city="Jakarta", country="Indonesia"
)


def _suggestion(name: str, provider: ProviderName = ProviderName.PHOTON) -> SuggestionRecord:
    return SuggestionRecord(display_name=name, provider=provider, lat="-6.2", lon="106.8")


def test_short_query_makes_no_request(fake_provider) -> None:
    """最小文字数未満では候補を取得しない"""
    photon = fake_provider(ProviderName.PHOTON, suggestions=[_suggestion("Jakarta")])
    chain = ProviderChain([photon])

    assert chain.suggest("J") == []
    assert chain.suggest("   ") == []
    assert photon.calls == []


def test_falls_through_on_error_and_empty(fake_provider) -> None:
    """失敗・結果なしの場合は次のプロバイダーへ"""
    google = fake_provider(ProviderName.GOOGLE_PLACES, error=GeocodingError("quota"))
    photon = fake_provider(ProviderName.PHOTON)
    nominatim = fake_provider(ProviderName.NOMINATIM, suggestions=[_suggestion("Jakarta, Indonesia")])
    chain = ProviderChain([google, photon, nominatim])

    suggestions = chain.suggest("Jakarta")

    assert [s.display_name for s in suggestions] == ["Jakarta, Indonesia"]
    assert google.calls_of("suggest") == ["Jakarta"]
    assert photon.calls_of("suggest") == ["Jakarta"]


def test_first_success_stops_chain(fake_provider) -> None:
    photon = fake_provider(ProviderName.PHOTON, suggestions=[_suggestion("Bandung")])
    nominatim = fake_provider(ProviderName.NOMINATIM, suggestions=[_suggestion("Other")])
    chain = ProviderChain([photon, nominatim])

    chain.suggest("Bandung")

    assert nominatim.calls == []


def test_all_providers_failing_returns_empty(fake_provider) -> None:
    """全プロバイダーが失敗しても例外は外に出ない"""
    chain = ProviderChain(
        [
            fake_provider(ProviderName.PHOTON, error=HTTPError("timeout")),
            fake_provider(ProviderName.NOMINATIM, error=HTTPError("503")),
        ]
    )

    assert chain.suggest("Qxzzz123") == []
    assert chain.resolve("Qxzzz123") is None


def test_suggestions_are_limited(fake_provider) -> None:
    photon = fake_provider(
        ProviderName.PHOTON, suggestions=[_suggestion(f"Place {i}") for i in range(8)]
    )
    chain = ProviderChain([photon], suggestion_limit=5)

    assert len(chain.suggest("Place")) == 5


def test_reverse_uses_only_reverse_capable_providers(fake_provider) -> None:
    """逆ジオコーディングは対応プロバイダーのみ"""
    photon = fake_provider(ProviderName.PHOTON)
    nominatim = fake_provider(ProviderName.NOMINATIM, reverse_location=JAKARTA, supports_reverse=True)
    chain = ProviderChain([photon, nominatim])

    assert chain.reverse_resolve(-6.2088, 106.8456) == JAKARTA
    assert photon.calls == []
    assert nominatim.calls_of("reverse") == [(-6.2088, 106.8456)]


def test_resolve_excludes_providers(fake_provider) -> None:
    google = fake_provider(ProviderName.GOOGLE_PLACES, location=JAKARTA)
    nominatim = fake_provider(ProviderName.NOMINATIM, location=JAKARTA)
    chain = ProviderChain([google, nominatim])

    chain.resolve("Jakarta", exclude=[ProviderName.GOOGLE_PLACES])

    assert google.calls == []
    assert nominatim.calls_of("resolve") == ["Jakarta"]


def test_close_closes_all_providers(fake_provider) -> None:
    providers = [fake_provider(ProviderName.PHOTON), fake_provider(ProviderName.NOMINATIM)]
    chain = ProviderChain(providers)

    chain.close()

    assert all(p.closed for p in providers)


def test_coordinate_suggestion_makes_no_network_call(fake_provider, monas_suggestion) -> None:
    """座標付きの候補はそのまま使う"""
    photon = fake_provider(ProviderName.PHOTON)
    resolver = CoordinateResolver(ProviderChain([photon]))

    location = resolver.resolve_suggestion(monas_suggestion)

    assert location is not None
    assert location.to_dict() == {
        "address": "Monas, Gambir, Jakarta, Indonesia",
        "lat": -6.1754,
        "lng": 106.8272,
        "city": "Jakarta",
        "country": "Indonesia",
    }
    assert photon.calls == []


def test_place_id_suggestion_fetches_details_once(fake_provider) -> None:
    """place_idのみの候補は詳細を1回だけ取得する"""
    google = fake_provider(
        ProviderName.GOOGLE_PLACES, details_location=JAKARTA, supports_details=True
    )
    nominatim = fake_provider(ProviderName.NOMINATIM)
    resolver = CoordinateResolver(ProviderChain([google, nominatim]))
    suggestion = SuggestionRecord(
        display_name="Jakarta, Indonesia", provider=ProviderName.GOOGLE_PLACES, place_id="ChIJ-jkt"
    )

    location = resolver.resolve_suggestion(suggestion)

    assert location == JAKARTA
    assert google.calls == [("details", "ChIJ-jkt")]
    assert nominatim.calls == []


def test_failed_details_fall_back_to_free_geocoding(fake_provider) -> None:
    """詳細取得に失敗した場合は表示名を無料プロバイダーで解決"""
    google = fake_provider(
        ProviderName.GOOGLE_PLACES, error=GeocodingError("OVER_QUERY_LIMIT"), supports_details=True
    )
    nominatim = fake_provider(ProviderName.NOMINATIM, location=JAKARTA)
    resolver = CoordinateResolver(ProviderChain([google, nominatim]))
    suggestion = SuggestionRecord(
        display_name="Jakarta, Indonesia", provider=ProviderName.GOOGLE_PLACES, place_id="ChIJ-jkt"
    )

    location = resolver.resolve_suggestion(suggestion)

    assert location == JAKARTA
    assert google.calls_of("resolve") == []
    assert nominatim.calls_of("resolve") == ["Jakarta, Indonesia"]


def test_malformed_photon_payloads_fall_through_to_nominatim(fake_provider) -> None:
    """Photonのレスポンスが壊れていてもNominatimまで到達する"""
    nominatim = fake_provider(
        ProviderName.NOMINATIM,
        suggestions=[_suggestion("Jakarta", ProviderName.NOMINATIM)],
        location=JAKARTA,
    )
    payloads = [
        {"features": ["oops"]},
        {"features": [{"geometry": {"coordinates": [None, None]}, "properties": {}}]},
    ]

    for payload in payloads:
        http_client = MagicMock()
        http_client.get_json.return_value = payload
        chain = ProviderChain([PhotonProvider(http_client), nominatim])

        assert [s.display_name for s in chain.suggest("Jakarta")] == ["Jakarta"]
        assert chain.resolve("Jakarta") == JAKARTA

    assert nominatim.calls_of("suggest") == ["Jakarta", "Jakarta"]
    assert nominatim.calls_of("resolve") == ["Jakarta", "Jakarta"]


def test_nominatim_result_without_longitude_yields_nothing(fake_provider) -> None:
    """最後のプロバイダーの結果が不完全なら空リスト"""
    http_client = MagicMock()
    http_client.get_json.return_value = [{"display_name": "Qxzzz", "lat": "-6.2"}]
    chain = ProviderChain(
        [
            fake_provider(ProviderName.PHOTON, error=HTTPError("timeout")),
            NominatimProvider(http_client, rate_limiter=RateLimiter(requests_per_second=0)),
        ]
    )

    assert chain.suggest("Qxzzz123") == []
    assert chain.resolve("Qxzzz123") is None


def test_unexpected_parse_errors_fall_through(fake_provider) -> None:
    """プロバイダー内部の KeyError なども次のプロバイダーへ"""
    broken = fake_provider(ProviderName.PHOTON, error=KeyError("lon"))
    nominatim = fake_provider(
        ProviderName.NOMINATIM, suggestions=[_suggestion("Jakarta", ProviderName.NOMINATIM)]
    )
    chain = ProviderChain([broken, nominatim])

    assert [s.display_name for s in chain.suggest("Jakarta")] == ["Jakarta"]
