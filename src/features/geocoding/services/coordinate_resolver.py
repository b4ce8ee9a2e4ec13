"""候補・テキストから座標への解決"""

from typing import Optional

from ....shared.logging.config import get_logger
from ..domain.enums import ProviderName
from ..domain.geo import extract_osm_city
from ..domain.models import LocationData, SuggestionRecord
from .provider_chain import ProviderChain

logger = get_logger(__name__)


class CoordinateResolver:
    """
    選択された候補または入力テキストを、座標と構造化住所に解決する

    - 座標付きの候補はそのまま使う（ネットワーク呼び出しなし）
    - place_idのみの候補は詳細を1回だけ取得し、失敗時は表示名を無料プロバイダーで解決
    - 生テキストはチェーンの優先順で解決
    """

    def __init__(self, chain: ProviderChain) -> None:
        """
        Args:
            chain: プロバイダーチェーン
        """
        self.chain = chain

    def resolve_suggestion(self, suggestion: SuggestionRecord) -> Optional[LocationData]:
        """
        候補を位置情報に解決

        Args:
            suggestion: 選択された候補

        Returns:
            Optional[LocationData]: 位置情報（解決できない場合はNone）
        """
        if suggestion.has_coordinates:
            address = suggestion.address or {}
            return LocationData(
                address=suggestion.display_name,
                lat=float(suggestion.lat),  # type: ignore[arg-type]
                lng=float(suggestion.lon),  # type: ignore[arg-type]
                city=extract_osm_city(address),
                country=address.get("country", ""),
            )

        if suggestion.place_id:
            location = self.chain.details(suggestion.place_id)
            if location:
                return location

            logger.info(
                f"Place details unavailable for {suggestion.place_id}, geocoding display name instead"
            )
            return self.chain.resolve(
                suggestion.display_name, exclude=[ProviderName.GOOGLE_PLACES]
            )

        return self.resolve_text(suggestion.display_name)

    def resolve_text(self, text: str) -> Optional[LocationData]:
        """入力テキストを位置情報に解決"""
        return self.chain.resolve(text)

    def reverse(self, lat: float, lng: float) -> Optional[LocationData]:
        """座標から住所を取得"""
        return self.chain.reverse_resolve(lat, lng)

