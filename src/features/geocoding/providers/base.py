"""位置情報プロバイダーの基底クラス"""

from abc import ABC, abstractmethod
from typing import Optional

from ....shared.exceptions.errors import GeocodingError
from ..domain.enums import ProviderName
from ..domain.models import LocationData, SuggestionRecord


class AbstractLocationProvider(ABC):
    """
    位置情報プロバイダーの抽象基底クラス

    各プロバイダーは候補検索（suggest）、住所から座標への解決（resolve）、
    座標から住所への逆解決（reverse_resolve）を提供する。
    失敗時は LocationServiceError のサブクラスを送出し、
    該当なしの場合は空リスト / None を返す。
    """

    name: ProviderName
    supports_details: bool = False
    supports_reverse: bool = False

    @property
    def is_available(self) -> bool:
        """プロバイダーが利用可能か（初期化済みか）"""
        return True

    @abstractmethod
    def suggest(self, query: str, limit: int = 5) -> list[SuggestionRecord]:
        """
        入力途中のテキストから候補を取得

        Args:
            query: 検索テキスト（トリム済み）
            limit: 最大件数

        Returns:
            list[SuggestionRecord]: 候補リスト

        Raises:
            LocationServiceError: リクエスト・レスポンス解析に失敗した場合
        """
        pass

    @abstractmethod
    def resolve(self, text: str) -> Optional[LocationData]:
        """
        住所テキストを座標付きの位置情報に解決

        Args:
            text: 住所・場所名

        Returns:
            Optional[LocationData]: 位置情報（見つからない場合はNone）

        Raises:
            LocationServiceError: リクエスト・レスポンス解析に失敗した場合
        """
        pass

    def details(self, place_id: str) -> Optional[LocationData]:
        """プロバイダー固有IDから位置情報を取得"""
        raise GeocodingError(f"{self.name.value} does not support place details")

    def reverse_resolve(self, lat: float, lng: float) -> Optional[LocationData]:
        """座標から住所を取得（逆ジオコーディング）"""
        raise GeocodingError(f"{self.name.value} does not support reverse geocoding")

    def close(self) -> None:
        """リソースをクリーンアップ"""
        pass
