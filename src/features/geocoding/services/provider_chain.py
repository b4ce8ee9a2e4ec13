"""プロバイダーのフォールバックチェーン"""

from typing import Callable, Iterable, Optional, TypeVar

from ....shared.exceptions.errors import LocationServiceError
from ....shared.logging.config import get_logger
from ....shared.utils.text import normalize_text, truncate_text
from ..domain.enums import ProviderName
from ..domain.models import LocationData, SuggestionRecord
from ..providers.base import AbstractLocationProvider

logger = get_logger(__name__)

T = TypeVar("T")


class ProviderChain:
    """
    優先順位付きのプロバイダーチェーン

    先頭から順に試し、失敗（例外）または結果なしの場合は次のプロバイダーへ進む。
    全て失敗した場合は空の結果を返し、例外は外に出さない。
    """

    def __init__(
        self,
        providers: Iterable[AbstractLocationProvider],
        suggestion_limit: int = 5,
        min_query_length: int = 2,
    ) -> None:
        """
        Args:
            providers: 優先順のプロバイダー
            suggestion_limit: 候補の最大件数
            min_query_length: 候補検索を行う最小文字数
        """
        self.providers = list(providers)
        self.suggestion_limit = suggestion_limit
        self.min_query_length = min_query_length

        logger.info(
            f"ProviderChain initialized: {[p.name.value for p in self.providers]}"
        )

    def get(self, name: ProviderName) -> Optional[AbstractLocationProvider]:
        """名前でプロバイダーを取得"""
        for provider in self.providers:
            if provider.name == name:
                return provider
        return None

    def is_searchable(self, query: Optional[str]) -> bool:
        """候補検索を行う長さがあるか"""
        normalized = normalize_text(query)
        return normalized is not None and len(normalized) >= self.min_query_length

    def suggest(self, query: str) -> list[SuggestionRecord]:
        """
        候補を取得

        Args:
            query: 入力テキスト

        Returns:
            list[SuggestionRecord]: 最大 suggestion_limit 件の候補（全滅時は空）
        """
        if not self.is_searchable(query):
            return []

        normalized = normalize_text(query) or ""
        results = self._first_result(
            "suggest",
            lambda provider: provider.suggest(normalized, self.suggestion_limit),
            normalized,
        )
        return (results or [])[: self.suggestion_limit]

    def resolve(
        self,
        text: str,
        exclude: Iterable[ProviderName] = (),
    ) -> Optional[LocationData]:
        """
        住所テキストを位置情報に解決

        Args:
            text: 住所・場所名
            exclude: 使用しないプロバイダー
        """
        normalized = normalize_text(text)
        if not normalized:
            return None

        excluded = set(exclude)
        return self._first_result(
            "resolve",
            lambda provider: provider.resolve(normalized),
            normalized,
            skip=lambda provider: provider.name in excluded,
        )

    def details(self, place_id: str) -> Optional[LocationData]:
        """place_idから位置情報を取得（詳細取得に対応したプロバイダーのみ）"""
        return self._first_result(
            "details",
            lambda provider: provider.details(place_id),
            place_id,
            skip=lambda provider: not provider.supports_details,
        )

    def reverse_resolve(self, lat: float, lng: float) -> Optional[LocationData]:
        """座標から住所を取得（逆ジオコーディングに対応したプロバイダーのみ）"""
        return self._first_result(
            "reverse",
            lambda provider: provider.reverse_resolve(lat, lng),
            f"({lat}, {lng})",
            skip=lambda provider: not provider.supports_reverse,
        )

    def close(self) -> None:
        """全プロバイダーのリソースをクリーンアップ"""
        for provider in self.providers:
            provider.close()

    def _first_result(
        self,
        operation: str,
        call: Callable[[AbstractLocationProvider], Optional[T]],
        subject: str,
        skip: Optional[Callable[[AbstractLocationProvider], bool]] = None,
    ) -> Optional[T]:
        """先頭から順にプロバイダーを試し、最初の空でない結果を返す"""
        label = truncate_text(subject, 60)

        for provider in self.providers:
            if not provider.is_available or (skip and skip(provider)):
                continue

            try:
                result = call(provider)
            except LocationServiceError as e:
                logger.warning(
                    f"{provider.name.value} {operation} failed for {label}, falling back: {e}"
                )
                continue
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                # レスポンス解析の取りこぼし
                logger.error(
                    f"{provider.name.value} {operation} returned a malformed response for {label}, "
                    f"falling back: {e}",
                    exc_info=True,
                )
                continue

            if result:
                logger.debug(f"{provider.name.value} {operation} succeeded for {label}")
                return result

            logger.debug(f"{provider.name.value} {operation} returned nothing for {label}")

        logger.info(f"All providers exhausted for {operation}: {label}")
        return None
