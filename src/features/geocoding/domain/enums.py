"""ジオコーディング機能のEnum定義"""
from enum import Enum


class LocationType(str, Enum):
    """イベント・コミュニティの開催形態"""

    PHYSICAL = "physical"  # 対面
    ONLINE = "online"  # オンライン（地図なし）
    HYBRID = "hybrid"  # 対面 + オンライン


class ProviderName(str, Enum):
    """位置情報プロバイダー"""

    GOOGLE_PLACES = "google_places"  # 商用（APIキー必須）
    PHOTON = "photon"  # 無料の候補検索
    NOMINATIM = "nominatim"  # 最小構成のジオコーダー
