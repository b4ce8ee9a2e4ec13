"""現在地取得機能のドメインモデル"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class GeolocationErrorCode(str, Enum):
    """現在地取得の失敗原因"""

    PERMISSION_DENIED = "permission_denied"  # ユーザーが許可しなかった
    POSITION_UNAVAILABLE = "position_unavailable"  # 位置情報を取得できない
    TIMEOUT = "timeout"  # 時間内に応答がない
    UNSUPPORTED = "unsupported"  # 端末が位置情報に対応していない
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class GeolocationOptions:
    """現在地取得のオプション"""

    enable_high_accuracy: bool = True
    timeout: float = 10.0  # 秒
    maximum_age: float = 0.0  # キャッシュ済み位置を使わない


@dataclass(frozen=True)
class Position:
    """端末から取得した位置"""

    lat: float
    lng: float
    accuracy: Optional[float] = None  # メートル
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class GeolocationFailure:
    """現在地取得の失敗"""

    code: GeolocationErrorCode
    message: str = ""  # 技術的な詳細（ログ用、ユーザーには表示しない）


@dataclass(frozen=True)
class GeolocationResult:
    """現在地取得の結果（位置か失敗のどちらか一方）"""

    position: Optional[Position] = None
    failure: Optional[GeolocationFailure] = None

    @property
    def ok(self) -> bool:
        return self.position is not None

    @classmethod
    def success(cls, position: Position) -> "GeolocationResult":
        return cls(position=position)

    @classmethod
    def error(cls, code: GeolocationErrorCode, message: str = "") -> "GeolocationResult":
        return cls(failure=GeolocationFailure(code=code, message=message))
