"""座標機能のEnum定義"""
from enum import Enum


class AuthorizationState(str, Enum):
    """位置情報の認可ステータス"""

    UNDETERMINED = "undetermined"  # 未確認（まだ尋ねていない）
    GRANTED = "granted"  # 許可
    DENIED = "denied"  # 拒否
    RESTRICTED = "restricted"  # 制限（ペアレンタルコントロール等）
    UNKNOWN = "unknown"  # 認識できないステータス

    @classmethod
    def from_value(cls, value: object) -> "AuthorizationState":
        """
        任意の値からステータスを取得

        認識できない値はUNKNOWNとして扱う
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_refused(self) -> bool:
        """拒否または制限されているか"""
        return self in (AuthorizationState.DENIED, AuthorizationState.RESTRICTED)


class RequestPhase(str, Enum):
    """位置情報リクエストの状態"""

    IDLE = "idle"
    AWAITING_AUTHORIZATION = "awaiting_authorization"
    AWAITING_FIX = "awaiting_fix"
    LOADED = "loaded"
    FAILED = "failed"


class CoordinateField(str, Enum):
    """入力欄"""

    LATITUDE = "latitude"
    LONGITUDE = "longitude"
