"""カスタム例外定義"""
from typing import Optional


class CoordinatesAppError(Exception):
    """アプリケーション基底例外"""

    pass


class ValidationError(CoordinatesAppError):
    """手動入力のバリデーションエラー"""

    def __init__(self, field: str, user_message: str) -> None:
        """
        Args:
            field: エラーとなった入力欄（"latitude" / "longitude"）
            user_message: ユーザー向けメッセージ
        """
        super().__init__(f"{field}: {user_message}")
        self.field = field
        self.user_message = user_message


class CoordinateParseError(ValidationError):
    """数値として解釈できない入力"""

    def __init__(self, field: str, text: str) -> None:
        super().__init__(field, "Please enter a valid number")
        self.text = text


class CoordinateRangeError(ValidationError):
    """数値だが範囲外の入力"""

    def __init__(self, field: str, value: float, bounds: tuple[float, float]) -> None:
        lower, upper = bounds
        super().__init__(
            field,
            f"{field.capitalize()} must be between {lower:g} and {upper:g}",
        )
        self.value = value
        self.bounds = bounds


class LocationError(CoordinatesAppError):
    """位置情報取得に関するエラー"""

    pass


class ServiceUnavailableError(LocationError):
    """OSレベルで位置情報サービスが無効"""

    pass


class LocationPermissionError(LocationError):
    """位置情報の利用が拒否・制限されている"""

    pass


class TransientProviderError(LocationError):
    """プロバイダー側の一時的なエラー"""

    pass


class NetworkError(TransientProviderError):
    """ネットワークエラー"""

    pass


class UnknownStatusError(LocationError):
    """認識できない認可ステータス"""

    def __init__(self, status: Optional[object] = None) -> None:
        super().__init__(f"Unknown authorization status: {status!r}")
        self.status = status


class HTTPError(CoordinatesAppError):
    """HTTP関連のエラー"""

    pass


class ConfigurationError(CoordinatesAppError):
    """設定エラー"""

    pass
