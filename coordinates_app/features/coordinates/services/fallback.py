"""位置情報取得失敗時のフォールバック規則"""
from dataclasses import dataclass

from ..domain.models import DEFAULT_COORDINATES, MOCK_COORDINATES, CoordinateValue


@dataclass(frozen=True)
class FallbackDecision:
    """フォールバックの適用内容"""

    coordinates: CoordinateValue
    suppress_message: bool
    used_mock: bool


@dataclass(frozen=True)
class FallbackPolicy:
    """
    回復不能な位置情報エラー時の座標の決め方

    既定では常に (0, 0) に戻す。シミュレーション用のフラグが
    有効な場合のみ、固定のモック座標を適用してメッセージを抑制する。
    実行環境からの推測は行わず、設定で明示的に切り替える。
    """

    use_mock_fallback_on_initial_failure: bool = False
    use_mock_fallback_on_provider_error: bool = False
    mock_coordinates: CoordinateValue = MOCK_COORDINATES

    def resolve(self, initial: bool) -> FallbackDecision:
        """
        フォールバック内容を決定

        Args:
            initial: 初回リクエストの失敗か

        Returns:
            FallbackDecision: 適用する座標とメッセージ抑制の有無
        """
        if initial:
            # 初回の失敗は常にメッセージを出さない
            if self.use_mock_fallback_on_initial_failure:
                return FallbackDecision(self.mock_coordinates, suppress_message=True, used_mock=True)
            return FallbackDecision(DEFAULT_COORDINATES, suppress_message=True, used_mock=False)

        if self.use_mock_fallback_on_provider_error:
            return FallbackDecision(self.mock_coordinates, suppress_message=True, used_mock=True)
        return FallbackDecision(DEFAULT_COORDINATES, suppress_message=False, used_mock=False)

    @property
    def reset_value(self) -> CoordinateValue:
        """権限拒否・サービス無効時に戻す座標"""
        return DEFAULT_COORDINATES

    @classmethod
    def simulation(cls) -> "FallbackPolicy":
        """シミュレーション環境用（両方のフラグを有効化）"""
        return cls(
            use_mock_fallback_on_initial_failure=True,
            use_mock_fallback_on_provider_error=True,
        )
