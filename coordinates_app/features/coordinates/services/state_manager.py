"""座標の状態管理サービス"""

from typing import Any, Optional

from ....shared.exceptions.errors import (
    LocationPermissionError,
    NetworkError,
    ServiceUnavailableError,
    TransientProviderError,
    UnknownStatusError,
    ValidationError,
)
from ....shared.logging.config import get_logger
from ....shared.reactive.observable import Observable
from ...location.providers.base import LocationProvider
from ..domain.enums import AuthorizationState, RequestPhase
from ..domain.models import DEFAULT_COORDINATES, MOCK_COORDINATES, CoordinateValue
from ..domain.results import ManualEditResult
from .fallback import FallbackPolicy
from .validation import validate_manual_input

logger = get_logger(__name__)

# ユーザー向けメッセージ
MESSAGE_SERVICE_DISABLED = "Location services are disabled. Please enable them in Settings."
MESSAGE_ACCESS_DENIED = "Location access denied. Please enable in Settings."
MESSAGE_UNKNOWN_STATUS = "Unknown authorization status."
MESSAGE_NETWORK_ERROR = "Network error. Please check your connection."
MESSAGE_LOCATION_ERROR = "Error getting location: {description}"

_IN_FLIGHT_PHASES = (RequestPhase.AWAITING_AUTHORIZATION, RequestPhase.AWAITING_FIX)


def describe_error(error: BaseException) -> str:
    """例外からユーザー向けの説明文を作成"""
    return str(error) or type(error).__name__


def is_permission_error(error: BaseException) -> bool:
    return isinstance(error, (LocationPermissionError, PermissionError))


def is_network_error(error: BaseException) -> bool:
    return isinstance(error, (NetworkError, ConnectionError, TimeoutError))


class CoordinateStateManager:
    """
    現在の座標を所有し、位置情報プロバイダーと手動編集を仲介する

    状態の書き込みはこのクラスのメソッドのみが行い、すべて同一の
    （メイン）実行コンテキストから呼ばれる前提。プロバイダーの
    コールバックはディスパッチャーでそのコンテキストへ転送される。

    Observables:
        coordinates: 反映済みの座標（反映のたびに通知）
        is_loading: リクエスト中か
        authorization_state: 認可ステータス
        last_error: 最後の位置情報エラー
        user_facing_error_message: ユーザー向けエラーメッセージ
        phase: リクエストの状態
    """

    def __init__(
        self,
        provider: LocationProvider,
        fallback_policy: Optional[FallbackPolicy] = None,
    ) -> None:
        """
        Args:
            provider: 位置情報プロバイダー
            fallback_policy: 失敗時のフォールバック規則（Noneの場合は常に(0, 0)）
        """
        self.provider = provider
        self.fallback_policy = fallback_policy or FallbackPolicy()

        self.coordinates: Observable[CoordinateValue] = Observable(DEFAULT_COORDINATES, "coordinates")
        self.is_loading: Observable[bool] = Observable(False, "is_loading")
        self.authorization_state: Observable[AuthorizationState] = Observable(
            AuthorizationState.from_value(provider.current_authorization()),
            "authorization_state",
        )
        self.last_error: Observable[Optional[Exception]] = Observable(None, "last_error")
        self.user_facing_error_message: Observable[Optional[str]] = Observable(
            None, "user_facing_error_message"
        )
        self.phase: Observable[RequestPhase] = Observable(RequestPhase.IDLE, "phase")

        self._has_pending_authorization_request = False
        self._is_initial_request = True
        # プロバイダーへ発行済みで結果未着の取得数と、そのうち破棄すべき古い取得数
        self._outstanding_fetches = 0
        self._superseded_fetches = 0

        provider.bind(self)

        logger.info(
            f"CoordinateStateManager initialized: provider={type(provider).__name__}, "
            f"authorization={self.authorization_state.value.value}"
        )

    # ------------------------------------------------------------------
    # スナップショット
    # ------------------------------------------------------------------

    @property
    def current_coordinates(self) -> CoordinateValue:
        return self.coordinates.value

    @property
    def has_pending_authorization_request(self) -> bool:
        return self._has_pending_authorization_request

    @property
    def is_initial_request(self) -> bool:
        return self._is_initial_request

    def snapshot(self) -> dict[str, Any]:
        """表示用に現在の状態を辞書で返す"""
        last_error = self.last_error.value
        return {
            "coordinates": self.current_coordinates.to_dict(),
            "is_loading": self.is_loading.value,
            "authorization_state": self.authorization_state.value.value,
            "phase": self.phase.value.value,
            "error_message": self.user_facing_error_message.value,
            "last_error": describe_error(last_error) if last_error else None,
        }

    # ------------------------------------------------------------------
    # プレゼンテーション層からの操作
    # ------------------------------------------------------------------

    def request_location(self) -> None:
        """
        現在地を要求

        リクエスト中（is_loading）に呼ばれた場合は何もしない。
        結果は非同期にコールバックで反映される。
        """
        if self.is_loading.value:
            logger.debug("Location request already in flight, ignoring")
            return

        self._clear_error()
        self.is_loading._publish(True)

        if not self.provider.is_service_available():
            logger.warning("Location services are disabled")
            self._fail(ServiceUnavailableError("Location services are disabled"), MESSAGE_SERVICE_DISABLED)
            return

        status = self.authorization_state.value

        if status == AuthorizationState.UNDETERMINED:
            logger.info("Requesting location authorization")
            self._has_pending_authorization_request = True
            self.phase._publish(RequestPhase.AWAITING_AUTHORIZATION)
            self.provider.request_authorization()
        elif status == AuthorizationState.GRANTED:
            logger.info("Requesting location fix")
            self.phase._publish(RequestPhase.AWAITING_FIX)
            self._start_fetch()
        elif status.is_refused:
            logger.warning(f"Location access {status.value}")
            self._fail(LocationPermissionError(f"Location access {status.value}"), MESSAGE_ACCESS_DENIED)
        else:
            logger.warning(f"Unknown authorization status: {status!r}")
            self._fail(UnknownStatusError(status), MESSAGE_UNKNOWN_STATUS)

    def apply_manual_edit(
        self, latitude_text: Optional[str], longitude_text: Optional[str]
    ) -> ManualEditResult:
        """
        手動入力された座標を検証して反映

        ローディング状態・認可ステータスには影響しない。

        Args:
            latitude_text: 緯度の入力文字列
            longitude_text: 経度の入力文字列

        Returns:
            ManualEditResult: 成功時は反映した座標、失敗時はバリデーションエラー
        """
        try:
            value = validate_manual_input(latitude_text, longitude_text)
        except ValidationError as e:
            logger.info(f"Manual edit rejected: {e}")
            return ManualEditResult.failure(e)

        self._clear_error()
        self._commit(value)
        logger.info(f"Manual edit applied: {value}")
        return ManualEditResult.success(value)

    def set_mock_location(self) -> None:
        """
        固定のモック座標を反映（テスト・シミュレーター用）

        取得中のリクエストがあれば、その結果は以後破棄される。
        """
        self._commit(MOCK_COORDINATES)
        self._supersede_outstanding_fetches()
        self._has_pending_authorization_request = False
        self.is_loading._publish(False)
        self._clear_error()
        self.phase._publish(RequestPhase.LOADED)
        logger.info("Mock location applied")

    # ------------------------------------------------------------------
    # プロバイダーからのコールバック
    # ------------------------------------------------------------------

    def on_location_received(self, latitude: float, longitude: float) -> None:
        if not self._settle_fetch():
            logger.debug(f"Dropping fix from superseded request: ({latitude}, {longitude})")
            return

        value = CoordinateValue.create(latitude, longitude)

        # 範囲外の位置はプロバイダーの失敗として扱う
        if not value.is_valid():
            logger.warning(f"Provider delivered an out-of-range fix: ({latitude}, {longitude})")
            self._handle_failure(
                TransientProviderError(f"Invalid fix received: ({latitude}, {longitude})")
            )
            return

        self.is_loading._publish(False)
        self._clear_error()
        self._commit(value)
        self.phase._publish(RequestPhase.LOADED)
        logger.info(f"Location received: {value}")

    def on_location_failed(self, error: Exception) -> None:
        if not self._settle_fetch():
            logger.debug(f"Dropping failure from superseded request: {error}")
            return

        self._handle_failure(error)

    def on_authorization_changed(self, new_state: AuthorizationState) -> None:
        status = AuthorizationState.from_value(new_state)
        self.authorization_state._publish(status)
        self._is_initial_request = False

        logger.info(f"Authorization changed: {status.value}")

        if status == AuthorizationState.GRANTED:
            if self._has_pending_authorization_request:
                self._has_pending_authorization_request = False
                self._clear_error()
                self.phase._publish(RequestPhase.AWAITING_FIX)
                self._start_fetch()
        elif status.is_refused:
            self._supersede_outstanding_fetches()
            self.is_loading._publish(False)
            if self._has_pending_authorization_request:
                self._has_pending_authorization_request = False
                self.last_error._publish(LocationPermissionError(f"Location access {status.value}"))
                self.user_facing_error_message._publish(MESSAGE_ACCESS_DENIED)
                self._commit(self.fallback_policy.reset_value)
            self._end_in_flight_phase()
        elif status == AuthorizationState.UNDETERMINED:
            # ユーザーの回答待ち
            pass
        else:
            self._supersede_outstanding_fetches()
            self._has_pending_authorization_request = False
            self.is_loading._publish(False)
            self.last_error._publish(UnknownStatusError(new_state))
            self.user_facing_error_message._publish(MESSAGE_UNKNOWN_STATUS)
            self._end_in_flight_phase()

    # ------------------------------------------------------------------
    # 内部処理
    # ------------------------------------------------------------------

    def _commit(self, value: CoordinateValue) -> None:
        """検証済みの座標を反映（全経路がここを通る）"""
        if not value.is_valid():
            raise ValueError(f"Refusing to commit out-of-range coordinates: {value}")
        self.coordinates._publish(value)

    def _clear_error(self) -> None:
        self.last_error._publish(None)
        self.user_facing_error_message._publish(None)

    def _fail(self, error: Exception, message: str) -> None:
        """同期的に判明した失敗を反映し、座標を(0, 0)に戻す"""
        self.is_loading._publish(False)
        self.last_error._publish(error)
        self.user_facing_error_message._publish(message)
        self._commit(self.fallback_policy.reset_value)
        self.phase._publish(RequestPhase.FAILED)

    def _handle_failure(self, error: Exception) -> None:
        """プロバイダーの失敗を分類して反映"""
        self.is_loading._publish(False)
        self.last_error._publish(error)
        self.phase._publish(RequestPhase.FAILED)

        if self._is_initial_request:
            # 初回起動時の失敗はユーザーに通知しない
            decision = self.fallback_policy.resolve(initial=True)
            logger.warning(
                f"Initial location request failed, applying fallback "
                f"{decision.coordinates} silently: {error}"
            )
            self.user_facing_error_message._publish(None)
            self._commit(decision.coordinates)
            self._is_initial_request = False
            return

        if is_permission_error(error):
            logger.warning(f"Location access denied: {error}")
            self.user_facing_error_message._publish(MESSAGE_ACCESS_DENIED)
            self._commit(self.fallback_policy.reset_value)
        elif is_network_error(error):
            logger.warning(f"Network error while locating: {error}")
            self.user_facing_error_message._publish(MESSAGE_NETWORK_ERROR)
        else:
            decision = self.fallback_policy.resolve(initial=False)
            logger.warning(f"Location request failed: {error}")
            if decision.suppress_message:
                self.user_facing_error_message._publish(None)
            else:
                self.user_facing_error_message._publish(
                    MESSAGE_LOCATION_ERROR.format(description=describe_error(error))
                )
            self._commit(decision.coordinates)

    def _start_fetch(self) -> None:
        self._outstanding_fetches += 1
        self.provider.request_location()

    def _supersede_outstanding_fetches(self) -> None:
        """未着の取得をすべて破棄対象にする"""
        if self._outstanding_fetches > self._superseded_fetches:
            logger.debug(
                f"Superseding {self._outstanding_fetches - self._superseded_fetches} "
                f"outstanding location request(s)"
            )
        self._superseded_fetches = self._outstanding_fetches

    def _settle_fetch(self) -> bool:
        """
        取得結果の到着を記録

        プロバイダーは要求順に結果を返すため、古い順に破棄対象を消化する。
        発行記録のない結果（プロバイダー側からの通知）はそのまま反映する。

        Returns:
            bool: 反映すべき結果ならTrue、破棄された取得の結果ならFalse
        """
        if self._outstanding_fetches == 0:
            return True

        self._outstanding_fetches -= 1
        if self._superseded_fetches > 0:
            self._superseded_fetches -= 1
            return False
        return True

    def _end_in_flight_phase(self) -> None:
        if self.phase.value in _IN_FLIGHT_PHASES:
            self.phase._publish(RequestPhase.FAILED)
