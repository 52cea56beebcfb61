"""シミュレーション用の位置情報プロバイダー"""

from collections import deque
from typing import Optional, Union

from ....shared.logging.config import get_logger
from ....shared.reactive.dispatcher import Dispatcher
from ...coordinates.domain.enums import AuthorizationState
from ...coordinates.domain.models import MOCK_COORDINATES, CoordinateValue
from .base import LocationProvider

logger = get_logger(__name__)

Outcome = Union[CoordinateValue, Exception]


class SimulatedLocationProvider(LocationProvider):
    """
    結果を台本どおりに返すプロバイダー

    `auto_respond=False` の場合、要求は保留され `resolve_next()` を
    呼ぶまで応答しない（リクエスト中の状態を観察するため）。
    台本が空の場合は `default_fix` を返す。
    """

    def __init__(
        self,
        service_available: bool = True,
        authorization: AuthorizationState = AuthorizationState.UNDETERMINED,
        authorization_answer: AuthorizationState = AuthorizationState.GRANTED,
        outcomes: Optional[list[Outcome]] = None,
        default_fix: CoordinateValue = MOCK_COORDINATES,
        auto_respond: bool = True,
        dispatcher: Optional[Dispatcher] = None,
    ) -> None:
        """
        Args:
            service_available: 位置情報サービスが有効か
            authorization: 初期の認可ステータス
            authorization_answer: 認可要求に対するユーザーの回答
            outcomes: 位置取得の結果（座標または例外）の台本
            default_fix: 台本が空のときに返す座標
            auto_respond: 要求に即座に応答するか
            dispatcher: コールバック転送用ディスパッチャー
        """
        super().__init__(dispatcher)
        self.service_available = service_available
        self.authorization = authorization
        self.authorization_answer = authorization_answer
        self.outcomes: deque[Outcome] = deque(outcomes or [])
        self.default_fix = default_fix
        self.auto_respond = auto_respond

        self.pending: deque[str] = deque()
        self.authorization_request_count = 0
        self.location_request_count = 0

        logger.info(
            f"SimulatedLocationProvider initialized: available={service_available}, "
            f"authorization={authorization.value}, auto_respond={auto_respond}"
        )

    def is_service_available(self) -> bool:
        return self.service_available

    def current_authorization(self) -> AuthorizationState:
        return self.authorization

    def request_authorization(self) -> None:
        self.authorization_request_count += 1
        self.pending.append("authorization")
        logger.debug("Simulated authorization requested")
        if self.auto_respond:
            self.resolve_next()

    def request_location(self) -> None:
        self.location_request_count += 1
        self.pending.append("location")
        logger.debug("Simulated location requested")
        if self.auto_respond:
            self.resolve_next()

    def queue_fix(self, latitude: float, longitude: float) -> None:
        """位置取得の成功結果を台本に追加"""
        self.outcomes.append(CoordinateValue.create(latitude, longitude))

    def queue_error(self, error: Exception) -> None:
        """位置取得の失敗結果を台本に追加"""
        self.outcomes.append(error)

    def resolve_next(self) -> bool:
        """
        保留中の要求を1件応答

        Returns:
            bool: 応答した場合True、保留がなかった場合False
        """
        if not self.pending:
            return False

        action = self.pending.popleft()

        if action == "authorization":
            self.authorization = self.authorization_answer
            self._emit("on_authorization_changed", self.authorization)
            return True

        outcome = self.outcomes.popleft() if self.outcomes else self.default_fix
        if isinstance(outcome, Exception):
            logger.debug(f"Simulated location failure: {outcome}")
            self._emit("on_location_failed", outcome)
        else:
            self._emit("on_location_received", outcome.latitude, outcome.longitude)
        return True

    def resolve_all(self) -> int:
        """保留中の要求をすべて応答"""
        count = 0
        while self.resolve_next():
            count += 1
        return count

    def change_authorization(self, state: AuthorizationState) -> None:
        """設定アプリ等での認可変更をシミュレート"""
        self.authorization = state
        self._emit("on_authorization_changed", state)
