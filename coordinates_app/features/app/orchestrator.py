"""アプリケーションオーケストレーター"""

from typing import Optional

from ...infrastructure.config.settings import Settings
from ...shared.exceptions.errors import ConfigurationError
from ...shared.http.client import HTTPClient
from ...shared.logging.config import get_logger
from ...shared.reactive.dispatcher import Dispatcher, ImmediateDispatcher, QueueDispatcher
from ..coordinates.services.state_manager import CoordinateStateManager
from ..location.providers.base import LocationProvider
from ..location.providers.ip_geolocation_provider import IpGeolocationProvider
from ..location.providers.simulated_provider import SimulatedLocationProvider

logger = get_logger(__name__)


class AppOrchestrator:
    """
    アプリケーションオーケストレーター

    設定からプロバイダー・状態マネージャーを組み立て、依存性注入を行う
    """

    def __init__(self, settings: Settings, dispatcher: Optional[Dispatcher] = None) -> None:
        """
        Args:
            settings: アプリケーション設定
            dispatcher: プロバイダーのコールバックを転送するディスパッチャー
                （Noneの場合、ワーカースレッドを使うプロバイダーではキュー）

        Raises:
            ConfigurationError: ワーカースレッドを使うプロバイダーに
                即時実行のディスパッチャーが指定された場合
        """
        self.settings = settings
        self.dispatcher: Dispatcher = dispatcher or self._default_dispatcher()

        if settings.location_provider == "ip" and isinstance(self.dispatcher, ImmediateDispatcher):
            raise ConfigurationError(
                "The ip location provider delivers results from a worker thread; "
                "use a QueueDispatcher or AsyncioDispatcher"
            )

        self.provider = self._create_provider()
        self.manager = CoordinateStateManager(
            provider=self.provider,
            fallback_policy=settings.build_fallback_policy(),
        )

        logger.info("AppOrchestrator initialized")

    def _default_dispatcher(self) -> Dispatcher:
        # IPプロバイダーの結果は呼び出しスレッドで消化する
        if self.settings.location_provider == "ip":
            return QueueDispatcher()
        return ImmediateDispatcher()

    def _create_provider(self) -> LocationProvider:
        """設定に応じたプロバイダーを作成"""
        kind = self.settings.location_provider

        if kind == "simulated":
            return SimulatedLocationProvider(
                service_available=self.settings.simulated_service_available,
                authorization=self.settings.simulated_authorization,
                authorization_answer=self.settings.simulated_authorization_answer,
                dispatcher=self.dispatcher,
            )

        if kind == "ip":
            http_client = HTTPClient(
                timeout=self.settings.http_timeout,
                max_retries=self.settings.http_max_retries,
                user_agent=self.settings.http_user_agent,
            )
            return IpGeolocationProvider(
                http_client=http_client,
                url=self.settings.ip_geolocation_url,
                dispatcher=self.dispatcher,
            )

        raise ConfigurationError(f"Unsupported location provider: {kind}")

    def locate_and_wait(self, timeout: Optional[float] = None) -> bool:
        """
        位置を要求し、完了まで待つ（CLI用）

        キューディスパッチャー使用時は呼び出しスレッドでコールバックを消化する。

        Args:
            timeout: 最大待機時間（秒、Noneの場合は設定値）

        Returns:
            bool: 完了した場合True、タイムアウトした場合False
        """
        wait = self.settings.location_wait_timeout if timeout is None else timeout

        self.manager.request_location()

        if isinstance(self.dispatcher, QueueDispatcher):
            return self.dispatcher.run_until(lambda: not self.manager.is_loading.value, timeout=wait)

        return not self.manager.is_loading.value

    def close(self) -> None:
        """リソースをクリーンアップ"""
        self.provider.close()
        logger.info("AppOrchestrator closed")
