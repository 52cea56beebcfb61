"""位置情報プロバイダーの基底クラス"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol

from ....shared.logging.config import get_logger
from ....shared.reactive.dispatcher import Dispatcher, ImmediateDispatcher
from ...coordinates.domain.enums import AuthorizationState

logger = get_logger(__name__)


class LocationCallbacks(Protocol):
    """プロバイダーからの非同期コールバックを受け取る側"""

    def on_authorization_changed(self, new_state: AuthorizationState) -> None:
        ...

    def on_location_received(self, latitude: float, longitude: float) -> None:
        ...

    def on_location_failed(self, error: Exception) -> None:
        ...


class LocationProvider(ABC):
    """
    位置情報プロバイダーの抽象基底クラス

    `request_authorization` と `request_location` は非同期で、
    結果はバインドされたコールバックにディスパッチャー経由で通知される。
    """

    def __init__(self, dispatcher: Optional[Dispatcher] = None) -> None:
        """
        Args:
            dispatcher: コールバックを状態所有コンテキストへ転送するディスパッチャー
        """
        self.dispatcher: Dispatcher = dispatcher or ImmediateDispatcher()
        self._callbacks: Optional[LocationCallbacks] = None

    def bind(self, callbacks: LocationCallbacks) -> None:
        """コールバックの受け取り先を設定"""
        self._callbacks = callbacks
        logger.debug(f"{type(self).__name__} bound to {type(callbacks).__name__}")

    @abstractmethod
    def is_service_available(self) -> bool:
        """OSレベルで位置情報サービスが有効か"""
        pass

    @abstractmethod
    def current_authorization(self) -> AuthorizationState:
        """現在の認可ステータス"""
        pass

    @abstractmethod
    def request_authorization(self) -> None:
        """認可を要求（結果は on_authorization_changed）"""
        pass

    @abstractmethod
    def request_location(self) -> None:
        """位置を1回取得（結果は on_location_received / on_location_failed）"""
        pass

    def close(self) -> None:
        """リソースをクリーンアップ"""
        pass

    def _emit(self, method_name: str, *args: Any) -> None:
        """バインド先のコールバックをディスパッチャー経由で呼び出す"""
        if self._callbacks is None:
            logger.warning(f"{type(self).__name__} has no bound callbacks, dropping {method_name}")
            return
        self.dispatcher.post(getattr(self._callbacks, method_name), *args)

    def __enter__(self) -> "LocationProvider":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
