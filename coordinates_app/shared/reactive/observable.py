"""購読可能な値（publish-subscribe）"""

from typing import Callable, Generic, TypeVar

from ..logging.config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Subscriber = Callable[[T], None]


class Observable(Generic[T]):
    """
    現在値を保持し、値が発行されるたびに購読者へ通知する

    値の書き込みは所有者（状態マネージャー）のみが `_publish` で行う。
    通知は発行したスレッド上で同期的に、購読順に行われる。
    """

    def __init__(self, initial: T, name: str = "observable") -> None:
        """
        Args:
            initial: 初期値
            name: ログ出力用の名前
        """
        self._value = initial
        self._name = name
        self._subscribers: list[Subscriber[T]] = []

    @property
    def value(self) -> T:
        """現在値のスナップショット"""
        return self._value

    def subscribe(self, callback: Subscriber[T], emit_current: bool = True) -> Callable[[], None]:
        """
        購読を登録

        Args:
            callback: 値を受け取るコールバック
            emit_current: 登録直後に現在値を通知するか

        Returns:
            Callable[[], None]: 購読解除関数（複数回呼んでも安全）
        """
        self._subscribers.append(callback)

        if emit_current:
            self._deliver(callback, self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, value: T) -> None:
        """値を更新して全購読者へ通知（同値でも通知する）"""
        self._value = value

        # 通知中の購読解除に備えてコピーを走査
        for callback in list(self._subscribers):
            self._deliver(callback, value)

    def _deliver(self, callback: Subscriber[T], value: T) -> None:
        try:
            callback(value)
        except Exception as e:
            logger.error(f"Subscriber of '{self._name}' raised: {e}", exc_info=True)

    def __repr__(self) -> str:
        return f"Observable({self._name}={self._value!r})"
