"""メイン実行コンテキストへのコールバック転送"""

import asyncio
import queue
import time
from typing import Any, Callable, Optional, Protocol

from ..logging.config import get_logger

logger = get_logger(__name__)


class Dispatcher(Protocol):
    """状態を所有するコンテキストへ処理を転送するインターフェース"""

    def post(self, func: Callable[..., Any], *args: Any) -> None:
        ...


class ImmediateDispatcher:
    """呼び出し元スレッドで即時実行（テスト・シングルスレッド用）"""

    def post(self, func: Callable[..., Any], *args: Any) -> None:
        func(*args)


class QueueDispatcher:
    """
    スレッドセーフなキュー経由のディスパッチャー

    任意のスレッドから `post` でき、所有スレッドが `run_pending` で消化する。
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[tuple[Callable[..., Any], tuple[Any, ...]]]" = queue.Queue()

    def post(self, func: Callable[..., Any], *args: Any) -> None:
        self._queue.put((func, args))

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def run_pending(self) -> int:
        """
        キューに溜まった処理をすべて実行

        Returns:
            int: 実行した件数
        """
        count = 0
        while True:
            try:
                func, args = self._queue.get_nowait()
            except queue.Empty:
                return count
            func(*args)
            count += 1

    def run_until(
        self,
        predicate: Callable[[], bool],
        timeout: Optional[float] = None,
        poll_interval: float = 0.05,
    ) -> bool:
        """
        条件を満たすまでキューを消化

        Args:
            predicate: 終了条件
            timeout: 最大待機時間（秒、Noneの場合は無制限）
            poll_interval: キュー待ちの間隔（秒）

        Returns:
            bool: 条件を満たした場合True、タイムアウトした場合False
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while not predicate():
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning(f"Dispatcher wait timed out after {timeout}s")
                return False
            try:
                func, args = self._queue.get(timeout=poll_interval)
            except queue.Empty:
                continue
            func(*args)

        return True


class AsyncioDispatcher:
    """イベントループ上で実行するディスパッチャー（HTTPサーバー用）"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def attach(self, loop: asyncio.AbstractEventLoop) -> None:
        """実行対象のイベントループを設定"""
        self._loop = loop

    def post(self, func: Callable[..., Any], *args: Any) -> None:
        if self._loop is None or self._loop.is_closed():
            # ループ起動前は呼び出し元で実行
            func(*args)
            return
        self._loop.call_soon_threadsafe(func, *args)
