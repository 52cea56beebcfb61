"""Observable・ディスパッチャーのテスト"""

import asyncio
import threading

from coordinates_app.shared.reactive.dispatcher import (
    AsyncioDispatcher,
    ImmediateDispatcher,
    QueueDispatcher,
)
from coordinates_app.shared.reactive.observable import Observable


def test_subscribe_emits_current_value() -> None:
    observable = Observable(1)
    received: list[int] = []

    observable.subscribe(received.append)

    assert received == [1]


def test_publish_notifies_in_order_even_when_equal() -> None:
    observable = Observable(0)
    calls: list[str] = []
    observable.subscribe(lambda v: calls.append(f"a{v}"), emit_current=False)
    observable.subscribe(lambda v: calls.append(f"b{v}"), emit_current=False)

    observable._publish(5)
    observable._publish(5)

    assert calls == ["a5", "b5", "a5", "b5"]
    assert observable.value == 5


def test_unsubscribe() -> None:
    observable = Observable("x")
    received: list[str] = []
    others: list[str] = []
    unsubscribe = observable.subscribe(received.append, emit_current=False)
    observable.subscribe(others.append, emit_current=False)

    unsubscribe()
    unsubscribe()
    observable._publish("y")

    assert received == []
    assert others == ["y"]


def test_failing_subscriber_does_not_block_others() -> None:
    observable = Observable(0)
    received: list[int] = []

    def broken(value: int) -> None:
        raise RuntimeError("subscriber bug")

    observable.subscribe(broken, emit_current=False)
    observable.subscribe(received.append, emit_current=False)

    observable._publish(3)

    assert received == [3]
    assert observable.value == 3


def test_immediate_dispatcher_runs_inline() -> None:
    calls: list[int] = []

    ImmediateDispatcher().post(calls.append, 1)

    assert calls == [1]


def test_queue_dispatcher_runs_on_owner_thread() -> None:
    dispatcher = QueueDispatcher()
    threads: list[str] = []

    worker = threading.Thread(
        target=lambda: dispatcher.post(lambda: threads.append(threading.current_thread().name)),
        name="worker",
    )
    worker.start()
    worker.join()

    assert threads == []
    assert dispatcher.run_pending() == 1
    assert threads == [threading.current_thread().name]


def test_queue_dispatcher_run_until() -> None:
    dispatcher = QueueDispatcher()
    state = {"done": False}

    threading.Thread(target=lambda: dispatcher.post(state.__setitem__, "done", True)).start()

    assert dispatcher.run_until(lambda: state["done"], timeout=5.0) is True


def test_queue_dispatcher_run_until_times_out() -> None:
    dispatcher = QueueDispatcher()

    assert dispatcher.run_until(lambda: False, timeout=0.1, poll_interval=0.01) is False


def test_asyncio_dispatcher_posts_to_loop() -> None:
    async def scenario() -> list[str]:
        dispatcher = AsyncioDispatcher()
        dispatcher.attach(asyncio.get_running_loop())
        names: list[str] = []
        done = asyncio.Event()

        def callback() -> None:
            names.append(threading.current_thread().name)
            done.set()

        threading.Thread(target=dispatcher.post, args=(callback,), name="worker").start()
        await asyncio.wait_for(done.wait(), timeout=5.0)
        return names

    names = asyncio.run(scenario())

    assert names == [threading.main_thread().name]
