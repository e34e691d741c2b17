"""Run many asynchronous checks under a fixed concurrency ceiling."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")

TaskFactory = Callable[[], Awaitable[T]]


async def _invoke(factory: TaskFactory[T]) -> T:
    return await factory()


class BoundedExecutor(Generic[T]):
    """FIFO task pool with at most ``limit`` tasks in flight.

    The ceiling is per executor instance, so concurrent ``run`` calls on the
    same executor share it. Results come back in input order; a failed task
    leaves its exception in its own result slot and does not cancel siblings.
    """

    def __init__(self, limit: int) -> None:
        if limit <= 0:
            raise ValueError(f"Concurrency limit must be positive, got {limit}")
        self.limit = limit
        self.active = 0
        self.peak_active = 0
        self._queue: deque[tuple[TaskFactory[T], Callable[[asyncio.Future[T]], None]]] = deque()

    @property
    def queued(self) -> int:
        return len(self._queue)

    def _start_next(self) -> None:
        while self._queue and self.active < self.limit:
            factory, on_settled = self._queue.popleft()
            self.active += 1
            self.peak_active = max(self.peak_active, self.active)
            task = asyncio.ensure_future(_invoke(factory))
            task.add_done_callback(on_settled)

    async def run(self, factories: Sequence[TaskFactory[T]]) -> list[T | BaseException]:
        """Run every factory's awaitable and wait for all of them to settle."""
        if not factories:
            return []

        loop = asyncio.get_running_loop()
        finished: asyncio.Future[None] = loop.create_future()
        results: list[T | BaseException | None] = [None] * len(factories)
        pending = len(factories)

        def settle(index: int, task: asyncio.Future[T]) -> None:
            nonlocal pending
            if task.cancelled():
                results[index] = asyncio.CancelledError()
            else:
                error = task.exception()
                results[index] = error if error is not None else task.result()
            self.active -= 1
            pending -= 1
            if pending == 0 and not finished.done():
                finished.set_result(None)
            self._start_next()

        for index, factory in enumerate(factories):
            self._queue.append((factory, lambda task, index=index: settle(index, task)))
        self._start_next()

        await finished
        return results  # type: ignore[return-value]


async def run_bounded(factories: Sequence[TaskFactory[T]], limit: int) -> list[T | BaseException]:
    """One-shot helper: run ``factories`` with a fresh executor of size ``limit``."""
    executor: BoundedExecutor[T] = BoundedExecutor(limit)
    return await executor.run(factories)
