"""Bounded executor ordering, ceiling and failure isolation."""

from __future__ import annotations

import asyncio

import pytest

from orderdesk.availability.executor import BoundedExecutor, run_bounded


def _job(value: int, delay: float, log: list[str] | None = None):
    async def run() -> int:
        if log is not None:
            log.append(f"start {value}")
        await asyncio.sleep(delay)
        return value

    return run


def test_results_come_back_in_input_order() -> None:
    delays = [0.05, 0.0, 0.03, 0.01, 0.02]
    results = asyncio.run(run_bounded([_job(i, d) for i, d in enumerate(delays)], 2))

    assert results == [0, 1, 2, 3, 4]


def test_never_more_than_limit_in_flight() -> None:
    executor: BoundedExecutor[int] = BoundedExecutor(3)

    asyncio.run(executor.run([_job(i, 0.01) for i in range(10)]))

    assert executor.peak_active == 3
    assert executor.active == 0
    assert executor.queued == 0


def test_tasks_start_in_fifo_order() -> None:
    log: list[str] = []

    asyncio.run(run_bounded([_job(i, 0.001, log) for i in range(6)], 1))

    assert log == [f"start {i}" for i in range(6)]


def test_failure_stays_in_its_slot() -> None:
    async def boom() -> int:
        raise RuntimeError("directory down")

    results = asyncio.run(run_bounded([_job(1, 0.01), boom, _job(3, 0.0)], 2))

    assert results[0] == 1
    assert isinstance(results[1], RuntimeError)
    assert results[2] == 3


def test_empty_input_and_invalid_limit() -> None:
    assert asyncio.run(run_bounded([], 4)) == []

    with pytest.raises(ValueError):
        BoundedExecutor(0)


def test_concurrent_runs_share_one_ceiling() -> None:
    executor: BoundedExecutor[int] = BoundedExecutor(2)

    async def scenario() -> tuple[list[int | BaseException], list[int | BaseException]]:
        return await asyncio.gather(
            executor.run([_job(i, 0.01) for i in range(4)]),
            executor.run([_job(i, 0.01) for i in range(10, 14)]),
        )

    first, second = asyncio.run(scenario())

    assert first == [0, 1, 2, 3]
    assert second == [10, 11, 12, 13]
    assert executor.peak_active == 2
