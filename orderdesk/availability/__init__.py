"""Concurrency primitives for provider availability checks.

- BoundedExecutor / run_bounded: ordered results under a concurrency ceiling
- AvailabilityCache / SelectionContext: memo scoped to one booking selection
"""

from orderdesk.availability.cache import AvailabilityCache, SelectionContext, slot_key, worker_key
from orderdesk.availability.executor import BoundedExecutor, run_bounded

__all__ = [
    "AvailabilityCache",
    "BoundedExecutor",
    "SelectionContext",
    "run_bounded",
    "slot_key",
    "worker_key",
]
