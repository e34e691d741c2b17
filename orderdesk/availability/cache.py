"""Per-selection memo of provider availability checks.

Entries only mean something for the booking draft the user is choosing a
provider for. As soon as the date, time, services or service title change,
the whole cache is dropped; there is no expiry timer.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


def _sorted_ids(service_ids: Iterable[str]) -> tuple[str, ...]:
    return tuple(sorted(str(service_id) for service_id in service_ids))


def worker_key(provider_id: str) -> str:
    return f"workers|{provider_id}"


def slot_key(provider_id: str, date: str, time: str, service_ids: Iterable[str]) -> str:
    return f"slot|{provider_id}|{date}|{time}|{','.join(_sorted_ids(service_ids))}"


@dataclass(frozen=True)
class SelectionContext:
    """The date/time/services combination that scopes cached results."""

    date: str
    time: str
    service_ids: tuple[str, ...] = ()
    service_title: str = ""

    @property
    def key(self) -> str:
        return f"{self.date}|{self.time}|{','.join(_sorted_ids(self.service_ids))}|{self.service_title}"


@dataclass
class AvailabilityCache:
    """Boolean results keyed by ``worker_key``/``slot_key``."""

    _entries: dict[str, bool] = field(default_factory=dict)
    _context_key: str | None = None
    generation: int = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def context_key(self) -> str | None:
        return self._context_key

    def get(self, key: str) -> bool | None:
        return self._entries.get(key)

    def set(self, key: str, value: bool) -> None:
        self._entries[key] = bool(value)

    def set_if_current(self, generation: int, key: str, value: bool) -> bool:
        """Store ``value`` only if no context switch happened since ``generation``."""
        if generation != self.generation:
            return False
        self.set(key, value)
        return True

    def clear(self) -> None:
        self._entries.clear()

    def enter_context(self, context: SelectionContext) -> int:
        """Switch to ``context``, clearing everything if it differs from the current one.

        Returns the generation that writes for this context must carry.
        """
        if context.key != self._context_key:
            self.clear()
            self._context_key = context.key
            self.generation += 1
        return self.generation
