"""Provider availability resolution for a booking draft.

A provider is offered for a booking only when it has at least one active
worker and every slot of the requested block is available. Remote lookups go
through bounded executors, are memoized per selection context, and fail
closed: a lookup that errors counts as "not available".
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from orderdesk.availability.cache import AvailabilityCache, SelectionContext, slot_key, worker_key
from orderdesk.availability.executor import BoundedExecutor
from orderdesk.domain.models import Provider, Slot
from orderdesk.runtime.collaborators import ProviderDirectory
from orderdesk.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PROVIDER_CONCURRENCY = 5
DEFAULT_SLOT_CONCURRENCY = 2


class AvailabilityResolver:
    """Filters candidate providers down to those that can take a slot block.

    The cache may be shared across calls (one per provider-selection screen);
    it is cleared automatically whenever the selection context changes.
    """

    def __init__(
        self,
        directory: ProviderDirectory,
        cache: AvailabilityCache | None = None,
        provider_concurrency: int = DEFAULT_PROVIDER_CONCURRENCY,
        slot_concurrency: int = DEFAULT_SLOT_CONCURRENCY,
    ) -> None:
        if provider_concurrency <= 0 or slot_concurrency <= 0:
            raise ValueError("Concurrency limits must be positive")
        self.directory = directory
        self.cache = cache if cache is not None else AvailabilityCache()
        self.provider_concurrency = provider_concurrency
        self.slot_concurrency = slot_concurrency
        self.remote_checks = 0
        self._in_flight: dict[str, asyncio.Future[bool]] = {}
        self._in_flight_generation = self.cache.generation

    def _enter_context(self, slots: Sequence[Slot], service_ids: Sequence[str], service_title: str) -> int:
        first = slots[0]
        context = SelectionContext(
            date=first.date,
            time=first.time,
            service_ids=tuple(service_ids),
            service_title=service_title,
        )
        generation = self.cache.enter_context(context)
        if generation != self._in_flight_generation:
            # Checks still running for the previous selection finish on their own;
            # their results are simply not shared or cached any more.
            self._in_flight = {}
            self._in_flight_generation = generation
            logger.debug("Availability context changed to %s", context.key)
        return generation

    async def _fetch(
        self,
        key: str,
        generation: int,
        lookup: Callable[[], Awaitable[bool]],
    ) -> bool:
        self.remote_checks += 1
        try:
            value = (await lookup()) is True
        except Exception as e:
            logger.warning("Availability check %s failed, treating as unavailable: %s", key, e)
            return False
        self.cache.set_if_current(generation, key, value)
        return value

    async def _check(self, key: str, generation: int, lookup: Callable[[], Awaitable[bool]]) -> bool:
        """Cached value, else a shared in-flight lookup, else a new remote lookup."""
        if generation == self.cache.generation:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        in_flight = self._in_flight.get(key) if generation == self._in_flight_generation else None
        if in_flight is not None:
            return await in_flight

        task = asyncio.ensure_future(self._fetch(key, generation, lookup))
        if generation == self._in_flight_generation:
            self._in_flight[key] = task
        try:
            return await task
        finally:
            if self._in_flight.get(key) is task:
                del self._in_flight[key]

    async def _has_active_workers(self, provider: Provider, generation: int) -> bool:
        provider_id = provider.provider_id
        if provider.workers and not any(worker.is_active for worker in provider.workers):
            logger.debug("Provider %s has no active workers on record", provider_id)
            return False

        has_workers = await self._check(
            worker_key(provider_id),
            generation,
            lambda: self.directory.has_active_workers(provider_id),
        )
        if not has_workers:
            logger.debug("Provider %s has no active workers", provider_id)
        return has_workers

    async def _provider_qualifies(
        self,
        provider: Provider,
        slots: Sequence[Slot],
        service_ids: Sequence[str],
        generation: int,
    ) -> bool:
        provider_id = provider.provider_id
        if not await self._has_active_workers(provider, generation):
            return False

        def slot_lookup(slot: Slot) -> Callable[[], Awaitable[bool]]:
            return lambda: self._check(
                slot_key(provider_id, slot.date, slot.time, service_ids),
                generation,
                lambda: self.directory.is_available_for_slot(provider_id, slot.date, slot.time, service_ids),
            )

        slot_pool: BoundedExecutor[bool] = BoundedExecutor(self.slot_concurrency)
        outcomes = await slot_pool.run([slot_lookup(slot) for slot in slots])
        for slot, outcome in zip(slots, outcomes):
            if outcome is not True:
                logger.debug("Provider %s is not available at %s", provider_id, slot)
                return False
        return True

    async def filter(
        self,
        providers: Sequence[Provider],
        required_slots: Sequence[Slot],
        service_ids: Sequence[str],
        service_title: str = "",
    ) -> list[Provider]:
        """Providers (in input order) available for every slot in ``required_slots``."""
        slots = tuple(required_slots)
        if not slots:
            logger.warning("No slots requested; no provider can be offered")
            return []
        if not providers:
            return []

        ids = tuple(service_ids)
        generation = self._enter_context(slots, ids, service_title)
        logger.info("Checking %d providers for %d slot(s) starting %s", len(providers), len(slots), slots[0])

        provider_pool: BoundedExecutor[bool] = BoundedExecutor(self.provider_concurrency)
        outcomes = await provider_pool.run(
            [
                (lambda provider=provider: self._provider_qualifies(provider, slots, ids, generation))
                for provider in providers
            ]
        )

        available: list[Provider] = []
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Availability check for provider %s failed: %s", provider.provider_id, outcome)
                continue
            if outcome:
                available.append(provider)

        logger.info("%d of %d providers available", len(available), len(providers))
        return available

    async def filter_with_bulk(
        self,
        providers: Sequence[Provider],
        required_slots: Sequence[Slot],
        service_ids: Sequence[str],
        category_id: str,
        service_title: str = "",
    ) -> list[Provider]:
        """Use the directory's bulk endpoint; fall back to per-provider checks if it errors.

        Bulk rows only answer for slots. Providers found free for every slot
        still pass the same active-worker check as :meth:`filter`.
        """
        bulk = getattr(self.directory, "get_providers_with_slot_availability", None)
        slots = tuple(required_slots)
        ids = tuple(service_ids)
        if bulk is None or not slots or not providers:
            return await self.filter(providers, slots, ids, service_title)

        def bulk_lookup(slot: Slot) -> Callable[[], Awaitable[set[str]]]:
            async def lookup() -> set[str]:
                rows = await bulk(category_id, ids, slot.date, slot.time, service_title)
                return {
                    row.provider_id
                    for row in rows
                    if row.available is True and (row.available_workers is None or row.available_workers > 0)
                }

            return lookup

        slot_pool: BoundedExecutor[set[str]] = BoundedExecutor(self.slot_concurrency)
        outcomes = await slot_pool.run([bulk_lookup(slot) for slot in slots])

        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        if failures:
            logger.warning("Bulk availability lookup failed (%s); falling back to per-provider checks", failures[0])
            return await self.filter(providers, slots, ids, service_title)

        available_ids: set[str] = set.intersection(*outcomes)  # type: ignore[arg-type]
        candidates = [provider for provider in providers if provider.provider_id in available_ids]
        if not candidates:
            return []

        generation = self._enter_context(slots, ids, service_title)
        provider_pool: BoundedExecutor[bool] = BoundedExecutor(self.provider_concurrency)
        staffed = await provider_pool.run(
            [(lambda provider=provider: self._has_active_workers(provider, generation)) for provider in candidates]
        )

        available = [provider for provider, outcome in zip(candidates, staffed) if outcome is True]
        logger.info("%d of %d providers available (bulk)", len(available), len(providers))
        return available
