"""HTTP clients for the provider directory and the routing (distance) service.

Both are black boxes to the engine. Transport and protocol failures are
raised as ``CollaboratorUnavailable``; deciding what a failure means for a
booking or a fare is left to the application layer.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

import httpx

from orderdesk.domain.models import Coordinate, ProviderSlotAvailability
from orderdesk.ingest.records import slot_availability_from_record
from orderdesk.runtime.logging import get_logger

logger = get_logger(__name__)


class CollaboratorUnavailable(RuntimeError):
    """Raised when a remote collaborator cannot be reached or returns an error."""


class ProviderDirectory(Protocol):
    """Worker and slot lookups for service providers."""

    async def has_active_workers(self, provider_id: str) -> bool: ...

    async def is_available_for_slot(
        self,
        provider_id: str,
        date: str,
        time: str,
        service_ids: Sequence[str],
    ) -> bool: ...


class BulkProviderDirectory(ProviderDirectory, Protocol):
    """Directory that can also answer for every provider of a category at once."""

    async def get_providers_with_slot_availability(
        self,
        category_id: str,
        service_ids: Sequence[str],
        date: str,
        time: str,
        service_name: str,
    ) -> list[ProviderSlotAvailability]: ...


class DistanceService(Protocol):
    async def distances_km(self, origin: Coordinate, destinations: Sequence[Coordinate]) -> list[float | None]: ...


def _element_km(element: Any) -> float | None:
    """Kilometres for one distance-matrix element; None when that route failed."""
    if not isinstance(element, dict) or element.get("status") != "OK":
        return None
    distance = element.get("distance")
    value = distance.get("value") if isinstance(distance, dict) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) / 1000.0


class _JsonClient:
    """Shared request plumbing over ``httpx.AsyncClient``."""

    service_name = "collaborator"

    def __init__(self, base_url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> _JsonClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, json=payload)
        except httpx.RequestError as e:
            logger.error("Failed to reach %s at %s: %s", self.service_name, url, e)
            raise CollaboratorUnavailable(f"Failed to reach {self.service_name}: {e}") from e

        if response.status_code != 200:
            logger.error("%s error: %s %s", self.service_name, response.status_code, url)
            raise CollaboratorUnavailable(f"{self.service_name} error: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise CollaboratorUnavailable(f"{self.service_name} returned invalid JSON") from e


class HttpProviderDirectory(_JsonClient):
    """Provider directory reached over HTTP."""

    service_name = "provider directory"

    async def has_active_workers(self, provider_id: str) -> bool:
        data = await self._request("GET", f"/providers/{provider_id}/active-workers")
        return isinstance(data, dict) and data.get("hasActiveWorkers") is True

    async def is_available_for_slot(
        self,
        provider_id: str,
        date: str,
        time: str,
        service_ids: Sequence[str],
    ) -> bool:
        data = await self._request(
            "POST",
            f"/providers/{provider_id}/availability",
            {"date": date, "time": time, "serviceIds": list(service_ids)},
        )
        return isinstance(data, dict) and data.get("available") is True

    async def get_providers_with_slot_availability(
        self,
        category_id: str,
        service_ids: Sequence[str],
        date: str,
        time: str,
        service_name: str,
    ) -> list[ProviderSlotAvailability]:
        data = await self._request(
            "POST",
            "/providers/availability",
            {
                "categoryId": category_id,
                "serviceIds": list(service_ids),
                "date": date,
                "time": time,
                "serviceName": service_name,
            },
        )
        rows = data.get("providers") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise CollaboratorUnavailable("provider directory returned no provider list")
        return [slot_availability_from_record(row) for row in rows if isinstance(row, dict)]


class HttpDistanceService(_JsonClient):
    """Distance-matrix style routing service: one origin, many destinations, one request."""

    service_name = "distance service"

    async def distances_km(self, origin: Coordinate, destinations: Sequence[Coordinate]) -> list[float | None]:
        if not destinations:
            return []

        data = await self._request(
            "POST",
            "/distance-matrix",
            {
                "origins": [{"lat": origin.lat, "lng": origin.lng}],
                "destinations": [{"lat": d.lat, "lng": d.lng} for d in destinations],
                "units": "metric",
            },
        )
        if not isinstance(data, dict) or data.get("status") != "OK":
            status = data.get("status") if isinstance(data, dict) else None
            logger.warning("Distance matrix returned status %s", status)
            raise CollaboratorUnavailable(f"distance service status: {status}")

        try:
            elements = data["rows"][0]["elements"]
        except (KeyError, IndexError, TypeError) as e:
            raise CollaboratorUnavailable("distance service returned no rows") from e

        return [
            _element_km(elements[index]) if index < len(elements) else None for index in range(len(destinations))
        ]

    async def distance_km(self, origin: Coordinate, destination: Coordinate) -> float:
        (km,) = await self.distances_km(origin, [destination])
        if km is None:
            raise CollaboratorUnavailable("distance service could not route to destination")
        return km
