"""Checkout quote orchestration: remote distance/zone lookups, then fare assembly."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from orderdesk.domain.fare import FareBreakdown, assemble_fare
from orderdesk.domain.models import Coordinate, DeliveryFareParameters, LineItem, PromoCode, Zone, ZoneFeeResult
from orderdesk.domain.money import ZERO, to_decimal
from orderdesk.domain.zones import haversine_km, resolve_zone_fee, resolve_zone_fee_from_distances
from orderdesk.runtime.collaborators import DistanceService
from orderdesk.runtime.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutRequest:
    """Inputs for one fare recomputation."""

    line_items: tuple[LineItem, ...]
    pickup: Coordinate | None = None
    dropoff: Coordinate | None = None
    promo: PromoCode | None = None
    is_surge_active: bool = False


class CheckoutQuoter:
    """Turns a cart plus drop-off into a fare.

    With a distance service, the pickup→drop-off distance and (when
    ``route_zones`` is set) the zone distances come from it, the latter in a
    single batched request. Without one, straight-line distances are used.
    """

    def __init__(
        self,
        delivery_params: DeliveryFareParameters | None,
        zones: Sequence[Zone] = (),
        distance_service: DistanceService | None = None,
        route_zones: bool = False,
    ) -> None:
        self.delivery_params = delivery_params
        self.zones = tuple(zones)
        self.distance_service = distance_service
        self.route_zones = route_zones

    async def lookup_distance_km(self, pickup: Coordinate | None, dropoff: Coordinate | None) -> Decimal:
        """Delivery distance; unknown or failed lookups count as 0 km."""
        if pickup is None or dropoff is None:
            return ZERO
        if self.distance_service is None:
            return to_decimal(round(haversine_km(pickup, dropoff), 3))

        try:
            (km,) = await self.distance_service.distances_km(pickup, [dropoff])
        except Exception as e:
            logger.error("Distance lookup failed, charging base delivery only: %s", e)
            return ZERO
        if km is None:
            logger.warning("No route from pickup to drop-off, charging base delivery only")
            return ZERO
        return to_decimal(km)

    async def lookup_zone(self, dropoff: Coordinate | None) -> ZoneFeeResult:
        """Zone containing the drop-off; lookup failures mean no zone fee."""
        if dropoff is None or not self.zones:
            return ZoneFeeResult()
        if not self.route_zones or self.distance_service is None:
            return resolve_zone_fee(dropoff, self.zones)

        try:
            distances = await self.distance_service.distances_km(dropoff, [zone.center for zone in self.zones])
        except Exception as e:
            logger.error("Zone distance lookup failed, no zone fee applied: %s", e)
            return ZoneFeeResult()
        return resolve_zone_fee_from_distances(self.zones, distances)

    async def quote(self, request: CheckoutRequest) -> FareBreakdown:
        if self.delivery_params is None:
            logger.info("Delivery settings not loaded yet; fare not computable")
            return FareBreakdown.zero()

        distance_km, zone = await asyncio.gather(
            self.lookup_distance_km(request.pickup, request.dropoff),
            self.lookup_zone(request.dropoff),
        )
        fare = assemble_fare(
            request.line_items,
            request.promo,
            self.delivery_params,
            zone_fee=zone,
            is_surge_active=request.is_surge_active,
            distance_km=distance_km,
        )
        logger.debug(
            "Quoted %d items: distance=%s km zone=%s total=%s",
            len(request.line_items),
            distance_km,
            zone.zone.zone_id if zone.zone is not None else None,
            fare.grand_total,
        )
        return fare
