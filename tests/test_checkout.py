"""Checkout quoting with distance and zone lookups."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from decimal import Decimal

from orderdesk.application.checkout import CheckoutQuoter, CheckoutRequest
from orderdesk.domain.models import Coordinate, DeliveryFareParameters, LineItem, Zone
from orderdesk.runtime.collaborators import CollaboratorUnavailable

PARAMS = DeliveryFareParameters(
    base_charge=Decimal("30"),
    distance_threshold_km=Decimal("3"),
    per_km_charge_beyond_threshold=Decimal("10"),
)
STORE = Coordinate(12.9716, 77.5946)
HOME = Coordinate(12.9352, 77.6245)
ZONES = (
    Zone(center=HOME, radius_km=2, fee=Decimal("15"), zone_id="home"),
    Zone(center=STORE, radius_km=1, fee=Decimal("40"), zone_id="store"),
)
REQUEST = CheckoutRequest(line_items=(LineItem(unit_price=Decimal("200")),), pickup=STORE, dropoff=HOME)


class FakeDistanceService:
    def __init__(self, distances: list[float | None] | None = None, fail: bool = False) -> None:
        self.distances = distances
        self.fail = fail
        self.requests: list[int] = []

    async def distances_km(self, origin: Coordinate, destinations: Sequence[Coordinate]) -> list[float | None]:
        self.requests.append(len(destinations))
        if self.fail:
            raise CollaboratorUnavailable("distance service error: 503")
        if self.distances is not None:
            return self.distances[: len(destinations)]
        return [5.0 for _ in destinations]


def test_routed_distance_drives_delivery_charge() -> None:
    quoter = CheckoutQuoter(PARAMS, distance_service=FakeDistanceService())

    fare = asyncio.run(quoter.quote(REQUEST))

    assert fare.distance_km == Decimal("5.00")
    assert fare.delivery_charge == Decimal("50.00")


def test_failed_distance_lookup_charges_base_only() -> None:
    quoter = CheckoutQuoter(PARAMS, distance_service=FakeDistanceService(fail=True))

    fare = asyncio.run(quoter.quote(REQUEST))

    assert fare.distance_km == Decimal("0.00")
    assert fare.delivery_charge == Decimal("30.00")
    assert fare.grand_total == Decimal("230.00")


def test_straight_line_distance_without_service() -> None:
    quoter = CheckoutQuoter(PARAMS, zones=ZONES)

    fare = asyncio.run(quoter.quote(REQUEST))

    assert Decimal("4") < fare.distance_km < Decimal("6")
    assert fare.zone_fee == Decimal("15.00")


def test_zone_distances_are_fetched_in_one_batch() -> None:
    service = FakeDistanceService(distances=[1.5, 6.0])
    quoter = CheckoutQuoter(PARAMS, zones=ZONES, distance_service=service, route_zones=True)

    zone = asyncio.run(quoter.lookup_zone(HOME))

    assert zone.zone is ZONES[0]
    assert service.requests == [2]


def test_zone_lookup_failure_means_no_zone_fee() -> None:
    quoter = CheckoutQuoter(PARAMS, zones=ZONES, distance_service=FakeDistanceService(fail=True), route_zones=True)

    fare = asyncio.run(quoter.quote(REQUEST))

    assert fare.zone_fee == Decimal("0.00")


def test_missing_settings_quote_is_not_computable() -> None:
    fare = asyncio.run(CheckoutQuoter(None).quote(REQUEST))

    assert not fare.is_computable


def test_missing_dropoff_has_zero_distance_and_no_zone() -> None:
    quoter = CheckoutQuoter(PARAMS, zones=ZONES, distance_service=FakeDistanceService())

    fare = asyncio.run(quoter.quote(CheckoutRequest(line_items=REQUEST.line_items, pickup=STORE)))

    assert fare.distance_km == Decimal("0.00")
    assert fare.zone_fee == Decimal("0.00")
