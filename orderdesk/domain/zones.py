"""Zone fee lookup for a drop-off coordinate."""

from __future__ import annotations

import math
from collections.abc import Sequence

from orderdesk.domain.models import Coordinate, Zone, ZoneFeeResult

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.lng - a.lng)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))


def resolve_zone_fee_from_distances(
    zones: Sequence[Zone],
    distances_km: Sequence[float | None],
) -> ZoneFeeResult:
    """Pick the nearest zone containing the point, given one distance per zone.

    ``None`` distances (the routing lookup failed for that zone) are skipped.
    Equal distances keep the zone listed first.
    """
    best: Zone | None = None
    best_km: float | None = None
    for zone, km in zip(zones, distances_km):
        if km is None or not math.isfinite(km):
            continue
        if km > zone.radius_km:
            continue
        if best_km is None or km < best_km:
            best, best_km = zone, km

    if best is None:
        return ZoneFeeResult()
    return ZoneFeeResult(zone=best, fee=best.fee, distance_km=best_km)


def resolve_zone_fee(point: Coordinate, zones: Sequence[Zone]) -> ZoneFeeResult:
    """Nearest zone whose radius contains ``point``, by straight-line distance."""
    return resolve_zone_fee_from_distances(zones, [haversine_km(point, zone.center) for zone in zones])
