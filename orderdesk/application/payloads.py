"""JSON request bodies shared by the HTTP server and the CLI."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from orderdesk.application.checkout import CheckoutQuoter, CheckoutRequest
from orderdesk.application.engine import compute_fare
from orderdesk.domain.fare import FareBreakdown
from orderdesk.domain.models import (
    Coordinate,
    DeliveryFareParameters,
    LineItem,
    PromoCode,
    Provider,
    QuantityOfferTier,
    Slot,
    ZoneFeeResult,
)
from orderdesk.domain.slots import DEFAULT_ATOMIC_MINUTES, build_slot_block, duration_to_minutes
from orderdesk.domain.tiered_pricing import QuantityPricing
from orderdesk.domain.zones import resolve_zone_fee
from orderdesk.ingest.records import (
    coordinate_from_record,
    fare_params_from_record,
    line_item_from_record,
    offer_tiers_from_records,
    promo_from_record,
    provider_from_record,
    slot_from_record,
)
from orderdesk.runtime.collaborators import DistanceService
from orderdesk.runtime.settings import EngineSettings


class PayloadError(ValueError):
    """Raised for request bodies that cannot be interpreted."""


@dataclass(frozen=True)
class FarePayload:
    line_items: tuple[LineItem, ...]
    promo: PromoCode | None
    delivery_params: DeliveryFareParameters | None
    zone_fee: ZoneFeeResult
    is_surge_active: bool
    distance_km: object | None
    pickup: Coordinate | None = None
    dropoff: Coordinate | None = None


@dataclass(frozen=True)
class QuantityPayload:
    base_unit_price: object
    quantity: int
    tiers: tuple[QuantityOfferTier, ...]


@dataclass(frozen=True)
class AvailabilityPayload:
    providers: tuple[Provider, ...]
    slots: tuple[Slot, ...]
    service_ids: tuple[str, ...]
    service_title: str = ""
    category_id: str | None = None


def require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise PayloadError("Request body must be a JSON object")
    return body


def records(body: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    value = body.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, Mapping) for v in value):
        raise PayloadError(f"'{key}' must be a list of objects")
    return value


def fare_payload(body: Mapping[str, Any], settings: EngineSettings) -> FarePayload:
    """Cart body -> fare inputs.

    ``delivery`` in the body overrides the configured delivery parameters. A
    ``dropoff`` coordinate is matched against the configured zones. With a
    ``pickup`` as well and no ``distanceKm``, the distance is looked up when
    the fare is priced.
    """
    promo_record = body.get("promo")
    delivery_record = body.get("delivery")
    dropoff_record = body.get("dropoff")
    pickup_record = body.get("pickup")

    zone_fee = ZoneFeeResult()
    if isinstance(dropoff_record, Mapping):
        zone_fee = resolve_zone_fee(coordinate_from_record(dropoff_record), settings.zones)

    return FarePayload(
        line_items=tuple(line_item_from_record(record) for record in records(body, "items")),
        promo=promo_from_record(promo_record) if isinstance(promo_record, Mapping) else None,
        delivery_params=fare_params_from_record(delivery_record)
        if isinstance(delivery_record, Mapping)
        else settings.delivery,
        zone_fee=zone_fee,
        is_surge_active=body.get("isSurgeActive") is True,
        distance_km=body.get("distanceKm"),
        pickup=coordinate_from_record(pickup_record) if isinstance(pickup_record, Mapping) else None,
        dropoff=coordinate_from_record(dropoff_record) if isinstance(dropoff_record, Mapping) else None,
    )


def quantity_payload(body: Mapping[str, Any]) -> QuantityPayload:
    quantity = body.get("quantity", 0)
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise PayloadError("'quantity' must be a number")
    return QuantityPayload(
        base_unit_price=body.get("baseUnitPrice", 0),
        quantity=int(quantity),
        tiers=offer_tiers_from_records(records(body, "offers")),
    )


def availability_payload(body: Mapping[str, Any], atomic_minutes: int = DEFAULT_ATOMIC_MINUTES) -> AvailabilityPayload:
    """Provider filter inputs.

    Slots come either as an explicit ``slots`` list or as ``date`` + ``start``
    with an optional ``duration``/``durationUnit``, expanded into the block of
    windows the booking occupies.
    """
    slots = tuple(slot_from_record(record) for record in records(body, "slots"))
    if not slots and body.get("date") and body.get("start"):
        duration = duration_to_minutes(body.get("duration"), body.get("durationUnit", "minutes"))
        slots = build_slot_block(str(body["date"]), str(body["start"]), duration, atomic_minutes)
    if not slots:
        raise PayloadError("At least one slot is required")
    service_ids = body.get("serviceIds") or []
    if not isinstance(service_ids, list):
        raise PayloadError("'serviceIds' must be a list")
    category_id = body.get("categoryId")
    return AvailabilityPayload(
        providers=tuple(provider_from_record(record) for record in records(body, "providers")),
        slots=slots,
        service_ids=tuple(str(service_id) for service_id in service_ids),
        service_title=str(body.get("serviceTitle") or ""),
        category_id=str(category_id) if category_id else None,
    )


def pricing_to_dict(pricing: QuantityPricing) -> dict[str, Any]:
    tier = pricing.chosen_tier
    return {
        "base_unit_price": str(pricing.base_unit_price),
        "quantity": pricing.quantity,
        "effective_unit_price": str(pricing.effective_unit_price),
        "total_price": str(pricing.total_price),
        "savings": str(pricing.savings),
        "chosen_tier": None
        if tier is None
        else {
            "min_quantity": tier.min_quantity,
            "discount_kind": tier.discount_kind.value if tier.discount_kind is not None else None,
            "message": tier.message,
        },
    }


def providers_to_list(providers: list[Provider]) -> list[dict[str, str]]:
    return [{"id": provider.provider_id, "name": provider.name} for provider in providers]


async def price_fare(
    payload: FarePayload,
    settings: EngineSettings,
    distance_service: DistanceService | None = None,
) -> FareBreakdown:
    """Fare for a parsed cart body, routing pickup -> drop-off when no distance was given."""
    if payload.distance_km is None and payload.pickup is not None and payload.dropoff is not None:
        quoter = CheckoutQuoter(
            payload.delivery_params,
            zones=settings.zones,
            distance_service=distance_service,
            route_zones=distance_service is not None,
        )
        return await quoter.quote(
            CheckoutRequest(
                line_items=payload.line_items,
                pickup=payload.pickup,
                dropoff=payload.dropoff,
                promo=payload.promo,
                is_surge_active=payload.is_surge_active,
            )
        )

    return compute_fare(
        payload.line_items,
        promo=payload.promo,
        delivery_params=payload.delivery_params,
        zone_fee=payload.zone_fee,
        is_surge_active=payload.is_surge_active,
        distance_km=payload.distance_km or 0,
    )
