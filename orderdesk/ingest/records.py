"""Map raw document-store records onto domain models.

Catalog records use camelCase keys and loosely-typed values. Offer and promo
type strings arrive in several spellings; they are normalized here into the
closed enums so nothing downstream has to guess.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from orderdesk.domain.models import (
    Coordinate,
    DeliveryFareParameters,
    DiscountKind,
    LineItem,
    PromoCode,
    PromoKind,
    Provider,
    ProviderSlotAvailability,
    QuantityOfferTier,
    Slot,
    TaxBreakdown,
    Worker,
    Zone,
)
from orderdesk.domain.money import to_decimal

_DISCOUNT_KIND_ALIASES: dict[str, DiscountKind] = {
    "newprice": DiscountKind.EXPLICIT_UNIT_PRICE,
    "explicitunitprice": DiscountKind.EXPLICIT_UNIT_PRICE,
    "flat": DiscountKind.PER_UNIT_FLAT,
    "flatperunit": DiscountKind.PER_UNIT_FLAT,
    "perunit": DiscountKind.PER_UNIT_FLAT,
    "perunitflat": DiscountKind.PER_UNIT_FLAT,
    "discount": DiscountKind.PER_UNIT_FLAT,
    "percent": DiscountKind.PERCENT,
    "percentage": DiscountKind.PERCENT,
    "absolute": DiscountKind.TOTAL_FLAT,
    "amount": DiscountKind.TOTAL_FLAT,
    "fixed": DiscountKind.TOTAL_FLAT,
    "totalflat": DiscountKind.TOTAL_FLAT,
}


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _optional_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    result = to_decimal(value, default=Decimal("NaN"))
    return None if result.is_nan() else result


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _optional_int(value: Any) -> int | None:
    return None if value is None else _int(value)


def _float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def normalize_discount_kind(raw: object) -> DiscountKind | None:
    """Closed enum for an offer type string; unknown spellings become ``None``."""
    if raw is None:
        return None
    if isinstance(raw, DiscountKind):
        return raw
    token = "".join(ch for ch in str(raw).lower() if ch.isalnum())
    return _DISCOUNT_KIND_ALIASES.get(token)


def normalize_promo_kind(raw: object) -> PromoKind:
    token = str(raw or "").strip().lower()
    if token.startswith("percent"):
        return PromoKind.PERCENT
    return PromoKind.FLAT


def offer_tier_from_record(record: Mapping[str, Any]) -> QuantityOfferTier:
    message = _first(record, "message", "explanatoryMessage")
    return QuantityOfferTier(
        min_quantity=_int(_first(record, "minQuantity", "minQty", "min_quantity")),
        discount_kind=normalize_discount_kind(_first(record, "discountType", "type", "discount_kind")),
        discount_value=_optional_decimal(_first(record, "discountValue", "value", "discount_value")),
        is_active=record.get("isActive", record.get("is_active", True)) is not False,
        explicit_unit_price=_optional_decimal(_first(record, "newPricePerUnit", "explicit_unit_price")),
        message=str(message) if message is not None else None,
    )


def offer_tiers_from_records(records: Any) -> tuple[QuantityOfferTier, ...]:
    """Parse a list of offer records, skipping anything that is not a mapping."""
    if not isinstance(records, Iterable) or isinstance(records, (str, bytes, Mapping)):
        return ()
    return tuple(offer_tier_from_record(record) for record in records if isinstance(record, Mapping))


def promo_from_record(record: Mapping[str, Any]) -> PromoCode:
    used_by = record.get("usedBy") or record.get("used_by_user_ids") or ()
    return PromoCode(
        code=str(record.get("code", "")),
        kind=normalize_promo_kind(_first(record, "discountType", "kind")),
        value=to_decimal(_first(record, "discountValue", "value")),
        minimum_subtotal=_optional_decimal(_first(record, "minimumSubtotal", "minOrderValue", "minimum_subtotal")),
        used_by_user_ids=frozenset(str(uid) for uid in used_by),
        is_active=record.get("isActive", record.get("is_active", True)) is not False,
        promo_id=str(record.get("id", "")),
        label=str(record.get("label", "") or ""),
    )


def fare_params_from_record(record: Mapping[str, Any] | None) -> DeliveryFareParameters | None:
    """Delivery fare settings; ``None`` when the settings document is absent."""
    if not record:
        return None
    return DeliveryFareParameters(
        base_charge=to_decimal(_first(record, "baseDeliveryCharge", "base_charge")),
        distance_threshold_km=to_decimal(_first(record, "distanceThreshold", "distance_threshold_km")),
        per_km_charge_beyond_threshold=to_decimal(
            _first(record, "additionalCostPerKm", "per_km_charge_beyond_threshold")
        ),
        gst_percent_on_delivery=to_decimal(_first(record, "gstPercentage", "gst_percent_on_delivery")),
        platform_fee=to_decimal(_first(record, "platformFee", "platform_fee")),
        surge_fee=to_decimal(_first(record, "surgeFee", "surge_fee")),
    )


def coordinate_from_record(record: Mapping[str, Any]) -> Coordinate:
    return Coordinate(
        lat=_float(_first(record, "lat", "latitude")),
        lng=_float(_first(record, "lng", "longitude")),
    )


def zone_from_record(record: Mapping[str, Any]) -> Zone:
    center = record.get("center")
    return Zone(
        center=coordinate_from_record(center if isinstance(center, Mapping) else record),
        radius_km=_float(_first(record, "radius", "radiusKm", "radius_km")),
        fee=to_decimal(_first(record, "fee", "zoneFee")),
        zone_id=str(_first(record, "id", "storeId", "zone_id") or ""),
    )


def line_item_from_record(record: Mapping[str, Any]) -> LineItem:
    tax = record.get("tax") if isinstance(record.get("tax"), Mapping) else record
    return LineItem(
        unit_price=to_decimal(_first(record, "price", "unitPrice", "unit_price")),
        quantity=max(0, _int(record.get("quantity"), default=0)),
        discount_amount=to_decimal(_first(record, "discount", "discountAmount", "discount_amount")),
        tax=TaxBreakdown(
            cgst=to_decimal(tax.get("cgst")),
            sgst=to_decimal(tax.get("sgst")),
            cess=to_decimal(tax.get("cess")),
        ),
        quantity_offers=offer_tiers_from_records(_first(record, "quantityOffers", "quantity_offers")),
        name=str(record.get("name", "") or ""),
        item_id=str(record.get("id", "") or ""),
    )


def worker_from_record(record: Mapping[str, Any]) -> Worker:
    return Worker(
        worker_id=str(_first(record, "id", "workerId") or ""),
        is_active=record.get("isActive", True) is True,
    )


def provider_from_record(record: Mapping[str, Any]) -> Provider:
    workers = record.get("workers") or ()
    return Provider(
        provider_id=str(_first(record, "companyId", "providerId", "provider_id", "id") or ""),
        workers=tuple(worker_from_record(w) for w in workers if isinstance(w, Mapping)),
        name=str(_first(record, "companyName", "name", "serviceName") or ""),
    )


def slot_from_record(record: Mapping[str, Any]) -> Slot:
    return Slot(date=str(record.get("date", "")), time=str(record.get("time", "")))


def slot_availability_from_record(record: Mapping[str, Any]) -> ProviderSlotAvailability:
    return ProviderSlotAvailability(
        provider_id=str(_first(record, "companyId", "providerId", "provider_id", "id") or ""),
        available=record.get("available") is True,
        available_workers=_optional_int(_first(record, "availableWorkers", "available_workers")),
    )
