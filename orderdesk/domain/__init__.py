"""Core pricing and booking models for orderdesk.

This package is pure: no I/O, no logging, no exceptions for bad business input.
- Models: LineItem, QuantityOfferTier, PromoCode, DeliveryFareParameters, Zone, Provider, Slot
- Pricing: resolve_quantity_pricing, assemble_fare, resolve_zone_fee

Usage:
    from orderdesk.domain import LineItem, assemble_fare
"""

from orderdesk.domain.fare import FareBreakdown, FareLine, assemble_fare
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
    ZoneFeeResult,
)
from orderdesk.domain.promos import eligible_promos, promo_discount
from orderdesk.domain.tiered_pricing import QuantityPricing, resolve_quantity_pricing, select_tier
from orderdesk.domain.zones import haversine_km, resolve_zone_fee, resolve_zone_fee_from_distances

__all__ = [
    "Coordinate",
    "DeliveryFareParameters",
    "DiscountKind",
    "FareBreakdown",
    "FareLine",
    "LineItem",
    "PromoCode",
    "PromoKind",
    "Provider",
    "ProviderSlotAvailability",
    "QuantityOfferTier",
    "QuantityPricing",
    "Slot",
    "TaxBreakdown",
    "Worker",
    "Zone",
    "ZoneFeeResult",
    "assemble_fare",
    "eligible_promos",
    "haversine_km",
    "promo_discount",
    "resolve_quantity_pricing",
    "resolve_zone_fee",
    "resolve_zone_fee_from_distances",
    "select_tier",
]
