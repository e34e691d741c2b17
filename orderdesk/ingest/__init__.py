"""Record normalization at the document-store boundary."""

from orderdesk.ingest.records import (
    coordinate_from_record,
    fare_params_from_record,
    line_item_from_record,
    normalize_discount_kind,
    normalize_promo_kind,
    offer_tier_from_record,
    offer_tiers_from_records,
    promo_from_record,
    provider_from_record,
    slot_availability_from_record,
    slot_from_record,
    zone_from_record,
)

__all__ = [
    "coordinate_from_record",
    "fare_params_from_record",
    "line_item_from_record",
    "normalize_discount_kind",
    "normalize_promo_kind",
    "offer_tier_from_record",
    "offer_tiers_from_records",
    "promo_from_record",
    "provider_from_record",
    "slot_availability_from_record",
    "slot_from_record",
    "zone_from_record",
]
