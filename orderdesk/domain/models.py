"""Data models for cart pricing and provider availability."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from orderdesk.domain.money import ZERO


class DiscountKind(str, Enum):
    """How a quantity offer tier changes the unit price."""

    PER_UNIT_FLAT = "per_unit_flat"
    PERCENT = "percent"
    EXPLICIT_UNIT_PRICE = "explicit_unit_price"
    # Flat amount off the whole line total rather than each unit.
    TOTAL_FLAT = "total_flat"


class PromoKind(str, Enum):
    FLAT = "flat"
    PERCENT = "percent"


@dataclass(frozen=True)
class TaxBreakdown:
    """Per-unit taxes on a cart good."""

    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    cess: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.cgst + self.sgst + self.cess


@dataclass(frozen=True)
class QuantityOfferTier:
    """A quantity threshold above which a different unit price applies."""

    min_quantity: int
    discount_kind: DiscountKind | None = None
    discount_value: Decimal | None = None
    is_active: bool = True
    explicit_unit_price: Decimal | None = None
    message: str | None = None


@dataclass(frozen=True)
class LineItem:
    """One cart line: a good, or a service booking when quantity offers are attached."""

    unit_price: Decimal
    quantity: int = 1
    discount_amount: Decimal = ZERO
    tax: TaxBreakdown = field(default_factory=TaxBreakdown)
    quantity_offers: tuple[QuantityOfferTier, ...] = ()
    name: str = ""
    item_id: str = ""


@dataclass(frozen=True)
class PromoCode:
    code: str
    kind: PromoKind
    value: Decimal
    minimum_subtotal: Decimal | None = None
    used_by_user_ids: frozenset[str] = frozenset()
    is_active: bool = True
    promo_id: str = ""
    label: str = ""


@dataclass(frozen=True)
class DeliveryFareParameters:
    base_charge: Decimal = ZERO
    distance_threshold_km: Decimal = ZERO
    per_km_charge_beyond_threshold: Decimal = ZERO
    gst_percent_on_delivery: Decimal = ZERO
    platform_fee: Decimal = ZERO
    surge_fee: Decimal = ZERO


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class Zone:
    """A geographic circle that adds a fee when a drop-off point falls inside it."""

    center: Coordinate
    radius_km: float
    fee: Decimal = ZERO
    zone_id: str = ""


@dataclass(frozen=True)
class ZoneFeeResult:
    zone: Zone | None = None
    fee: Decimal = ZERO
    distance_km: float | None = None


@dataclass(frozen=True)
class Worker:
    worker_id: str
    is_active: bool = True


@dataclass(frozen=True)
class Provider:
    provider_id: str
    workers: tuple[Worker, ...] = ()
    name: str = ""


@dataclass(frozen=True)
class Slot:
    """One bookable window: a calendar date plus a time-of-day label."""

    date: str
    time: str

    def __str__(self) -> str:
        return f"{self.date} {self.time}"


@dataclass(frozen=True)
class ProviderSlotAvailability:
    """One row of the bulk availability lookup.

    ``available_workers`` is ``None`` when the directory does not report a count.
    """

    provider_id: str
    available: bool
    available_workers: int | None = None
