"""Quantity-offer tier resolution for service bookings.

A priced entity may carry several independent tiers (e.g. "4+ units: 25 off
each"). The highest tier the quantity reaches applies; tiers never stack.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from orderdesk.domain.models import DiscountKind, QuantityOfferTier
from orderdesk.domain.money import HUNDRED, ZERO, non_negative, round2, to_decimal


@dataclass(frozen=True)
class QuantityPricing:
    """Outcome of pricing one quantity against its offer tiers."""

    base_unit_price: Decimal
    quantity: int
    effective_unit_price: Decimal
    total_price: Decimal
    savings: Decimal
    chosen_tier: QuantityOfferTier | None = None

    @property
    def has_offer(self) -> bool:
        return self.chosen_tier is not None


def select_tier(tiers: Iterable[QuantityOfferTier], quantity: int) -> QuantityOfferTier | None:
    """Return the active tier with the largest ``min_quantity`` reached by ``quantity``.

    Tiers sharing the same ``min_quantity`` resolve to the first one declared.
    """
    if quantity <= 0:
        return None

    best: QuantityOfferTier | None = None
    for tier in tiers:
        if not tier.is_active:
            continue
        if tier.min_quantity <= 0 or quantity < tier.min_quantity:
            continue
        # Strict comparison keeps the earlier tier on ties.
        if best is None or tier.min_quantity > best.min_quantity:
            best = tier
    return best


def _discount_value(tier: QuantityOfferTier) -> Decimal | None:
    if tier.discount_value is None:
        return None
    value = to_decimal(tier.discount_value)
    return value if value >= ZERO else None


def _per_unit_flat(base: Decimal, tier: QuantityOfferTier) -> Decimal:
    value = _discount_value(tier)
    if value is None:
        return base
    return non_negative(base - value)


def _effective_unit_price(base: Decimal, tier: QuantityOfferTier) -> Decimal:
    kind = tier.discount_kind

    if kind is DiscountKind.EXPLICIT_UNIT_PRICE:
        if tier.explicit_unit_price is not None:
            explicit = to_decimal(tier.explicit_unit_price, default=Decimal("-1"))
            if explicit >= ZERO:
                return explicit
        return _per_unit_flat(base, tier)

    if kind is DiscountKind.PERCENT:
        value = _discount_value(tier)
        if value is None:
            return base
        return non_negative(base - base * value / HUNDRED)

    # PER_UNIT_FLAT, and any tier whose kind is missing.
    return _per_unit_flat(base, tier)


def resolve_quantity_pricing(
    base_unit_price: object,
    quantity: int,
    tiers: Iterable[QuantityOfferTier] = (),
) -> QuantityPricing:
    """Price ``quantity`` units of something costing ``base_unit_price`` each.

    Inputs are clamped to nonnegative values; this never raises.
    """
    base = non_negative(to_decimal(base_unit_price))
    qty = max(0, int(quantity or 0))

    full_price = round2(base * qty)
    tier = select_tier(tiers, qty)

    if tier is None:
        effective = base
        total = full_price
    elif tier.discount_kind is DiscountKind.TOTAL_FLAT:
        value = _discount_value(tier)
        total = full_price if value is None else non_negative(round2(full_price - value))
        effective = round2(total / qty)
    else:
        effective = _effective_unit_price(base, tier)
        total = round2(effective * qty)

    savings = non_negative(round2(base * qty - total))
    return QuantityPricing(
        base_unit_price=base,
        quantity=qty,
        effective_unit_price=effective,
        total_price=total,
        savings=savings,
        chosen_tier=tier,
    )
