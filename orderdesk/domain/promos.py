"""Promo code eligibility and discount amounts."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from orderdesk.domain.models import PromoCode, PromoKind
from orderdesk.domain.money import HUNDRED, ZERO, non_negative, to_decimal


def meets_minimum(promo: PromoCode, subtotal: Decimal) -> bool:
    if promo.minimum_subtotal is None:
        return True
    return subtotal >= to_decimal(promo.minimum_subtotal)


def promo_discount(promo: PromoCode | None, subtotal: Decimal) -> Decimal:
    """Discount a promo grants on ``subtotal``, never more than the subtotal itself."""
    subtotal = non_negative(subtotal)
    if promo is None or not meets_minimum(promo, subtotal):
        return ZERO

    value = non_negative(to_decimal(promo.value))
    if promo.kind is PromoKind.PERCENT:
        raw = subtotal * value / HUNDRED
    else:
        raw = value
    return min(raw, subtotal)


def eligible_promos(
    promos: Iterable[PromoCode],
    user_id: str | None,
    subtotal: Decimal | None = None,
) -> list[PromoCode]:
    """Promos a user may still pick: active, not already redeemed, minimum met."""
    result: list[PromoCode] = []
    for promo in promos:
        if not promo.is_active:
            continue
        if user_id is not None and user_id in promo.used_by_user_ids:
            continue
        if subtotal is not None and not meets_minimum(promo, subtotal):
            continue
        result.append(promo)
    return result
