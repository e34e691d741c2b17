"""Quantity-offer tier selection and pricing."""

from __future__ import annotations

from decimal import Decimal

from orderdesk.domain.models import DiscountKind, QuantityOfferTier
from orderdesk.domain.tiered_pricing import resolve_quantity_pricing, select_tier


def _tier(min_quantity: int, kind: DiscountKind | None, value: str | None = None, **kwargs) -> QuantityOfferTier:
    return QuantityOfferTier(
        min_quantity=min_quantity,
        discount_kind=kind,
        discount_value=Decimal(value) if value is not None else None,
        **kwargs,
    )


def test_per_unit_flat_tier() -> None:
    pricing = resolve_quantity_pricing(Decimal("100"), 4, [_tier(4, DiscountKind.PER_UNIT_FLAT, "25")])

    assert pricing.effective_unit_price == Decimal("75")
    assert pricing.total_price == Decimal("300.00")
    assert pricing.savings == Decimal("100.00")
    assert pricing.has_offer


def test_explicit_unit_price_without_price_falls_back_to_per_unit_discount() -> None:
    pricing = resolve_quantity_pricing(Decimal("200"), 3, [_tier(3, DiscountKind.EXPLICIT_UNIT_PRICE, "50")])

    assert pricing.effective_unit_price == Decimal("150")
    assert pricing.total_price == Decimal("450.00")
    assert pricing.savings == Decimal("150.00")


def test_total_flat_discount_comes_off_the_line_once() -> None:
    pricing = resolve_quantity_pricing(Decimal("200"), 3, [_tier(3, DiscountKind.TOTAL_FLAT, "50")])

    assert pricing.total_price == Decimal("550.00")
    assert pricing.effective_unit_price == Decimal("183.33")
    assert pricing.savings == Decimal("50.00")


def test_explicit_unit_price_is_used_when_present() -> None:
    tier = _tier(3, DiscountKind.EXPLICIT_UNIT_PRICE, "50", explicit_unit_price=Decimal("80"))
    pricing = resolve_quantity_pricing(Decimal("100"), 3, [tier])

    assert pricing.effective_unit_price == Decimal("80")
    assert pricing.total_price == Decimal("240.00")
    assert pricing.savings == Decimal("60.00")


def test_percent_tier() -> None:
    pricing = resolve_quantity_pricing(Decimal("100"), 5, [_tier(5, DiscountKind.PERCENT, "10")])

    assert pricing.effective_unit_price == Decimal("90")
    assert pricing.total_price == Decimal("450.00")
    assert pricing.savings == Decimal("50.00")


def test_highest_reached_tier_applies_and_tiers_do_not_stack() -> None:
    tiers = [
        _tier(2, DiscountKind.PER_UNIT_FLAT, "10"),
        _tier(5, DiscountKind.PER_UNIT_FLAT, "20"),
    ]

    assert resolve_quantity_pricing(Decimal("100"), 6, tiers).effective_unit_price == Decimal("80")
    assert resolve_quantity_pricing(Decimal("100"), 4, tiers).effective_unit_price == Decimal("90")

    below = resolve_quantity_pricing(Decimal("100"), 1, tiers)
    assert below.effective_unit_price == Decimal("100")
    assert below.total_price == Decimal("100.00")
    assert below.savings == Decimal("0.00")
    assert below.chosen_tier is None


def test_inactive_tiers_are_ignored() -> None:
    tiers = [_tier(2, DiscountKind.PER_UNIT_FLAT, "30", is_active=False)]

    pricing = resolve_quantity_pricing(Decimal("100"), 3, tiers)

    assert pricing.chosen_tier is None
    assert pricing.total_price == Decimal("300.00")


def test_equal_min_quantity_keeps_first_declared_tier() -> None:
    first = _tier(3, DiscountKind.PER_UNIT_FLAT, "10", message="first")
    second = _tier(3, DiscountKind.PER_UNIT_FLAT, "40", message="second")

    assert select_tier([first, second], 3) is first
    assert select_tier([second, first], 3) is second


def test_discount_larger_than_price_clamps_to_zero() -> None:
    pricing = resolve_quantity_pricing(Decimal("20"), 2, [_tier(2, DiscountKind.PER_UNIT_FLAT, "50")])

    assert pricing.effective_unit_price == Decimal("0")
    assert pricing.total_price == Decimal("0.00")
    assert pricing.savings == Decimal("40.00")


def test_zero_quantity_and_bad_inputs_never_raise() -> None:
    empty = resolve_quantity_pricing(Decimal("100"), 0, [_tier(1, DiscountKind.PER_UNIT_FLAT, "10")])
    assert empty.total_price == Decimal("0.00")
    assert empty.chosen_tier is None

    negative = resolve_quantity_pricing(Decimal("-5"), 2)
    assert negative.base_unit_price == Decimal("0")
    assert negative.total_price == Decimal("0.00")

    garbage = resolve_quantity_pricing("not a number", 2)
    assert garbage.total_price == Decimal("0.00")


def test_missing_discount_kind_is_treated_as_per_unit_flat() -> None:
    pricing = resolve_quantity_pricing(Decimal("100"), 2, [_tier(2, None, "15")])

    assert pricing.effective_unit_price == Decimal("85")


def test_total_never_exceeds_undiscounted_price() -> None:
    tiers = [
        _tier(2, DiscountKind.PER_UNIT_FLAT, "5"),
        _tier(3, DiscountKind.PERCENT, "12.5"),
        _tier(4, DiscountKind.TOTAL_FLAT, "999"),
        _tier(6, DiscountKind.EXPLICIT_UNIT_PRICE, None, explicit_unit_price=Decimal("61.40")),
    ]
    for quantity in range(0, 9):
        pricing = resolve_quantity_pricing(Decimal("64.99"), quantity, tiers)
        full = Decimal("64.99") * quantity
        assert Decimal("0") <= pricing.total_price <= full
        assert pricing.savings >= Decimal("0")


def test_zero_percent_tier_keeps_base_price() -> None:
    pricing = resolve_quantity_pricing(Decimal("100"), 5, [_tier(5, DiscountKind.PERCENT, "0")])

    assert pricing.has_offer
    assert pricing.effective_unit_price == Decimal("100")
    assert pricing.total_price == Decimal("500.00")
    assert pricing.savings == Decimal("0")


def test_total_grows_with_quantity_within_one_tier() -> None:
    for tier in (
        _tier(3, DiscountKind.PER_UNIT_FLAT, "7.25"),
        _tier(3, DiscountKind.PERCENT, "33.3"),
        _tier(3, DiscountKind.TOTAL_FLAT, "120"),
        _tier(3, DiscountKind.EXPLICIT_UNIT_PRICE, None, explicit_unit_price=Decimal("41.10")),
    ):
        totals = []
        for quantity in range(3, 12):
            pricing = resolve_quantity_pricing(Decimal("45.50"), quantity, [tier])
            assert pricing.chosen_tier is tier
            totals.append(pricing.total_price)
        assert totals == sorted(totals), tier.discount_kind
