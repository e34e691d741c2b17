"""Fare assembly from cart lines, promo, delivery settings and zone fee."""

from __future__ import annotations

from decimal import Decimal

from orderdesk.domain.fare import FareBreakdown, assemble_fare, delivery_charge_for, realized_unit_price
from orderdesk.domain.models import (
    DeliveryFareParameters,
    DiscountKind,
    LineItem,
    PromoCode,
    PromoKind,
    QuantityOfferTier,
    TaxBreakdown,
    ZoneFeeResult,
)

PARAMS = DeliveryFareParameters(
    base_charge=Decimal("30"),
    distance_threshold_km=Decimal("3"),
    per_km_charge_beyond_threshold=Decimal("8"),
    gst_percent_on_delivery=Decimal("18"),
    platform_fee=Decimal("5"),
    surge_fee=Decimal("20"),
)

ITEMS = (
    LineItem(
        unit_price=Decimal("100"),
        quantity=2,
        discount_amount=Decimal("10"),
        tax=TaxBreakdown(cgst=Decimal("2.5"), sgst=Decimal("2.5")),
        name="detergent",
    ),
    LineItem(unit_price=Decimal("50"), quantity=1, name="sponge"),
)


def test_full_breakdown() -> None:
    promo = PromoCode(code="SAVE30", kind=PromoKind.FLAT, value=Decimal("30"))

    fare = assemble_fare(ITEMS, promo, PARAMS, zone_fee=ZoneFeeResult(fee=Decimal("15")), distance_km=5)

    assert fare.subtotal == Decimal("230.00")
    assert fare.tax_total == Decimal("10.00")
    assert fare.promo_discount == Decimal("30.00")
    assert fare.items_payable == Decimal("200.00")
    assert fare.delivery_charge == Decimal("46.00")
    assert fare.delivery_cgst == Decimal("4.14")
    assert fare.delivery_sgst == Decimal("4.14")
    assert fare.platform_fee == Decimal("5.00")
    assert fare.surge_fee == Decimal("0.00")
    assert fare.zone_fee == Decimal("15.00")
    assert fare.grand_total == Decimal("284.28")
    assert fare.promo_code == "SAVE30"
    assert fare.is_computable


def test_grand_total_matches_lines_when_nothing_needs_rounding() -> None:
    promo = PromoCode(code="TEN", kind=PromoKind.PERCENT, value=Decimal("10"))
    fare = assemble_fare(
        ITEMS, promo, PARAMS, zone_fee=ZoneFeeResult(fee=Decimal("7.5")), is_surge_active=True, distance_km="5"
    )

    assert sum(line.amount for line in fare.lines) == fare.grand_total


def test_delivery_within_threshold_is_base_charge_only() -> None:
    assert delivery_charge_for(PARAMS, Decimal("3")) == Decimal("30")
    assert delivery_charge_for(PARAMS, Decimal("0")) == Decimal("30")
    assert delivery_charge_for(PARAMS, Decimal("4.5")) == Decimal("42.0")


def test_surge_fee_only_when_active() -> None:
    calm = assemble_fare(ITEMS, None, PARAMS)
    surging = assemble_fare(ITEMS, None, PARAMS, is_surge_active=True)

    assert calm.surge_fee == Decimal("0.00")
    assert surging.surge_fee == Decimal("20.00")
    assert surging.grand_total - calm.grand_total == Decimal("20.00")


def test_missing_delivery_settings_give_zero_breakdown() -> None:
    fare = assemble_fare(ITEMS, None, None)

    assert fare == FareBreakdown.zero()
    assert not fare.is_computable
    assert fare.grand_total == Decimal("0")


def test_line_order_does_not_change_fare() -> None:
    forward = assemble_fare(ITEMS, None, PARAMS, distance_km=7)
    backward = assemble_fare(tuple(reversed(ITEMS)), None, PARAMS, distance_km=7)

    assert forward == backward


def test_item_discount_larger_than_price_is_ignored() -> None:
    item = LineItem(unit_price=Decimal("40"), discount_amount=Decimal("60"))

    assert realized_unit_price(item) == Decimal("40")


def test_promo_is_clamped_to_subtotal_and_code_only_recorded_when_applied() -> None:
    big = PromoCode(code="BIG", kind=PromoKind.FLAT, value=Decimal("1000"))
    fare = assemble_fare(ITEMS, big, PARAMS)

    assert fare.promo_discount == fare.subtotal
    assert fare.items_payable == Decimal("0.00")

    picky = PromoCode(code="PICKY", kind=PromoKind.FLAT, value=Decimal("10"), minimum_subtotal=Decimal("500"))
    unmet = assemble_fare(ITEMS, picky, PARAMS)

    assert unmet.promo_discount == Decimal("0.00")
    assert unmet.promo_code is None


def test_service_lines_use_quantity_offers() -> None:
    service = LineItem(
        unit_price=Decimal("100"),
        quantity=4,
        quantity_offers=(QuantityOfferTier(4, DiscountKind.PER_UNIT_FLAT, Decimal("25")),),
    )

    fare = assemble_fare([service], None, DeliveryFareParameters())

    assert fare.subtotal == Decimal("300.00")
    assert fare.grand_total == Decimal("300.00")


def test_negative_distance_counts_as_zero() -> None:
    fare = assemble_fare(ITEMS, None, PARAMS, distance_km=-12)

    assert fare.distance_km == Decimal("0.00")
    assert fare.delivery_charge == Decimal("30.00")


def test_as_dict_uses_strings_for_amounts() -> None:
    fare = assemble_fare(ITEMS, None, PARAMS)
    payload = fare.as_dict()

    assert payload["subtotal"] == "230.00"
    assert payload["promo_discount"] == "0.00"
    assert payload["grand_total"] == str(fare.grand_total)
    assert payload["promo_code"] is None
    assert payload["is_computable"] is True


def test_rounding_happens_once_at_the_end() -> None:
    # 1.3 km beyond threshold: delivery 40.4, GST 7.272 split into two 3.636 halves.
    fare = assemble_fare(ITEMS, None, PARAMS, distance_km="4.3")

    assert fare.delivery_cgst == Decimal("3.64")
    assert fare.delivery_sgst == Decimal("3.64")
    assert fare.grand_total == Decimal("292.67")


def test_rounded_gst_halves_can_put_lines_a_cent_off_the_total() -> None:
    fare = assemble_fare(ITEMS, None, PARAMS, distance_km="4.3")

    assert fare.delivery_tax == Decimal("7.28")
    assert sum(line.amount for line in fare.lines) == Decimal("292.68")
    assert abs(sum(line.amount for line in fare.lines) - fare.grand_total) == Decimal("0.01")
