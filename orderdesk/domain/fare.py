"""Fare assembly: cart lines, promo, delivery and fees into one payable total.

Terms are added in a fixed order so every line of the breakdown can be
audited on its own:

    subtotal - promo discount + item taxes + delivery charge
    + delivery GST (two halves) + platform fee + surge fee + zone fee

Nothing is rounded until the breakdown is built.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from orderdesk.domain.models import DeliveryFareParameters, LineItem, PromoCode, ZoneFeeResult
from orderdesk.domain.money import HUNDRED, ZERO, non_negative, round2, to_decimal
from orderdesk.domain.promos import promo_discount
from orderdesk.domain.tiered_pricing import resolve_quantity_pricing

TWO = Decimal("2")


@dataclass(frozen=True)
class FareLine:
    """One named, signed contributor to the grand total."""

    name: str
    amount: Decimal


@dataclass(frozen=True)
class FareBreakdown:
    """Itemized fare. Produced fresh on every recomputation and never patched.

    Each field is rounded on its own from the exact amounts, and so is
    ``grand_total``. The two delivery GST halves are rounded separately, so the
    displayed lines can add up to one cent more or less than ``grand_total``.
    """

    subtotal: Decimal = ZERO
    tax_total: Decimal = ZERO
    promo_discount: Decimal = ZERO
    items_payable: Decimal = ZERO
    distance_km: Decimal = ZERO
    delivery_charge: Decimal = ZERO
    delivery_cgst: Decimal = ZERO
    delivery_sgst: Decimal = ZERO
    platform_fee: Decimal = ZERO
    surge_fee: Decimal = ZERO
    zone_fee: Decimal = ZERO
    grand_total: Decimal = ZERO
    promo_code: str | None = None
    is_computable: bool = True

    @classmethod
    def zero(cls) -> FareBreakdown:
        """Placeholder returned while required pricing inputs are still missing."""
        return cls(is_computable=False)

    @property
    def delivery_tax(self) -> Decimal:
        return self.delivery_cgst + self.delivery_sgst

    @property
    def lines(self) -> tuple[FareLine, ...]:
        return (
            FareLine("subtotal", self.subtotal),
            FareLine("promo_discount", ZERO - self.promo_discount),
            FareLine("tax", self.tax_total),
            FareLine("delivery_charge", self.delivery_charge),
            FareLine("delivery_cgst", self.delivery_cgst),
            FareLine("delivery_sgst", self.delivery_sgst),
            FareLine("platform_fee", self.platform_fee),
            FareLine("surge_fee", self.surge_fee),
            FareLine("zone_fee", self.zone_fee),
        )

    def as_dict(self) -> dict[str, object]:
        """Payload shape handed to the order creation collaborator."""
        payload: dict[str, object] = {line.name: str(line.amount) for line in self.lines}
        payload["promo_discount"] = str(self.promo_discount)
        payload["items_payable"] = str(self.items_payable)
        payload["distance_km"] = str(self.distance_km)
        payload["grand_total"] = str(self.grand_total)
        payload["promo_code"] = self.promo_code
        payload["is_computable"] = self.is_computable
        return payload


def realized_unit_price(item: LineItem) -> Decimal:
    """Unit price after the item's own discount.

    A discount larger than the price is ignored rather than inverting the sign.
    """
    price = non_negative(to_decimal(item.unit_price))
    discount = non_negative(to_decimal(item.discount_amount))
    if discount > price:
        return price
    return price - discount


def line_subtotal(item: LineItem) -> Decimal:
    quantity = max(0, int(item.quantity or 0))
    unit = realized_unit_price(item)
    if item.quantity_offers:
        return resolve_quantity_pricing(unit, quantity, item.quantity_offers).total_price
    return unit * quantity


def line_tax(item: LineItem) -> Decimal:
    quantity = max(0, int(item.quantity or 0))
    per_unit = (
        non_negative(to_decimal(item.tax.cgst))
        + non_negative(to_decimal(item.tax.sgst))
        + non_negative(to_decimal(item.tax.cess))
    )
    return per_unit * quantity


def delivery_charge_for(params: DeliveryFareParameters, distance_km: Decimal) -> Decimal:
    base = non_negative(to_decimal(params.base_charge))
    threshold = non_negative(to_decimal(params.distance_threshold_km))
    if distance_km <= threshold:
        return base
    per_km = non_negative(to_decimal(params.per_km_charge_beyond_threshold))
    return base + (distance_km - threshold) * per_km


def assemble_fare(
    line_items: Iterable[LineItem],
    promo: PromoCode | None,
    delivery_params: DeliveryFareParameters | None,
    zone_fee: ZoneFeeResult | None = None,
    is_surge_active: bool = False,
    distance_km: object = 0,
) -> FareBreakdown:
    """Build the fare breakdown for a cart.

    Returns ``FareBreakdown.zero()`` when ``delivery_params`` is missing so the
    caller can show a "not yet computable" state. Never raises.
    """
    if delivery_params is None:
        return FareBreakdown.zero()

    items = list(line_items)
    distance = non_negative(to_decimal(distance_km))

    subtotal = sum((line_subtotal(item) for item in items), ZERO)
    tax_total = sum((line_tax(item) for item in items), ZERO)
    discount = promo_discount(promo, subtotal)
    items_payable = subtotal - discount

    delivery_charge = delivery_charge_for(delivery_params, distance)
    gst_percent = non_negative(to_decimal(delivery_params.gst_percent_on_delivery))
    delivery_tax = delivery_charge * gst_percent / HUNDRED
    delivery_half = delivery_tax / TWO

    platform_fee = non_negative(to_decimal(delivery_params.platform_fee))
    surge_fee = non_negative(to_decimal(delivery_params.surge_fee)) if is_surge_active else ZERO
    zone = non_negative(to_decimal(zone_fee.fee)) if zone_fee is not None else ZERO

    grand_total = (
        items_payable + tax_total + delivery_charge + delivery_tax + platform_fee + surge_fee + zone
    )

    return FareBreakdown(
        subtotal=round2(subtotal),
        tax_total=round2(tax_total),
        promo_discount=round2(discount),
        items_payable=round2(items_payable),
        distance_km=round2(distance),
        delivery_charge=round2(delivery_charge),
        delivery_cgst=round2(delivery_half),
        delivery_sgst=round2(delivery_half),
        platform_fee=round2(platform_fee),
        surge_fee=round2(surge_fee),
        zone_fee=round2(zone),
        grand_total=round2(grand_total),
        promo_code=promo.code if promo is not None and discount > ZERO else None,
    )
