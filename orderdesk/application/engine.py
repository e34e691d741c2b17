"""Public entry points used by the checkout and booking flows.

Everything a caller needs is passed in explicitly; the engine keeps no
cart, session or cache state of its own.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from orderdesk.application.availability import (
    DEFAULT_PROVIDER_CONCURRENCY,
    DEFAULT_SLOT_CONCURRENCY,
    AvailabilityResolver,
)
from orderdesk.availability.cache import AvailabilityCache
from orderdesk.domain.fare import FareBreakdown, assemble_fare
from orderdesk.domain.models import (
    DeliveryFareParameters,
    LineItem,
    PromoCode,
    Provider,
    QuantityOfferTier,
    Slot,
    ZoneFeeResult,
)
from orderdesk.domain.tiered_pricing import QuantityPricing, resolve_quantity_pricing
from orderdesk.runtime.collaborators import ProviderDirectory


def price_quantity_offer(
    base_unit_price: object,
    quantity: int,
    tiers: Iterable[QuantityOfferTier] = (),
) -> QuantityPricing:
    """Unit price, total and savings for ``quantity`` units under the best reached tier."""
    return resolve_quantity_pricing(base_unit_price, quantity, tiers)


def compute_fare(
    line_items: Iterable[LineItem],
    promo: PromoCode | None = None,
    delivery_params: DeliveryFareParameters | None = None,
    zone_fee: ZoneFeeResult | None = None,
    is_surge_active: bool = False,
    distance_km: object = 0,
) -> FareBreakdown:
    """Itemized fare for a cart; a zeroed, non-computable breakdown if settings are missing."""
    return assemble_fare(
        line_items,
        promo,
        delivery_params,
        zone_fee=zone_fee,
        is_surge_active=is_surge_active,
        distance_km=distance_km,
    )


async def resolve_available_providers(
    providers: Sequence[Provider],
    required_slots: Sequence[Slot],
    service_ids: Sequence[str],
    directory: ProviderDirectory,
    *,
    service_title: str = "",
    category_id: str | None = None,
    cache: AvailabilityCache | None = None,
    provider_concurrency: int = DEFAULT_PROVIDER_CONCURRENCY,
    slot_concurrency: int = DEFAULT_SLOT_CONCURRENCY,
) -> list[Provider]:
    """Providers that can take every slot of the booking, in input order.

    With ``category_id`` the directory's bulk endpoint is tried first. Pass the
    same ``cache`` across calls made while one booking draft is open.
    """
    resolver = AvailabilityResolver(
        directory,
        cache=cache,
        provider_concurrency=provider_concurrency,
        slot_concurrency=slot_concurrency,
    )
    if category_id:
        return await resolver.filter_with_bulk(providers, required_slots, service_ids, category_id, service_title)
    return await resolver.filter(providers, required_slots, service_ids, service_title)
