"""Orchestration: entry points, checkout quoting and availability resolution.

Usage:
    from orderdesk.application import compute_fare, resolve_available_providers
"""

from orderdesk.application.availability import AvailabilityResolver
from orderdesk.application.checkout import CheckoutQuoter, CheckoutRequest
from orderdesk.application.engine import compute_fare, price_quantity_offer, resolve_available_providers

__all__ = [
    "AvailabilityResolver",
    "CheckoutQuoter",
    "CheckoutRequest",
    "compute_fare",
    "price_quantity_offer",
    "resolve_available_providers",
]
