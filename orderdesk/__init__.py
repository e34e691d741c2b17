"""orderdesk: pricing, fare assembly and provider availability for a booking app."""

__version__ = "0.1.0"
