"""Unified command-line interface for orderdesk.

Usage:
    orderdesk price <base_price> <quantity> [--offers offers.json]
    orderdesk fare <cart.json> [--json] [--surge]
    orderdesk slots <date> <start> <duration> [--unit minutes]
    orderdesk providers <request.json>
    orderdesk serve [--host] [--port]
"""
