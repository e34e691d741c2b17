#!/usr/bin/env python3

import argparse
from collections.abc import Sequence

from orderdesk.domain.slots import DEFAULT_ATOMIC_MINUTES


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="orderdesk",
        description="Order pricing and booking utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  price <base_price> <quantity>
                             Price a quantity against offer tiers
  fare <cart.json>           Print the fare breakdown for a cart
  slots <date> <start> <duration>
                             List the windows a booking occupies
  providers <request.json>   Filter providers available for a booking
  serve [--port]             Start the HTTP server

Notes:
  Settings are read from config/orderdesk.toml unless --config or
  ORDERDESK_CONFIG points elsewhere.
""",
    )
    parser.add_argument("--config", default=None, help="Path to settings TOML (default: config/orderdesk.toml)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    price_parser = subparsers.add_parser("price", help="Price a quantity against offer tiers")
    price_parser.add_argument("base_price", help="Base unit price")
    price_parser.add_argument("quantity", type=int, help="Number of units")
    price_parser.add_argument("--offers", default=None, help="JSON file with an 'offers' list")

    fare_parser = subparsers.add_parser("fare", help="Print the fare breakdown for a cart")
    fare_parser.add_argument("cart", help="JSON file with 'items' and optional promo, delivery, dropoff")
    fare_parser.add_argument("--json", action="store_true", help="Print the breakdown as JSON")
    fare_parser.add_argument("--surge", action="store_true", help="Apply the surge fee")

    slots_parser = subparsers.add_parser("slots", help="List the windows a booking occupies")
    slots_parser.add_argument("date", help="Booking date (YYYY-MM-DD)")
    slots_parser.add_argument("start", help="Start time label, e.g. '9:00 AM'")
    slots_parser.add_argument("duration", help="Booking duration")
    slots_parser.add_argument("--unit", default="minutes", help="Duration unit (default: minutes)")
    slots_parser.add_argument(
        "--atomic-minutes",
        type=int,
        default=DEFAULT_ATOMIC_MINUTES,
        help=f"Window length in minutes (default: {DEFAULT_ATOMIC_MINUTES})",
    )

    providers_parser = subparsers.add_parser("providers", help="Filter providers available for a booking")
    providers_parser.add_argument("request", help="JSON file with providers, slots and serviceIds")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "price":
        from orderdesk.cli.booking import cmd_price

        return cmd_price(args)
    elif args.command == "fare":
        from orderdesk.cli.booking import cmd_fare

        return cmd_fare(args)
    elif args.command == "slots":
        from orderdesk.cli.booking import cmd_slots

        return cmd_slots(args)
    elif args.command == "providers":
        from orderdesk.cli.booking import cmd_providers

        return cmd_providers(args)
    elif args.command == "serve":
        from orderdesk.cli.booking import cmd_serve

        return cmd_serve(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
