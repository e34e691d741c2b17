"""Pricing and booking command handlers used by the unified CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import replace
from pathlib import Path
from typing import Any

from orderdesk.application.availability import AvailabilityResolver
from orderdesk.application.engine import price_quantity_offer
from orderdesk.application.payloads import (
    FarePayload,
    PayloadError,
    availability_payload,
    fare_payload,
    price_fare,
    pricing_to_dict,
    providers_to_list,
    quantity_payload,
    require_object,
)
from orderdesk.domain.fare import FareBreakdown
from orderdesk.domain.slots import build_slot_block, duration_to_minutes
from orderdesk.runtime import get_logger
from orderdesk.runtime.collaborators import CollaboratorUnavailable, HttpDistanceService, HttpProviderDirectory
from orderdesk.runtime.settings import EngineSettings, load_settings

logger = get_logger(__name__)


def _settings(args: argparse.Namespace) -> EngineSettings:
    return load_settings(getattr(args, "config", None))


def _read_body(path: str) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise PayloadError(f"File not found: {file_path}")
    try:
        body = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise PayloadError(f"{file_path} is not valid JSON: {e}") from e
    return require_object(body)


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2))


def cmd_price(args: argparse.Namespace) -> int:
    """Price a quantity of one service against the offer tiers in a JSON file."""
    try:
        body = _read_body(args.offers) if args.offers else {}
        body = {**body, "baseUnitPrice": args.base_price, "quantity": args.quantity}
        payload = quantity_payload(body)
    except PayloadError as e:
        print(f"Error: {e}")
        return 1

    pricing = price_quantity_offer(payload.base_unit_price, payload.quantity, payload.tiers)
    _print_json(pricing_to_dict(pricing))
    return 0


async def _price_fare(payload: FarePayload, settings: EngineSettings) -> FareBreakdown:
    if not settings.collaborators.distance_url:
        return await price_fare(payload, settings)
    async with HttpDistanceService(
        settings.collaborators.distance_url,
        timeout=settings.collaborators.timeout_seconds,
    ) as distance_service:
        return await price_fare(payload, settings, distance_service)  # type: ignore[arg-type]


def cmd_fare(args: argparse.Namespace) -> int:
    """Print the fare breakdown for a cart file."""
    try:
        settings = _settings(args)
        payload = fare_payload(_read_body(args.cart), settings)
    except (PayloadError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if args.surge:
        payload = replace(payload, is_surge_active=True)
    breakdown = asyncio.run(_price_fare(payload, settings))
    if not breakdown.is_computable:
        print("Delivery settings are not configured; fare cannot be computed yet.")
        return 1

    if args.json:
        _print_json(breakdown.as_dict())
        return 0

    width = max(len(line.name) for line in breakdown.lines)
    for line in breakdown.lines:
        print(f"{line.name:<{width}}  {line.amount:>10}")
    print(f"{'grand_total':<{width}}  {breakdown.grand_total:>10}")
    return 0


def cmd_slots(args: argparse.Namespace) -> int:
    """Print the atomic windows a booking occupies."""
    duration = duration_to_minutes(args.duration, args.unit)
    if duration is None:
        print(f"Error: invalid duration {args.duration} {args.unit}")
        return 1
    for slot in build_slot_block(args.date, args.start, duration, args.atomic_minutes):
        print(slot)
    return 0


async def _resolve_providers(settings: EngineSettings, body: dict[str, Any]) -> list[dict[str, str]]:
    payload = availability_payload(body, settings.availability.atomic_minutes)
    assert settings.collaborators.directory_url is not None
    async with HttpProviderDirectory(
        settings.collaborators.directory_url,
        timeout=settings.collaborators.timeout_seconds,
    ) as directory:
        resolver = AvailabilityResolver(
            directory,
            provider_concurrency=settings.availability.provider_concurrency,
            slot_concurrency=settings.availability.slot_concurrency,
        )
        if payload.category_id:
            available = await resolver.filter_with_bulk(
                payload.providers, payload.slots, payload.service_ids, payload.category_id, payload.service_title
            )
        else:
            available = await resolver.filter(
                payload.providers, payload.slots, payload.service_ids, payload.service_title
            )
        logger.info("%d remote availability checks", resolver.remote_checks)
    return providers_to_list(available)


def cmd_providers(args: argparse.Namespace) -> int:
    """Print providers from a request file that can take every slot of the booking."""
    try:
        settings = _settings(args)
        body = _read_body(args.request)
    except (PayloadError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if not settings.collaborators.directory_url:
        print("Error: provider directory URL is not configured.")
        print("Set [collaborators] directory_url or ORDERDESK_DIRECTORY_URL.")
        return 1

    try:
        providers = asyncio.run(_resolve_providers(settings, body))
    except PayloadError as e:
        print(f"Error: {e}")
        return 1
    except CollaboratorUnavailable as e:
        logger.error("%s", e)
        print(f"Provider directory unavailable: {e}")
        return 1

    _print_json(providers)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI server."""
    import uvicorn

    from orderdesk.application import server

    print(f"Starting orderdesk server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/fare | /quantity-pricing | /providers/available")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0
