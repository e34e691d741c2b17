"""FastAPI server exposing fare, quantity pricing and provider availability."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from orderdesk.application.availability import AvailabilityResolver
from orderdesk.application.engine import price_quantity_offer
from orderdesk.application.payloads import (
    PayloadError,
    availability_payload,
    fare_payload,
    price_fare,
    pricing_to_dict,
    providers_to_list,
    quantity_payload,
    require_object,
)
from orderdesk.runtime import get_logger
from orderdesk.runtime.collaborators import HttpDistanceService, HttpProviderDirectory
from orderdesk.runtime.settings import EngineSettings, load_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load settings and open collaborator clients for the server's lifetime."""
    settings = load_settings()
    app.state.settings = settings
    directory = None
    distance_service = None
    if settings.collaborators.directory_url:
        directory = HttpProviderDirectory(
            settings.collaborators.directory_url,
            timeout=settings.collaborators.timeout_seconds,
        )
        logger.info("Provider directory at %s", settings.collaborators.directory_url)
    if settings.collaborators.distance_url:
        distance_service = HttpDistanceService(
            settings.collaborators.distance_url,
            timeout=settings.collaborators.timeout_seconds,
        )
        logger.info("Distance service at %s", settings.collaborators.distance_url)
    app.state.directory = directory
    app.state.distance_service = distance_service
    try:
        yield
    finally:
        if directory is not None:
            await directory.aclose()
        if distance_service is not None:
            await distance_service.aclose()


app = FastAPI(title="orderdesk", lifespan=lifespan)


def _settings(request: Request) -> EngineSettings:
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else load_settings()


async def _json_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as e:
        raise PayloadError("Request body is not valid JSON") from e
    return require_object(body)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


@app.post("/fare")
async def fare(request: Request) -> JSONResponse:
    """Compute the fare breakdown for a cart."""
    settings = _settings(request)
    try:
        payload = fare_payload(await _json_body(request), settings)
    except PayloadError as e:
        return _error(str(e), 400)

    breakdown = await price_fare(payload, settings, getattr(request.app.state, "distance_service", None))
    return JSONResponse({"status": "success", "fare": breakdown.as_dict()})


@app.post("/quantity-pricing")
async def quantity_pricing(request: Request) -> JSONResponse:
    """Price a quantity of one service against its offer tiers."""
    try:
        payload = quantity_payload(await _json_body(request))
    except PayloadError as e:
        return _error(str(e), 400)

    pricing = price_quantity_offer(payload.base_unit_price, payload.quantity, payload.tiers)
    return JSONResponse({"status": "success", "pricing": pricing_to_dict(pricing)})


@app.post("/providers/available")
async def providers_available(request: Request) -> JSONResponse:
    """Filter candidate providers down to those free for every requested slot."""
    directory = getattr(request.app.state, "directory", None)
    if directory is None:
        return _error("Provider directory is not configured", 503)

    settings = _settings(request)
    try:
        payload = availability_payload(await _json_body(request), settings.availability.atomic_minutes)
    except PayloadError as e:
        return _error(str(e), 400)

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
        available = await resolver.filter(payload.providers, payload.slots, payload.service_ids, payload.service_title)

    return JSONResponse({"status": "success", "providers": providers_to_list(available)})


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
