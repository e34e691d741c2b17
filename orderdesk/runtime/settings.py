"""Runtime loader for engine settings.

Example ``config/orderdesk.toml``::

    [delivery]
    base_charge = 30
    distance_threshold_km = 3
    per_km_charge_beyond_threshold = 8
    gst_percent_on_delivery = 5
    platform_fee = 5
    surge_fee = 20

    [[zones]]
    id = "north"
    latitude = 12.97
    longitude = 77.59
    radius = 5
    fee = 15

    [availability]
    provider_concurrency = 5
    slot_concurrency = 2
    atomic_minutes = 30

    [collaborators]
    directory_url = "http://localhost:8100"
    distance_url = "http://localhost:8200"
    timeout_seconds = 10
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from orderdesk.domain.models import DeliveryFareParameters, Zone
from orderdesk.ingest.records import fare_params_from_record, zone_from_record
from orderdesk.runtime.logging import get_logger
from orderdesk.runtime.paths import get_paths

logger = get_logger(__name__)

DEFAULT_PROVIDER_CONCURRENCY = 5
DEFAULT_SLOT_CONCURRENCY = 2
DEFAULT_ATOMIC_MINUTES = 30
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class AvailabilitySettings:
    provider_concurrency: int = DEFAULT_PROVIDER_CONCURRENCY
    slot_concurrency: int = DEFAULT_SLOT_CONCURRENCY
    atomic_minutes: int = DEFAULT_ATOMIC_MINUTES


@dataclass(frozen=True)
class CollaboratorSettings:
    directory_url: str | None = None
    distance_url: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class EngineSettings:
    """Everything the engine reads from configuration."""

    delivery: DeliveryFareParameters | None = None
    zones: tuple[Zone, ...] = ()
    availability: AvailabilitySettings = field(default_factory=AvailabilitySettings)
    collaborators: CollaboratorSettings = field(default_factory=CollaboratorSettings)
    source: Path | None = None


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def _positive_int(section: dict[str, Any], key: str, default: int) -> int:
    raw = section.get(key, default)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
        raise ValueError(f"[availability] {key} must be a positive integer, got {raw!r}")
    return raw


def _availability_settings(section: dict[str, Any]) -> AvailabilitySettings:
    return AvailabilitySettings(
        provider_concurrency=_positive_int(section, "provider_concurrency", DEFAULT_PROVIDER_CONCURRENCY),
        slot_concurrency=_positive_int(section, "slot_concurrency", DEFAULT_SLOT_CONCURRENCY),
        atomic_minutes=_positive_int(section, "atomic_minutes", DEFAULT_ATOMIC_MINUTES),
    )


def _collaborator_settings(section: dict[str, Any]) -> CollaboratorSettings:
    directory_url = os.environ.get("ORDERDESK_DIRECTORY_URL") or section.get("directory_url")
    distance_url = os.environ.get("ORDERDESK_DISTANCE_URL") or section.get("distance_url")
    timeout = section.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError(f"[collaborators] timeout_seconds must be a positive number, got {timeout!r}")
    return CollaboratorSettings(
        directory_url=str(directory_url) if directory_url else None,
        distance_url=str(distance_url) if distance_url else None,
        timeout_seconds=float(timeout),
    )


@lru_cache(maxsize=4)
def load_settings(config_path: str | None = None) -> EngineSettings:
    """Load engine settings from TOML.

    Args:
        config_path: Optional TOML path override. If None, uses the project settings file.

    Returns:
        Parsed settings; a missing file yields defaults with no delivery parameters.
    """
    path = Path(config_path) if config_path is not None else get_paths().settings_file
    data = _load_toml(path)
    if not data:
        logger.debug("No settings found at %s, using defaults", path)

    delivery_section = data.get("delivery")
    zones_section = data.get("zones", [])
    settings = EngineSettings(
        delivery=fare_params_from_record(delivery_section) if isinstance(delivery_section, dict) else None,
        zones=tuple(zone_from_record(z) for z in zones_section if isinstance(z, dict)),
        availability=_availability_settings(data.get("availability", {})),
        collaborators=_collaborator_settings(data.get("collaborators", {})),
        source=path if data else None,
    )
    logger.debug(
        "Loaded settings from %s: %d zones, delivery configured=%s",
        path,
        len(settings.zones),
        settings.delivery is not None,
    )
    return settings
