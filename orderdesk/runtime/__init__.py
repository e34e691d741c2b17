"""Runtime infrastructure for orderdesk.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Settings loading via load_settings(), EngineSettings
- HTTP clients for the provider directory and the distance service

Usage:
    from orderdesk.runtime import get_logger, load_settings

    logger = get_logger(__name__)
    settings = load_settings()
    print(settings.delivery, settings.zones)
"""

from orderdesk.runtime.collaborators import (
    BulkProviderDirectory,
    CollaboratorUnavailable,
    DistanceService,
    HttpDistanceService,
    HttpProviderDirectory,
    ProviderDirectory,
)
from orderdesk.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from orderdesk.runtime.paths import ProjectPaths, get_paths
from orderdesk.runtime.settings import (
    AvailabilitySettings,
    CollaboratorSettings,
    EngineSettings,
    load_settings,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Paths
    "get_paths",
    "ProjectPaths",
    # Settings
    "load_settings",
    "EngineSettings",
    "AvailabilitySettings",
    "CollaboratorSettings",
    # Collaborators
    "CollaboratorUnavailable",
    "ProviderDirectory",
    "BulkProviderDirectory",
    "DistanceService",
    "HttpProviderDirectory",
    "HttpDistanceService",
]
