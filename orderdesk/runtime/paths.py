"""Centralized path management for orderdesk.

Single source of truth for where configuration lives, so loaders do not
compute paths relative to the current working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Determine the project root directory."""
    # orderdesk/runtime/paths.py -> orderdesk/runtime -> orderdesk -> project root
    return Path(__file__).parent.parent.parent


@dataclass
class ProjectPaths:
    """Container for project-related paths.

    ``ORDERDESK_CONFIG`` points the settings file somewhere else entirely,
    which is how deployments supply their own fare and zone tables.
    """

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    @property
    def src(self) -> Path:
        """Package code directory (orderdesk/)."""
        return self.root / "orderdesk"

    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def settings_file(self) -> Path:
        """Engine settings TOML (fares, zones, concurrency, collaborator URLs)."""
        override = os.environ.get("ORDERDESK_CONFIG")
        if override:
            return Path(override).expanduser()
        return self.config / "orderdesk.toml"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths
