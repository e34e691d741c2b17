"""Shared pytest fixtures for orderdesk tests."""

from __future__ import annotations

import pytest

from orderdesk.runtime.settings import load_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at an empty per-test file unless a test writes one."""
    monkeypatch.setenv("ORDERDESK_CONFIG", str(tmp_path / "orderdesk.toml"))
    monkeypatch.delenv("ORDERDESK_DIRECTORY_URL", raising=False)
    monkeypatch.delenv("ORDERDESK_DISTANCE_URL", raising=False)
    load_settings.cache_clear()
    yield tmp_path / "orderdesk.toml"
    load_settings.cache_clear()
