# tests/conftest.py
from __future__ import annotations

import pytest

from panelgrid.config import StyleSettings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path_factory):
    """Keep user config and session variables out of every test."""
    cfg_dir = tmp_path_factory.mktemp("cfg")
    monkeypatch.setenv("PANELGRID_CONFIG", str(cfg_dir / "missing.toml"))
    monkeypatch.delenv("PANELGRID_SESSION_DIR", raising=False)
    monkeypatch.delenv("PANELGRID_FIGURE", raising=False)


@pytest.fixture
def style() -> StyleSettings:
    return StyleSettings()


@pytest.fixture
def pt():
    """Points to inches."""
    return lambda value: value / 72.0
