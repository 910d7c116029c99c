# src/panelgrid/plot/__init__.py
from __future__ import annotations

from . import _export as export
from .layout import draw_layout, render_layout

__all__ = ["export", "draw_layout", "render_layout"]
