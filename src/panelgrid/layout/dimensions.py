# src/panelgrid/layout/dimensions.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np

from panelgrid.errors import ConfigError, LayoutError

__all__ = [
    "FigureDims",
    "PanelDims",
    "ResolvedDimensions",
    "normalize_weights",
    "expand_panel_dims",
    "resolve_dimensions",
]

logger = logging.getLogger(__name__)

AspectRatio = Callable[[], float]


@dataclass(frozen=True)
class FigureDims:
    """
    Overall figure size (inches) with optional relative column/row weights.

    Attributes:
        width, height: full plottable area including the fluff
        width_fractions: relative column widths (None = equal)
        height_fractions: relative row heights (None = equal)
    """
    width: float
    height: float
    width_fractions: Optional[Tuple[float, ...]] = None
    height_fractions: Optional[Tuple[float, ...]] = None


@dataclass(frozen=True)
class PanelDims:
    """
    Per-column widths and per-row heights (inches). A single value applies to
    every column/row. A height of exactly 0 means "derive from the projection
    aspect ratio".
    """
    widths: Tuple[float, ...]
    heights: Tuple[float, ...]

    @property
    def needs_aspect(self) -> bool:
        return len(self.heights) == 1 and self.heights[0] == 0.0


@dataclass(frozen=True)
class ResolvedDimensions:
    width: float
    height: float
    column_widths: Tuple[float, ...]
    row_heights: Tuple[float, ...]


def normalize_weights(weights: Optional[Sequence[float]], n: int, *, what: str) -> np.ndarray:
    """Return `n` weights summing to 1. A single weight is duplicated; None means equal."""
    if weights is None:
        return np.full(n, 1.0 / n)
    w = np.asarray(weights, dtype=float)
    if w.size == 1:
        w = np.full(n, float(w[0]))
    elif w.size != n:
        raise ConfigError(f"{what}: expected 1 or {n} values, got {w.size}", "-F")
    if np.any(w <= 0.0):
        raise ConfigError(f"{what} must be positive", "-F")
    return w / w.sum()


def _expand(values: Sequence[float], n: int, *, what: str) -> np.ndarray:
    v = np.asarray(values, dtype=float)
    if v.size == 1:
        return np.full(n, float(v[0]))
    if v.size != n:
        raise ConfigError(f"{what}: expected 1 or {n} values, got {v.size}", "-F")
    return v


def expand_panel_dims(
    dims: PanelDims,
    rows: int,
    columns: int,
    aspect_ratio: Optional[AspectRatio] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Duplicate single values and resolve the zero-height sentinel."""
    widths = _expand(dims.widths, columns, what="panel widths")
    if dims.needs_aspect:
        if aspect_ratio is None:
            raise ConfigError(
                "panel height 0 requires a projection aspect ratio (e.g. --aspect)", "-F"
            )
        ratio = float(aspect_ratio())
        heights = np.full(rows, widths[0] * ratio)
        logger.debug("row heights from aspect ratio %g: %g", ratio, heights[0])
    else:
        heights = _expand(dims.heights, rows, what="panel heights")
    return widths, heights


def resolve_dimensions(
    dims: Union[FigureDims, PanelDims],
    fluff: Tuple[float, float],
    rows: int,
    columns: int,
    aspect_ratio: Optional[AspectRatio] = None,
) -> ResolvedDimensions:
    """
    Complete the figure geometry.

    Figure mode splits (dimension - fluff) over columns/rows by weight; panel
    mode sums the panel sizes and adds the fluff.

    Raises:
        ConfigError: value counts do not match the grid, or a required aspect ratio is missing.
        LayoutError: the fluff leaves no room, or a panel ends up with a non-positive size.
    """
    fluff_x, fluff_y = fluff
    if isinstance(dims, FigureDims):
        wfrac = normalize_weights(dims.width_fractions, columns, what="column width fractions")
        hfrac = normalize_weights(dims.height_fractions, rows, what="row height fractions")
        remainder = np.array([dims.width - fluff_x, dims.height - fluff_y])
        if np.any(remainder <= 0.0):
            raise LayoutError(
                f"non-positive dimension: figure {dims.width:g} x {dims.height:g} inch "
                f"leaves {remainder[0]:g} x {remainder[1]:g} inch for panels after "
                f"{fluff_x:g} x {fluff_y:g} inch of margins and annotations"
            )
        widths = wfrac * remainder[0]
        heights = hfrac * remainder[1]
        width, height = float(dims.width), float(dims.height)
    else:
        widths, heights = expand_panel_dims(dims, rows, columns, aspect_ratio)
        width = float(widths.sum() + fluff_x)
        height = float(heights.sum() + fluff_y)
        if width <= 0.0 or height <= 0.0:
            raise LayoutError(f"non-positive dimension: figure would be {width:g} x {height:g} inch")

    if np.any(widths <= 0.0) or np.any(heights <= 0.0):
        raise LayoutError("non-positive dimension: every panel width and height must be positive")

    logger.debug("column widths: %s", " ".join(f"{w:g}" for w in widths))
    logger.debug("row heights: %s", " ".join(f"{h:g}" for h in heights))
    logger.debug("figure dimension: {%g, %g}", width, height)
    return ResolvedDimensions(
        width=width,
        height=height,
        column_widths=tuple(float(w) for w in widths),
        row_heights=tuple(float(h) for h in heights),
    )
