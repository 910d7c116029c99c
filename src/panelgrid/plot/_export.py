# src/panelgrid/plot/_export.py
from __future__ import annotations
from pathlib import Path
from typing import Sequence
import matplotlib.pyplot as plt

from panelgrid.errors import StateIOError


def _as_fig(obj) -> plt.Figure:
    if hasattr(obj, "figure") and obj.figure is not None:
        return obj.figure  # Axes -> Figure
    return obj  # assume Figure


def savefig(
    fig_or_ax,
    path: str | Path,
    *,
    fmts: Sequence[str] | None = None,
    dpi: int = 150,
    transparent: bool = False,
    metadata: dict[str, str] | None = None,
) -> list[Path]:
    """
    Save figure (or axes.figure) to <path>.<fmt> for each fmt in fmts.
    Without fmts the suffix of `path` is used, or png if it has none.
    Returns the list of written paths in order.
    """
    fig = _as_fig(fig_or_ax)
    target = Path(path)
    if fmts is None:
        fmts = (target.suffix or ".png",)
    if target.suffix:
        target = target.with_suffix("")

    # normalize fmts: lower, dedupe while preserving order
    seen: set[str] = set()
    norm_fmts: list[str] = []
    for f in fmts:
        f2 = str(f).lower().lstrip(".")
        if f2 and f2 not in seen:
            seen.add(f2)
            norm_fmts.append(f2)

    if not norm_fmts:
        raise ValueError("fmts must contain at least one non-empty format.")

    extra = {"metadata": metadata} if metadata else {}
    written: list[Path] = []
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        for fmt in norm_fmts:
            outfile = target.with_suffix(f".{fmt}")
            # the canvas is drawn to scale, so no tight bbox
            fig.savefig(outfile, dpi=dpi, transparent=transparent, **extra)
            written.append(outfile)
    except OSError as exc:
        raise StateIOError("write", target, exc) from exc
    return written


__all__ = ["savefig"]
