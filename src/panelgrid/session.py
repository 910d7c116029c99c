# src/panelgrid/session.py
from __future__ import annotations
import logging
import warnings
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from panelgrid.config import PanelgridConfig, StyleSettings, load_config, resolve_session_dir
from panelgrid.cursor import CursorState, PanelCursor
from panelgrid.errors import ConfigError
from panelgrid.layout.grid import LayoutRequest, build_grid
from panelgrid.layout.records import FigureLayout, PanelRecord, Tag
from panelgrid.store import LayoutStore

__all__ = ["Subplot", "BeginResult", "PanelSelection", "EndResult"]

logger = logging.getLogger(__name__)

Quad = Tuple[float, float, float, float]

# A tag override of "-" removes the tag from the selected panel
NO_TAG = "-"


@dataclass(frozen=True)
class BeginResult:
    figure_id: int
    layout: FigureLayout
    panels: List[PanelRecord]


@dataclass(frozen=True)
class PanelSelection:
    """
    Result of `set`.

    Attributes:
        figure_id: figure the panel belongs to
        panel: the stored panel record
        tag: effective tag after any one-panel override (None = untagged)
        gaps: effective (w, e, s, n) clearances inside the panel
        page_origin: lower-left corner of the panel on the page
        cursor: new cursor state
    """
    figure_id: int
    panel: PanelRecord
    tag: Optional[Tag]
    gaps: Optional[Quad]
    page_origin: Tuple[float, float]
    cursor: CursorState


@dataclass(frozen=True)
class EndResult:
    figure_id: int
    dimension: Tuple[float, float]
    region: str
    debug_plot: Optional[Path] = None


class Subplot:
    """
    begin / set / end operations for one figure.

    Each call reloads its state from the session directory, so a sequence of
    calls may be spread over separate processes.
    """

    def __init__(
        self,
        figure_id: int = 1,
        *,
        session_dir: Optional[Path | str] = None,
        config: Optional[PanelgridConfig] = None,
        style: Optional[StyleSettings] = None,
        aspect_ratio: Optional[Callable[[], float]] = None,
    ):
        if figure_id < 0:
            raise ConfigError(f"figure id must be non-negative, got {figure_id}")
        self.figure_id = int(figure_id)
        self.config = config if config is not None else load_config()
        self.style = style if style is not None else self.config.style
        directory = Path(session_dir) if session_dir is not None else resolve_session_dir(self.config)
        self.store = LayoutStore(directory)
        self.cursor = PanelCursor(self.store)
        self.aspect_ratio = aspect_ratio

    def __repr__(self) -> str:
        return f"Subplot(figure_id={self.figure_id}, session_dir={str(self.store.directory)!r})"

    # ------------------------------ operations ---------------------------------

    def begin(self, request: LayoutRequest) -> BeginResult:
        """
        Compute and persist the layout. Nothing is written unless the whole
        layout could be built.
        """
        layout, panels = build_grid(request, self.style, self.aspect_ratio)
        self.store.save(self.figure_id, layout, panels)
        logger.info(
            "figure %d: %dx%d subplot, %.4g x %.4g inch",
            self.figure_id, layout.rows, layout.columns, *layout.dimension,
        )
        return BeginResult(self.figure_id, layout, panels)

    def set(
        self,
        row: Optional[int] = None,
        col: Optional[int] = None,
        *,
        index: Optional[int] = None,
        tag: Optional[str] = None,
        gaps: Optional[Quad] = None,
    ) -> PanelSelection:
        """
        Select a panel by (row, col), by linear index, or (with neither) the
        next panel in the figure's numbering order.

        `tag` replaces the automatic tag of this panel only ("-" removes it);
        it is ignored with a warning when `begin` requested no tags.
        """
        if (row is None) != (col is None):
            raise ConfigError("give both row and column, or neither")
        if index is not None and row is not None:
            raise ConfigError("give either row,column or an index, not both")

        layout, panels = self.store.load(self.figure_id)
        if tag is not None and not self.store.has_tags(self.figure_id):
            warnings.warn(
                "Cannot override tags with -A if it was not set during begin; -A ignored.",
                RuntimeWarning,
                stacklevel=2,
            )
            tag = None

        if index is not None:
            state = self.cursor.set_index(self.figure_id, index, tag=tag, gaps=gaps)
        elif row is not None and col is not None:
            state = self.cursor.set_explicit(self.figure_id, row, col, tag=tag, gaps=gaps)
        else:
            state = self.cursor.advance(self.figure_id, tag=tag, gaps=gaps)

        panel = panels[state.row * layout.columns + state.column]
        effective_tag = panel.tag
        if state.tag == NO_TAG:
            effective_tag = None
        elif state.tag is not None and panel.tag is not None:
            effective_tag = replace(panel.tag, text=state.tag)

        page_origin = (layout.origin[0] + panel.origin[0], layout.origin[1] + panel.origin[1])
        logger.debug("figure %d: panel (%d,%d) at %s", self.figure_id, state.row, state.column, page_origin)
        return PanelSelection(
            figure_id=self.figure_id,
            panel=panel,
            tag=effective_tag,
            gaps=state.gaps if state.gaps is not None else layout.gaps,
            page_origin=page_origin,
            cursor=state,
        )

    def end(self, debug_plot: Optional[Path | str] = None) -> EndResult:
        """
        Finish the figure: optionally draw the panel partition (for layouts
        begun with debug on), then remove all state.
        """
        layout, panels = self.store.load(self.figure_id)
        written: Optional[Path] = None
        if debug_plot is not None:
            if layout.debug:
                from panelgrid.plot import draw_layout

                written = draw_layout(layout, panels, debug_plot)
            else:
                warnings.warn(
                    "Debug plot requested but the subplot was not begun with +d; nothing drawn.",
                    RuntimeWarning,
                    stacklevel=2,
                )
        self.store.delete(self.figure_id)
        logger.info("figure %d: subplot ended", self.figure_id)
        return EndResult(
            figure_id=self.figure_id,
            dimension=layout.dimension,
            region=layout.region,
            debug_plot=written,
        )
