# src/panelgrid/cursor.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from panelgrid.errors import LayoutError, NoMorePanelsError, StateIOError
from panelgrid.layout.tags import Numbering
from panelgrid.store import LayoutStore, escape_text, unescape_text

__all__ = ["CursorState", "PanelCursor"]

logger = logging.getLogger(__name__)

Quad = Tuple[float, float, float, float]


@dataclass(frozen=True)
class CursorState:
    """
    Current panel of a figure.

    Attributes:
        row, column: 0-based panel position
        exhausted: `advance` went past the last panel; only a new `begin` clears this
        tag: one-panel tag override ("-" = no tag), None = automatic tag
        gaps: one-panel (w, e, s, n) clearance override
    """
    row: int
    column: int
    exhausted: bool = False
    tag: Optional[str] = None
    gaps: Optional[Quad] = None

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.column)

    def encode(self) -> str:
        gaps = " ".join(repr(float(g)) for g in self.gaps) if self.gaps is not None else ""
        return "\t".join([str(self.row), str(self.column), str(int(self.exhausted)), gaps, escape_text(self.tag or "")])

    @classmethod
    def decode(cls, text: str) -> CursorState:
        row, col, exhausted, gaps, tag = text.split("\t", 4)
        quad = None
        if gaps:
            values = tuple(float(g) for g in gaps.split())
            if len(values) != 4:
                raise ValueError(f"expected 4 gaps, got {len(values)}")
            quad = values
        return cls(int(row), int(col), exhausted == "1", unescape_text(tag) or None, quad)


class PanelCursor:
    """
    Tracks the current panel of each figure across `set` invocations.

    States: uninitialized (no marker) -> at panel (r, c) -> exhausted.
    The marker lives next to the layout and is removed with it.
    """

    def __init__(self, store: LayoutStore):
        self.store = store

    def current(self, figure_id: int) -> Optional[CursorState]:
        text = self.store.read_marker(figure_id)
        if not text:
            return None
        try:
            return CursorState.decode(text)
        except ValueError as exc:
            raise StateIOError("parse", self.store.cursor_path(figure_id), exc) from exc

    def _write(self, figure_id: int, state: CursorState) -> CursorState:
        self.store.write_marker(figure_id, state.encode())
        logger.debug("figure %d cursor -> %s", figure_id, state)
        return state

    def _check_live(self, figure_id: int, rows: int, columns: int) -> Optional[CursorState]:
        state = self.current(figure_id)
        if state is not None and state.exhausted:
            raise NoMorePanelsError(figure_id, rows, columns)
        return state

    def advance(self, figure_id: int, *, tag: Optional[str] = None, gaps: Optional[Quad] = None) -> CursorState:
        """
        Move to the next panel in the figure's numbering order; the first call
        selects (0, 0).

        Raises:
            NoMorePanelsError: already at the last panel; the cursor becomes exhausted.
        """
        rows, columns, numbering = self.store.read_order(figure_id)
        state = self._check_live(figure_id, rows, columns)
        if state is None:
            row, col = 0, 0
        else:
            if numbering is Numbering.COLUMN:
                k = state.column * rows + state.row + 1
                col, row = divmod(k, rows)
            else:
                k = state.row * columns + state.column + 1
                row, col = divmod(k, columns)
            if k >= rows * columns:
                self._write(figure_id, CursorState(state.row, state.column, exhausted=True))
                raise NoMorePanelsError(figure_id, rows, columns)
        return self._write(figure_id, CursorState(row, col, tag=tag, gaps=gaps))

    def set_explicit(
        self,
        figure_id: int,
        row: int,
        col: int,
        *,
        tag: Optional[str] = None,
        gaps: Optional[Quad] = None,
    ) -> CursorState:
        rows, columns, _ = self.store.read_order(figure_id)
        self._check_live(figure_id, rows, columns)
        if not (0 <= row < rows and 0 <= col < columns):
            raise LayoutError(
                f"panel ({row},{col}) is outside the {rows}x{columns} grid "
                f"(rows 0-{rows - 1}, columns 0-{columns - 1})"
            )
        return self._write(figure_id, CursorState(row, col, tag=tag, gaps=gaps))

    def set_index(
        self,
        figure_id: int,
        index: int,
        *,
        tag: Optional[str] = None,
        gaps: Optional[Quad] = None,
    ) -> CursorState:
        rows, columns, _ = self.store.read_order(figure_id)
        if not 0 <= index < rows * columns:
            raise LayoutError(f"panel index {index} is outside 0-{rows * columns - 1}")
        row, col = divmod(index, columns)
        return self.set_explicit(figure_id, row, col, tag=tag, gaps=gaps)
