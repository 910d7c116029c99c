# src/panelgrid/store.py
"""
File-backed layout state.

Every artifact lives in the session directory and is keyed by the figure id:

    subplot.<id>       header lines + one tab-separated row per panel (commit point)
    subplotorder.<id>  "rows columns numbering"
    tags.<id>          zero-byte sentinel: automatic tags were requested
    panel.<id>         cursor marker, owned by `panelgrid.cursor`

Each file is written to a temporary sibling and renamed into place, and
`subplot.<id>` is written last, so a reader never sees a partial layout.
"""
from __future__ import annotations
import contextlib
import logging
import re
import uuid
import warnings
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from panelgrid.errors import ConfigError, SessionNotFoundError, StateIOError
from panelgrid.layout.frame import FrameSides
from panelgrid.layout.records import Canvas, FigureLayout, Heading, PanelRecord, Tag
from panelgrid.layout.tags import Numbering

__all__ = ["LayoutStore", "FIELD_SEPARATOR", "escape_text", "unescape_text"]

logger = logging.getLogger(__name__)

# Separates the frame/label/annotation fields, which may contain spaces
FIELD_SEPARATOR = "\x1d"

_NO_TAG = "-\t0\t0\t0\t0\tBL\tBL\t-\t-\t0\t0\t-"
_COLUMNS = (
    "#panel\trow\tcol\tnrow\tncol\tx0\ty0\tw\th\ttag\ttag_dx\ttag_dy\ttag_clearx\ttag_cleary"
    "\ttag_pos\ttag_just\ttag_fill\ttag_pen\tshade_offx\tshade_offy\tshade\tBframe\tBx\tBy\tAx\tAy"
)
_N_FIELDS = 21


def _num(value: float) -> str:
    # repr keeps every bit so a reload compares equal
    return repr(float(value))


def _nums(values) -> str:
    return " ".join(_num(v) for v in values)


# Free text is escaped so it cannot break a record or the frame group
_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", FIELD_SEPARATOR: "\\x1d"}
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r", "t": "\t", "x1d": FIELD_SEPARATOR}
_ESCAPED = re.compile(r"\\(\\|n|r|t|x1d)")


def escape_text(text: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def unescape_text(text: str) -> str:
    return _ESCAPED.sub(lambda m: _UNESCAPES[m.group(1)], text)


class LayoutStore:
    """Durable per-figure layout state under one session directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def __repr__(self) -> str:
        return f"LayoutStore({str(self.directory)!r})"

    # ---- paths ----

    def subplot_path(self, figure_id: int) -> Path:
        return self.directory / f"subplot.{figure_id}"

    def order_path(self, figure_id: int) -> Path:
        return self.directory / f"subplotorder.{figure_id}"

    def tags_path(self, figure_id: int) -> Path:
        return self.directory / f"tags.{figure_id}"

    def cursor_path(self, figure_id: int) -> Path:
        return self.directory / f"panel.{figure_id}"

    def _artifacts(self, figure_id: int) -> Tuple[Path, ...]:
        return (
            self.subplot_path(figure_id),
            self.order_path(figure_id),
            self.tags_path(figure_id),
            self.cursor_path(figure_id),
        )

    # ---- queries ----

    def exists(self, figure_id: int) -> bool:
        return self.subplot_path(figure_id).exists()

    def has_tags(self, figure_id: int) -> bool:
        return self.tags_path(figure_id).exists()

    # ---- low-level I/O ----

    def _ensure_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StateIOError("create", self.directory, exc) from exc

    def _write(self, path: Path, text: str) -> None:
        tmp_path = path.with_name(f".{path.name}.tmp-{uuid.uuid4().hex[:8]}")
        try:
            try:
                tmp_path.write_text(text, encoding="utf-8")
                tmp_path.replace(path)
            finally:
                with contextlib.suppress(FileNotFoundError):
                    tmp_path.unlink()
        except OSError as exc:
            raise StateIOError("write", path, exc) from exc

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StateIOError("read", path, exc) from exc

    # ---- layout ----

    def save(self, figure_id: int, layout: FigureLayout, panels: List[PanelRecord]) -> None:
        """
        Persist a layout. An existing subplot file for the same id is a stale
        session: it is reported with a RuntimeWarning and purged first.
        """
        if self.exists(figure_id):
            warnings.warn(
                f"Found stale subplot state for figure {figure_id} in {self.directory}; "
                "removing it before starting the new subplot.",
                RuntimeWarning,
                stacklevel=2,
            )
        # Also clears orphans left by a begin that died before its commit
        self.delete(figure_id)
        self._ensure_directory()

        self._write(
            self.order_path(figure_id),
            f"{layout.rows} {layout.columns} {layout.numbering.value}\n",
        )
        if layout.tagging:
            self._write(self.tags_path(figure_id), "")
        self._write(self.subplot_path(figure_id), self._render(layout, panels))
        logger.debug("saved %d panels for figure %d to %s", len(panels), figure_id, self.directory)

    def load(self, figure_id: int) -> Tuple[FigureLayout, List[PanelRecord]]:
        path = self.subplot_path(figure_id)
        if not path.exists():
            raise SessionNotFoundError(figure_id, path)
        text = self._read(path)
        _, _, numbering = self.read_order(figure_id)
        try:
            return self._parse(text, numbering, self.has_tags(figure_id))
        except (IndexError, KeyError, ValueError, ConfigError) as exc:
            raise StateIOError("parse", path, exc) from exc

    def read_order(self, figure_id: int) -> Tuple[int, int, Numbering]:
        """Return (rows, columns, numbering) of a committed layout."""
        if not self.exists(figure_id):
            raise SessionNotFoundError(figure_id, self.subplot_path(figure_id))
        path = self.order_path(figure_id)
        if not path.exists():
            raise StateIOError("read", path, "file is missing")
        try:
            rows, columns, numbering = self._read(path).split()
            return int(rows), int(columns), Numbering(int(numbering))
        except ValueError as exc:
            raise StateIOError("parse", path, exc) from exc

    def delete(self, figure_id: int) -> None:
        """Remove every artifact of `figure_id`; missing files are ignored."""
        for path in self._artifacts(figure_id):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise StateIOError("remove", path, exc) from exc

    # ---- cursor marker ----

    def read_marker(self, figure_id: int) -> Optional[str]:
        path = self.cursor_path(figure_id)
        if not path.exists():
            return None
        return self._read(path).rstrip("\n")

    def write_marker(self, figure_id: int, text: str) -> None:
        self._ensure_directory()
        self._write(self.cursor_path(figure_id), text + "\n")

    # ---- serialization ----

    @staticmethod
    def _render(layout: FigureLayout, panels: List[PanelRecord]) -> str:
        lines = ["# panelgrid subplot information file"]
        lines.append(f"# Command: {escape_text(layout.command)}")
        if layout.heading is not None:
            h = layout.heading
            lines.append(f"# HEADING: {_num(h.x)} {_num(h.y)} {escape_text(h.text)}")
        lines.append(f"# ORIGIN: {_nums(layout.origin)}")
        lines.append(f"# DIMENSION: {_nums(layout.dimension)}")
        lines.append(f"# PARALLEL: {int(layout.parallel)}")
        lines.append(f"# INSIDE: {int(layout.inside)}")
        if layout.gaps is not None:
            lines.append(f"# GAPS: {_nums(layout.gaps)}")
        if layout.direction is not None:
            lines.append(f"# DIRECTION: {layout.direction[0]} {layout.direction[1]}")
        if layout.frame_axes:
            lines.append(f"# FRAME_AXES: {escape_text(layout.frame_axes)}")
        lines.append(f"# COLUMNS: {_nums(layout.column_widths)}")
        lines.append(f"# ROWS: {_nums(layout.row_heights)}")
        lines.append(f"# MARGINS: {_nums(layout.margins)}")
        c = layout.canvas
        lines.append(f"# CANVAS: {_nums(c.clearance)} {c.fill} {c.pen} {c.divider_pen}")
        lines.append(f"# XDIVIDERS: {_nums(layout.dividers[0])}".rstrip())
        lines.append(f"# YDIVIDERS: {_nums(layout.dividers[1])}".rstrip())
        lines.append(f"# DEBUG: {int(layout.debug)}")
        lines.append(_COLUMNS)

        gs = FIELD_SEPARATOR
        for p in panels:
            fields = [
                str(p.index), str(p.row), str(p.column), str(p.rows), str(p.columns),
                _num(p.origin[0]), _num(p.origin[1]), _num(p.size[0]), _num(p.size[1]),
            ]
            head = "\t".join(fields)
            if p.tag is None:
                tag = _NO_TAG
            else:
                t = p.tag
                tag = "\t".join([
                    escape_text(t.text), _num(t.offset[0]), _num(t.offset[1]), _num(t.clearance[0]), _num(t.clearance[1]),
                    t.placement, t.justify, escape_text(t.fill), escape_text(t.pen),
                    _num(t.shade_offset[0]), _num(t.shade_offset[1]), escape_text(t.shade),
                ])
            frame = gs.join(
                escape_text(v) for v in (p.frame.code(), p.x_label, p.y_label, p.x_annotation, p.y_annotation)
            )
            lines.append(f"{head}\t{tag}\t{gs}{frame}{gs}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _parse(text: str, numbering: Numbering, tagging: bool) -> Tuple[FigureLayout, List[PanelRecord]]:
        header: Dict[str, str] = {}
        panels: List[PanelRecord] = []
        # splitlines() would also break on the frame group separator
        for line in text.split("\n"):
            if not line:
                continue
            if line.startswith("# "):
                key, sep, value = line[2:].partition(":")
                if sep:
                    header[key] = value[1:] if value.startswith(" ") else value
                continue
            if line.startswith("#"):
                continue
            panels.append(LayoutStore._parse_panel(line))

        def floats(key: str) -> Tuple[float, ...]:
            return tuple(float(v) for v in header.get(key, "").split())

        heading = None
        if "HEADING" in header:
            hx, hy, htext = header["HEADING"].split(" ", 2)
            heading = Heading(text=unescape_text(htext), x=float(hx), y=float(hy))
        gaps = floats("GAPS") if "GAPS" in header else None
        direction = None
        if "DIRECTION" in header:
            dx, dy = header["DIRECTION"].split()
            direction = (int(dx), int(dy))
        cx, cy, fill, pen, divider_pen = header["CANVAS"].split()
        columns = floats("COLUMNS")
        rows = floats("ROWS")

        layout = FigureLayout(
            rows=len(rows),
            columns=len(columns),
            origin=floats("ORIGIN"),
            dimension=floats("DIMENSION"),
            column_widths=columns,
            row_heights=rows,
            margins=floats("MARGINS"),
            numbering=numbering,
            heading=heading,
            parallel=header["PARALLEL"] == "1",
            inside=header["INSIDE"] == "1",
            gaps=gaps,
            direction=direction,
            frame_axes=unescape_text(header.get("FRAME_AXES", "")),
            canvas=Canvas(clearance=(float(cx), float(cy)), fill=fill, pen=pen, divider_pen=divider_pen),
            dividers=(floats("XDIVIDERS"), floats("YDIVIDERS")),
            debug=header["DEBUG"] == "1",
            tagging=tagging,
            command=unescape_text(header.get("Command", "")),
        )
        if len(panels) != layout.n_panels:
            raise ValueError(f"expected {layout.n_panels} panel rows, found {len(panels)}")
        return layout, panels

    @staticmethod
    def _parse_panel(line: str) -> PanelRecord:
        parts = line.split("\t", _N_FIELDS)
        if len(parts) != _N_FIELDS + 1:
            raise ValueError(f"malformed panel row: {line!r}")
        f = parts[:_N_FIELDS]
        frame_fields = parts[_N_FIELDS].split(FIELD_SEPARATOR)
        if len(frame_fields) != 7:
            raise ValueError(f"malformed frame fields: {parts[_N_FIELDS]!r}")
        _, code, x_label, y_label, x_annot, y_annot, _ = (unescape_text(v) for v in frame_fields)
        tag = None
        if f[9] != "-":
            tag = Tag(
                text=unescape_text(f[9]),
                offset=(float(f[10]), float(f[11])),
                clearance=(float(f[12]), float(f[13])),
                placement=f[14],
                justify=f[15],
                fill=unescape_text(f[16]),
                pen=unescape_text(f[17]),
                shade_offset=(float(f[18]), float(f[19])),
                shade=unescape_text(f[20]),
            )
        return PanelRecord(
            index=int(f[0]),
            row=int(f[1]),
            column=int(f[2]),
            rows=int(f[3]),
            columns=int(f[4]),
            origin=(float(f[5]), float(f[6])),
            size=(float(f[7]), float(f[8])),
            tag=tag,
            frame=FrameSides.from_code(code),
            x_label=x_label,
            y_label=y_label,
            x_annotation=x_annot,
            y_annotation=y_annot,
        )
