# src/panelgrid/options.py
"""
Option-string parsers.

Turns the compact `begin`/`set` option strings into structured records before
any layout logic runs:

    -F[f|s]<w>[/<h>][+f<wfracs>/<hfracs>][+c<dx>[/<dy>]][+d][+g<fill>][+p<pen>][+w<pen>]
    -M<m> | <mx>/<my> | <w>/<e>/<s>/<n>
    -A[<prefix>]<a|1>[<suffix>][+c<dx>[/<dy>]][+g<fill>][+j|J<just>][+o<dx>[/<dy>]][+p<pen>][+r|R][+s[<dx>/<dy>/][<shade>]][+v]
    -Sc[t|b][+l[<label>]][+s[<label>]][+t[c]]
    -Sr[l|r][+l[<label>]][+s[<label>]][+p][+t[c]]
    -B<frame>[+<mods>] | -Bx<annot>[+l<label>][+s<label>][+p<prefix>][+u<unit>] | -By... | -B<annot> | -B+n
    -C[w|e|s|n|x|y]<gap>

Every failure raises ConfigError naming the offending option.
"""
from __future__ import annotations
import re
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from panelgrid.errors import ConfigError
from panelgrid.layout.dimensions import FigureDims, PanelDims
from panelgrid.layout.frame import NO_FRAME
from panelgrid.layout.grid import LayoutRequest
from panelgrid.layout.records import Canvas
from panelgrid.layout.sharing import AxisShare, FrameOverride, Placement, TitleMode
from panelgrid.layout.tags import Numbering, TagMode, TagSpec, flip_justify, parse_justify
from panelgrid.units import parse_lengths, parse_numbers, to_inch

__all__ = [
    "split_modifiers",
    "parse_grid",
    "parse_dimensions",
    "parse_margins",
    "parse_tags",
    "parse_share",
    "parse_frame",
    "parse_gaps",
    "parse_panel_target",
    "DimensionOption",
    "ShareOption",
    "FrameOption",
    "AxisOption",
    "build_request",
]

Quad = Tuple[float, float, float, float]

_GRID_RE = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")
_FRAME_START = "WESNwesnlrbt"


def split_modifiers(text: str, allowed: str, option: str) -> Tuple[str, List[Tuple[str, str]]]:
    """Split 'head+a1+bxyz' into ('head', [('a', '1'), ('b', 'xyz')])."""
    head, *parts = text.split("+")
    mods: List[Tuple[str, str]] = []
    for part in parts:
        if not part:
            raise ConfigError(f"empty modifier in '{text}'", option)
        key, value = part[0], part[1:]
        if key not in allowed:
            raise ConfigError(
                f"unknown modifier +{key} in '{text}' (allowed: {', '.join('+' + c for c in allowed)})",
                option,
            )
        mods.append((key, value))
    return head, mods


def _pair(text: str, unit: str, option: str) -> Tuple[float, float]:
    values = parse_lengths(text, unit, option=option)
    if len(values) == 1:
        return (values[0], values[0])
    if len(values) == 2:
        return (values[0], values[1])
    raise ConfigError(f"expected <d> or <dx>/<dy>, got '{text}'", option)


# ---- grid ----

def parse_grid(text: str) -> Tuple[int, int]:
    """Parse '<rows>x<columns>'."""
    m = _GRID_RE.match(text)
    if m is None:
        raise ConfigError(f"expected <rows>x<columns>, got '{text}'")
    rows, columns = int(m.group(1)), int(m.group(2))
    if rows < 1 or columns < 1:
        raise ConfigError(f"need at least one row and one column; got {rows}x{columns}")
    return rows, columns


# ---- -F ----

@dataclass(frozen=True)
class DimensionOption:
    dims: Union[FigureDims, PanelDims]
    canvas: Canvas
    debug: bool = False


def parse_dimensions(text: str, unit: str = "c") -> DimensionOption:
    option = "-F"
    if not text:
        raise ConfigError("no dimensions given", option)
    mode = "f"
    if text[0] in "fs":
        mode, text = text[0], text[1:]
    head, mods = split_modifiers(text, "cdfgpw", option)
    if not head:
        raise ConfigError("no dimensions given", option)

    clearance = (0.0, 0.0)
    fill = pen = divider_pen = "-"
    debug = False
    fractions: Optional[Tuple[Tuple[float, ...], Tuple[float, ...]]] = None
    for key, value in mods:
        if key == "c":
            clearance = _pair(value, unit, option) if value else (0.0, 0.0)
        elif key == "d":
            debug = True
        elif key == "f":
            if mode != "f":
                raise ConfigError("+f<fractions> is only valid with figure dimensions (-Ff)", option)
            wtxt, sep, htxt = value.partition("/")
            if not sep or not wtxt or not htxt:
                raise ConfigError(f"expected +f<wfracs>/<hfracs>, got '+f{value}'", option)
            fractions = (
                tuple(parse_numbers(wtxt, option=option)),
                tuple(parse_numbers(htxt, option=option)),
            )
        elif key == "g":
            fill = value or "-"
        elif key == "p":
            pen = value or "-"
        elif key == "w":
            divider_pen = value or "-"
    canvas = Canvas(clearance=clearance, fill=fill, pen=pen, divider_pen=divider_pen)

    wtxt, sep, htxt = head.partition("/")
    if mode == "f":
        width = to_inch(wtxt, unit, option=option)
        height = to_inch(htxt, unit, option=option) if sep else width
        if width <= 0.0 or height <= 0.0:
            raise ConfigError("figure width and height must be positive", option)
        dims: Union[FigureDims, PanelDims] = FigureDims(
            width,
            height,
            width_fractions=fractions[0] if fractions else None,
            height_fractions=fractions[1] if fractions else None,
        )
    else:
        widths = tuple(to_inch(t, unit, option=option) for t in wtxt.split(","))
        if sep:
            heights = tuple(to_inch(t, unit, option=option) for t in htxt.split(","))
        elif len(widths) == 1:
            heights = widths
        else:
            raise ConfigError("give panel heights after '/' when listing several widths", option)
        if any(w <= 0.0 for w in widths):
            raise ConfigError("panel widths must be positive", option)
        if any(h < 0.0 for h in heights) or (0.0 in heights and len(heights) > 1):
            raise ConfigError("panel heights must be positive (a single 0 derives them from the aspect ratio)", option)
        dims = PanelDims(widths=widths, heights=heights)
    return DimensionOption(dims=dims, canvas=canvas, debug=debug)


# ---- -M ----

def parse_margins(text: str, unit: str = "c") -> Quad:
    values = parse_lengths(text, unit, option="-M")
    if any(v < 0.0 for v in values):
        raise ConfigError(f"margins cannot be negative: {text!r}", "-M")
    if len(values) == 1:
        m = values[0]
        return (m, m, m, m)
    if len(values) == 2:
        mx, my = values
        return (mx, mx, my, my)
    if len(values) == 4:
        w, e, s, n = values
        return (w, e, s, n)
    raise ConfigError(f"expected 1, 2 or 4 margins, got {len(values)}", "-M")


# ---- -A ----

_DEFAULT_SHADE_OFFSET = 2.0 / 72.0  # 2p
_DEFAULT_SHADE = "gray50"


def _parse_tag_format(head: str) -> Dict[str, object]:
    if not head:
        return {"mode": TagMode.LETTER, "start_letter": "a", "prefix": "", "suffix": ")"}
    for k, ch in enumerate(head):
        if ch.isdigit():
            m = re.match(r"\d+", head[k:])
            digits = m.group(0) if m else ch
            return {
                "mode": TagMode.NUMBER,
                "start_number": int(digits),
                "prefix": head[:k],
                "suffix": head[k + len(digits):],
            }
        if ch.isalpha():
            return {"mode": TagMode.LETTER, "start_letter": ch, "prefix": head[:k], "suffix": head[k + 1:]}
    raise ConfigError(f"tag format '{head}' has no letter or number placeholder", "-A")


def parse_tags(text: str, unit: str = "c") -> TagSpec:
    option = "-A"
    head, mods = split_modifiers(text, "cgjJoprRsv", option)
    kwargs: Dict[str, object] = _parse_tag_format(head)
    for key, value in mods:
        if key == "c":
            kwargs["clearance"] = _pair(value, unit, option)
        elif key == "g":
            kwargs["fill"] = value or "-"
        elif key == "j":
            code = value or "TL"
            parse_justify(code)
            kwargs["placement"] = code
            kwargs["justify"] = code
        elif key == "J":
            code = value or "TL"
            kwargs["placement"] = code
            kwargs["justify"] = flip_justify(code)
        elif key == "o":
            kwargs["offset"] = _pair(value, unit, option)
        elif key == "p":
            kwargs["pen"] = value or "-"
        elif key == "r":
            kwargs["roman"] = "lower"
        elif key == "R":
            kwargs["roman"] = "upper"
        elif key == "s":
            kwargs.update(_parse_shade(value, unit))
        elif key == "v":
            kwargs["numbering"] = Numbering.COLUMN
    if "roman" in kwargs and kwargs["mode"] is TagMode.LETTER and head == "":
        # bare -A+r: roman numerals starting at 1
        kwargs.update(mode=TagMode.NUMBER, start_number=1)
        kwargs.pop("start_letter", None)
    return TagSpec(**kwargs)  # type: ignore[arg-type]


def _parse_shade(value: str, unit: str) -> Dict[str, object]:
    offset = (_DEFAULT_SHADE_OFFSET, -_DEFAULT_SHADE_OFFSET)
    shade = _DEFAULT_SHADE
    parts = value.split("/") if value else []
    if len(parts) == 1:
        shade = parts[0]
    elif len(parts) == 2:
        offset = _pair(value, unit, "-A")
    elif len(parts) == 3:
        offset = (to_inch(parts[0], unit, option="-A"), to_inch(parts[1], unit, option="-A"))
        shade = parts[2]
    elif len(parts) > 3:
        raise ConfigError(f"expected +s[<dx>/<dy>/][<shade>], got '+s{value}'", "-A")
    return {"shade": shade, "shade_offset": offset}


# ---- -S ----

@dataclass(frozen=True)
class ShareOption:
    """One -Sc or -Sr request."""
    axis: str                 # "x" for -Sc, "y" for -Sr
    placement: Placement
    has_label: bool = False
    label: Optional[str] = None
    parallel: bool = False
    title_mode: TitleMode = TitleMode.NONE


def parse_share(text: str) -> ShareOption:
    option = f"-S{text[:1]}"
    if not text or text[0] not in "cr":
        raise ConfigError(f"expected -Sc or -Sr, got '-S{text}'", "-S")
    kind = text[0]
    head, mods = split_modifiers(text[1:], "lspt", option)
    sides = {"c": {"b": Placement.MIN, "t": Placement.MAX}, "r": {"l": Placement.MIN, "r": Placement.MAX}}[kind]
    if head == "":
        placement = Placement.BOTH
    elif head in sides:
        placement = sides[head]
    else:
        raise ConfigError(f"unknown side '{head}' (use {' or '.join(sides)})", option)

    has_label = False
    label: Optional[str] = None
    parallel = False
    title_mode = TitleMode.NONE
    for key, value in mods:
        if key == "l":
            has_label = True
            label = value or label
        elif key == "s":
            has_label = True
        elif key == "p":
            if kind != "r":
                raise ConfigError("+p (parallel annotations) only applies to -Sr", option)
            parallel = True
        elif key == "t":
            if value not in ("", "c"):
                raise ConfigError(f"expected +t or +tc, got '+t{value}'", option)
            title_mode = TitleMode.COLUMN if value == "c" else TitleMode.ALL
    return ShareOption(
        axis="x" if kind == "c" else "y",
        placement=placement,
        has_label=has_label,
        label=label,
        parallel=parallel,
        title_mode=title_mode,
    )


# ---- -B ----

@dataclass(frozen=True)
class AxisOption:
    """Annotation settings for one axis from -Bx/-By/-B<annot>."""
    annotation: str = "af"
    label: Optional[str] = None
    has_label: bool = False
    prefix: Optional[str] = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class FrameOption:
    override: Optional[FrameOverride] = None
    no_frame: bool = False
    x: AxisOption = AxisOption()
    y: AxisOption = AxisOption()


def _parse_axis(text: str, option: str) -> AxisOption:
    head, mods = split_modifiers(text, "lspu", option)
    label = prefix = unit = None
    has_label = False
    for key, value in mods:
        if key == "l":
            label = value or None
            has_label = True
        elif key == "s":
            has_label = True
        elif key == "p":
            prefix = value or None
        elif key == "u":
            unit = value or None
    return AxisOption(annotation=head or "af", label=label, has_label=has_label, prefix=prefix, unit=unit)


def parse_frame(args: Sequence[str]) -> FrameOption:
    """Combine every -B argument of a `begin` call."""
    frame = bx = by = bxy = None
    no_frame = False
    for arg in args:
        if NO_FRAME in arg:
            no_frame = True
        if arg.startswith("x"):
            kind = "bx"
        elif arg.startswith("y"):
            kind = "by"
        elif arg and arg[0] in _FRAME_START:
            kind = "frame"
        elif arg.startswith("+"):
            kind = "frame"
        else:
            kind = "bxy"
        if {"bx": bx, "by": by, "bxy": bxy, "frame": frame}[kind] is not None:
            raise ConfigError(f"given more than once: '-B{arg}'", "-B")
        if kind == "bx":
            bx = arg
        elif kind == "by":
            by = arg
        elif kind == "frame":
            frame = arg
        else:
            bxy = arg

    if not no_frame:
        if bxy is not None and (bx is not None or by is not None):
            raise ConfigError("cannot combine -B<annot> with -Bx or -By", "-B")
        if (bx is None) != (by is None):
            raise ConfigError("must give both -Bx and -By, or neither", "-B")

    x = y = AxisOption()
    if bxy is not None:
        x = y = _parse_axis(bxy, "-B")
    if bx is not None:
        x = _parse_axis(bx[1:], "-Bx")
    if by is not None:
        y = _parse_axis(by[1:], "-By")

    override = None
    if frame is not None and not no_frame:
        axes, sep, mods = frame.partition("+")
        override = FrameOverride.from_axes(axes, extra=sep + mods)
    return FrameOption(override=override, no_frame=no_frame, x=x, y=y)


# ---- -C ----

def parse_gaps(args: Sequence[str], unit: str = "c") -> Optional[Quad]:
    """Fold repeated -C[side]<gap> options into (w, e, s, n); None when not given."""
    if not args:
        return None
    gaps = [0.0, 0.0, 0.0, 0.0]
    slots = {"w": (0,), "e": (1,), "s": (2,), "n": (3,), "x": (0, 1), "y": (2, 3)}
    for arg in args:
        if arg and arg[0] in slots:
            targets, value = slots[arg[0]], arg[1:]
        else:
            targets, value = (0, 1, 2, 3), arg
        if not value:
            raise ConfigError(f"no gap given in '-C{arg}'", "-C")
        gap = to_inch(value, unit, option="-C")
        for k in targets:
            gaps[k] = gap
    return (gaps[0], gaps[1], gaps[2], gaps[3])


# ---- set target ----

def parse_panel_target(text: str) -> Union[int, Tuple[int, int]]:
    """'<row>,<col>' -> (row, col); '<index>' -> index."""
    try:
        if "," in text:
            row, col = (int(t) for t in text.split(","))
            if row < 0 or col < 0:
                raise ValueError(text)
            return (row, col)
        index = int(text)
    except ValueError:
        raise ConfigError(f"expected <row>,<col> or <index>, got '{text}'") from None
    if index < 0:
        raise ConfigError(f"panel index must be non-negative, got {index}")
    return index


# ---- begin ----

def _axis_share(share: Optional[ShareOption], axis: AxisOption, *, parallel: bool = False) -> AxisShare:
    base = AxisShare(
        annotation=axis.annotation,
        label=axis.label,
        has_label=axis.has_label,
        prefix=axis.prefix,
        unit=axis.unit,
    )
    if share is None:
        return base
    return replace(
        base,
        active=True,
        placement=share.placement,
        has_label=base.has_label or share.has_label,
        label=share.label or base.label,
        parallel=parallel or share.parallel,
    )


def build_request(
    grid: str,
    *,
    dimensions: Optional[str],
    margins: Optional[str] = None,
    tags: Optional[str] = None,
    frame: Sequence[str] = (),
    share: Sequence[str] = (),
    gaps: Sequence[str] = (),
    heading: Optional[str] = None,
    compute_only: bool = False,
    origin: Tuple[Optional[str], Optional[str]] = (None, None),
    unit: str = "c",
    command: str = "",
) -> LayoutRequest:
    """Parse every `begin` option into a LayoutRequest."""
    rows, columns = parse_grid(grid)
    if dimensions is None:
        raise ConfigError("dimensions are required (-F)", "-F")
    dim = parse_dimensions(dimensions, unit)

    shares: Dict[str, ShareOption] = {}
    for text in share:
        opt = parse_share(text)
        if opt.axis in shares:
            raise ConfigError("given more than once", "-Sc" if opt.axis == "x" else "-Sr")
        shares[opt.axis] = opt
    title_mode = TitleMode.NONE
    for opt in shares.values():
        if opt.title_mode is TitleMode.ALL or (opt.title_mode is TitleMode.COLUMN and title_mode is TitleMode.NONE):
            title_mode = opt.title_mode

    frame_opt = parse_frame(frame)
    ox = to_inch(origin[0], unit, option="-X") if origin[0] else 0.0
    oy = to_inch(origin[1], unit, option="-Y") if origin[1] else 0.0

    return LayoutRequest(
        rows=rows,
        columns=columns,
        dims=dim.dims,
        margins=parse_margins(margins, unit) if margins is not None else None,
        tags=parse_tags(tags, unit) if tags is not None else None,
        x_share=_axis_share(shares.get("x"), frame_opt.x),
        y_share=_axis_share(shares.get("y"), frame_opt.y),
        title_mode=title_mode,
        frame=frame_opt.override,
        no_frame=frame_opt.no_frame,
        compute_only=compute_only,
        heading=heading or None,
        gaps=parse_gaps(gaps, unit),
        canvas=dim.canvas,
        debug=dim.debug,
        origin=(ox, oy),
        command=command,
    )
