# src/panelgrid/cli.py
"""
Command-line entry point.

    panelgrid [--figure N] [--session-dir DIR] [-V] begin <rows>x<cols> -F... [options]
    panelgrid [--figure N] set [<row>,<col> | <index>] [-A<tag>] [-C<gap>]
    panelgrid [--figure N] end [--debug-plot PATH]

Exit codes: 0 success, 2 option/configuration error, 3 no subplot in progress,
4 layout error, 5 state file error.
"""
from __future__ import annotations
import argparse
import logging
import os
import shlex
import sys
from importlib import metadata as importlib_metadata
from typing import Callable, Optional, Sequence

from panelgrid.config import load_config
from panelgrid.errors import ConfigError, LayoutError, PanelgridError, SessionNotFoundError, StateIOError
from panelgrid.options import build_request, parse_gaps, parse_panel_target
from panelgrid.session import Subplot

__all__ = ["main", "build_parser"]

EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_NO_SESSION = 3
EXIT_LAYOUT = 4
EXIT_STATE = 5


def _version() -> str:
    try:
        return importlib_metadata.version("panelgrid")
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def _default_figure() -> int:
    value = os.environ.get("PANELGRID_FIGURE", "1")
    try:
        return int(value)
    except ValueError:
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="panelgrid", description="Lay out a grid of plot panels.")
    parser.add_argument("--figure", type=int, default=None, help="figure id [$PANELGRID_FIGURE or 1]")
    parser.add_argument("--session-dir", default=None, help="directory holding the subplot state files")
    parser.add_argument("--config", default=None, help="config file [$PANELGRID_CONFIG]")
    parser.add_argument("-V", "--verbose", action="store_true", help="print layout details to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    sub = parser.add_subparsers(dest="command", required=True)

    begin = sub.add_parser("begin", help="compute and store a new subplot layout")
    begin.add_argument("grid", help="<rows>x<columns>")
    begin.add_argument("-F", dest="dimensions", help="[f|s]<w>[/<h>][+f<wfracs>/<hfracs>][+c<dx>[/<dy>]][+d][+g<fill>][+p<pen>][+w<pen>]")
    begin.add_argument("-M", dest="margins", help="<m> | <mx>/<my> | <w>/<e>/<s>/<n>")
    begin.add_argument("-A", dest="tags", nargs="?", const="", help="[<format>][+c][+g][+j|J][+o][+p][+r|R][+s][+v]")
    begin.add_argument("-B", dest="frame", action="append", default=[], help="frame settings (repeatable)")
    begin.add_argument("-S", dest="share", action="append", default=[], help="c[t|b][+l][+s][+t[c]] or r[l|r][+l][+s][+p][+t[c]]")
    begin.add_argument("-C", dest="gaps", action="append", default=[], help="[w|e|s|n|x|y]<gap> (repeatable)")
    begin.add_argument("-T", dest="heading", help="figure heading")
    begin.add_argument("-D", dest="compute_only", action="store_true", help="lay out panels but draw no frames")
    begin.add_argument("-X", dest="x_origin", help="x offset of the subplot block")
    begin.add_argument("-Y", dest="y_origin", help="y offset of the subplot block")
    begin.add_argument("--aspect", type=float, default=None, help="height/width ratio for -Fs<w>/0")

    sel = sub.add_parser("set", help="select the current panel")
    sel.add_argument("target", nargs="?", help="<row>,<col> or <index>; omit to advance")
    sel.add_argument("-A", dest="tag", help="tag for this panel only ('-' for none)")
    sel.add_argument("-C", dest="gaps", action="append", default=[], help="[w|e|s|n|x|y]<gap> (repeatable)")

    end = sub.add_parser("end", help="finish the subplot and remove its state")
    end.add_argument("--debug-plot", default=None, help="draw the partition to this file (needs -F+d)")
    return parser


def _run_begin(args: argparse.Namespace, argv: Sequence[str], unit: str) -> Callable[[Subplot], None]:
    request = build_request(
        args.grid,
        dimensions=args.dimensions,
        margins=args.margins,
        tags=args.tags,
        frame=args.frame,
        share=args.share,
        gaps=args.gaps,
        heading=args.heading,
        compute_only=args.compute_only,
        origin=(args.x_origin, args.y_origin),
        unit=unit,
        command="panelgrid " + shlex.join(argv),
    )

    def run(subplot: Subplot) -> None:
        result = subplot.begin(request)
        layout = result.layout
        print(
            f"figure {result.figure_id}: {layout.rows}x{layout.columns} panels, "
            f"{layout.dimension[0]:.4f} x {layout.dimension[1]:.4f} inch"
        )

    return run


def _run_set(args: argparse.Namespace, unit: str) -> Callable[[Subplot], None]:
    target = parse_panel_target(args.target) if args.target is not None else None
    gaps = parse_gaps(args.gaps, unit)

    def run(subplot: Subplot) -> None:
        if isinstance(target, tuple):
            sel = subplot.set(target[0], target[1], tag=args.tag, gaps=gaps)
        else:
            sel = subplot.set(index=target, tag=args.tag, gaps=gaps)
        p = sel.panel
        tag = sel.tag.text if sel.tag is not None else "-"
        print(
            f"panel {p.index} ({p.row},{p.column}) origin {sel.page_origin[0]:.4f} {sel.page_origin[1]:.4f} "
            f"size {p.size[0]:.4f} {p.size[1]:.4f} frame {p.frame.code()} tag {tag}"
        )

    return run


def _run_end(args: argparse.Namespace) -> Callable[[Subplot], None]:
    def run(subplot: Subplot) -> None:
        result = subplot.end(debug_plot=args.debug_plot)
        print(f"region {result.region}")
        if result.debug_plot is not None:
            print(f"debug plot {result.debug_plot}")

    return run


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # argparse has already printed usage/help
        return int(exc.code or 0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    op = args.command
    try:
        config = load_config(args.config)
        unit = config.style.length_unit
        if op == "begin":
            run = _run_begin(args, argv, unit)
        elif op == "set":
            run = _run_set(args, unit)
        else:
            run = _run_end(args)
        figure = args.figure if args.figure is not None else _default_figure()
        aspect = getattr(args, "aspect", None)
        subplot = Subplot(
            figure,
            session_dir=args.session_dir,
            config=config,
            aspect_ratio=(lambda: aspect) if aspect is not None else None,
        )
        run(subplot)
    except ConfigError as exc:
        print(f"panelgrid {op}: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except SessionNotFoundError as exc:
        print(f"panelgrid {op}: {exc}", file=sys.stderr)
        return EXIT_NO_SESSION
    except LayoutError as exc:
        print(f"panelgrid {op}: {exc}", file=sys.stderr)
        return EXIT_LAYOUT
    except StateIOError as exc:
        print(f"panelgrid {op}: {exc}", file=sys.stderr)
        return EXIT_STATE
    except PanelgridError as exc:
        print(f"panelgrid {op}: {exc}", file=sys.stderr)
        return 1
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
