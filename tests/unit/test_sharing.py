# tests/unit/test_sharing.py
from __future__ import annotations

import pytest

from panelgrid.config import StyleSettings
from panelgrid.layout.frame import SideMode
from panelgrid.layout.sharing import (
    AxisShare,
    FrameOverride,
    Placement,
    TitleMode,
    compute_metrics,
    plan_axes,
    requested_sides,
)

NO_MARGINS = (0.0, 0.0, 0.0, 0.0)
SHARED = AxisShare(active=True, placement=Placement.BOTH)


# ---- metrics ----------------------------------------------------------------

def test_metrics_default_style(style, pt):
    m = compute_metrics(style)
    assert m.tick == pytest.approx(pt(5.0))
    assert m.annot == pytest.approx(pt(0.736 * 12 + 5))
    assert m.label == pytest.approx(pt(0.736 * 16 + 8))
    assert m.title == pytest.approx(pt(0.736 * 24 + 14))
    assert m.heading_offset == pytest.approx(pt(18.0))


def test_metrics_inside_frame_drops_ticks_and_letter_heights(pt):
    m = compute_metrics(StyleSettings(frame_type="inside"))
    assert m.tick == 0.0
    assert m.annot == pytest.approx(pt(5.0))
    assert m.label == pytest.approx(pt(8.0))


def test_metrics_no_frame(style):
    m = compute_metrics(style, no_frame=True)
    assert (m.tick, m.annot, m.label) == (0.0, 0.0, 0.0)
    assert m.title > 0.0


# ---- requested sides ----------------------------------------------------------

def test_auto_frame_axes_resolve_and_write_back(style):
    x_axes, y_axes, writeback = requested_sides(style, AxisShare(), AxisShare())
    assert (x_axes, y_axes) == ("St", "Wr")
    assert writeback == "StWrZ"


def test_explicit_frame_axes_not_written_back():
    style = StyleSettings(frame_axes="WSne")
    x_axes, y_axes, writeback = requested_sides(style, AxisShare(), AxisShare())
    assert (x_axes, y_axes) == ("Sn", "We")
    assert writeback is None


def test_shared_axes_request_both_sides(style):
    x_axes, y_axes, _ = requested_sides(style, SHARED, SHARED)
    assert (x_axes, y_axes) == ("SN", "WE")


def test_override_is_lowercased_for_shared_axis(style):
    override = FrameOverride.from_axes("WSne")
    assert (override.x_tokens, override.y_tokens) == ("Sn", "We")
    x_axes, y_axes, writeback = requested_sides(style, SHARED, AxisShare(), override)
    assert x_axes == "sn"
    assert y_axes == "We"
    assert writeback is None


# ---- row/column plans ---------------------------------------------------------

def test_shared_x_axis_three_rows_annotates_outer_rows_only(style):
    plan = plan_axes(3, 1, style=style, margins=NO_MARGINS, x_share=SHARED)
    norths = [r.north for r in plan.rows]
    souths = [r.south for r in plan.rows]
    assert norths == [SideMode.ANNOTATE, SideMode.TICK, SideMode.TICK]
    assert souths == [SideMode.TICK, SideMode.TICK, SideMode.ANNOTATE]
    assert sum(n is SideMode.ANNOTATE for n in norths) == 1
    assert sum(s is SideMode.ANNOTATE for s in souths) == 1
    # four interior sides carry ticks only
    assert plan.fluff[1] == pytest.approx(4 * plan.metrics.tick)


def test_shared_bottom_only(style):
    share = AxisShare(active=True, placement=Placement.MIN)
    plan = plan_axes(2, 1, style=style, margins=NO_MARGINS, x_share=share)
    assert plan.rows[0].north is SideMode.TICK
    assert plan.rows[1].south is SideMode.ANNOTATE


def test_shared_y_axis_columns(style):
    share = AxisShare(active=True, placement=Placement.MIN, has_label=True)
    plan = plan_axes(1, 3, style=style, margins=NO_MARGINS, y_share=share)
    assert [c.west for c in plan.columns] == [SideMode.ANNOTATE, SideMode.TICK, SideMode.TICK]
    assert [c.east for c in plan.columns] == [SideMode.TICK] * 3
    assert [c.label_sides for c in plan.columns] == [Placement.MIN, Placement.NONE, Placement.NONE]


def test_unshared_axes_annotate_every_row(style):
    plan = plan_axes(3, 2, style=style, margins=NO_MARGINS)
    m = plan.metrics
    assert all(r.south is SideMode.ANNOTATE for r in plan.rows)
    assert all(r.north is SideMode.LINE for r in plan.rows)
    assert all(c.west is SideMode.ANNOTATE for c in plan.columns)
    assert all(c.east is SideMode.LINE for c in plan.columns)
    assert plan.fluff[1] == pytest.approx(2 * (m.annot + m.tick))
    assert plan.fluff[0] == pytest.approx(m.annot + m.tick)


def test_labels_add_label_height(style):
    share = AxisShare(has_label=True)
    plan = plan_axes(2, 1, style=style, margins=NO_MARGINS, x_share=share)
    m = plan.metrics
    assert plan.fluff[1] == pytest.approx(m.annot + m.tick + m.label)
    assert all(r.label_sides == Placement.MIN for r in plan.rows)


def test_margins_counted_between_panels_only(style):
    plan = plan_axes(3, 4, style=style, margins=(0.1, 0.2, 0.3, 0.4), no_frame=True)
    assert plan.fluff == pytest.approx((3 * 0.3, 2 * 0.7))


def test_titles_on_every_row(style):
    plan = plan_axes(3, 1, style=style, margins=NO_MARGINS, title_mode=TitleMode.ALL, no_frame=True)
    assert plan.fluff[1] == pytest.approx(2 * plan.metrics.title)
    assert plan.title_space(0) == 0.0
    assert plan.title_space(1) == pytest.approx(plan.metrics.title)


def test_column_titles_only_raise_heading(style):
    plan = plan_axes(3, 1, style=style, margins=NO_MARGINS, title_mode=TitleMode.COLUMN, no_frame=True)
    assert plan.fluff[1] == 0.0
    assert plan.heading_offset == pytest.approx(plan.metrics.heading_offset + plan.metrics.title)


def test_heading_offset_includes_top_annotation(style):
    share = AxisShare(active=True, placement=Placement.BOTH, has_label=True)
    plan = plan_axes(2, 2, style=style, margins=NO_MARGINS, x_share=share)
    m = plan.metrics
    assert plan.heading_offset == pytest.approx(m.heading_offset + m.annot + m.tick + m.label)


def test_outer_sides_consume_no_space(style):
    plan = plan_axes(1, 1, style=style, margins=(1.0, 1.0, 1.0, 1.0), x_share=SHARED, y_share=SHARED)
    assert plan.fluff == (0.0, 0.0)
