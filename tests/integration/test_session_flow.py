# tests/integration/test_session_flow.py
from __future__ import annotations

from pathlib import Path

import pytest

from panelgrid import LayoutError, NoMorePanelsError, SessionNotFoundError, Subplot
from panelgrid.errors import ConfigError
from panelgrid.options import build_request


def _subplot(tmp_path: Path, figure_id: int = 1, **kwargs) -> Subplot:
    return Subplot(figure_id, session_dir=tmp_path / "session", **kwargs)


def test_full_session(tmp_path: Path):
    request = build_request(
        "2x2",
        dimensions="s2i/1i",
        margins="0.1i",
        tags="a)",
        share=["cb+lTime", "rl+lValue"],
        heading="Overview",
        origin=("1i", "0.5i"),
    )
    begun = _subplot(tmp_path).begin(request)
    width, height = begun.layout.dimension

    # each step reloads from disk, as separate processes would
    first = _subplot(tmp_path).set()
    assert first.panel.index == 0
    assert first.tag.text == "a)"
    assert first.page_origin == pytest.approx((1.0, 0.5 + first.panel.origin[1]))

    second = _subplot(tmp_path).set()
    assert (second.panel.row, second.panel.column) == (0, 1)
    assert second.panel.frame.code() == "wens"

    last = _subplot(tmp_path).set(1, 0)
    assert last.panel.frame.code() == "WenS"
    assert last.panel.x_label == "Time"
    assert last.panel.y_label == "Value"

    result = _subplot(tmp_path).end()
    assert result.dimension == (width, height)
    assert result.region == f"0/{width + 1.0:g}/0/{height + 0.5:g}"
    assert result.debug_plot is None
    with pytest.raises(SessionNotFoundError):
        _subplot(tmp_path).set()


def test_tag_overrides(tmp_path: Path):
    subplot = _subplot(tmp_path)
    subplot.begin(build_request("1x3", dimensions="s1i", tags="1"))
    assert subplot.set(tag="(x)").tag.text == "(x)"
    assert subplot.set(tag="-").tag is None
    # the override applied to one panel only
    assert subplot.set(0, 0).tag.text == "1"


def test_tag_override_ignored_without_tags(tmp_path: Path):
    subplot = _subplot(tmp_path)
    subplot.begin(build_request("1x2", dimensions="s1i"))
    with pytest.warns(RuntimeWarning, match="Cannot override tags"):
        selection = subplot.set(tag="(x)")
    assert selection.tag is None
    assert selection.cursor.tag is None


def test_gap_overrides(tmp_path: Path):
    subplot = _subplot(tmp_path)
    subplot.begin(build_request("1x2", dimensions="s1i", gaps=["0.1i"]))
    assert subplot.set().gaps == pytest.approx((0.1,) * 4)
    assert subplot.set(gaps=(0.2, 0.2, 0.0, 0.0)).gaps == (0.2, 0.2, 0.0, 0.0)


def test_set_argument_checks(tmp_path: Path):
    subplot = _subplot(tmp_path)
    subplot.begin(build_request("2x2", dimensions="s1i"))
    with pytest.raises(ConfigError, match="both row and column"):
        subplot.set(1)
    with pytest.raises(ConfigError, match="not both"):
        subplot.set(0, 0, index=1)
    assert subplot.set(index=3).panel.index == 3


def test_exhaustion_persists_until_new_begin(tmp_path: Path):
    subplot = _subplot(tmp_path)
    request = build_request("1x2", dimensions="s1i")
    subplot.begin(request)
    subplot.set()
    subplot.set()
    with pytest.raises(NoMorePanelsError):
        subplot.set()
    with pytest.raises(NoMorePanelsError):
        subplot.set(index=0)
    with pytest.warns(RuntimeWarning, match="stale subplot state"):
        subplot.begin(request)
    assert subplot.set().panel.index == 0


def test_figures_are_independent(tmp_path: Path):
    one = _subplot(tmp_path, 1)
    two = _subplot(tmp_path, 2)
    one.begin(build_request("1x2", dimensions="s1i"))
    two.begin(build_request("2x1", dimensions="s1i"))
    one.set()
    assert two.set().panel.index == 0
    assert one.set().panel.index == 1
    one.end()
    assert two.set().panel.index == 1


def test_failed_begin_writes_nothing(tmp_path: Path):
    subplot = _subplot(tmp_path)
    with pytest.raises(LayoutError):
        subplot.begin(build_request("1x6", dimensions="f1c/4c"))
    assert not subplot.store.exists(1)
    assert not (tmp_path / "session").exists()


def test_failed_begin_keeps_previous_layout(tmp_path: Path):
    subplot = _subplot(tmp_path)
    subplot.begin(build_request("1x1", dimensions="s1i"))
    with pytest.raises(LayoutError):
        subplot.begin(build_request("1x6", dimensions="f1c/4c"))
    assert subplot.store.exists(1)


def test_aspect_ratio_callback(tmp_path: Path):
    subplot = _subplot(tmp_path, aspect_ratio=lambda: 0.75)
    begun = subplot.begin(build_request("2x1", dimensions="s4i/0", frame=["+n"], margins="0"))
    assert begun.layout.row_heights == pytest.approx((3.0, 3.0))
    assert begun.layout.dimension == pytest.approx((4.0, 6.0))


def test_debug_plot_needs_debug_flag(tmp_path: Path):
    subplot = _subplot(tmp_path)
    subplot.begin(build_request("1x1", dimensions="s1i"))
    with pytest.warns(RuntimeWarning, match="not begun with \\+d"):
        result = subplot.end(debug_plot=tmp_path / "layout.png")
    assert result.debug_plot is None
    assert not (tmp_path / "layout.png").exists()
    assert not subplot.store.exists(1)


def test_session_dir_from_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("PANELGRID_SESSION_DIR", str(tmp_path / "env-session"))
    Subplot(5).begin(build_request("1x1", dimensions="s1i"))
    assert (tmp_path / "env-session" / "subplot.5").exists()


def test_negative_margins_never_commit(tmp_path: Path):
    subplot = _subplot(tmp_path)
    with pytest.raises(ConfigError, match="margins cannot be negative"):
        subplot.begin(build_request("1x2", dimensions="s1i", margins="-1i", frame=["+n"]))
    assert not subplot.store.exists(1)


def test_multiline_text_survives_reload(tmp_path: Path):
    request = build_request("2x1", dimensions="s1i", tags="a)", share=["cb+lTime\n(s)"], heading="Line one\nLine two")
    _subplot(tmp_path).begin(request)
    assert _subplot(tmp_path).set(tag="x\ny").tag.text == "x\ny"
    bottom = _subplot(tmp_path).set(1, 0)
    assert bottom.panel.x_label == "Time\n(s)"
    assert _subplot(tmp_path).end().dimension[1] > 2.0
