# tests/integration/test_debug_plot.py
from __future__ import annotations

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import pytest
from matplotlib.patches import Rectangle

from panelgrid import Subplot
from panelgrid.layout.grid import build_grid
from panelgrid.options import build_request
from panelgrid.plot import render_layout
from panelgrid.plot.layout import pen_style


def test_end_draws_debug_plot(tmp_path):
    subplot = Subplot(1, session_dir=tmp_path / "session")
    subplot.begin(build_request("2x3", dimensions="f6i/4i+d+gwhite+wthin,red", tags="", heading="Debug"))
    result = subplot.end(debug_plot=tmp_path / "out" / "layout.png")
    assert result.debug_plot == tmp_path / "out" / "layout.png"
    assert result.debug_plot.stat().st_size > 0
    assert not subplot.store.exists(1)


def test_render_layout_draws_every_panel(style):
    request = build_request("2x2", dimensions="s1i+gwhite+pthick", tags="", heading="H")
    layout, panels = build_grid(request, style)
    fig = render_layout(layout, panels)
    try:
        ax = fig.axes[0]
        rects = [p for p in ax.patches if isinstance(p, Rectangle)]
        # canvas plus one rectangle per panel
        assert len(rects) == 5
        texts = [t.get_text() for t in ax.texts]
        assert "a)" in texts and "d)" in texts
        assert "H" in texts
        width, height = fig.get_size_inches()
        assert width == pytest.approx(layout.dimension[0])
        assert height >= layout.heading.y
    finally:
        plt.close(fig)


@pytest.mark.parametrize(
    "pen, expected",
    [("thin", (1.0, "black")), ("2p,red", (2.0, "red")), ("thick,gray50", (1.5, "0.5")), ("", (1.0, "black"))],
)
def test_pen_style(pen, expected):
    lw, color = pen_style(pen)
    assert lw == pytest.approx(expected[0])
    assert color == expected[1]
