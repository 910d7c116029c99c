from pathlib import Path
import tempfile

from panelgrid import Subplot
from panelgrid.options import build_request

session = Path(tempfile.mkdtemp(prefix="panelgrid-demo-"))

# 3x2 panels sharing x along columns (annotated at the bottom) and y along rows (left)
request = build_request(
    "3x2",
    dimensions="f16c/18c+d+gwhite+wthin,gray60",
    tags="a)",
    share=["cb+lTime (s)", "rl+lAmplitude"],
    heading="Shared axes demo",
)

subplot = Subplot(1, session_dir=session)
begun = subplot.begin(request)
print(f"figure: {begun.layout.dimension[0]:.3f} x {begun.layout.dimension[1]:.3f} inch")

# Visit every panel in tag order
for _ in range(begun.layout.n_panels):
    sel = subplot.set()
    p = sel.panel
    print(
        f"{sel.tag.text:>3} ({p.row},{p.column}) origin=({p.origin[0]:.3f}, {p.origin[1]:.3f}) "
        f"size=({p.size[0]:.3f}, {p.size[1]:.3f}) frame={p.frame.code()} "
        f"xlabel={p.x_label!r} ylabel={p.y_label!r}"
    )

# Panel (1,1) again, with a one-off tag
print(subplot.set(1, 1, tag="(*)").tag.text)

result = subplot.end(debug_plot=session / "layout.png")
print(f"region {result.region}")
print(f"partition drawn to {result.debug_plot}")
