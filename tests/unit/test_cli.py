# tests/unit/test_cli.py
from __future__ import annotations

from pathlib import Path

import pytest

from panelgrid import cli


@pytest.fixture
def run(tmp_path: Path, capsys):
    session = tmp_path / "session"

    def _run(*args: str):
        code = cli.main(["--session-dir", str(session), *args])
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    _run.session = session
    return _run


def test_begin_set_end(run):
    code, out, _ = run("begin", "2x2", "-Fs8c", "-Aa)")
    assert code == 0
    assert out.startswith("figure 1: 2x2 panels,")

    code, out, _ = run("set")
    assert code == 0
    assert out.startswith("panel 0 (0,0) origin")
    assert "frame WrtS" in out
    assert out.rstrip().endswith("tag a)")

    code, out, _ = run("set", "1,1", "-A(z)")
    assert code == 0
    assert out.startswith("panel 3 (1,1)")
    assert out.rstrip().endswith("tag (z)")

    code, out, _ = run("end")
    assert code == 0
    assert out.startswith("region 0/")
    assert not (run.session / "subplot.1").exists()


def test_fifth_set_on_two_by_two_fails(run):
    assert run("begin", "2x2", "-Ff10c")[0] == 0
    for _ in range(4):
        assert run("set")[0] == 0
    code, _, err = run("set")
    assert code == 4
    assert "no more panels" in err


def test_set_without_begin(run):
    code, _, err = run("set")
    assert code == 3
    assert "panelgrid set:" in err
    assert "run 'begin' first" in err


def test_end_without_begin(run):
    assert run("end")[0] == 3


def test_missing_dimensions(run):
    code, _, err = run("begin", "2x2")
    assert code == 2
    assert "dimensions are required" in err
    assert not (run.session / "subplot.1").exists()


def test_bad_option_value(run):
    code, _, err = run("begin", "2x2", "-Fs8c", "-M1/2/3")
    assert code == 2
    assert "Option -M" in err


def test_impossible_layout(run):
    code, _, err = run("begin", "1x8", "-Ff1c/5c")
    assert code == 4
    assert "non-positive dimension" in err


def test_out_of_range_panel(run):
    run("begin", "2x2", "-Fs5c")
    code, _, err = run("set", "2,0")
    assert code == 4
    assert "outside the 2x2 grid" in err


def test_figures_by_id(run):
    assert run("--figure", "2", "begin", "1x2", "-Fs5c")[0] == 0
    assert run("--figure", "3", "begin", "3x1", "-Fs5c")[0] == 0
    code, out, _ = run("--figure", "3", "set", "2")
    assert code == 0
    assert out.startswith("panel 2 (2,0)")
    assert run("--figure", "2", "end")[0] == 0
    assert run("--figure", "3", "end")[0] == 0


def test_figure_from_environment(run, monkeypatch):
    monkeypatch.setenv("PANELGRID_FIGURE", "4")
    run("begin", "1x1", "-Fs5c")
    assert (run.session / "subplot.4").exists()


def test_aspect_ratio(run):
    code, out, _ = run("begin", "1x1", "-Fs2i/0", "-M0", "--aspect", "0.5", "-B+n")
    assert code == 0
    assert "2.0000 x 1.0000 inch" in out


def test_zero_height_needs_aspect(run):
    code, _, err = run("begin", "1x1", "-Fs2i/0")
    assert code == 2
    assert "aspect ratio" in err


def test_usage_error_returns_argparse_code(run):
    code, _, err = run("frobnicate")
    assert code == 2
    assert "usage:" in err


def test_tag_override_without_tags_warns(run):
    run("begin", "1x1", "-Fs5c")
    with pytest.warns(RuntimeWarning, match="Cannot override tags"):
        code, out, _ = run("set", "-Ax")
    assert code == 0
    assert out.rstrip().endswith("tag -")
