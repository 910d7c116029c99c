# tests/unit/test_config.py
"""
Unit tests for style settings and configuration loading.

Tests cover:
- StyleSettings defaults and validation
- [style]/[session] tables from TOML
- PANELGRID_CONFIG / PANELGRID_SESSION_DIR overrides
- Error messages for malformed files
"""
from __future__ import annotations
import sys
from pathlib import Path

import pytest

from panelgrid.config import (
    PanelgridConfig,
    StyleSettings,
    _get_config_path,
    load_config,
    resolve_session_dir,
)
from panelgrid.errors import ConfigError


# ---- StyleSettings ----------------------------------------------------------

def test_style_defaults(pt):
    style = StyleSettings()
    assert style.font_annot == 12.0
    assert style.font_tag == 20.0
    assert style.tick_length == pytest.approx(pt(5.0))
    assert style.heading_offset == pytest.approx(pt(18.0))
    assert style.frame_type == "fancy"
    assert not style.inside
    assert style.resolved_frame_axes() == "WrStZ"


def test_style_letter_height():
    assert StyleSettings().letter_height(72.0) == pytest.approx(0.736)


def test_style_rejects_bad_frame_type():
    with pytest.raises(ConfigError, match="frame_type must be one of"):
        StyleSettings(frame_type="boxed")


def test_style_rejects_non_positive_font():
    with pytest.raises(ConfigError, match="font_label must be positive"):
        StyleSettings(font_label=0.0)


def test_style_from_mapping_units(pt):
    style = StyleSettings.from_mapping(
        {"font_annot": 10, "font_title": "0.5i", "tick_length": "4p", "annot_offset": 0.254, "frame_type": "inside"}
    )
    assert style.font_annot == 10.0
    assert style.font_title == pytest.approx(36.0)
    assert style.tick_length == pytest.approx(pt(4.0))
    # bare numbers use the default length unit (cm)
    assert style.annot_offset == pytest.approx(0.1)
    assert style.inside


def test_style_from_mapping_unknown_key():
    with pytest.raises(ConfigError, match="unknown keys"):
        StyleSettings.from_mapping({"font_size": 12})


# ---- load_config ------------------------------------------------------------

def test_load_config_missing_file_gives_defaults(tmp_path: Path):
    cfg = load_config(tmp_path / "nope.toml")
    assert cfg == PanelgridConfig()


def test_load_config_reads_tables(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[style]\nfont_annot = "8p"\nlength_unit = "i"\nlabel_offset = 0.1\n\n'
        '[session]\ndir = "' + (tmp_path / "state").as_posix() + '"\n',
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.style.font_annot == pytest.approx(8.0)
    assert cfg.style.label_offset == pytest.approx(0.1)
    assert cfg.session_dir == tmp_path / "state"
    assert cfg.source == path.resolve()


def test_load_config_bad_toml(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text("[style\nfont_annot = 1\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to load config"):
        load_config(path)


def test_load_config_style_must_be_table(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text('style = "big"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match=r"\[style\] must be a table"):
        load_config(path)


def test_config_path_env_override(monkeypatch, tmp_path: Path):
    target = tmp_path / "custom.toml"
    monkeypatch.setenv("PANELGRID_CONFIG", str(target))
    assert _get_config_path() == target.resolve()


@pytest.mark.skipif(sys.platform in ("darwin", "win32"), reason="XDG layout is Linux-only")
def test_config_path_xdg(monkeypatch, tmp_path: Path):
    monkeypatch.delenv("PANELGRID_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert _get_config_path() == (tmp_path / "panelgrid" / "config.toml").resolve()


def test_load_config_uses_env_path(monkeypatch, tmp_path: Path):
    path = tmp_path / "env.toml"
    path.write_text('[style]\nframe_axes = "WSne"\n', encoding="utf-8")
    monkeypatch.setenv("PANELGRID_CONFIG", str(path))
    assert load_config().style.frame_axes == "WSne"


# ---- session directory --------------------------------------------------------

def test_session_dir_precedence(monkeypatch, tmp_path: Path):
    cfg = PanelgridConfig(session_dir=tmp_path / "from-config")
    assert resolve_session_dir(cfg) == tmp_path / "from-config"
    monkeypatch.setenv("PANELGRID_SESSION_DIR", str(tmp_path / "from-env"))
    assert resolve_session_dir(cfg) == tmp_path / "from-env"


def test_session_dir_default_is_in_tempdir():
    assert resolve_session_dir().name == "panelgrid-session"
