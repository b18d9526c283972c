import json

import pytest

from pdfoverlay.config import ViewerSettings
from pdfoverlay.core.providers import TextStyle


def test_defaults():
    settings = ViewerSettings()
    assert settings.zoom == 1.0
    assert settings.fallback_enabled is True
    assert settings.text_style == TextStyle()
    assert settings.effective_dpi(1.0) == pytest.approx(96 / 72)
    assert settings.render_scale(1.0) == pytest.approx(96 / 72)


def test_unit_points_only_affect_effective_dpi():
    settings = ViewerSettings(device_pixel_ratio=2.0, unit_points=72.0)
    assert settings.effective_dpi(1.5) == pytest.approx(2.0 * 96 * 1.5)
    assert settings.render_scale(1.5) == pytest.approx(2.0 * 96 * 1.5 / 72)


def test_clamp_zoom():
    settings = ViewerSettings()
    assert settings.clamp_zoom(10) == 3.0
    assert settings.clamp_zoom(0.01) == 0.3
    assert settings.clamp_zoom(1.5) == 1.5


def test_from_dict_ignores_unknown_keys_and_converts_colours():
    settings = ViewerSettings.from_dict({
        "zoom": 9,
        "fallback_enabled": False,
        "outline_color": [0, 0, 255, 255],
        "text_style": {"font_size": 14, "text_color": [10, 20, 30, 255], "shadow": True},
        "theme": "dark",
    })

    assert settings.zoom == 3.0
    assert settings.fallback_enabled is False
    assert settings.outline_color == (0, 0, 255, 255)
    assert settings.text_style.font_size == 14
    assert settings.text_style.text_color == (10, 20, 30, 255)


def test_load_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"device_pixel_ratio": 2.0}), encoding="utf-8")
    assert ViewerSettings.load(str(path)).device_pixel_ratio == 2.0


def test_load_missing_or_invalid_file_gives_defaults(tmp_path):
    assert ViewerSettings.load(str(tmp_path / "missing.json")) == ViewerSettings()

    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert ViewerSettings.load(str(path)) == ViewerSettings()


def test_load_uses_config_dir(tmp_path, monkeypatch):
    monkeypatch.setattr("pdfoverlay.config.get_config_dir", lambda: tmp_path)
    (tmp_path / "settings.json").write_text(json.dumps({"zoom": 2.0}), encoding="utf-8")
    assert ViewerSettings.load().zoom == 2.0


def test_text_style_updated_returns_copy():
    style = TextStyle()
    bigger = style.updated(font_size=20)
    assert bigger.font_size == 20
    assert style.font_size == 12
