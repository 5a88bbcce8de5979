import pytest

from linkrouter.config import ConfiguredTheme
from linkrouter.theme import (
    Color,
    Theme,
    UITheme,
    detect_system_theme,
    env_key,
    get_theme,
    resolve_theme,
)


def _failing_detector():
    raise RuntimeError("no desktop session")


def test_rgb8_is_opaque():
    assert Color.rgb8(0x29, 0x29, 0x29).a == 255


def test_to_hex_format():
    assert Color.rgb8(0x43, 0x70, 0xA8).to_hex() == "#4370A8FF"


def test_float_constructors_match_8bit():
    assert Color.rgba(1.0, 1.0, 1.0, 1.0) == Color.WHITE
    assert Color.rgb(0.0, 0.0, 0.0) == Color.BLACK


def test_float_components_are_clamped():
    assert Color.rgba(2.0, -1.0, 1.0, 5.0) == Color.rgba8(255, 0, 255, 255)


def test_grey8_equals_rgb8():
    assert Color.grey8(0x74) == Color.rgb8(0x74, 0x74, 0x74)


@pytest.mark.parametrize("args", [(256, 0, 0), (-1, 0, 0), (0, 0, 300)])
def test_channel_out_of_range(args):
    with pytest.raises(ValueError):
        Color.rgb8(*args)


def test_themes_publish_same_keys():
    dark = get_theme(UITheme.DARK).to_env()
    light = get_theme(UITheme.LIGHT).to_env()
    assert set(dark) == set(light)
    assert len(dark) > 0


def test_dark_theme_values_from_palette():
    theme = get_theme(UITheme.DARK)
    assert isinstance(theme, Theme)
    env = theme.to_env()
    assert env[env_key("builtin", "window_background_color")] == Color.rgb8(0x29, 0x29, 0x29)
    assert env[env_key("main", "browser_label_color")] == Color.rgb8(255, 255, 255)
    assert env[env_key("main", "browser_label_size")] == 12.0
    assert env[env_key("about", "window_background_color")] == Color.rgb8(27, 32, 32)


def test_light_theme_values_from_palette():
    env = get_theme(UITheme.LIGHT).to_env()
    assert env[env_key("main", "window_background_color")] == Color.rgba8(215, 215, 215, 230)
    assert env[env_key("builtin", "cursor_color")] == Color.BLACK
    assert env[env_key("settings", "inactive_tab_text_color")] == Color.rgb8(0, 0, 0)


def test_themes_differ_in_cursor():
    dark = get_theme(UITheme.DARK).to_env()
    light = get_theme(UITheme.LIGHT).to_env()
    key = env_key("builtin", "cursor_color")
    assert dark[key] == Color.WHITE
    assert light[key] == Color.BLACK


def test_detect_failure_falls_back_to_dark():
    assert detect_system_theme(_failing_detector) is UITheme.DARK


@pytest.mark.parametrize(
    "mode, expected",
    [("light", UITheme.LIGHT), ("dark", UITheme.DARK), (None, UITheme.DARK), ("unspecified", UITheme.DARK)],
)
def test_detect_modes(mode, expected):
    assert detect_system_theme(lambda: mode) is expected


def test_resolve_explicit_ignores_detector():
    assert resolve_theme(ConfiguredTheme.LIGHT, _failing_detector) is UITheme.LIGHT
    assert resolve_theme(ConfiguredTheme.DARK, lambda: "light") is UITheme.DARK


def test_resolve_auto_uses_detector():
    assert resolve_theme(ConfiguredTheme.AUTO, lambda: "light") is UITheme.LIGHT
    assert resolve_theme(ConfiguredTheme.AUTO, _failing_detector) is UITheme.DARK