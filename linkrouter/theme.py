"""Light and dark colour themes for the picker and its dialogs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from enum import Enum
from typing import Callable, ClassVar, Optional, Union

from linkrouter.config import ConfiguredTheme

log = logging.getLogger(__name__)

ENV_PREFIX = "linkrouter.theme"

EnvValue = Union["Color", float]
Detector = Callable[[], Optional[str]]


def _channel(value: float) -> int:
    """Convert a 0.0–1.0 colour component to an 8-bit channel."""
    clamped = min(1.0, max(0.0, float(value)))
    return int(clamped * 255.0 + 0.5)


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit channels."""

    r: int
    g: int
    b: int
    a: int = 255

    WHITE: ClassVar[Color]
    BLACK: ClassVar[Color]

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"colour channel {name} must be an int in 0..255, got {value!r}")

    @classmethod
    def rgb8(cls, r: int, g: int, b: int) -> Color:
        return cls(r, g, b, 255)

    @classmethod
    def rgba8(cls, r: int, g: int, b: int, a: int) -> Color:
        return cls(r, g, b, a)

    @classmethod
    def rgb(cls, r: float, g: float, b: float) -> Color:
        return cls(_channel(r), _channel(g), _channel(b), 255)

    @classmethod
    def rgba(cls, r: float, g: float, b: float, a: float) -> Color:
        return cls(_channel(r), _channel(g), _channel(b), _channel(a))

    @classmethod
    def grey8(cls, value: int) -> Color:
        return cls(value, value, value, 255)

    def to_hex(self) -> str:
        """Return the colour as ``#RRGGBBAA``."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}{self.a:02X}"


Color.WHITE = Color.rgb8(255, 255, 255)
Color.BLACK = Color.rgb8(0, 0, 0)


class UITheme(Enum):
    LIGHT = "Light"
    DARK = "Dark"


@dataclass(frozen=True)
class BuiltinTheme:
    """Colours for the standard widgets."""

    section: ClassVar[str] = "builtin"

    window_background_color: Color
    text_color: Color
    disabled_text_color: Color
    placeholder_color: Color
    primary_light: Color
    primary_dark: Color
    background_light: Color
    background_dark: Color
    foreground_light: Color
    foreground_dark: Color
    disabled_foreground_light: Color
    disabled_foreground_dark: Color
    button_dark: Color
    button_light: Color
    disabled_button_dark: Color
    disabled_button_light: Color
    border_dark: Color
    border_light: Color
    selected_text_background_color: Color
    selected_text_inactive_background_color: Color
    selection_text_color: Color
    cursor_color: Color
    scrollbar_color: Color
    scrollbar_border_color: Color


@dataclass(frozen=True)
class GeneralTheme:
    section: ClassVar[str] = "general"

    window_background_color: Color
    window_border_color: Color


@dataclass(frozen=True)
class MainWindowTheme:
    section: ClassVar[str] = "main"

    window_background_color: Color
    window_border_color: Color
    browser_label_size: float
    browser_label_color: Color
    profile_label_size: float
    profile_label_color: Color
    hotkey_background_color: Color
    hotkey_border_color: Color
    hotkey_text_color: Color
    options_button_text_color: Color


@dataclass(frozen=True)
class SettingsWindowTheme:
    section: ClassVar[str] = "settings"

    active_tab_background_color: Color
    active_tab_text_color: Color
    inactive_tab_text_color: Color
    rule_background_color: Color
    rule_border_color: Color


@dataclass(frozen=True)
class AboutWindowTheme:
    section: ClassVar[str] = "about"

    window_background_color: Color


def env_key(section: str, name: str) -> str:
    """Name under which a theme value is published in the environment."""
    return f"{ENV_PREFIX}.{section}.{name}"


@dataclass(frozen=True)
class Theme:
    builtin: BuiltinTheme
    general: GeneralTheme
    main: MainWindowTheme
    settings: SettingsWindowTheme
    about: AboutWindowTheme

    def to_env(self) -> dict[str, EnvValue]:
        """Flatten every section into a mapping of environment keys to values."""
        env: dict[str, EnvValue] = {}
        for part in (self.builtin, self.general, self.main, self.settings, self.about):
            for f in fields(part):
                env[env_key(part.section, f.name)] = getattr(part, f.name)
        return env


def _default_detector() -> Optional[str]:
    gtk_theme = os.environ.get("GTK_THEME")
    if not gtk_theme:
        return None
    return "dark" if "dark" in gtk_theme.lower() else "light"


def detect_system_theme(detector: Optional[Detector] = None) -> UITheme:
    """Ask ``detector`` for the system mode; dark when unknown or on failure."""
    detect = detector if detector is not None else _default_detector
    try:
        mode = detect()
    except Exception as error:  # detection is best effort
        log.warning("%s", error)
        return UITheme.DARK

    if isinstance(mode, UITheme):
        return mode
    if isinstance(mode, str) and mode.strip().lower() == "light":
        return UITheme.LIGHT
    return UITheme.DARK


def resolve_theme(configured: ConfiguredTheme, detector: Optional[Detector] = None) -> UITheme:
    """Turn the configured theme into the one to show."""
    if configured is ConfiguredTheme.LIGHT:
        return UITheme.LIGHT
    if configured is ConfiguredTheme.DARK:
        return UITheme.DARK
    return detect_system_theme(detector)


def _dark_theme() -> Theme:
    return Theme(
        builtin=BuiltinTheme(
            window_background_color=Color.rgb8(0x29, 0x29, 0x29),
            text_color=Color.rgb8(0xF0, 0xF0, 0xEA),
            disabled_text_color=Color.rgb8(0xA0, 0xA0, 0x9A),
            placeholder_color=Color.rgb8(0x80, 0x80, 0x80),
            primary_light=Color.rgb8(0x5C, 0xC4, 0xFF),
            primary_dark=Color.rgb8(0x00, 0x8D, 0xDD),
            background_light=Color.rgb8(0x3A, 0x3A, 0x3A),
            background_dark=Color.rgb8(0x31, 0x31, 0x31),
            foreground_light=Color.rgb8(0xF9, 0xF9, 0xF9),
            foreground_dark=Color.rgb8(0xBF, 0xBF, 0xBF),
            disabled_foreground_light=Color.rgb8(0x89, 0x89, 0x89),
            disabled_foreground_dark=Color.rgb8(0x6F, 0x6F, 0x6F),
            button_dark=Color.BLACK,
            button_light=Color.rgb8(0x21, 0x21, 0x21),
            disabled_button_dark=Color.grey8(0x28),
            disabled_button_light=Color.grey8(0x38),
            border_dark=Color.rgb8(0x3A, 0x3A, 0x3A),
            border_light=Color.rgb8(0xA1, 0xA1, 0xA1),
            selected_text_background_color=Color.rgb8(0x43, 0x70, 0xA8),
            selected_text_inactive_background_color=Color.grey8(0x74),
            selection_text_color=Color.rgb8(0x00, 0x00, 0x00),
            cursor_color=Color.WHITE,
            scrollbar_color=Color.rgb8(0xFF, 0xFF, 0xFF),
            scrollbar_border_color=Color.rgb8(0x77, 0x77, 0x77),
        ),
        general=GeneralTheme(
            window_background_color=Color.rgba(0.15, 0.15, 0.15, 0.9),
            window_border_color=Color.rgba(0.5, 0.5, 0.5, 0.9),
        ),
        main=MainWindowTheme(
            window_background_color=Color.rgba(0.15, 0.15, 0.15, 0.9),
            window_border_color=Color.rgba(0.5, 0.5, 0.5, 0.9),
            browser_label_size=12.0,
            browser_label_color=Color.rgb8(255, 255, 255),
            profile_label_size=11.0,
            profile_label_color=Color.rgb8(190, 190, 190),
            hotkey_background_color=Color.rgba(0.15, 0.15, 0.15, 1.0),
            hotkey_border_color=Color.rgba(0.4, 0.4, 0.4, 0.9),
            hotkey_text_color=Color.rgb8(128, 128, 128),
            options_button_text_color=Color.rgb8(128, 128, 128),
        ),
        settings=SettingsWindowTheme(
            active_tab_background_color=Color.rgb8(25, 90, 194),
            active_tab_text_color=Color.rgb8(255, 255, 255),
            inactive_tab_text_color=Color.rgb8(255, 255, 255),
            rule_background_color=Color.rgba(0.1, 0.1, 0.1, 0.9),
            rule_border_color=Color.rgba(0.5, 0.5, 0.5, 0.9),
        ),
        about=AboutWindowTheme(window_background_color=Color.rgb8(27, 32, 32)),
    )


def _light_theme() -> Theme:
    return Theme(
        builtin=BuiltinTheme(
            window_background_color=Color.rgb(0.85, 0.85, 0.85),
            text_color=Color.rgb8(10, 10, 10),
            disabled_text_color=Color.rgb8(0xA0, 0xA0, 0x9A),
            placeholder_color=Color.rgb8(0x80, 0x80, 0x80),
            primary_light=Color.rgb8(0x5C, 0xC4, 0xFF),
            primary_dark=Color.rgb8(0x00, 0x8D, 0xDD),
            background_light=Color.rgb8(220, 220, 220),
            background_dark=Color.rgb8(200, 200, 200),
            foreground_light=Color.rgb8(0xF9, 0xF9, 0xF9),
            foreground_dark=Color.rgb8(0xBF, 0xBF, 0xBF),
            disabled_foreground_light=Color.rgb8(0x89, 0x89, 0x89),
            disabled_foreground_dark=Color.rgb8(0x6F, 0x6F, 0x6F),
            button_dark=Color.rgb8(120, 120, 120),
            button_light=Color.rgb8(150, 150, 150),
            disabled_button_dark=Color.grey8(0x28),
            disabled_button_light=Color.grey8(0x38),
            border_dark=Color.rgb8(0x3A, 0x3A, 0x3A),
            border_light=Color.rgb8(0xA1, 0xA1, 0xA1),
            selected_text_background_color=Color.rgb8(0x43, 0x70, 0xA8),
            selected_text_inactive_background_color=Color.grey8(0x74),
            selection_text_color=Color.rgb8(0x00, 0x00, 0x00),
            cursor_color=Color.BLACK,
            scrollbar_color=Color.rgb8(0xFF, 0xFF, 0xFF),
            scrollbar_border_color=Color.rgb8(0x77, 0x77, 0x77),
        ),
        general=GeneralTheme(
            window_background_color=Color.rgba(0.85, 0.85, 0.85, 0.9),
            window_border_color=Color.rgba(0.7, 0.7, 0.7, 0.9),
        ),
        main=MainWindowTheme(
            window_background_color=Color.rgba8(215, 215, 215, 230),
            window_border_color=Color.rgba(0.7, 0.7, 0.7, 0.9),
            browser_label_size=12.0,
            browser_label_color=Color.rgb8(0, 0, 0),
            profile_label_size=11.0,
            profile_label_color=Color.rgb8(30, 30, 30),
            hotkey_background_color=Color.rgb8(215, 215, 215),
            hotkey_border_color=Color.rgba(0.4, 0.4, 0.4, 0.9),
            hotkey_text_color=Color.rgb8(128, 128, 128),
            options_button_text_color=Color.rgb8(128, 128, 128),
        ),
        settings=SettingsWindowTheme(
            active_tab_background_color=Color.rgb8(25, 90, 194),
            active_tab_text_color=Color.rgb8(255, 255, 255),
            inactive_tab_text_color=Color.rgb8(0, 0, 0),
            rule_background_color=Color.rgba(0.8, 0.8, 0.8, 0.9),
            rule_border_color=Color.rgba(0.5, 0.5, 0.5, 0.9),
        ),
        about=AboutWindowTheme(window_background_color=Color.rgb8(236, 236, 236)),
    )


def get_theme(ui_theme: UITheme) -> Theme:
    """Return the full set of colours for ``ui_theme``."""
    if ui_theme is UITheme.LIGHT:
        return _light_theme()
    return _dark_theme()