"""User configuration: rules, hidden apps and profiles, ordering and settings."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional


class ConfiguredTheme(Enum):
    AUTO = "Auto"
    LIGHT = "Light"
    DARK = "Dark"


@dataclass(frozen=True)
class ProfileAndOptions:
    """A profile to open links in, and whether to use incognito mode."""

    profile: str
    incognito: bool = False


@dataclass(frozen=True)
class UIConfig:
    show_hotkeys: bool = True
    quit_on_lost_focus: bool = True
    theme: ConfiguredTheme = ConfiguredTheme.AUTO


@dataclass(frozen=True)
class BehavioralConfig:
    unwrap_urls: bool = True


@dataclass(frozen=True)
class ConfigRule:
    """Open links from ``source_app`` matching ``url_pattern`` with ``opener``."""

    source_app: Optional[str] = None
    url_pattern: Optional[str] = None
    opener: Optional[ProfileAndOptions] = None


@dataclass
class Config:
    hidden_apps: list[str] = field(default_factory=list)
    hidden_profiles: list[str] = field(default_factory=list)
    profile_order: list[str] = field(default_factory=list)
    rules: list[ConfigRule] = field(default_factory=list)
    default_profile: Optional[ProfileAndOptions] = None
    ui: UIConfig = field(default_factory=UIConfig)
    behavior: BehavioralConfig = field(default_factory=BehavioralConfig)

    def hide_all_profiles(self, profile_ids) -> None:
        """Hide every profile in ``profile_ids``."""
        for profile_id in profile_ids:
            self.hide_profile(profile_id)

    def hide_profile(self, unique_id: str) -> None:
        if unique_id not in self.hidden_profiles:
            self.hidden_profiles.append(unique_id)

    def restore_profile(self, unique_id: str) -> None:
        self.hidden_profiles = [p for p in self.hidden_profiles if p != unique_id]

    def set_profile_order(self, profile_ids) -> None:
        self.profile_order = list(profile_ids)

    def set_rules(self, rules) -> None:
        self.rules = list(rules)

    def set_default_profile(self, profile: Optional[ProfileAndOptions]) -> None:
        self.default_profile = profile

    def set_ui_config(self, ui_config: UIConfig) -> None:
        self.ui = replace(ui_config)

    def set_behavior(self, behavior: BehavioralConfig) -> None:
        self.behavior = replace(behavior)