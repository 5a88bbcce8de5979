"""State shown by the picker and its settings dialog."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Sequence
from urllib.parse import urlsplit

from linkrouter.config import Config, ConfiguredTheme, ProfileAndOptions
from linkrouter.profiles import CommonBrowserProfile, UrlMatcher

log = logging.getLogger(__name__)


class SettingsTab(Enum):
    GENERAL = "general"
    RULES = "rules"
    ADVANCED = "advanced"


@dataclass
class UIProfileAndIncognito:
    profile: str
    incognito: bool = False


@dataclass
class UIVisualSettings:
    show_hotkeys: bool = True
    quit_on_lost_focus: bool = True
    theme: ConfiguredTheme = ConfiguredTheme.AUTO


@dataclass
class UIBehavioralSettings:
    unwrap_urls: bool = True


@dataclass
class UISettingsRule:
    """An editable rule; empty strings stand for absent values."""

    index: int
    saved: bool = False
    deleted: bool = False
    source_app: str = ""
    url_pattern: str = ""
    opener: Optional[UIProfileAndIncognito] = None

    def source_app_or_none(self) -> Optional[str]:
        return self.source_app or None

    def url_pattern_or_none(self) -> Optional[str]:
        return self.url_pattern or None


def _to_ui_opener(profile: Optional[ProfileAndOptions]) -> Optional[UIProfileAndIncognito]:
    if profile is None:
        return None
    return UIProfileAndIncognito(profile=profile.profile, incognito=profile.incognito)


@dataclass
class UISettings:
    tab: SettingsTab = SettingsTab.GENERAL
    default_opener: Optional[UIProfileAndIncognito] = None
    rules: list[UISettingsRule] = field(default_factory=list)
    visual_settings: UIVisualSettings = field(default_factory=UIVisualSettings)
    behavioral_settings: UIBehavioralSettings = field(default_factory=UIBehavioralSettings)

    @classmethod
    def from_config(cls, config: Config) -> UISettings:
        rules = [
            UISettingsRule(
                index=i,
                saved=True,
                deleted=False,
                source_app=rule.source_app or "",
                url_pattern=rule.url_pattern or "",
                opener=_to_ui_opener(rule.opener),
            )
            for i, rule in enumerate(config.rules)
        ]
        return cls(
            tab=SettingsTab.GENERAL,
            default_opener=_to_ui_opener(config.default_profile),
            rules=rules,
            visual_settings=UIVisualSettings(
                show_hotkeys=config.ui.show_hotkeys,
                quit_on_lost_focus=config.ui.quit_on_lost_focus,
                theme=config.ui.theme,
            ),
            behavioral_settings=UIBehavioralSettings(unwrap_urls=config.behavior.unwrap_urls),
        )

    def add_empty_rule(self) -> UISettingsRule:
        """Append an unsaved, empty rule and return it."""
        log.info("add_empty_rule called")
        rule = UISettingsRule(index=len(self.rules))
        self.rules.append(rule)
        return rule

    def mark_rules_as_saved(self) -> None:
        for rule in self.rules:
            if not rule.deleted:
                rule.saved = True


@dataclass(frozen=True)
class UIBrowser:
    browser_profile_index: int
    is_first: bool
    is_last: bool
    browser_name: str
    profile_name: str
    supports_profiles: bool
    supports_incognito: bool
    icon_path: str
    profile_icon_path: str
    unique_id: str
    unique_app_id: str
    filtered_index: int
    profile_name_maybe: Optional[str] = None
    restricted_url_matchers: tuple[UrlMatcher, ...] = ()

    def has_priority_ordering(self) -> bool:
        return bool(self.restricted_url_matchers)

    def full_name(self) -> str:
        """App name, plus the profile name when the app has profiles."""
        if self.supports_profiles:
            return f"{self.browser_name} ({self.profile_name})"
        return self.browser_name


def real_to_ui_browsers(profiles: Sequence[CommonBrowserProfile]) -> list[UIBrowser]:
    if not profiles:
        return []

    first_orderable = next(
        (i for i, p in enumerate(profiles) if not p.has_priority_ordering()), 0
    )
    last = len(profiles) - 1

    browsers = []
    for i, profile in enumerate(profiles):
        has_real_profiles = profile.app.has_real_profiles()
        browsers.append(
            UIBrowser(
                browser_profile_index=i,
                is_first=i == first_orderable,
                is_last=i == last,
                restricted_url_matchers=tuple(profile.restricted_url_matchers()),
                browser_name=profile.browser_name,
                profile_name=profile.profile_name,
                supports_profiles=has_real_profiles,
                profile_name_maybe=profile.profile_name if has_real_profiles else None,
                supports_incognito=profile.app.supports_incognito(),
                icon_path=profile.browser_icon_path,
                profile_icon_path=profile.profile_icon or "",
                unique_id=profile.unique_id(),
                unique_app_id=profile.unique_app_id(),
                filtered_index=i,
            )
        )
    return browsers


def _is_absolute_url(url: str) -> bool:
    try:
        return bool(urlsplit(url.strip()).scheme)
    except ValueError:
        return False


def get_filtered_browsers(url: str, browsers: Iterable[UIBrowser]) -> list[UIBrowser]:
    """Browsers that may open ``url``, restricted ones first, renumbered."""
    valid_url = _is_absolute_url(url)

    def allowed(browser: UIBrowser) -> bool:
        if not browser.restricted_url_matchers:
            return True
        return valid_url and any(m.url_matches(url) for m in browser.restricted_url_matchers)

    filtered = [
        replace(browser, filtered_index=index)
        for index, browser in enumerate(b for b in browsers if allowed(b))
    ]
    filtered.sort(key=lambda b: not b.has_priority_ordering())
    return filtered


@dataclass
class UIState:
    """Everything the picker window shows; filtered browsers follow the URL."""

    url: str = ""
    selected_browser: str = ""
    focused_index: Optional[int] = None
    incognito_mode: bool = False
    browsers: list[UIBrowser] = field(default_factory=list)
    filtered_browsers: Optional[list[UIBrowser]] = None
    restorable_app_profiles: list[UIBrowser] = field(default_factory=list)
    show_set_as_default: bool = False
    ui_settings: UISettings = field(default_factory=UISettings)
    has_non_main_window_open: bool = False

    def __post_init__(self) -> None:
        if self.filtered_browsers is None:
            self.filtered_browsers = get_filtered_browsers(self.url, self.browsers)