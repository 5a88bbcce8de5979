"""Opening rules: which profile opens a link, chosen by source app and URL."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence
from urllib.parse import SplitResult, parse_qsl, urlsplit

from linkrouter.config import Config, ConfigRule, ProfileAndOptions
from linkrouter.profiles import MatcherFactory, VisibleAndHiddenProfiles
from linkrouter.ui_model import UISettingsRule

log = logging.getLogger(__name__)

# Link-wrapping services: host suffix and the query parameter holding the real URL.
UNWRAP_TARGETS = (
    ("safelinks.protection.outlook.com", "url"),
    ("l.messenger.com", "u"),
)


@dataclass(frozen=True)
class UrlOpenContext:
    """A URL to open, and the app it came from when known."""

    cleaned_url: str
    source_app_maybe: Optional[str] = None


@dataclass(frozen=True)
class OpeningRule:
    source_app: Optional[str] = None
    url_pattern: Optional[str] = None
    opener: Optional[ProfileAndOptions] = None


def _parse_absolute(url: str) -> Optional[SplitResult]:
    """Split ``url`` if it is an absolute URL, otherwise return None."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return parts


def to_opening_rules(config_rules: Iterable[ConfigRule]) -> list[OpeningRule]:
    return [
        OpeningRule(
            source_app=rule.source_app,
            url_pattern=rule.url_pattern,
            opener=rule.opener,
        )
        for rule in config_rules
    ]


def source_app_matches(rule: OpeningRule, actual_source_app: Optional[str]) -> bool:
    """A rule without a source app matches any; otherwise the app must be equal."""
    if rule.source_app is None:
        return True
    return actual_source_app is not None and rule.source_app == actual_source_app


@dataclass
class OpeningRulesAndDefaultProfile:
    opening_rules: list[OpeningRule] = field(default_factory=list)
    default_profile: Optional[ProfileAndOptions] = None
    matcher_factory: Optional[MatcherFactory] = None

    @classmethod
    def from_config(
        cls, config: Config, matcher_factory: MatcherFactory
    ) -> OpeningRulesAndDefaultProfile:
        return cls(
            opening_rules=to_opening_rules(config.rules),
            default_profile=config.default_profile,
            matcher_factory=matcher_factory,
        )

    def _url_matches(self, rule: OpeningRule, url: str) -> bool:
        if rule.url_pattern is None:
            return True
        if self.matcher_factory is None:
            raise ValueError("a matcher factory is needed to evaluate URL patterns")
        return self.matcher_factory(rule.url_pattern).url_matches(url)

    def rule_for(self, context: UrlOpenContext) -> Optional[ProfileAndOptions]:
        """The opener of the first matching rule, else the default profile.

        Returns None when the URL is not an absolute URL.
        """
        url = context.cleaned_url
        if _parse_absolute(url) is None:
            return None

        for rule in self.opening_rules:
            if self._url_matches(rule, url) and source_app_matches(
                rule, context.source_app_maybe
            ):
                return rule.opener

        return self.default_profile


def unwrap_url(url: str, unwrap_urls: bool) -> str:
    """Return the real target of a wrapped link, or ``url`` unchanged."""
    if not unwrap_urls:
        return url

    parts = _parse_absolute(url)
    if parts is None or not parts.hostname:
        return url

    host = parts.hostname.lower()
    for suffix, key in UNWRAP_TARGETS:
        if host.endswith(suffix):
            for name, value in parse_qsl(parts.query, keep_blank_values=True):
                if name == key:
                    return value
            return url
    return url


def open_link_if_matching_rule(
    context: UrlOpenContext,
    opening_rules: OpeningRulesAndDefaultProfile,
    profiles: VisibleAndHiddenProfiles,
) -> bool:
    """Open the link directly when a rule names a known profile."""
    opener = opening_rules.rule_for(context)
    if opener is None:
        return False

    profile = profiles.find_by_id(opener.profile)
    if profile is None:
        log.debug("Rule names unknown profile %s", opener.profile)
        return False

    profile.open_link(context.cleaned_url, opener.incognito)
    return True


def rules_to_config_rules(rules: Sequence[UISettingsRule]) -> list[ConfigRule]:
    """Convert edited rules to their stored form; empty strings become None."""
    return [
        ConfigRule(
            source_app=rule.source_app_or_none(),
            url_pattern=rule.url_pattern_or_none(),
            opener=(
                ProfileAndOptions(profile=rule.opener.profile, incognito=rule.opener.incognito)
                if rule.opener is not None
                else None
            ),
        )
        for rule in rules
    ]