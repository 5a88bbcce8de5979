"""Installed apps, their profiles, and how links are opened in them."""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Sequence

from linkrouter.config import Config

log = logging.getLogger(__name__)

URL_PLACEHOLDER = "%u"


class UrlMatcher(Protocol):
    """Something that decides whether a URL is covered by a pattern."""

    def url_matches(self, url: str) -> bool: ...


MatcherFactory = Callable[[str], UrlMatcher]


class SupportedApp(Protocol):
    """Per-app knowledge of command line arguments and URL handling."""

    def app_id(self) -> str: ...

    def supports_incognito(self) -> bool: ...

    def incognito_args(self) -> Sequence[str]: ...

    def profile_args(self, profile_cli_arg_value: str) -> Sequence[str]: ...

    def transformed_url(self, profile: CommonBrowserProfile, url: str) -> str: ...

    def url_as_first_arg(self) -> bool: ...

    def restricted_url_matchers(self) -> Sequence[UrlMatcher]: ...


class AppRepository(Protocol):
    def get_or_generate(self, app_id: str, restricted_domains: Sequence[str]) -> SupportedApp: ...


def _current_platform() -> str:
    if sys.platform == "darwin":
        return "macos"
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform in ("win32", "cygwin"):
        return "windows"
    return sys.platform


class InstalledAppProfilesType(Enum):
    REAL_PROFILES = "RealProfiles"
    PLACEHOLDER_PROFILES = "PlaceholderProfiles"


@dataclass
class InstalledBrowserProfile:
    profile_cli_arg_value: str
    profile_name: str
    profile_cli_container_name: Optional[str] = None
    profile_icon: Optional[str] = None
    profile_restricted_url_patterns: list[str] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        return {
            "profile_cli_arg_value": self.profile_cli_arg_value,
            "profile_cli_container_name": self.profile_cli_container_name,
            "profile_name": self.profile_name,
            "profile_icon": self.profile_icon,
            "profile_restricted_url_patterns": list(self.profile_restricted_url_patterns),
        }

    @classmethod
    def _from_dict(cls, data: Mapping[str, Any]) -> InstalledBrowserProfile:
        return cls(
            profile_cli_arg_value=data["profile_cli_arg_value"],
            profile_cli_container_name=data.get("profile_cli_container_name"),
            profile_name=data["profile_name"],
            profile_icon=data.get("profile_icon"),
            profile_restricted_url_patterns=list(data["profile_restricted_url_patterns"]),
        )


@dataclass
class InstalledAppProfiles:
    profiles_type: InstalledAppProfilesType
    profiles: list[InstalledBrowserProfile] = field(default_factory=list)

    @classmethod
    def new_real(cls, profiles: Iterable[InstalledBrowserProfile]) -> InstalledAppProfiles:
        return cls(InstalledAppProfilesType.REAL_PROFILES, list(profiles))

    @classmethod
    def new_placeholder(cls) -> InstalledAppProfiles:
        """A single unnamed profile for apps without real profiles."""
        placeholder = InstalledBrowserProfile(profile_cli_arg_value="", profile_name="")
        return cls(InstalledAppProfilesType.PLACEHOLDER_PROFILES, [placeholder])


@dataclass
class InstalledBrowser:
    """An app found on the system that can open URLs."""

    command: list[str]
    executable_path: str
    display_name: str
    bundle: str
    user_dir: str
    icon_path: str
    profiles: InstalledAppProfiles
    restricted_domains: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InstalledBrowser:
        """Build from the cached JSON form; raises ValueError on bad data."""
        try:
            profiles_data = data["profiles"]
            profiles = InstalledAppProfiles(
                profiles_type=InstalledAppProfilesType(profiles_data["profiles_type"]),
                profiles=[
                    InstalledBrowserProfile._from_dict(p) for p in profiles_data["profiles"]
                ],
            )
            return cls(
                command=list(data["command"]),
                executable_path=data["executable_path"],
                display_name=data["display_name"],
                bundle=data["bundle"],
                user_dir=data["user_dir"],
                icon_path=data["icon_path"],
                profiles=profiles,
                restricted_domains=list(data.get("restricted_domains", [])),
            )
        except (KeyError, TypeError) as error:
            raise ValueError(f"invalid installed browser data: {error!r}") from error

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": list(self.command),
            "executable_path": self.executable_path,
            "display_name": self.display_name,
            "bundle": self.bundle,
            "user_dir": self.user_dir,
            "icon_path": self.icon_path,
            "profiles": {
                "profiles_type": self.profiles.profiles_type.value,
                "profiles": [p._to_dict() for p in self.profiles.profiles],
            },
            "restricted_domains": list(self.restricted_domains),
        }


def replace_url_placeholder(command_arguments: Iterable[str], app_url: str) -> list[str]:
    """Replace every ``%u``/``%U`` argument with the URL."""
    return [app_url if arg.lower() == URL_PLACEHOLDER else arg for arg in command_arguments]


@dataclass(eq=False)
class BrowserCommon:
    command: list[str]
    executable_path: str
    display_name: str
    icon_path: str
    supported_app: SupportedApp
    profiles_type: InstalledAppProfilesType

    def unique_app_id(self) -> str:
        """Identifies this app in the configuration file."""
        return self.executable_path

    def has_real_profiles(self) -> bool:
        return self.profiles_type is InstalledAppProfilesType.REAL_PROFILES

    def supports_incognito(self) -> bool:
        return self.supported_app.supports_incognito()

    def create_command(
        self,
        profile: CommonBrowserProfile,
        url: str,
        incognito_mode: bool,
        platform: Optional[str] = None,
    ) -> list[str]:
        """Arguments that open ``url`` in ``profile`` on the given platform."""
        if not self.command:
            raise ValueError(f"no command configured for {self.display_name!r}")
        platform = platform or _current_platform()

        app = self.supported_app
        profile_args = list(app.profile_args(profile.profile_cli_arg_value))
        app_url = app.transformed_url(profile, url)
        incognito_args = (
            list(app.incognito_args()) if incognito_mode and app.supports_incognito() else []
        )
        main_command, *command_arguments = self.command

        if platform == "macos":
            url_first = app.url_as_first_arg()
            args = ["open", "-b", app.app_id()]
            # Without "-n" Safari-like apps take the URL as an event instead.
            args.append("-n" if url_first else app_url)
            args.append("--args")
            args.extend(profile_args)
            args.extend(incognito_args)
            if url_first:
                args.append(app_url)
            log.debug("Launching: %s", args)
            return args

        if platform == "linux":
            has_placeholder = any(arg.lower() == URL_PLACEHOLDER for arg in command_arguments)
            arguments = (
                replace_url_placeholder(command_arguments, app_url)
                if has_placeholder
                else list(command_arguments)
            )
            args = [main_command, *incognito_args, *arguments, *profile_args]
            if not has_placeholder:
                args.append(app_url)
            return args

        if platform == "windows":
            return [main_command, *profile_args, *incognito_args, app_url]

        raise ValueError(f"platform is not supported: {platform!r}")


@dataclass(eq=False)
class CommonBrowserProfile:
    profile_cli_arg_value: str
    profile_name: str
    app: BrowserCommon
    profile_cli_container_name: Optional[str] = None
    profile_icon: Optional[str] = None
    profile_restricted_url_matchers: list[UrlMatcher] = field(default_factory=list)

    @property
    def browser_name(self) -> str:
        return self.app.display_name

    @property
    def browser_icon_path(self) -> str:
        return self.app.icon_path

    def unique_id(self) -> str:
        """Identifies app, profile and container in the configuration file."""
        unique = f"{self.unique_app_id()}#{self.profile_cli_arg_value}"
        if self.profile_cli_container_name is not None:
            unique += f"#{self.profile_cli_container_name}"
        return unique

    def unique_app_id(self) -> str:
        return self.app.unique_app_id()

    def restricted_url_matchers(self) -> list[UrlMatcher]:
        """The profile's own restrictions, or the app's when it has none."""
        if self.profile_restricted_url_matchers:
            return list(self.profile_restricted_url_matchers)
        return list(self.app.supported_app.restricted_url_matchers())

    def has_priority_ordering(self) -> bool:
        return bool(self.restricted_url_matchers())

    def create_command(
        self, url: str, incognito_mode: bool, platform: Optional[str] = None
    ) -> list[str]:
        return self.app.create_command(self, url, incognito_mode, platform)

    def open_link(self, url: str, incognito_mode: bool) -> bool:
        """Start the app with ``url``; returns whether it could be started."""
        command = self.create_command(url, incognito_mode)
        try:
            subprocess.Popen(command)
        except OSError as error:
            log.warning("Could not launch %s: %s", command, error)
            return False
        return True


@dataclass(eq=False)
class GenericApp:
    """A browser with its profiles, or another app that opens links."""

    app: BrowserCommon
    profiles: list[CommonBrowserProfile]

    @classmethod
    def from_installed(
        cls,
        installed_browser: InstalledBrowser,
        app_repository: AppRepository,
        matcher_factory: MatcherFactory,
    ) -> GenericApp:
        supported_app = app_repository.get_or_generate(
            installed_browser.bundle, installed_browser.restricted_domains
        )
        app = BrowserCommon(
            command=list(installed_browser.command),
            executable_path=installed_browser.executable_path,
            display_name=installed_browser.display_name,
            icon_path=installed_browser.icon_path,
            supported_app=supported_app,
            profiles_type=installed_browser.profiles.profiles_type,
        )
        profiles = [
            CommonBrowserProfile(
                profile_cli_arg_value=p.profile_cli_arg_value,
                profile_name=p.profile_name,
                app=app,
                profile_cli_container_name=p.profile_cli_container_name,
                profile_icon=p.profile_icon,
                profile_restricted_url_matchers=[
                    matcher_factory(pattern) for pattern in p.profile_restricted_url_patterns
                ],
            )
            for p in installed_browser.profiles.profiles
        ]
        return cls(app, profiles)


def sort_browser_profiles(
    profiles: list[CommonBrowserProfile], profile_order: Sequence[str]
) -> None:
    """Sort in place by configured order; restricted apps always come first."""
    positions = {}
    for position, unique_id in enumerate(profile_order):
        positions.setdefault(unique_id, position)
    unordered = len(profile_order)
    profiles.sort(key=lambda p: positions.get(p.unique_id(), unordered))
    profiles.sort(key=lambda p: not p.has_priority_ordering())


@dataclass(eq=False)
class VisibleAndHiddenProfiles:
    visible: list[CommonBrowserProfile] = field(default_factory=list)
    hidden: list[CommonBrowserProfile] = field(default_factory=list)

    def find_by_id(self, unique_id: str) -> Optional[CommonBrowserProfile]:
        for profile in (*self.visible, *self.hidden):
            if profile.unique_id() == unique_id:
                return profile
        return None

    def hide_app(self, app_id: str) -> list[str]:
        """Hide every visible profile of an app; returns the hidden profile ids."""
        to_hide = [p for p in self.visible if p.unique_app_id() == app_id]
        self.visible[:] = [p for p in self.visible if p.unique_app_id() != app_id]
        self.hidden.extend(to_hide)
        return [p.unique_id() for p in to_hide]

    def hide_profile(self, unique_id: str) -> bool:
        for index, profile in enumerate(self.visible):
            if profile.unique_id() == unique_id:
                self.hidden.append(self.visible.pop(index))
                return True
        return False

    def restore_profile(self, unique_id: str, profile_order: Sequence[str]) -> bool:
        for index, profile in enumerate(self.hidden):
            if profile.unique_id() == unique_id:
                self.visible.append(self.hidden.pop(index))
                sort_browser_profiles(self.visible, profile_order)
                return True
        return False


def generate_all_browser_profiles(
    config: Config,
    installed_browsers: Iterable[InstalledBrowser],
    app_repository: AppRepository,
    matcher_factory: MatcherFactory,
) -> VisibleAndHiddenProfiles:
    """Split every installed app's profiles into visible and hidden ones."""
    result = VisibleAndHiddenProfiles()
    for installed_browser in installed_browsers:
        log.debug("App: %s (%s)", installed_browser.bundle, installed_browser.executable_path)
        app = GenericApp.from_installed(installed_browser, app_repository, matcher_factory)
        for profile in app.profiles:
            if profile.unique_app_id() in config.hidden_apps:
                log.debug("Skipping %r: whole app is hidden", profile.profile_name)
                result.hidden.append(profile)
            elif profile.unique_id() in config.hidden_profiles:
                log.debug("Skipping %r: profile is hidden", profile.profile_name)
                result.hidden.append(profile)
            else:
                result.visible.append(profile)

    sort_browser_profiles(result.visible, config.profile_order)
    return result