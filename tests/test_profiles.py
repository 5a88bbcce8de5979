from dataclasses import dataclass, field
from unittest.mock import patch
from urllib.parse import urlsplit

import pytest

from linkrouter.config import Config
from linkrouter.profiles import (
    BrowserCommon,
    CommonBrowserProfile,
    GenericApp,
    InstalledAppProfiles,
    InstalledAppProfilesType,
    InstalledBrowser,
    InstalledBrowserProfile,
    VisibleAndHiddenProfiles,
    generate_all_browser_profiles,
    replace_url_placeholder,
    sort_browser_profiles,
)

URL = "https://example.com/page"
EXE = "/usr/bin/firefox"


@dataclass
class HostMatcher:
    host: str

    def url_matches(self, url):
        return urlsplit(url).hostname == self.host


@dataclass
class FakeApp:
    identifier: str = "org.example.browser"
    incognito: bool = True
    url_first: bool = True
    matchers: tuple = ()

    def app_id(self):
        return self.identifier

    def supports_incognito(self):
        return self.incognito

    def incognito_args(self):
        return ["--incognito"]

    def profile_args(self, value):
        return ["--profile", value] if value else []

    def transformed_url(self, profile, url):
        return url

    def url_as_first_arg(self):
        return self.url_first

    def restricted_url_matchers(self):
        return list(self.matchers)


@dataclass
class FakeRepository:
    calls: list = field(default_factory=list)

    def get_or_generate(self, app_id, restricted_domains):
        self.calls.append((app_id, list(restricted_domains)))
        return FakeApp(identifier=app_id, matchers=tuple(HostMatcher(d) for d in restricted_domains))


def make_profile(arg="Default", command=None, exe=EXE, supported=None, container=None, matchers=()):
    app = BrowserCommon(
        command=command if command is not None else ["firefox"],
        executable_path=exe,
        display_name="Firefox",
        icon_path="/icons/firefox.png",
        supported_app=supported or FakeApp(),
        profiles_type=InstalledAppProfilesType.REAL_PROFILES,
    )
    return CommonBrowserProfile(
        profile_cli_arg_value=arg,
        profile_name=arg,
        app=app,
        profile_cli_container_name=container,
        profile_restricted_url_matchers=list(matchers),
    )


def make_installed(exe, profiles, domains=None):
    return InstalledBrowser(
        command=[exe],
        executable_path=exe,
        display_name="Browser",
        bundle="org.example." + exe.rsplit("/", 1)[-1],
        user_dir="/home/user/.config",
        icon_path="/icons/b.png",
        profiles=profiles,
        restricted_domains=domains or [],
    )


def test_replace_url_placeholder_any_case():
    assert replace_url_placeholder(["--new", "%U", "x", "%u"], URL) == ["--new", URL, "x", URL]


def test_linux_command_with_placeholder():
    profile = make_profile(command=["firefox", "--new-window", "%u"])
    assert profile.create_command(URL, True, "linux") == [
        "firefox", "--incognito", "--new-window", URL, "--profile", "Default"
    ]


def test_linux_command_without_placeholder_appends_url():
    profile = make_profile(command=["spotify"], arg="")
    assert profile.create_command(URL, False, "linux") == ["spotify", URL]


def test_incognito_ignored_when_unsupported():
    profile = make_profile(supported=FakeApp(incognito=False))
    assert profile.create_command(URL, True, "windows") == ["firefox", "--profile", "Default", URL]


def test_macos_url_as_first_arg():
    profile = make_profile(supported=FakeApp(url_first=True))
    assert profile.create_command(URL, True, "macos") == [
        "open", "-b", "org.example.browser", "-n", "--args",
        "--profile", "Default", "--incognito", URL,
    ]


def test_macos_url_as_event():
    profile = make_profile(supported=FakeApp(url_first=False), arg="")
    assert profile.create_command(URL, False, "macos") == [
        "open", "-b", "org.example.browser", URL, "--args"
    ]


def test_unsupported_platform_raises():
    with pytest.raises(ValueError):
        make_profile().create_command(URL, False, "haiku")


def test_empty_command_raises():
    with pytest.raises(ValueError):
        make_profile(command=[]).create_command(URL, False, "linux")


def test_unique_ids():
    assert make_profile().unique_id() == EXE + "#" + "Default"
    assert make_profile(container="Work").unique_id() == EXE + "#Default#Work"
    assert make_profile().unique_app_id() == EXE


def test_restricted_matchers_fall_back_to_app():
    app_matcher = HostMatcher("example.org")
    profile = make_profile(supported=FakeApp(matchers=(app_matcher,)))
    assert profile.restricted_url_matchers() == [app_matcher]
    assert profile.has_priority_ordering()
    own = HostMatcher("example.net")
    assert make_profile(supported=FakeApp(matchers=(app_matcher,)), matchers=[own]).restricted_url_matchers() == [own]
    assert not make_profile().has_priority_ordering()


def test_sort_browser_profiles_orders_and_puts_priority_first():
    a = make_profile("a")
    b = make_profile("b")
    c = make_profile("c")
    special = make_profile("s", matchers=[HostMatcher("example.org")])
    profiles = [a, b, special, c]
    sort_browser_profiles(profiles, [c.unique_id(), a.unique_id()])
    assert profiles == [special, c, a, b]


def test_installed_browser_round_trip():
    installed = make_installed(
        EXE,
        InstalledAppProfiles.new_real([
            InstalledBrowserProfile("Default", "Person", "box", "/icon.png", ["example.com"])
        ]),
        ["example.org"],
    )
    assert InstalledBrowser.from_dict(installed.to_dict()) == installed
    assert installed.to_dict()["profiles"]["profiles_type"] == "RealProfiles"


def test_installed_browser_defaults_and_errors():
    data = make_installed(EXE, InstalledAppProfiles.new_placeholder()).to_dict()
    del data["restricted_domains"]
    assert InstalledBrowser.from_dict(data).restricted_domains == []
    del data["bundle"]
    with pytest.raises(ValueError):
        InstalledBrowser.from_dict(data)


def test_placeholder_profiles():
    placeholder = InstalledAppProfiles.new_placeholder()
    assert placeholder.profiles_type is InstalledAppProfilesType.PLACEHOLDER_PROFILES
    assert [(p.profile_cli_arg_value, p.profile_name) for p in placeholder.profiles] == [("", "")]


def test_generic_app_from_installed_uses_repository_and_factory():
    repo = FakeRepository()
    installed = make_installed(
        EXE,
        InstalledAppProfiles.new_real([InstalledBrowserProfile("P", "P", None, None, ["example.net"])]),
        ["example.org"],
    )
    app = GenericApp.from_installed(installed, repo, HostMatcher)
    assert repo.calls == [(installed.bundle, ["example.org"])]
    assert app.profiles[0].profile_restricted_url_matchers == [HostMatcher("example.net")]
    assert app.app.has_real_profiles()


def test_generate_all_browser_profiles_hides():
    real = InstalledAppProfiles.new_real(
        [InstalledBrowserProfile("a", "A"), InstalledBrowserProfile("b", "B")]
    )
    first = make_installed("/bin/one", real)
    second = make_installed("/bin/two", InstalledAppProfiles.new_placeholder())
    config = Config(hidden_apps=["/bin/two"], hidden_profiles=["/bin/one#b"])
    result = generate_all_browser_profiles(config, [first, second], FakeRepository(), HostMatcher)
    assert [p.unique_id() for p in result.visible] == ["/bin/one#a"]
    assert sorted(p.unique_id() for p in result.hidden) == ["/bin/one#b", "/bin/two#"]


def test_visible_and_hidden_operations():
    a = make_profile("a")
    b = make_profile("b", exe="/bin/other")
    c = make_profile("c")
    profiles = VisibleAndHiddenProfiles(visible=[a, b, c])

    assert profiles.hide_app(EXE) == [a.unique_id(), c.unique_id()]
    assert profiles.visible == [b]
    assert profiles.find_by_id(c.unique_id()) is c

    assert profiles.hide_profile(b.unique_id())
    assert not profiles.hide_profile(b.unique_id())

    assert profiles.restore_profile(c.unique_id(), [c.unique_id()])
    assert profiles.visible == [c]
    assert not profiles.restore_profile("missing", [])
    assert profiles.find_by_id("missing") is None


def test_open_link_spawns_command():
    profile = make_profile(command=["firefox"], arg="")
    with patch("linkrouter.profiles.subprocess.Popen") as popen:
        assert profile.open_link(URL, False)
    assert popen.call_args.args[0] == profile.create_command(URL, False)


def test_open_link_reports_failure():
    profile = make_profile(command=["firefox"])
    with patch("linkrouter.profiles.subprocess.Popen", side_effect=OSError("missing")):
        assert profile.open_link(URL, False) is False