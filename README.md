# linkrouter

linkrouter holds the logic for deciding where a clicked link should open:
which installed browser, browser profile or link-handling app, whether in
incognito mode, and which of them to offer when no rule decides. It is a
library; it has no dependencies outside the standard library.

## Modules

- `linkrouter.config` – `Config` with the opening rules (`ConfigRule`), the
  default opener (`ProfileAndOptions`), hidden apps and profiles, the profile
  order, and `UIConfig` (hotkeys, quit on lost focus, `ConfiguredTheme`) and
  `BehavioralConfig` (`unwrap_urls`). Methods such as `hide_profile`,
  `restore_profile`, `hide_all_profiles`, `set_profile_order` and `set_rules`
  edit it in memory.
- `linkrouter.profiles` – `InstalledBrowser` (with `from_dict`/`to_dict` for a
  JSON cache), `InstalledAppProfiles` (`new_real`, `new_placeholder`),
  `GenericApp.from_installed`, `CommonBrowserProfile` and `BrowserCommon`.
  A profile builds the command line that opens a URL for `"macos"`, `"linux"`
  or `"windows"` (`create_command`) and can start it (`open_link`).
  `generate_all_browser_profiles` splits profiles into visible and hidden
  ones (`VisibleAndHiddenProfiles`) and `sort_browser_profiles` orders them.
- `linkrouter.rules` – `OpeningRulesAndDefaultProfile.rule_for` returns the
  opener of the first rule matching a `UrlOpenContext`, or the default
  opener; `unwrap_url` recovers the real target of Outlook Safe Links and
  Messenger redirect links; `open_link_if_matching_rule` opens the link
  directly when a rule names a known profile; `rules_to_config_rules`
  converts edited rules back to `ConfigRule`s.
- `linkrouter.ui_model` – the data a picker window shows: `UIBrowser`,
  `UIState`, `UISettings` (`from_config`, `add_empty_rule`,
  `mark_rules_as_saved`), `real_to_ui_browsers` and `get_filtered_browsers`.
- `linkrouter.geometry` – picker window size and placement
  (`recalculate_window_size`, `calculate_window_position`,
  `main_window_frame`).
- `linkrouter.theme` – light and dark colour sets (`get_theme`, `Theme.to_env`)
  and `resolve_theme` / `detect_system_theme`.
- `linkrouter.textutil` – `ellipsize`.
- `linkrouter.xdg` – Linux desktop integration: reading `.desktop` files
  (`parse_desktop_entry`, `find_desktop_entries`), splitting `Exec` lines,
  guessing the executable, finding icons, the XDG config, cache, log and
  runtime directories, and querying or setting the default web browser
  through the `xdg-mime` command.

## Examples

```python
from linkrouter.textutil import ellipsize

ellipsize("some text", 8)   # "some te…"
ellipsize("some text", 9)   # "some text"
```

Choosing an opener. URL patterns are evaluated by a matcher you supply: any
callable that takes a pattern and returns an object with a
`url_matches(url)` method.

```python
from linkrouter.config import Config, ConfigRule, ProfileAndOptions
from linkrouter.rules import OpeningRulesAndDefaultProfile, UrlOpenContext

class PrefixMatcher:
    def __init__(self, pattern):
        self.pattern = pattern

    def url_matches(self, url):
        return url.startswith(self.pattern)

config = Config(
    rules=[ConfigRule(url_pattern="https://example.com/",
                      opener=ProfileAndOptions("/usr/bin/firefox#work"))],
    default_profile=ProfileAndOptions("/usr/bin/chromium#"),
)
rules = OpeningRulesAndDefaultProfile.from_config(config, PrefixMatcher)

rules.rule_for(UrlOpenContext("https://example.com/docs"))  # the firefox#work opener
rules.rule_for(UrlOpenContext("https://example.org/"))      # the default opener
rules.rule_for(UrlOpenContext("not a url"))                 # None
```

Window size: at most six entries are shown without scrolling, at least one.

```python
from linkrouter.geometry import calculate_visible_browser_count, recalculate_window_size

calculate_visible_browser_count(10)   # 6
calculate_visible_browser_count(0)    # 1
recalculate_window_size(3)            # Size(width=222.0, height=143.0)
```

Themes:

```python
from linkrouter.config import ConfiguredTheme
from linkrouter.theme import UITheme, get_theme, resolve_theme

resolve_theme(ConfiguredTheme.AUTO, lambda: "light")            # UITheme.LIGHT
get_theme(UITheme.DARK).main.browser_label_color.to_hex()       # "#FFFFFFFF"
```

Without a detector, `detect_system_theme` looks at `GTK_THEME`, and falls
back to dark when the mode is unknown or detection fails.

## How rules work

Rules are checked in order. A rule matches when its URL pattern (if any)
matches the link and its source app (if any) equals the app the link came
from. The first match wins; otherwise the default opener is used. A link that
is not an absolute URL matches nothing.

Profiles restricted to certain URLs are always listed first and are shown
only for links they match; the rest follow the configured profile order.

## What it does not do

- It draws no window. The picker's state, menus-free model and geometry are
  here, but there is no GUI, no keyboard handling and no message loop.
- It has no command-line entry point.
- It does not read or write the configuration file; `Config` lives in memory.
- It knows no particular browser: per-app argument handling
  (`SupportedApp`), the app repository (`AppRepository`) and URL pattern
  matching are protocols the caller implements. Discovering browser profiles
  on disk is likewise left to the caller.
- There is no move-up/move-down reordering helper; set the order with
  `Config.set_profile_order` and `sort_browser_profiles`.