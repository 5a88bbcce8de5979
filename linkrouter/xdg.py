"""Desktop integration through freedesktop.org conventions."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

log = logging.getLogger(__name__)

XDG_NAME = "software.Browsers"
DESKTOP_FILE_NAME = f"{XDG_NAME}.desktop"
DESKTOP_ENTRY_GROUP = "Desktop Entry"
HTTP_SCHEMES = ("x-scheme-handler/https", "x-scheme-handler/http")
ICON_SIZE = 48
ICON_EXTENSIONS = (".png", ".svg", ".xpm")

_ESCAPES = {"s": " ", "n": "\n", "t": "\t", "r": "\r", "\\": "\\"}


@dataclass(frozen=True)
class DesktopEntry:
    """The parts of a ``.desktop`` file needed to launch an app with a URL."""

    app_id: str
    display_name: str
    exec: str
    icon: Optional[str] = None


def _unescape(value: str) -> str:
    out = []
    chars = iter(value)
    for char in chars:
        if char == "\\":
            following = next(chars, "")
            out.append(_ESCAPES.get(following, "\\" + following))
        else:
            out.append(char)
    return "".join(out)


def _read_group(text: str, group: str) -> dict[str, str]:
    """Key/value pairs of one group of a desktop file; the first key wins."""
    values: dict[str, str] = {}
    current = None
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("[") and line.endswith("]"):
            current = line[1:-1]
            continue
        if current != group or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values.setdefault(key.strip(), value.strip())
    return values


def _languages_from_env() -> list[str]:
    """Locale names from the environment, most specific first."""
    for variable in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(variable, "")
        if not value or value in ("C", "POSIX"):
            continue
        locale = value.split(".", 1)[0].split("@", 1)[0]
        languages = [locale]
        if "_" in locale:
            languages.append(locale.split("_", 1)[0])
        return languages
    return []


def _localized(values: dict[str, str], key: str, locales: Sequence[str]) -> Optional[str]:
    for locale in locales:
        value = values.get(f"{key}[{locale}]")
        if value is not None:
            return value
    return values.get(key)


def parse_desktop_entry(
    path: Path, content_type: str, locales: Optional[Sequence[str]] = None
) -> Optional[DesktopEntry]:
    """Read a desktop file; None unless it handles ``content_type`` and can be run."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    values = _read_group(text, DESKTOP_ENTRY_GROUP)
    mime_types = [m.strip() for m in values.get("MimeType", "").split(";") if m.strip()]
    if content_type not in mime_types:
        return None

    app_id = path.stem
    locales = list(locales) if locales is not None else _languages_from_env()
    name = _localized(values, "Name", locales)
    if name is None:
        log.warning("no name found for %s", app_id)
        return None

    exec_value = values.get("Exec")
    if exec_value is None:
        return None

    icon = values.get("Icon")
    return DesktopEntry(
        app_id=app_id,
        display_name=_unescape(name),
        exec=exec_value,
        icon=_unescape(icon) if icon is not None else None,
    )


def _xdg_dir(variable: str, default: Path) -> Path:
    value = os.environ.get(variable)
    if value and os.path.isabs(value):
        return Path(value)
    return default


def _data_home() -> Path:
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share")


def _data_dirs() -> list[Path]:
    value = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    return [Path(p) for p in value.split(":") if p and os.path.isabs(p)]


def default_search_paths() -> list[Path]:
    """Directories holding application desktop files, without duplicates."""
    paths = [_data_home() / "applications"]
    paths.extend(d / "applications" for d in _data_dirs())
    return list(dict.fromkeys(paths))


def find_desktop_entries(
    content_type: str,
    search_paths: Optional[Iterable[Path]] = None,
    locales: Optional[Sequence[str]] = None,
) -> list[DesktopEntry]:
    """All apps handling ``content_type``, one per desktop file name, by file name."""
    paths = default_search_paths() if search_paths is None else list(search_paths)
    locales = list(locales) if locales is not None else _languages_from_env()

    by_file_name: dict[str, Path] = {}
    for directory in dict.fromkeys(Path(p) for p in paths):
        if not directory.is_dir():
            continue
        for desktop_file in sorted(directory.rglob("*.desktop")):
            by_file_name.setdefault(desktop_file.name, desktop_file)

    entries = (
        parse_desktop_entry(by_file_name[name], content_type, locales)
        for name in sorted(by_file_name)
    )
    return [entry for entry in entries if entry is not None]


def split_exec(exec_value: str) -> list[str]:
    """Split an ``Exec`` value into arguments the way a shell would."""
    try:
        return shlex.split(exec_value)
    except ValueError as error:
        raise ValueError(f"failed to parse Exec value {exec_value!r}: {error}") from error


def is_snap_command(command_parts: Iterable[str]) -> bool:
    return any(part.startswith("/snap/bin") for part in command_parts)


def executable_path_guess(command_parts: Sequence[str]) -> str:
    """The last argument that is not a field code, option or ``@`` argument."""
    for part in reversed(command_parts):
        if not part.startswith(("%", "-", "@")):
            return part
    return "unknown"


def _default_icon_dirs() -> list[Path]:
    dirs = [_data_home() / "icons"]
    dirs.extend(d / "icons" for d in _data_dirs())
    dirs.append(Path("/usr/share/pixmaps"))
    return list(dict.fromkeys(dirs))


def _icon_candidates(base: Path, name: str) -> Iterable[Path]:
    size_dir = f"{ICON_SIZE}x{ICON_SIZE}"
    for extension in ICON_EXTENSIONS:
        yield base / "hicolor" / size_dir / "apps" / f"{name}{extension}"
    if base.is_dir():
        for theme in sorted(p for p in base.iterdir() if p.is_dir() and p.name != "hicolor"):
            for extension in ICON_EXTENSIONS:
                yield theme / size_dir / "apps" / f"{name}{extension}"
    for extension in ICON_EXTENSIONS:
        yield base / f"{name}{extension}"


def find_icon_path(
    icon_value: str, icon_dirs: Optional[Iterable[Path]] = None
) -> Optional[Path]:
    """Resolve a desktop file ``Icon`` value to a file: an absolute path or a themed name."""
    if icon_value.startswith("/"):
        return Path(icon_value)
    dirs = _default_icon_dirs() if icon_dirs is None else [Path(d) for d in icon_dirs]
    for base in dirs:
        for candidate in _icon_candidates(base, icon_value):
            if candidate.is_file():
                return candidate
    return None


def config_root_dir() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / XDG_NAME


def cache_root_dir() -> Path:
    return _xdg_dir("XDG_CACHE_HOME", Path.home() / ".cache") / XDG_NAME


def logs_root_dir() -> Path:
    return _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state") / XDG_NAME / "logs"


def runtime_dir() -> Path:
    """``$XDG_RUNTIME_DIR``, falling back to the cache directory."""
    runtime = os.environ.get("XDG_RUNTIME_DIR")
    if runtime and os.path.isabs(runtime):
        return Path(runtime) / XDG_NAME
    return cache_root_dir()


def query_default_app(scheme: str) -> Optional[str]:
    """Desktop file registered for ``scheme``, or None when it cannot be asked."""
    try:
        result = subprocess.run(
            ["xdg-mime", "query", "default", scheme],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        log.warning("Could not query default app for scheme %s", scheme)
        return None
    default_app = (result.stdout or "").strip()
    log.info("Default for %s is '%s'", scheme, default_app)
    return default_app


def is_default_web_browser() -> bool:
    return all((query_default_app(s) or "") == DESKTOP_FILE_NAME for s in HTTP_SCHEMES)


def set_default_web_browser() -> bool:
    """Register as the web browser; returns True if it already was (nothing done)."""
    if is_default_web_browser():
        return True
    try:
        subprocess.run(["xdg-mime", "default", DESKTOP_FILE_NAME, *HTTP_SCHEMES], check=False)
    except OSError:
        log.warning("Could not set this app as the default browser")
    return False