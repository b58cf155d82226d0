"""Current wallpaper detection and crop lookup from the wallpaper catalog."""

from __future__ import annotations

import csv
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

import psutil

from wfetch_colors.errors import ConfigAbsent, ParseFailure, StrategiesExhausted, first_success

_LOG = logging.getLogger("wfetch.wallpaper")

WallpaperProvider = Callable[[], str]

GSETTINGS_KEYS = (
    ("org.gnome.desktop.background", "picture-uri"),
    ("org.cinnamon.desktop.background", "picture-uri"),
    ("org.mate.background", "picture-filename"),
)


@dataclass(frozen=True)
class CatalogEntry:
    filename: str
    width: int
    height: int
    geometry: str


def _non_empty(value: str | None, source: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ConfigAbsent(f"{source} reported no wallpaper")
    return value


def _stdout(cmd: list[str]) -> str:
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=2, check=False)
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ConfigAbsent(f"{cmd[0]} unavailable: {exc}") from exc
    if proc.returncode != 0:
        raise ConfigAbsent(f"{cmd[0]} exited with status {proc.returncode}")
    return proc.stdout


def from_runtime_file(runtime_dir: str | None = None) -> str:
    base = runtime_dir or os.environ.get("XDG_RUNTIME_DIR", "")
    if not base:
        raise ConfigAbsent("XDG_RUNTIME_DIR is not set")
    path = Path(base) / "current_wallpaper"
    try:
        return _non_empty(path.read_text(encoding="utf-8"), str(path))
    except OSError as exc:
        raise ConfigAbsent(f"{path} is unreadable") from exc


def from_swww() -> str:
    lines = _stdout(["swww", "query"]).splitlines()
    if not lines or "image: " not in lines[0]:
        raise ConfigAbsent("swww reported no image")
    wallpaper = lines[0].rsplit("image: ", 1)[1].strip().strip("'")
    if wallpaper == "STDIN":
        raise ConfigAbsent("swww image was piped from stdin")
    return _non_empty(wallpaper, "swww")


def from_swaybg() -> str:
    for proc in psutil.process_iter(["name", "cmdline"]):
        if proc.info.get("name") == "swaybg" and proc.info.get("cmdline"):
            return _non_empty(proc.info["cmdline"][-1], "swaybg")
    raise ConfigAbsent("swaybg is not running")


def from_hyprpaper(conf: Path | None = None) -> str:
    conf = conf or Path("~/.config/hypr/hyprpaper.conf").expanduser()
    try:
        lines = conf.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise ConfigAbsent(f"{conf} is unreadable") from exc
    for line in lines:
        line = line.strip()
        if line.startswith("wallpaper") and "," in line:
            return _non_empty(line.rsplit(",", 1)[1], "hyprpaper")
    raise ConfigAbsent(f"{conf} sets no wallpaper")


def _strip_uri(value: str) -> str:
    value = value.strip().strip("'")
    return value[len("file://") :] if value.startswith("file://") else value


def from_gsettings() -> str:
    """gnome, cinnamon and mate keep the wallpaper in gsettings."""
    for schema, key in GSETTINGS_KEYS:
        try:
            return _non_empty(_strip_uri(_stdout(["gsettings", "get", schema, key])), schema)
        except ConfigAbsent:
            continue
    raise ConfigAbsent("gsettings has no wallpaper key")


def default_providers(explicit: str | None = None) -> list[tuple[str, WallpaperProvider]]:
    providers: list[tuple[str, WallpaperProvider]] = []
    if explicit:
        providers.append(("argument", lambda: explicit))
    providers += [
        ("runtime", from_runtime_file),
        ("swww", from_swww),
        ("swaybg", from_swaybg),
        ("hyprpaper", from_hyprpaper),
        ("gsettings", from_gsettings),
    ]
    return providers


def detect_wallpaper(
    explicit: str | None = None,
    providers: Sequence[tuple[str, WallpaperProvider]] | None = None,
) -> str | None:
    """Full path of the wallpaper being shown, or None when nothing reports one."""
    try:
        return first_success(
            providers if providers is not None else default_providers(explicit),
            lambda errors: StrategiesExhausted("wallpaper", errors),
        )
    except StrategiesExhausted as exc:
        _LOG.info("%s", exc, extra={"event": "wallpaper_not_found"})
        return None


def _geometry(row: dict[str, str], width: int, height: int) -> str:
    value = (row.get("1x1") or "").strip()
    if not value:
        raise ParseFailure("catalog row has no 1x1 crop")
    if "x" in value:
        return value
    # Older catalogs only store the offset of the square.
    side = min(width, height)
    return f"{side}x{side}+{value}"


def catalog_lookup(image: str | Path, catalog: Path) -> CatalogEntry | None:
    """Find the catalog row for ``image`` by filename."""
    catalog = Path(catalog).expanduser()
    if not catalog.is_file():
        return None

    fname = Path(image).name
    with catalog.open(newline="", encoding="utf-8") as fh:
        for row in csv.DictReader(fh):
            if row.get("filename") != fname:
                continue
            try:
                width = int(row.get("width") or 0)
                height = int(row.get("height") or 0)
                return CatalogEntry(filename=fname, width=width, height=height, geometry=_geometry(row, width, height))
            except (ValueError, ParseFailure) as exc:
                _LOG.warning("skipping malformed catalog row for %s: %s", fname, exc)
                return None
    return None
