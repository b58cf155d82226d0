"""Persistent wfetch settings schema and load/save helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

CONFIG_VERSION = 1

_LOG = logging.getLogger("wfetch.config")


@dataclass
class PaletteConfig:
    cache_path: str = "~/.cache/wallust/nix.json"
    live_query: bool = True
    query_timeout_ms: int = 100


@dataclass
class LogoConfig:
    waifu_size: int = 340
    waifu2_size: int = 305
    extended_bonus: int = 80
    builtin: str = "nixos"
    stock_colors: list[str] = field(default_factory=lambda: ["blue", "cyan"])


@dataclass
class WallpaperConfig:
    size: int = 270
    catalog_csv: str = "~/Pictures/Wallpapers/wallpapers.csv"
    ascii_converter: str = "ascii-image-converter"
    ascii_size: int = 70


@dataclass
class DisplayConfig:
    scale: float | None = None
    round_up_terminals: list[str] = field(default_factory=lambda: ["wezterm"])


@dataclass
class OutputConfig:
    directory: str = "/tmp/wfetch"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    palette: PaletteConfig = field(default_factory=PaletteConfig)
    logo: LogoConfig = field(default_factory=LogoConfig)
    wallpaper: WallpaperConfig = field(default_factory=WallpaperConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME", "").strip()
    root = Path(base) if base else Path.home() / ".config"
    return root / "wfetch" / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_palette(cfg: AppConfig) -> None:
    cfg.palette.query_timeout_ms = max(10, min(1000, int(cfg.palette.query_timeout_ms)))
    cfg.palette.live_query = bool(cfg.palette.live_query)


def _normalize_logo(cfg: AppConfig) -> None:
    defaults = LogoConfig()
    cfg.logo.waifu_size = max(16, int(cfg.logo.waifu_size))
    cfg.logo.waifu2_size = max(16, int(cfg.logo.waifu2_size))
    cfg.logo.extended_bonus = max(0, int(cfg.logo.extended_bonus))
    colors = cfg.logo.stock_colors
    if not isinstance(colors, list) or len(colors) != 2 or not all(isinstance(c, str) for c in colors):
        cfg.logo.stock_colors = defaults.stock_colors


def _normalize_wallpaper(cfg: AppConfig) -> None:
    cfg.wallpaper.size = max(16, int(cfg.wallpaper.size))
    cfg.wallpaper.ascii_size = max(10, int(cfg.wallpaper.ascii_size))


def _normalize_display(cfg: AppConfig) -> None:
    scale = cfg.display.scale
    if scale is not None:
        scale = float(scale)
        cfg.display.scale = scale if scale > 0 else None
    terms = cfg.display.round_up_terminals
    if not isinstance(terms, list):
        cfg.display.round_up_terminals = DisplayConfig().round_up_terminals
    else:
        cfg.display.round_up_terminals = [str(t).lower() for t in terms]


def _normalize_logging(cfg: AppConfig) -> None:
    level = str(cfg.logging.level).upper()
    cfg.logging.level = level if level in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"
    cfg.logging.keep_log_files = max(2, int(cfg.logging.keep_log_files))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        _LOG.warning("ignoring unreadable config %s: %s", path, exc)
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=int(raw.get("config_version", CONFIG_VERSION)),
        palette=_merge(PaletteConfig, raw.get("palette", {})),
        logo=_merge(LogoConfig, raw.get("logo", {})),
        wallpaper=_merge(WallpaperConfig, raw.get("wallpaper", {})),
        display=_merge(DisplayConfig, raw.get("display", {})),
        output=_merge(OutputConfig, raw.get("output", {})),
        logging=_merge(LoggingConfig, raw.get("logging", {})),
    )

    _normalize_palette(cfg)
    _normalize_logo(cfg)
    _normalize_wallpaper(cfg)
    _normalize_display(cfg)
    _normalize_logging(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
