"""Core services for settings, logging, environment probing and logo selection."""

from .config import AppConfig, load_config, save_config
from .logos import LogoChoice, LogoKind, LogoRequest, LogoSelector, ascii_converter_command, select_logo
from .scale import compositor_scale, resolve_scale
from .terminal import TerminalInfo, detect_terminal
from .wallpaper import CatalogEntry, catalog_lookup, detect_wallpaper

__all__ = [
    "AppConfig",
    "CatalogEntry",
    "LogoChoice",
    "LogoKind",
    "LogoRequest",
    "LogoSelector",
    "TerminalInfo",
    "ascii_converter_command",
    "catalog_lookup",
    "compositor_scale",
    "detect_terminal",
    "detect_wallpaper",
    "load_config",
    "resolve_scale",
    "save_config",
    "select_logo",
]
