"""Palette acquisition from a theming tool's cache or the live terminal."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Sequence

from .errors import ConfigAbsent, PaletteUnavailable, ParseFailure, first_success
from .models import PALETTE_SIZE, Palette
from .xterm import DEFAULT_TIMEOUT_MS, RawMode, TerminalChannel, open_tty, query_color

_LOG = logging.getLogger("wfetch.palette")

DEFAULT_CACHE_PATH = Path("~/.cache/wallust/nix.json")

PaletteProvider = Callable[[], Palette]


def load_cached_palette(path: Path = DEFAULT_CACHE_PATH) -> Palette:
    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigAbsent(f"palette cache {path} does not exist") from exc
    except OSError as exc:
        raise ConfigAbsent(f"palette cache {path} is unreadable: {exc.strerror}") from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseFailure(f"palette cache {path} is not valid JSON: {exc}") from exc

    colors = raw.get("colors") if isinstance(raw, dict) else None
    if not isinstance(colors, dict):
        raise ParseFailure(f"palette cache {path} has no colors object")
    return Palette.from_mapping(colors)


def query_terminal_palette(
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    channel: TerminalChannel | None = None,
) -> Palette:
    """Ask the terminal for each of the 16 slots; any failed slot fails the whole query."""
    owned = channel is None
    if channel is None:
        channel = open_tty()
    try:
        with RawMode(channel.read_fd):
            colors = tuple(query_color(channel, slot, timeout_ms) for slot in range(PALETTE_SIZE))
    finally:
        if owned:
            channel.close()
    return Palette(colors)


def default_providers(
    cache_path: Path = DEFAULT_CACHE_PATH,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    live_query: bool = True,
) -> list[tuple[str, PaletteProvider]]:
    providers: list[tuple[str, PaletteProvider]] = [("cache", lambda: load_cached_palette(cache_path))]
    if live_query:
        providers.append(("terminal", lambda: query_terminal_palette(timeout_ms)))
    return providers


def get_palette(providers: Sequence[tuple[str, PaletteProvider]] | None = None) -> Palette:
    """Return the first palette any provider can produce, else raise PaletteUnavailable."""
    palette = first_success(providers if providers is not None else default_providers(), PaletteUnavailable)
    _LOG.info(
        "palette acquired",
        extra={"event": "palette_acquired", "palette": [color.hex for color in palette]},
    )
    return palette
