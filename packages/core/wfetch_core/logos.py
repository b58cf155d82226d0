"""Decide which logo fastfetch shows and produce the artifact backing it."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from wfetch_colors import ColorPair, Palette, PaletteUnavailable, ParseFailure, get_palette, most_contrasting_pair
from wfetch_colors.palette import default_providers as default_palette_providers
from wfetch_renderer import (
    HOLLOW_LOGO,
    LOGO_FILENAME,
    SMOOTH_LOGO,
    TEMPLATES,
    WALLPAPER_FILENAME,
    asset_path,
    logo_side,
    output_path,
    render_logo,
    resize_source_image,
)

from .config import AppConfig
from .scale import ScaleProvider, resolve_scale
from .terminal import TerminalInfo, detect_terminal
from .wallpaper import catalog_lookup, detect_wallpaper

_LOG = logging.getLogger("wfetch.logos")


class LogoKind(str, Enum):
    DEFAULT = "default"
    WALLPAPER_ASCII = "wallpaper-ascii"
    WALLPAPER = "wallpaper"
    RECOLORED = "recolored"
    STOCK = "stock"


@dataclass(frozen=True)
class LogoRequest:
    hollow: bool = False
    smooth: bool = False
    filled: bool = False
    waifu: bool = False
    waifu2: bool = False
    # None: not requested, "": detect the current wallpaper, otherwise a path.
    wallpaper: str | None = None
    wallpaper_ascii: str | None = None
    image_size: int | None = None
    ascii_size: int | None = None
    extended: bool = False
    scale: float | None = None

    @property
    def recolor_requested(self) -> bool:
        return self.waifu or self.waifu2

    @property
    def stock_requested(self) -> bool:
        return self.hollow or self.smooth or self.filled


@dataclass(frozen=True)
class LogoChoice:
    kind: LogoKind
    type: str | None = None
    source: str | None = None
    colors: tuple[str, str] | None = None
    pair: ColorPair | None = None
    command: tuple[str, ...] | None = None

    def module(self) -> dict[str, Any]:
        """The ``logo`` object of a fastfetch JSON config."""
        if self.kind is LogoKind.DEFAULT:
            return {"type": "auto"}
        if self.kind is LogoKind.WALLPAPER_ASCII:
            # The converter's output is piped into fastfetch.
            return {"type": "file-raw", "source": "-"}

        out: dict[str, Any] = {}
        if self.type:
            out["type"] = self.type
        if self.source:
            out["source"] = self.source
        if self.colors:
            out["color"] = {"1": self.colors[0], "2": self.colors[1]}
        if self.kind in (LogoKind.WALLPAPER, LogoKind.RECOLORED):
            out["preserveAspectRatio"] = True
        return out


def ascii_converter_command(image: Path, width: int, converter: str = "ascii-image-converter") -> tuple[str, ...]:
    return (converter, "--color", "--braille", "--threshold", "50", "--width", str(width), str(image))


class LogoSelector:
    """Single-shot decision tree: ascii wallpaper, wallpaper image, recolored logo, stock logo, default."""

    def __init__(
        self,
        cfg: AppConfig,
        palette_provider: Callable[[], Palette] | None = None,
        terminal: TerminalInfo | None = None,
        scale_providers: list[tuple[str, ScaleProvider]] | None = None,
    ) -> None:
        self.cfg = cfg
        self._palette_provider = palette_provider or self._default_palette
        self._terminal = terminal
        self._scale_providers = scale_providers

    @property
    def terminal(self) -> TerminalInfo:
        if self._terminal is None:
            self._terminal = detect_terminal()
        return self._terminal

    def _default_palette(self) -> Palette:
        return get_palette(
            default_palette_providers(
                cache_path=Path(self.cfg.palette.cache_path),
                timeout_ms=self.cfg.palette.query_timeout_ms,
                live_query=self.cfg.palette.live_query,
            )
        )

    def display_scale(self, request: LogoRequest) -> float:
        explicit = request.scale if request.scale is not None else self.cfg.display.scale
        return resolve_scale(
            explicit,
            terminal=self.terminal,
            round_up_terminals=self.cfg.display.round_up_terminals,
            providers=self._scale_providers,
        )

    def _output(self, filename: str) -> Path:
        return output_path(filename, Path(self.cfg.output.directory))

    def resize_wallpaper(self, request: LogoRequest, explicit: str, scale: float) -> Path | None:
        wallpaper = detect_wallpaper(explicit or None)
        if wallpaper is None:
            return None
        entry = catalog_lookup(wallpaper, Path(self.cfg.wallpaper.catalog_csv))
        if request.image_size is not None:
            size = request.image_size
        else:
            size = self.cfg.wallpaper.size + (self.cfg.logo.extended_bonus if request.extended else 0)
        return resize_source_image(
            Path(wallpaper).expanduser(),
            self._output(WALLPAPER_FILENAME),
            target_size=size,
            scale=scale,
            crop_hint=entry.geometry if entry else None,
        )

    def select(self, request: LogoRequest) -> LogoChoice:
        if request.wallpaper_ascii is not None:
            resized = self.resize_wallpaper(request, request.wallpaper_ascii, scale=1.0)
            if resized is not None:
                width = request.ascii_size or self.cfg.wallpaper.ascii_size
                return LogoChoice(
                    kind=LogoKind.WALLPAPER_ASCII,
                    source=str(resized),
                    command=ascii_converter_command(resized, width, self.cfg.wallpaper.ascii_converter),
                )
            _LOG.warning("no wallpaper found for ascii logo", extra={"event": "wallpaper_missing"})

        if request.wallpaper is not None:
            resized = self.resize_wallpaper(request, request.wallpaper, scale=self.display_scale(request))
            if resized is not None:
                return LogoChoice(kind=LogoKind.WALLPAPER, type=self.terminal.image_type, source=str(resized))
            _LOG.warning("no wallpaper found for image logo", extra={"event": "wallpaper_missing"})

        if not (request.recolor_requested or request.stock_requested):
            return LogoChoice(kind=LogoKind.DEFAULT)

        try:
            palette = self._palette_provider()
            pair = most_contrasting_pair(palette.slots)
        except PaletteUnavailable as exc:
            if request.recolor_requested:
                raise
            _LOG.warning("%s, using stock colors", exc, extra={"event": "palette_fallback"})
            return self._stock(request, None, None)
        except ParseFailure as exc:
            if request.recolor_requested:
                raise PaletteUnavailable([("contrast", exc)]) from exc
            _LOG.warning("%s, using stock colors", exc, extra={"event": "palette_fallback"})
            return self._stock(request, None, None)

        _LOG.info(
            "selected colors %s and %s",
            pair.primary.hex,
            pair.secondary.hex,
            extra={"event": "pair_selected", "pair": [pair.primary.hex, pair.secondary.hex]},
        )
        if request.recolor_requested:
            return self._recolored(request, pair)
        return self._stock(request, palette, pair)

    def _recolored(self, request: LogoRequest, pair: ColorPair) -> LogoChoice:
        if request.waifu:
            template = dataclasses.replace(TEMPLATES["waifu"], default_size=self.cfg.logo.waifu_size)
        else:
            template = dataclasses.replace(TEMPLATES["waifu2"], default_size=self.cfg.logo.waifu2_size)
        side = logo_side(
            template,
            image_size=request.image_size,
            extended=request.extended,
            scale=self.display_scale(request),
            extended_bonus=self.cfg.logo.extended_bonus,
        )
        rendered = render_logo(template, pair, side, self._output(LOGO_FILENAME))
        return LogoChoice(kind=LogoKind.RECOLORED, type=self.terminal.image_type, source=str(rendered), pair=pair)

    def _stock(self, request: LogoRequest, palette: Palette | None, pair: ColorPair | None) -> LogoChoice:
        if palette is not None and pair is not None:
            colors: tuple[str, str] | None = pair.names(palette)
        else:
            colors = (self.cfg.logo.stock_colors[0], self.cfg.logo.stock_colors[1])

        if request.hollow:
            # Without a palette the hollow logo is drawn as a plain outline.
            return LogoChoice(
                kind=LogoKind.STOCK,
                type="file",
                source=str(asset_path(HOLLOW_LOGO)),
                colors=colors if pair is not None else None,
                pair=pair,
            )
        if request.smooth:
            return LogoChoice(kind=LogoKind.STOCK, type="file", source=str(asset_path(SMOOTH_LOGO)), colors=colors, pair=pair)
        return LogoChoice(kind=LogoKind.STOCK, type="builtin", source=self.cfg.logo.builtin, colors=colors, pair=pair)


def select_logo(request: LogoRequest, cfg: AppConfig | None = None, **kwargs: Any) -> LogoChoice:
    return LogoSelector(cfg or AppConfig(), **kwargs).select(request)
