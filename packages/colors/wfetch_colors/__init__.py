"""Color values, palette acquisition and contrast-based pair selection."""

from .contrast import MIN_CONTRAST, most_contrasting_pair, pair_score
from .errors import (
    AssetIOFailure,
    ConfigAbsent,
    EncodeFailure,
    PaletteUnavailable,
    ParseFailure,
    StrategiesExhausted,
    TerminalMismatch,
    TerminalQueryError,
    TerminalTimeout,
    WFetchError,
    first_success,
)
from .models import BLACK, PALETTE_SIZE, TERMINAL_COLOR_NAMES, WHITE, Color, ColorPair, Palette
from .palette import get_palette, load_cached_palette, query_terminal_palette

__all__ = [
    "AssetIOFailure",
    "BLACK",
    "Color",
    "ColorPair",
    "ConfigAbsent",
    "EncodeFailure",
    "MIN_CONTRAST",
    "PALETTE_SIZE",
    "Palette",
    "PaletteUnavailable",
    "ParseFailure",
    "StrategiesExhausted",
    "TERMINAL_COLOR_NAMES",
    "TerminalMismatch",
    "TerminalQueryError",
    "TerminalTimeout",
    "WFetchError",
    "WHITE",
    "first_success",
    "get_palette",
    "load_cached_palette",
    "most_contrasting_pair",
    "pair_score",
    "query_terminal_palette",
]
