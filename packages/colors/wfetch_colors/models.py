"""Typed color, palette and color-pair models."""

from __future__ import annotations

import math
import string
from dataclasses import dataclass
from typing import Iterator, Mapping

from .errors import ParseFailure

PALETTE_SIZE = 16

# Standard ANSI slot order; index 0 is the terminal background.
TERMINAL_COLOR_NAMES: tuple[str, ...] = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
    "bright_black",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
    "bright_white",
)

_HEX_DIGITS = frozenset(string.hexdigits)


def _linear(channel: int) -> float:
    v = channel / 255
    return v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"channel {name}={value} outside 0..255")

    @classmethod
    def parse(cls, text: str) -> Color:
        """Parse ``#RRGGBB`` or ``#RRGGBBAA`` (leading ``#`` optional, any case)."""
        raw = text.strip()
        if raw.startswith("#"):
            raw = raw[1:]
        if len(raw) < 6:
            raise ParseFailure(f"color {text!r} needs at least 6 hex digits")
        if not set(raw) <= _HEX_DIGITS:
            raise ParseFailure(f"color {text!r} contains non-hex characters")
        r, g, b = (int(raw[i : i + 2], 16) for i in (0, 2, 4))
        a = int(raw[6:8], 16) if len(raw) == 8 else 255
        return cls(r, g, b, a)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> str:
        out = f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        if self.a != 255:
            out += f"{self.a:02x}"
        return out

    @property
    def fg(self) -> str:
        """SGR parameters for a true-color foreground."""
        return f"38;2;{self.r};{self.g};{self.b}"

    @property
    def bg(self) -> str:
        """SGR parameters for a true-color background."""
        return f"48;2;{self.r};{self.g};{self.b}"

    def distance(self, other: Color) -> float:
        return math.dist(self.rgb, other.rgb)

    def relative_luminance(self) -> float:
        """WCAG 2.0 relative luminance in [0, 1]."""
        return 0.2126 * _linear(self.r) + 0.7152 * _linear(self.g) + 0.0722 * _linear(self.b)

    def contrast_ratio(self, other: Color) -> float:
        l1 = self.relative_luminance()
        l2 = other.relative_luminance()
        lighter, darker = max(l1, l2), min(l1, l2)
        return (lighter + 0.05) / (darker + 0.05)

    def multiply(self, other: Color) -> Color:
        return Color(
            self.r * other.r // 255,
            self.g * other.g // 255,
            self.b * other.b // 255,
            self.a,
        )

    def with_alpha(self, alpha: int) -> Color:
        return Color(self.r, self.g, self.b, alpha)

    def __str__(self) -> str:
        return self.hex


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)


@dataclass(frozen=True)
class Palette:
    colors: tuple[Color, ...]

    def __post_init__(self) -> None:
        if len(self.colors) != PALETTE_SIZE:
            raise ParseFailure(f"palette needs {PALETTE_SIZE} colors, got {len(self.colors)}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> Palette:
        """Build from ``{"color0": "#rrggbb", ..., "color15": ...}``."""
        colors = []
        for i in range(PALETTE_SIZE):
            key = f"color{i}"
            if key not in mapping:
                raise ParseFailure(f"palette is missing {key}")
            value = mapping[key]
            if not isinstance(value, str):
                raise ParseFailure(f"palette entry {key} is not a string")
            colors.append(Color.parse(value))
        return cls(tuple(colors))

    @property
    def background(self) -> Color:
        return self.colors[0]

    @property
    def slots(self) -> tuple[Color, ...]:
        """Colors eligible for logo use, i.e. everything but the background."""
        return self.colors[1:]

    def name_of(self, color: Color) -> str | None:
        for index, candidate in enumerate(self.slots, start=1):
            if candidate == color:
                return TERMINAL_COLOR_NAMES[index]
        return None

    def __iter__(self) -> Iterator[Color]:
        return iter(self.colors)

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, index: int) -> Color:
        return self.colors[index]


@dataclass(frozen=True)
class ColorPair:
    primary: Color
    secondary: Color

    def names(self, palette: Palette) -> tuple[str, str]:
        """fastfetch color names, falling back to raw SGR when a color is not in the palette."""
        first = palette.name_of(self.primary) or self.primary.fg
        second = palette.name_of(self.secondary) or self.secondary.fg
        return first, second

    @property
    def fg_codes(self) -> tuple[str, str]:
        return self.primary.fg, self.secondary.fg

    @property
    def bg_codes(self) -> tuple[str, str]:
        return self.primary.bg, self.secondary.bg

    @property
    def fills(self) -> tuple[tuple[int, int, int], tuple[int, int, int]]:
        return self.primary.rgb, self.secondary.rgb
