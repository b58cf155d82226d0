"""Typed renderer models and crop geometry."""

from __future__ import annotations

import re
from dataclasses import dataclass

from wfetch_colors.errors import ParseFailure

_GEOMETRY_RE = re.compile(r"^\s*(\d+)x(\d+)\+(\d+)\+(\d+)\s*$")


@dataclass(frozen=True)
class CropRect:
    width: int
    height: int
    x: int
    y: int

    @classmethod
    def parse(cls, geometry: str) -> CropRect:
        """Parse an ImageMagick-style ``<w>x<h>+<x>+<y>`` geometry string."""
        match = _GEOMETRY_RE.match(geometry)
        if not match:
            raise ParseFailure(f"invalid crop geometry {geometry!r}")
        w, h, x, y = (int(v) for v in match.groups())
        return cls(width=w, height=h, x=x, y=y)

    @classmethod
    def centered_square(cls, width: int, height: int) -> CropRect:
        side = min(width, height)
        return cls(width=side, height=side, x=(width - side) // 2, y=(height - side) // 2)

    @property
    def is_square(self) -> bool:
        return self.width == self.height

    def squared(self) -> CropRect:
        """Clamp both sides to the smaller one, keeping the offset."""
        side = min(self.width, self.height)
        return CropRect(width=side, height=side, x=self.x, y=self.y)

    def fits_within(self, width: int, height: int) -> bool:
        return (
            self.width > 0
            and self.height > 0
            and self.x + self.width <= width
            and self.y + self.height <= height
        )

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Pillow crop box (left, upper, right, lower)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}+{self.x}+{self.y}"


@dataclass(frozen=True)
class LogoTemplate:
    """A bundled logo with either baked-in placeholder colors or a pair of masks."""

    name: str
    image: str
    default_size: int
    masks: tuple[str, str] | None = None
