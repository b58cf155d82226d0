"""Recolor bundled logo templates with a palette-derived color pair."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np
from PIL import Image

from wfetch_colors.errors import AssetIOFailure
from wfetch_colors.models import BLACK, Color, ColorPair

from .assets import asset_path
from .codec import open_image, save_png
from .models import LogoTemplate

_LOG = logging.getLogger("wfetch.recolor")

# 10% of the largest possible RGB distance, like ImageMagick's "-fuzz 10%".
FUZZ_THRESHOLD = 0.1 * math.sqrt(3 * 255**2)

PLACEHOLDERS: tuple[Color, Color] = (Color.parse("#5278c3"), Color.parse("#7fbae4"))

EXTENDED_BONUS = 80


def _distance_to(rgb: np.ndarray, color: Color) -> np.ndarray:
    diff = rgb.astype(np.float64) - np.asarray(color.rgb, dtype=np.float64)
    return np.sqrt((diff * diff).sum(axis=-1))


def _rgba_buffer(image: Image.Image) -> np.ndarray:
    # np.array copies, so the template image itself is never mutated.
    return np.array(image.convert("RGBA"), dtype=np.uint8)


def recolor_placeholders(
    template: Image.Image,
    pair: ColorPair,
    placeholders: tuple[Color, Color] = PLACEHOLDERS,
) -> Image.Image:
    """Replace pixels near either placeholder color, keeping their alpha.

    Placeholder 1 is tested first; a pixel it claims is not reconsidered.
    """
    buf = _rgba_buffer(template)
    rgb = buf[..., :3].copy()
    claimed = np.zeros(buf.shape[:2], dtype=bool)

    for placeholder, fill in zip(placeholders, (pair.primary, pair.secondary)):
        hit = ~claimed & (_distance_to(rgb, placeholder) <= FUZZ_THRESHOLD)
        buf[hit, :3] = fill.rgb
        claimed |= hit
        _LOG.debug("placeholder %s -> %s on %d pixels", placeholder.hex, fill.hex, int(hit.sum()))

    return Image.fromarray(buf)


def recolor_masked(
    template: Image.Image,
    mask1: Image.Image,
    mask2: Image.Image,
    pair: ColorPair,
) -> Image.Image:
    """Color the regions where ``buffer * mask`` is near black.

    Masks are composited in order: mask 2 is multiplied against the buffer
    after mask 1's fill, so a pixel only mask 1 marks keeps color 1.
    """
    buf = _rgba_buffer(template)

    for index, (mask, fill) in enumerate(((mask1, pair.primary), (mask2, pair.secondary)), start=1):
        if mask.size != template.size:
            raise AssetIOFailure(
                f"mask{index}",
                f"size {mask.size[0]}x{mask.size[1]} does not match template {template.size[0]}x{template.size[1]}",
            )
        rgb = buf[..., :3].astype(np.uint32)
        weights = np.asarray(mask.convert("RGB"), dtype=np.uint32)
        product = rgb * weights // 255
        region = _distance_to(product, BLACK) <= FUZZ_THRESHOLD
        buf[region, :3] = fill.rgb
        _LOG.debug("mask%d -> %s on %d pixels", index, fill.hex, int(region.sum()))

    return Image.fromarray(buf)


def fit_size(size: tuple[int, int], side: int) -> tuple[int, int]:
    """Scale ``size`` so its larger dimension equals ``side``."""
    width, height = size
    if width >= height:
        return side, max(1, round(height * side / width))
    return max(1, round(width * side / height)), side


def logo_side(
    template: LogoTemplate,
    image_size: int | None = None,
    extended: bool = False,
    scale: float = 1.0,
    extended_bonus: int = EXTENDED_BONUS,
) -> int:
    if image_size is not None:
        base = image_size
    else:
        base = template.default_size + (extended_bonus if extended else 0)
    return max(1, math.floor(base * scale))


def render_logo(template: LogoTemplate, pair: ColorPair, side: int, output: Path) -> Path:
    """Recolor ``template`` with ``pair``, fit it into a ``side`` square and write a PNG."""
    image = open_image(asset_path(template.image))
    if template.masks:
        mask1, mask2 = (open_image(asset_path(name)) for name in template.masks)
        recolored = recolor_masked(image, mask1, mask2, pair)
    else:
        recolored = recolor_placeholders(image, pair)

    resized = recolored.resize(fit_size(recolored.size, side), Image.Resampling.LANCZOS)
    save_png(resized, output)
    _LOG.info(
        "rendered %s logo %dx%d to %s",
        template.name,
        resized.size[0],
        resized.size[1],
        output,
        extra={"event": "logo_rendered", "path": str(output)},
    )
    return output
