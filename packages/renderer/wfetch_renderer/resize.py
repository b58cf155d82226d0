"""Crop an arbitrary source image to a square and resize it for the logo slot."""

from __future__ import annotations

import logging
import math
from pathlib import Path

from PIL import Image

from wfetch_colors.errors import ParseFailure

from .codec import open_image, save_png
from .models import CropRect

_LOG = logging.getLogger("wfetch.resize")

CROP_TEXT_KEYS = ("wallpaper-crop", "WallpaperCrop")
EXIF_IMAGE_DESCRIPTION = 0x010E


def embedded_crop_geometry(image: Image.Image) -> str | None:
    """Crop geometry stored in the image itself (PNG text chunk or EXIF description)."""
    for key in CROP_TEXT_KEYS:
        value = image.info.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    description = image.getexif().get(EXIF_IMAGE_DESCRIPTION)
    if isinstance(description, str) and description.strip():
        return description.strip()
    return None


def resolve_crop(image: Image.Image, crop_hint: str | None = None) -> CropRect:
    """Pick the crop rectangle: metadata when usable, else a centered square."""
    width, height = image.size
    fallback = CropRect.centered_square(width, height)

    geometry = crop_hint or embedded_crop_geometry(image)
    if not geometry:
        return fallback

    try:
        rect = CropRect.parse(geometry)
    except ParseFailure:
        _LOG.debug("ignoring unparseable crop geometry %r", geometry)
        return fallback

    if not rect.is_square:
        rect = rect.squared()
    if not rect.fits_within(width, height):
        _LOG.warning("crop %s exceeds %dx%d image, using centered square", rect, width, height)
        return fallback
    return rect


def scaled_size(target_size: int, scale: float = 1.0) -> int:
    return max(1, math.floor(target_size * scale))


def resize_source_image(
    source_path: Path,
    output_path: Path,
    target_size: int,
    scale: float = 1.0,
    crop_hint: str | None = None,
) -> Path:
    """Crop ``source_path`` to a square, resize it to ``target_size * scale`` and write a PNG."""
    image = open_image(Path(source_path))
    rect = resolve_crop(image, crop_hint)
    side = scaled_size(target_size, scale)

    cropped = image.crop(rect.box).resize((side, side), Image.Resampling.LANCZOS)
    save_png(cropped, Path(output_path))
    _LOG.info(
        "resized %s (crop %s) to %dx%d",
        source_path,
        rect,
        side,
        side,
        extra={"event": "wallpaper_resized", "path": str(output_path), "scale": scale},
    )
    return Path(output_path)
