"""Image decode/encode helpers that map Pillow failures onto the wfetch error taxonomy."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from wfetch_colors.errors import AssetIOFailure, EncodeFailure

# Modes Pillow can write to PNG without conversion.
PNG_MODES = frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"})


def open_image(path: Path) -> Image.Image:
    """Open and fully decode an image so later failures cannot surface lazily."""
    try:
        with Image.open(path) as handle:
            handle.load()
            return handle.copy()
    except FileNotFoundError as exc:
        raise AssetIOFailure(path, "file not found") from exc
    except (OSError, ValueError) as exc:
        raise AssetIOFailure(path, str(exc)) from exc


def png_compatible(image: Image.Image) -> Image.Image:
    if image.mode in PNG_MODES:
        return image
    return image.convert("RGBA" if "A" in image.getbands() else "RGB")


def save_png(image: Image.Image, path: Path) -> Path:
    try:
        png_compatible(image).save(path, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodeFailure(path, str(exc)) from exc
    return path
