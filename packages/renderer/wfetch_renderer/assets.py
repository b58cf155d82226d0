"""Bundled asset lookup and scratch output paths."""

from __future__ import annotations

import os
from pathlib import Path

from wfetch_colors.errors import AssetIOFailure, EncodeFailure

from .models import LogoTemplate

ASSETS_ENV = "WFETCH_ASSETS_DIR"
DEFAULT_OUTPUT_DIR = Path("/tmp/wfetch")

LOGO_FILENAME = "logo.png"
WALLPAPER_FILENAME = "wallpaper.png"

TEMPLATES: dict[str, LogoTemplate] = {
    "waifu": LogoTemplate(name="waifu", image="logo1.png", default_size=340),
    "waifu2": LogoTemplate(
        name="waifu2",
        image="logo2.png",
        default_size=305,
        masks=("logo2-mask1.png", "logo2-mask2.png"),
    ),
}

HOLLOW_LOGO = "hollow.txt"
SMOOTH_LOGO = "smooth.txt"


def assets_dir() -> Path:
    override = os.environ.get(ASSETS_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(__file__).resolve().parent / "assets"


def asset_path(filename: str) -> Path:
    path = assets_dir() / filename
    if not path.is_file():
        raise AssetIOFailure(path, "bundled asset is missing")
    return path


def output_path(filename: str, directory: Path | None = None) -> Path:
    """Path for a generated artifact; the directory is created if needed."""
    base = Path(directory).expanduser() if directory else DEFAULT_OUTPUT_DIR
    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise EncodeFailure(base, f"cannot create output directory: {exc.strerror}") from exc
    return base / filename
