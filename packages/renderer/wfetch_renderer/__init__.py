"""Logo recoloring, wallpaper cropping and PNG output."""

from .assets import (
    HOLLOW_LOGO,
    LOGO_FILENAME,
    SMOOTH_LOGO,
    TEMPLATES,
    WALLPAPER_FILENAME,
    asset_path,
    output_path,
)
from .codec import open_image, save_png
from .models import CropRect, LogoTemplate
from .recolor import (
    FUZZ_THRESHOLD,
    PLACEHOLDERS,
    fit_size,
    logo_side,
    recolor_masked,
    recolor_placeholders,
    render_logo,
)
from .resize import resolve_crop, resize_source_image, scaled_size

__all__ = [
    "CropRect",
    "FUZZ_THRESHOLD",
    "HOLLOW_LOGO",
    "LOGO_FILENAME",
    "LogoTemplate",
    "PLACEHOLDERS",
    "SMOOTH_LOGO",
    "TEMPLATES",
    "WALLPAPER_FILENAME",
    "asset_path",
    "fit_size",
    "logo_side",
    "open_image",
    "output_path",
    "recolor_masked",
    "recolor_placeholders",
    "render_logo",
    "resize_source_image",
    "resolve_crop",
    "save_png",
    "scaled_size",
]
