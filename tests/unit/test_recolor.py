import sys
import tempfile
import unittest
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "colors"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from wfetch_colors.errors import AssetIOFailure
from wfetch_colors.models import Color, ColorPair
from wfetch_renderer.assets import TEMPLATES
from wfetch_renderer.models import LogoTemplate
from wfetch_renderer.recolor import (
    PLACEHOLDERS,
    fit_size,
    logo_side,
    recolor_masked,
    recolor_placeholders,
    render_logo,
)

PAIR = ColorPair(Color.parse("#f7768e"), Color.parse("#9ece6a"))


class PlaceholderRecolorTests(unittest.TestCase):
    def test_placeholders_replaced_alpha_kept(self):
        image = Image.new("RGBA", (3, 1))
        image.putpixel((0, 0), PLACEHOLDERS[0].rgb + (255,))
        image.putpixel((1, 0), PLACEHOLDERS[1].rgb + (90,))
        image.putpixel((2, 0), (255, 255, 255, 255))

        out = recolor_placeholders(image, PAIR)
        self.assertEqual(out.getpixel((0, 0)), PAIR.primary.rgb + (255,))
        self.assertEqual(out.getpixel((1, 0)), PAIR.secondary.rgb + (90,))
        self.assertEqual(out.getpixel((2, 0)), (255, 255, 255, 255))

    def test_template_is_not_mutated(self):
        image = Image.new("RGBA", (2, 2), PLACEHOLDERS[0].rgb + (255,))
        recolor_placeholders(image, PAIR)
        self.assertEqual(image.getpixel((0, 0)), PLACEHOLDERS[0].rgb + (255,))

    def test_near_placeholder_within_fuzz(self):
        near = tuple(c + 10 for c in PLACEHOLDERS[0].rgb)
        image = Image.new("RGBA", (1, 1), near + (255,))
        self.assertEqual(recolor_placeholders(image, PAIR).getpixel((0, 0)), PAIR.primary.rgb + (255,))

    def test_first_placeholder_claims_pixels_first(self):
        # Replacing placeholder 1 with placeholder 2 must not chain into a second replacement.
        pair = ColorPair(PLACEHOLDERS[1], Color.parse("#000000"))
        image = Image.new("RGBA", (1, 1), PLACEHOLDERS[0].rgb + (255,))
        self.assertEqual(recolor_placeholders(image, pair).getpixel((0, 0)), PLACEHOLDERS[1].rgb + (255,))


class MaskRecolorTests(unittest.TestCase):
    def test_mask_regions(self):
        template = Image.new("RGBA", (4, 1), (40, 40, 40, 255))
        template.putpixel((3, 0), (240, 240, 240, 255))
        mask1 = Image.new("L", (4, 1), 255)
        mask2 = Image.new("L", (4, 1), 255)
        mask1.putpixel((0, 0), 0)
        mask1.putpixel((2, 0), 0)
        mask2.putpixel((1, 0), 0)
        mask2.putpixel((2, 0), 0)

        out = recolor_masked(template, mask1, mask2, PAIR)
        self.assertEqual(out.getpixel((0, 0)), PAIR.primary.rgb + (255,))
        self.assertEqual(out.getpixel((1, 0)), PAIR.secondary.rgb + (255,))
        # mask 2 is applied last
        self.assertEqual(out.getpixel((2, 0)), PAIR.secondary.rgb + (255,))
        self.assertEqual(out.getpixel((3, 0)), (240, 240, 240, 255))

    def test_dark_pixel_marked_by_first_mask_only_keeps_first_color(self):
        template = Image.new("RGBA", (1, 1), (5, 5, 5, 128))
        out = recolor_masked(template, Image.new("L", (1, 1), 0), Image.new("L", (1, 1), 255), PAIR)
        self.assertEqual(out.getpixel((0, 0)), PAIR.primary.rgb + (128,))

    def test_pixel_marked_by_second_mask_only(self):
        template = Image.new("RGBA", (1, 1), (200, 200, 200, 255))
        out = recolor_masked(template, Image.new("L", (1, 1), 255), Image.new("L", (1, 1), 0), PAIR)
        self.assertEqual(out.getpixel((0, 0)), PAIR.secondary.rgb + (255,))

    def test_jpeg_mask_noise_stays_within_fuzz(self):
        mask = Image.new("L", (16, 16), 255)
        mask.paste(0, (0, 0, 5, 16))
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "mask1.jpg"
            mask.save(path, quality=60)
            with Image.open(path) as lossy:
                lossy.load()
                noisy = lossy.copy()
        template = Image.new("RGBA", (16, 16), (40, 40, 40, 255))
        out = recolor_masked(template, noisy, Image.new("L", (16, 16), 255), PAIR)
        for y in (0, 7, 15):
            self.assertEqual(out.getpixel((1, y)), PAIR.primary.rgb + (255,))
            self.assertEqual(out.getpixel((12, y)), (40, 40, 40, 255))

    def test_mask_size_mismatch(self):
        template = Image.new("RGBA", (4, 4))
        with self.assertRaises(AssetIOFailure):
            recolor_masked(template, Image.new("L", (2, 2)), Image.new("L", (4, 4)), PAIR)


class SizingTests(unittest.TestCase):
    def test_fit_size_keeps_aspect(self):
        self.assertEqual(fit_size((256, 256), 340), (340, 340))
        self.assertEqual(fit_size((400, 200), 100), (100, 50))
        self.assertEqual(fit_size((200, 400), 100), (50, 100))

    def test_logo_side(self):
        template = LogoTemplate(name="t", image="t.png", default_size=340)
        self.assertEqual(logo_side(template), 340)
        self.assertEqual(logo_side(template, extended=True), 420)
        self.assertEqual(logo_side(template, scale=1.5), 510)
        self.assertEqual(logo_side(template, image_size=101, scale=1.25), 126)
        self.assertEqual(logo_side(template, extended=True, extended_bonus=0), 340)


class RenderLogoTests(unittest.TestCase):
    def test_placeholder_logo(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = render_logo(TEMPLATES["waifu"], PAIR, 256, Path(tmp) / "logo.png")
            with Image.open(out) as img:
                self.assertEqual(img.format, "PNG")
                self.assertEqual(img.size, (256, 256))
                rgba = img.convert("RGBA")
                self.assertEqual(rgba.getpixel((50, 82)), PAIR.primary.rgb + (255,))
                self.assertEqual(rgba.getpixel((127, 37)), PAIR.secondary.rgb + (255,))
                self.assertEqual(rgba.getpixel((127, 127)), (255, 255, 255, 255))
                self.assertEqual(rgba.getpixel((0, 0))[3], 0)

    def test_masked_logo(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = render_logo(TEMPLATES["waifu2"], PAIR, 256, Path(tmp) / "logo.png")
            with Image.open(out) as img:
                rgba = img.convert("RGBA")
                self.assertEqual(rgba.getpixel((127, 37)), PAIR.primary.rgb + (255,))
                self.assertEqual(rgba.getpixel((127, 217)), PAIR.secondary.rgb + (255,))
                self.assertEqual(rgba.getpixel((127, 127)), (240, 240, 240, 255))

    def test_resized_to_requested_side(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = render_logo(TEMPLATES["waifu"], PAIR, 340, Path(tmp) / "logo.png")
            with Image.open(out) as img:
                self.assertEqual(img.size, (340, 340))

    def test_rendering_is_repeatable(self):
        with tempfile.TemporaryDirectory() as tmp:
            first = render_logo(TEMPLATES["waifu"], PAIR, 128, Path(tmp) / "a.png").read_bytes()
            second = render_logo(TEMPLATES["waifu"], PAIR, 128, Path(tmp) / "b.png").read_bytes()
        self.assertEqual(first, second)

    def test_missing_template_is_asset_failure(self):
        template = LogoTemplate(name="gone", image="does-not-exist.png", default_size=100)
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(AssetIOFailure):
                render_logo(template, PAIR, 100, Path(tmp) / "logo.png")


if __name__ == "__main__":
    unittest.main()
