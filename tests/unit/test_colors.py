import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "colors"))

from wfetch_colors.errors import ParseFailure
from wfetch_colors.models import BLACK, WHITE, Color, ColorPair, Palette, TERMINAL_COLOR_NAMES


def _palette(*overrides: tuple[int, str]) -> Palette:
    mapping = {f"color{i}": f"#{i:02x}{i:02x}{i:02x}" for i in range(16)}
    for index, value in overrides:
        mapping[f"color{index}"] = value
    return Palette.from_mapping(mapping)


class ColorParseTests(unittest.TestCase):
    def test_parse_with_and_without_hash(self):
        self.assertEqual(Color.parse("#5278c3"), Color(0x52, 0x78, 0xC3))
        self.assertEqual(Color.parse("5278C3"), Color(0x52, 0x78, 0xC3))

    def test_parse_alpha_only_for_eight_digits(self):
        self.assertEqual(Color.parse("#11223344").a, 0x44)
        self.assertEqual(Color.parse("#112233").a, 255)

    def test_hex_is_lowercase_and_round_trips(self):
        color = Color.parse("#7EBAE4")
        self.assertEqual(color.hex, "#7ebae4")
        self.assertEqual(Color.parse(color.hex), color)
        self.assertEqual(Color(1, 2, 3, 4).hex, "#01020304")

    def test_rejects_short_and_non_hex(self):
        with self.assertRaises(ParseFailure):
            Color.parse("#12345")
        with self.assertRaises(ParseFailure):
            Color.parse("#12345g")
        with self.assertRaises(ValueError):
            Color.parse("")

    def test_sgr_codes(self):
        color = Color(1, 22, 255)
        self.assertEqual(color.fg, "38;2;1;22;255")
        self.assertEqual(color.bg, "48;2;1;22;255")


class ColorMathTests(unittest.TestCase):
    def test_distance(self):
        self.assertEqual(BLACK.distance(BLACK), 0.0)
        self.assertAlmostEqual(Color(3, 4, 0).distance(BLACK), 5.0)
        self.assertAlmostEqual(WHITE.distance(BLACK), (3 * 255**2) ** 0.5)

    def test_luminance_bounds(self):
        self.assertEqual(BLACK.relative_luminance(), 0.0)
        self.assertAlmostEqual(WHITE.relative_luminance(), 1.0)

    def test_contrast_ratio(self):
        self.assertAlmostEqual(WHITE.contrast_ratio(BLACK), 21.0)
        self.assertAlmostEqual(BLACK.contrast_ratio(WHITE), 21.0)
        red = Color.parse("#ff0000")
        self.assertAlmostEqual(red.contrast_ratio(red), 1.0)
        self.assertAlmostEqual(red.contrast_ratio(WHITE), WHITE.contrast_ratio(red))

    def test_multiply_keeps_own_alpha(self):
        product = Color(255, 128, 10, 7).multiply(Color(128, 255, 0, 200))
        self.assertEqual(product, Color(128, 128, 0, 7))
        self.assertEqual(WHITE.multiply(Color(9, 8, 7)), Color(9, 8, 7))

    def test_channels_are_range_checked(self):
        with self.assertRaises(ValueError):
            Color(256, 0, 0)


class PaletteTests(unittest.TestCase):
    def test_from_mapping_requires_every_slot(self):
        mapping = {f"color{i}": "#000000" for i in range(15)}
        with self.assertRaises(ParseFailure):
            Palette.from_mapping(mapping)

    def test_slots_exclude_background(self):
        palette = _palette()
        self.assertEqual(len(palette), 16)
        self.assertEqual(len(palette.slots), 15)
        self.assertEqual(palette.background, palette[0])
        self.assertNotIn(palette[0], palette.slots)

    def test_name_of_uses_ansi_order(self):
        palette = _palette((1, "#ff0000"), (4, "#0000ff"), (12, "#7ebae4"))
        self.assertEqual(palette.name_of(Color.parse("#ff0000")), "red")
        self.assertEqual(palette.name_of(Color.parse("#0000ff")), "blue")
        self.assertEqual(palette.name_of(Color.parse("#7ebae4")), TERMINAL_COLOR_NAMES[12])
        self.assertIsNone(palette.name_of(Color.parse("#abcdef")))

    def test_pair_names_fall_back_to_sgr(self):
        palette = _palette((1, "#ff0000"))
        pair = ColorPair(Color.parse("#ff0000"), Color.parse("#abcdef"))
        self.assertEqual(pair.names(palette), ("red", "38;2;171;205;239"))
        self.assertEqual(pair.fills, ((255, 0, 0), (171, 205, 239)))
        self.assertEqual(pair.bg_codes, ("48;2;255;0;0", "48;2;171;205;239"))


if __name__ == "__main__":
    unittest.main()
