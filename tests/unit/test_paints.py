import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from dialface_renderer.models import DisplayState, HandStyle, ShadowLayer, StrokeCap
from dialface_renderer.paints import MUTED_ALPHA, PaintCache, PaintMode, select_mode

STYLE = HandStyle("#E42E40", 9.0, ShadowLayer(7.0), cap=StrokeCap.ROUND)


class PaintTests(unittest.TestCase):
    def test_outline_is_black_and_wider(self):
        paint = PaintCache().outline(STYLE)
        self.assertEqual(paint.color, "#000000")
        self.assertEqual(paint.stroke_width, 9.5)
        self.assertIsNone(paint.shadow)
        self.assertFalse(paint.anti_alias)

    def test_active_paint_keeps_color_and_shadow(self):
        paint = PaintCache().selected(STYLE, DisplayState())
        self.assertEqual(paint.color, "#E42E40")
        self.assertEqual(paint.alpha, 255)
        self.assertTrue(paint.anti_alias)
        self.assertEqual(paint.shadow, ShadowLayer(7.0))

    def test_muted_dims_instead_of_hiding(self):
        paint = PaintCache().selected(STYLE, DisplayState(muted=True))
        self.assertEqual(paint.alpha, MUTED_ALPHA)
        self.assertEqual(paint.color, "#E42E40")

    def test_ambient_is_flat_white_regardless_of_mute(self):
        cache = PaintCache()
        for muted in (False, True):
            paint = cache.selected(STYLE, DisplayState(ambient=True, muted=muted))
            self.assertEqual(paint.color, "#FFFFFF")
            self.assertFalse(paint.anti_alias)
            self.assertIsNone(paint.shadow)
            self.assertEqual(paint.alpha, 255)

    def test_select_mode(self):
        self.assertIs(select_mode(DisplayState()), PaintMode.ACTIVE)
        self.assertIs(select_mode(DisplayState(muted=True)), PaintMode.ACTIVE_MUTED)
        self.assertIs(select_mode(DisplayState(ambient=True, muted=True)), PaintMode.AMBIENT)

    def test_paints_are_memoized_per_style_and_mode(self):
        cache = PaintCache()
        first = cache.get(STYLE, PaintMode.ACTIVE)
        self.assertIs(cache.get(STYLE, PaintMode.ACTIVE), first)
        cache.get(STYLE, PaintMode.AMBIENT)
        cache.get(STYLE.with_color("#FFFFFF"), PaintMode.ACTIVE)
        self.assertEqual(len(cache), 3)


if __name__ == "__main__":
    unittest.main()
