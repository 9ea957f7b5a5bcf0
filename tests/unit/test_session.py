import sys
import unittest
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "tests" / "unit"))

from dialface_core import RenderBudgetMonitor, TapType, WatchFaceSession
from dialface_renderer import FacePreset, MinutePolicy, TimeSample, get_preset
from dialface_renderer.canvas import DrawBitmap, FillColor

from test_scheduler import FakeTimerHost

THREE_THEMES = FacePreset("three", get_preset("minimal").themes[:3], MinutePolicy.SWEEP)


def _source(index):
    return Image.new("RGB", (50, 50), (40 * (index + 1), 0, 0))


class WatchFaceSessionTests(unittest.TestCase):
    def setUp(self):
        self.timer = FakeTimerHost()
        self.redraws = 0
        self.session = self._session(THREE_THEMES)

    def _session(self, preset, **kwargs):
        def request_redraw():
            self.redraws += 1

        return WatchFaceSession(
            preset,
            self.timer,
            request_redraw,
            background_source=_source,
            time_source=lambda: TimeSample(10, 9, 30),
            clock_millis=lambda: 0,
            **kwargs,
        )

    def test_tap_wraps_theme_and_invalidates_background(self):
        self.session.on_surface_changed(100, 100)
        self.session.select_theme(2)
        self.session.draw()
        before = self.redraws

        self.session.on_tap(TapType.TAP, 10, 10)

        self.assertEqual(self.session.themes.index, 0)
        self.assertFalse(self.session.backgrounds.valid)
        self.assertEqual(self.session.backgrounds.theme_index, 0)
        self.assertEqual(self.redraws, before + 1)

        count = self.session.backgrounds.rescale_count
        seq = self.session.draw()
        self.assertEqual(self.session.backgrounds.rescale_count, count + 1)
        self.assertEqual(seq.ops[0].key, "background:0:100x100")

    def test_initial_theme_index_requests_no_redraw(self):
        session = self._session(THREE_THEMES, theme_index=4)
        self.assertEqual(self.redraws, 0)
        self.assertEqual(session.themes.index, 1)
        self.assertEqual(session.backgrounds.theme_index, 1)
        session.on_surface_changed(80, 80)
        self.assertEqual(session.draw().ops[0].key, "background:1:80x80")

    def test_touch_does_not_change_theme(self):
        for tap in (TapType.TOUCH, TapType.TOUCH_CANCEL):
            self.session.on_tap(tap)
        self.assertEqual(self.session.themes.index, 0)
        self.assertEqual(self.redraws, 2)

    def test_single_theme_tap_still_requests_redraw(self):
        session = self._session(get_preset("elegant"))
        session.on_tap(TapType.TAP)
        self.assertEqual(session.themes.index, 0)
        self.assertEqual(self.redraws, 1)

    def test_surface_change_rescales_eagerly(self):
        self.session.on_surface_changed(300, 300)
        self.assertTrue(self.session.backgrounds.valid)
        self.assertEqual(self.session.backgrounds.rescale_count, 1)
        seq = self.session.draw()
        self.assertIsInstance(seq.ops[0], DrawBitmap)
        self.assertEqual((seq.width, seq.height), (300, 300))

    def test_mute_change_redraws_once(self):
        self.session.on_interruption_filter_changed(True)
        self.session.on_interruption_filter_changed(True)
        self.assertTrue(self.session.state.muted)
        self.assertEqual(self.redraws, 1)

    def test_visibility_drives_scheduler(self):
        self.session.on_visibility_changed(True)
        self.assertEqual(self.redraws, 1)
        self.assertEqual([p[1] for p in self.timer.pending()], [0])
        self.timer.fire_next()
        self.assertEqual(self.redraws, 2)
        self.assertEqual([p[1] for p in self.timer.pending()], [1000])

        self.session.on_visibility_changed(False)
        self.assertEqual(self.timer.pending(), [])
        self.assertEqual(self.redraws, 2)

    def test_ambient_switches_to_minute_ticks(self):
        self.session.on_visibility_changed(True)
        self.session.on_ambient_mode_changed(True)
        self.assertEqual(self.timer.pending(), [])
        self.session.on_time_tick()
        self.assertEqual(self.redraws, 3)
        self.session.on_ambient_mode_changed(True)
        self.assertEqual(self.redraws, 3)

    def test_low_bit_ambient_draws_black_background(self):
        self.session.on_properties_changed(low_bit_ambient=True)
        self.session.on_surface_changed(100, 100)
        self.session.on_ambient_mode_changed(True)
        seq = self.session.draw()
        self.assertEqual(seq.ops[0], FillColor("#000000"))
        self.assertIsNone(self.session.backgrounds.get().desaturated)

    def test_destroy_stops_everything(self):
        self.session.on_visibility_changed(True)
        self.session.destroy()
        self.assertTrue(self.session.destroyed)
        self.assertEqual(self.timer.pending(), [])
        before = self.redraws
        self.session.invalidate()
        self.session.on_tap(TapType.TAP)
        self.assertEqual(self.redraws, before)

    def test_draw_records_render_budget(self):
        monitor = RenderBudgetMonitor()
        session = self._session(THREE_THEMES, budget=monitor)
        session.on_surface_changed(64, 64)
        session.draw()
        session.render_image()
        self.assertEqual(monitor.status().frames, 2)

    def test_minute_policy_override(self):
        session = self._session(get_preset("minimal"), minute_policy=MinutePolicy.STEP)
        self.assertIs(session.renderer.rotation.minute_policy, MinutePolicy.STEP)


if __name__ == "__main__":
    unittest.main()
