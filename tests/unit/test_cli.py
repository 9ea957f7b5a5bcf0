import argparse
import io
import json
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from dialface_app.cli import build_parser, parse_size, parse_time
from dialface_renderer import TimeSample


class CliTests(unittest.TestCase):
    def setUp(self):
        # Keep commands away from the real settings file.
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        patcher = mock.patch("dialface_core.config.config_root", return_value=Path(tmp.name))
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, argv):
        args = build_parser().parse_args(argv)
        buf = io.StringIO()
        with redirect_stdout(buf):
            self.assertEqual(args.func(args), 0)
        return json.loads(buf.getvalue())

    def test_run_command(self):
        args = build_parser().parse_args(["run"])
        self.assertEqual(args.command, "run")

    def test_render_command(self):
        args = build_parser().parse_args(
            ["render", "--face", "elegant", "--time", "10:09:30", "--ambient", "--low-bit", "--size", "320"]
        )
        self.assertEqual(args.command, "render")
        self.assertEqual(args.face, "elegant")
        self.assertEqual(args.time, TimeSample(10, 9, 30, 0))
        self.assertEqual(args.size, (320, 320))
        self.assertTrue(args.ambient and args.low_bit)
        self.assertFalse(args.burn_in)

    def test_watch_command(self):
        args = build_parser().parse_args(["watch", "--seconds", "2.5", "--interval-ms", "250", "--minute-policy", "step"])
        self.assertEqual(args.command, "watch")
        self.assertEqual(args.seconds, 2.5)
        self.assertEqual(args.interval_ms, 250)
        self.assertEqual(args.minute_policy, "step")

    def test_themes_and_doctor_commands(self):
        parser = build_parser()
        self.assertEqual(parser.parse_args(["themes", "--face", "minimal"]).face, "minimal")
        self.assertEqual(parser.parse_args(["doctor"]).command, "doctor")

    def test_parse_time(self):
        self.assertEqual(parse_time("3:00"), TimeSample(3, 0, 0, 0))
        self.assertEqual(parse_time("23:59:59.5"), TimeSample(23, 59, 59, 500))
        for bad in ("24:00", "12:60", "noon", "1:2"):
            with self.assertRaises(argparse.ArgumentTypeError):
                parse_time(bad)

    def test_parse_size(self):
        self.assertEqual(parse_size("454"), (454, 454))
        self.assertEqual(parse_size("400x300"), (400, 300))
        for bad in ("0", "x10", "10x0"):
            with self.assertRaises(argparse.ArgumentTypeError):
                parse_size(bad)

    def test_render_writes_png(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "face.png"
            args = build_parser().parse_args(
                ["render", "--time", "3:00", "--ambient", "--low-bit", "--size", "96", "--out", str(out), "--ops"]
            )
            buf = io.StringIO()
            with redirect_stdout(buf):
                self.assertEqual(args.func(args), 0)
            payload = json.loads(buf.getvalue())
            self.assertEqual(payload["angles"], {"hour": 90.0, "minute": 0.0, "second": 0.0})
            self.assertEqual(payload["sequence"][0], {"op": "fill_color", "color": "#000000"})
            with Image.open(out) as image:
                self.assertEqual(image.size, (96, 96))

    def test_watch_with_non_default_theme(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "watch.png"
            payload = self._run(
                ["watch", "--seconds", "0.05", "--theme", "1", "--size", "64", "--out", str(out)]
            )
            self.assertTrue(out.exists())
        self.assertGreaterEqual(payload["redraws"], 1)
        self.assertGreaterEqual(payload["scheduler"]["fires"], 1)
        self.assertEqual(payload["pending_timers"], 0)
        self.assertGreaterEqual(payload["budget"]["frames"], 1)

    def test_render_selects_theme_by_index(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = str(Path(tmp) / "face.png")
            payload = self._run(["render", "--time", "1:00", "--theme", "6", "--size", "48", "--out", out])
        self.assertEqual(payload["theme"]["index"], 1)

    def test_themes_lists_presets(self):
        args = build_parser().parse_args(["themes"])
        buf = io.StringIO()
        with redirect_stdout(buf):
            args.func(args)
        payload = json.loads(buf.getvalue())
        self.assertEqual(payload["elegant"], {"minute_policy": "step", "themes": ["Elegant"]})
        self.assertEqual(len(payload["minimal"]["themes"]), 5)


if __name__ == "__main__":
    unittest.main()
