import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from dialface_core.config import AppConfig, load_config, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.face.preset, "minimal")
            self.assertEqual(cfg.face.minute_policy, "auto")
            self.assertEqual(cfg.face.interactive_update_ms, 1000)
            self.assertFalse(cfg.display.low_bit_ambient)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.face.preset = "elegant"
            cfg.display.burn_in_protection = True
            cfg.backgrounds["Lemon Dusk"] = "/tmp/lemon.png"
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.face.preset, "elegant")
            self.assertTrue(reloaded.display.burn_in_protection)
            self.assertEqual(reloaded.backgrounds, {"Lemon Dusk": "/tmp/lemon.png"})

    def test_migrate_v1_shape(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            old = {
                "preset": "elegant",
                "background_paths": {"harbor_blue": "~/harbor.jpg"},
                "display": {"width": 320, "height": 320},
            }
            path.write_text(json.dumps(old), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.config_version, 2)
            self.assertEqual(cfg.face.preset, "elegant")
            self.assertEqual(cfg.backgrounds, {"harbor_blue": "~/harbor.jpg"})
            self.assertEqual(cfg.display.width, 320)

    def test_out_of_range_values_are_clamped(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "config_version": 2,
                "display": {"width": 2, "height": 99999},
                "face": {"preset": "fancy", "minute_policy": "wobble", "interactive_update_ms": 5},
                "performance": {"frame_budget_ms": 0, "rss_mb_max": 1},
                "diagnostics": {"keep_log_files": 0},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual((cfg.display.width, cfg.display.height), (16, 4096))
            self.assertEqual(cfg.face.preset, "minimal")
            self.assertEqual(cfg.face.minute_policy, "auto")
            self.assertEqual(cfg.face.interactive_update_ms, 33)
            self.assertEqual(cfg.performance.frame_budget_ms, 1.0)
            self.assertEqual(cfg.performance.rss_mb_max, 32.0)
            self.assertEqual(cfg.diagnostics.keep_log_files, 2)

    def test_bool_fields_only_accept_booleans(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {"display": {"low_bit_ambient": "false", "burn_in_protection": "TRUE"}}
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertFalse(cfg.display.low_bit_ambient)
            self.assertTrue(cfg.display.burn_in_protection)

            raw = {"display": {"low_bit_ambient": "off", "burn_in_protection": 1, "width": True}}
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertFalse(cfg.display.low_bit_ambient)
            self.assertFalse(cfg.display.burn_in_protection)
            self.assertEqual(cfg.display.width, 454)

    def test_corrupt_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())
            path.write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())


if __name__ == "__main__":
    unittest.main()
