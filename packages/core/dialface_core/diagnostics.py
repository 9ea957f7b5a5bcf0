"""Diagnostics payload for support and the ``doctor`` command."""

from __future__ import annotations

import platform
from dataclasses import asdict
from datetime import datetime, timezone
from importlib import metadata
from typing import Any

from dialface_renderer import get_preset

from .config import AppConfig, config_path
from .performance import RenderBudgetMonitor, RenderTargets


def _version(dist: str) -> str | None:
    try:
        return metadata.version(dist)
    except metadata.PackageNotFoundError:
        return None


def build_doctor_payload(cfg: AppConfig, monitor: RenderBudgetMonitor | None = None) -> dict[str, Any]:
    monitor = monitor or RenderBudgetMonitor(
        RenderTargets(frame_budget_ms=cfg.performance.frame_budget_ms, rss_mb_max=cfg.performance.rss_mb_max)
    )
    process = monitor.sample_process()
    preset = get_preset(cfg.face.preset)
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config_path": str(config_path()),
        "config": asdict(cfg),
        "libraries": {name: _version(name) for name in ("dialface", "Pillow", "numpy", "psutil", "PySide6")},
        "face": {
            "preset": preset.name,
            "themes": [entry.name for entry in preset.themes],
            "missing_backgrounds": [
                entry.name
                for entry in preset.themes
                if entry.name not in cfg.backgrounds and entry.background_ref not in cfg.backgrounds
            ],
        },
        "process": asdict(process),
        "memory_ok": monitor.memory_ok(process),
    }
