"""Settings file: nested dataclass sections, versioned and clamped on load."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

SETTINGS_VERSION = 2

PRESET_CHOICES = ("minimal", "elegant")
MINUTE_POLICY_CHOICES = ("auto", "sweep", "step")


@dataclass
class DisplayConfig:
    width: int = 454
    height: int = 454
    low_bit_ambient: bool = False
    burn_in_protection: bool = False


@dataclass
class FaceConfig:
    preset: str = "minimal"
    minute_policy: str = "auto"
    interactive_update_ms: int = 1000


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class PerformanceConfig:
    frame_budget_ms: float = 16.0
    rss_mb_max: float = 200.0


@dataclass
class AppConfig:
    config_version: int = SETTINGS_VERSION
    display: DisplayConfig = field(default_factory=DisplayConfig)
    face: FaceConfig = field(default_factory=FaceConfig)
    # Theme name or background reference -> image path.
    backgrounds: dict[str, str] = field(default_factory=dict)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)


_SECTIONS = {
    "display": DisplayConfig,
    "face": FaceConfig,
    "diagnostics": DiagnosticsConfig,
    "performance": PerformanceConfig,
}


def config_root() -> Path:
    if platform.system() == "Windows":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming")) / "Dialface"
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Dialface"
    return Path.home() / ".config" / "dialface"


def config_path() -> Path:
    return config_root() / "config.json"


def _coerce(value: Any, default: Any) -> Any:
    kind = type(default)
    if kind is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, kind):
        return value
    try:
        return kind(value)
    except (TypeError, ValueError):
        return default


def _section(section_type, raw: Any):
    section = section_type()
    if not isinstance(raw, dict):
        return section
    for f in fields(section):
        if f.name in raw:
            setattr(section, f.name, _coerce(raw[f.name], getattr(section, f.name)))
    return section


def _clamp(value, low, high=None):
    value = max(low, value)
    return value if high is None else min(high, value)


def _normalize(cfg: AppConfig) -> None:
    cfg.display.width = _clamp(cfg.display.width, 16, 4096)
    cfg.display.height = _clamp(cfg.display.height, 16, 4096)

    if cfg.face.preset not in PRESET_CHOICES:
        cfg.face.preset = FaceConfig.preset
    if cfg.face.minute_policy not in MINUTE_POLICY_CHOICES:
        cfg.face.minute_policy = FaceConfig.minute_policy
    cfg.face.interactive_update_ms = _clamp(cfg.face.interactive_update_ms, 33, 1000)

    cfg.performance.frame_budget_ms = _clamp(cfg.performance.frame_budget_ms, 1.0)
    cfg.performance.rss_mb_max = _clamp(cfg.performance.rss_mb_max, 32.0)
    cfg.diagnostics.keep_log_files = _clamp(cfg.diagnostics.keep_log_files, 2)


def _upgrade(raw: dict[str, Any]) -> dict[str, Any]:
    data = dict(raw)
    if int(data.get("config_version", 1)) < 2:
        # Version 1 stored the preset and the background paths at the top level.
        face = dict(data.get("face") or {})
        if "preset" in data:
            face.setdefault("preset", data.pop("preset"))
        data["face"] = face
        data.setdefault("backgrounds", data.pop("background_paths", None) or {})
        data["config_version"] = 2
    return data


def load_config(path: Path | None = None) -> AppConfig:
    """Read settings; a missing or unreadable file yields defaults."""
    path = path or config_path()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    data = _upgrade(raw)
    backgrounds = data.get("backgrounds")
    cfg = AppConfig(
        config_version=SETTINGS_VERSION,
        backgrounds={str(k): str(v) for k, v in backgrounds.items()} if isinstance(backgrounds, dict) else {},
        **{name: _section(section_type, data.get(name)) for name, section_type in _SECTIONS.items()},
    )
    _normalize(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = SETTINGS_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
