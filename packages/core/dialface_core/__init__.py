"""Core app services for watch-face sessions, redraw scheduling, settings and diagnostics."""

from .config import AppConfig, load_config, save_config
from .diagnostics import build_doctor_payload
from .performance import BudgetStatus, ProcessSample, RenderBudgetMonitor, RenderTargets
from .scheduler import LoopTimerHost, RedrawScheduler, TimerHost
from .session import TapType, WatchFaceSession, local_time_sample

__all__ = [
    "AppConfig",
    "BudgetStatus",
    "LoopTimerHost",
    "ProcessSample",
    "RedrawScheduler",
    "RenderBudgetMonitor",
    "RenderTargets",
    "TapType",
    "TimerHost",
    "WatchFaceSession",
    "build_doctor_payload",
    "load_config",
    "local_time_sample",
    "save_config",
]
