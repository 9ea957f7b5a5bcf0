"""CLI entrypoints for rendering, watching, listing themes and diagnostics."""

from __future__ import annotations

import argparse
import json
import re
from dataclasses import asdict
from pathlib import Path

from dialface_core import (
    AppConfig,
    LoopTimerHost,
    RenderBudgetMonitor,
    RenderTargets,
    WatchFaceSession,
    build_doctor_payload,
    load_config,
    local_time_sample,
)
from dialface_core.logging_setup import configure_logging, get_logger
from dialface_renderer import MinutePolicy, TimeSample, get_preset, list_presets, rasterize

from .assets import BackgroundLibrary

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2})(?:\.(\d{1,3}))?)?$")
_SIZE_RE = re.compile(r"^(\d+)(?:x(\d+))?$")


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def parse_time(value: str) -> TimeSample:
    match = _TIME_RE.match(value.strip())
    if not match:
        raise argparse.ArgumentTypeError(f"expected HH:MM[:SS[.mmm]], got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    millis = int((match.group(4) or "0").ljust(3, "0"))
    if hour > 23 or minute > 59 or second > 59:
        raise argparse.ArgumentTypeError(f"time out of range: {value!r}")
    return TimeSample(hour, minute, second, millis)


def parse_size(value: str) -> tuple[int, int]:
    match = _SIZE_RE.match(value.strip())
    if not match:
        raise argparse.ArgumentTypeError(f"expected W or WxH, got {value!r}")
    width = int(match.group(1))
    height = int(match.group(2) or width)
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive: {value!r}")
    return width, height


def _minute_policy(cfg: AppConfig, override: str | None) -> MinutePolicy | None:
    value = override or cfg.face.minute_policy
    if value == "auto":
        return None
    return MinutePolicy(value)


def build_session(cfg: AppConfig, args: argparse.Namespace, timer, request_redraw, monitor=None) -> WatchFaceSession:
    preset = get_preset(args.face or cfg.face.preset)
    session = WatchFaceSession(
        preset,
        timer,
        request_redraw,
        background_source=BackgroundLibrary(preset, cfg.backgrounds, placeholders=not args.no_placeholders),
        minute_policy=_minute_policy(cfg, args.minute_policy),
        interactive_update_ms=getattr(args, "interval_ms", None) or cfg.face.interactive_update_ms,
        budget=monitor,
        theme_index=args.theme,
    )
    session.on_properties_changed(
        low_bit_ambient=args.low_bit or cfg.display.low_bit_ambient,
        burn_in_protection=args.burn_in or cfg.display.burn_in_protection,
    )
    width, height = args.size or (cfg.display.width, cfg.display.height)
    session.on_surface_changed(width, height)
    return session


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config()
    session = build_session(cfg, args, LoopTimerHost(), lambda: None)
    session.on_ambient_mode_changed(args.ambient)
    session.on_interruption_filter_changed(args.muted)

    sample = args.time or local_time_sample()
    sequence = session.draw(sample)
    angles = session.renderer.rotation.angles(sample)

    out = Path(args.out).expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    rasterize(sequence).save(out, format="PNG")

    payload = {
        "out": str(out),
        "time": asdict(sample),
        "theme": {"index": session.themes.index, "name": session.themes.current.name},
        "state": asdict(session.state),
        "angles": asdict(angles),
        "ops": len(sequence),
    }
    if args.ops:
        payload["sequence"] = sequence.describe()
    _print_json(payload)
    return 0


def cmd_themes(args: argparse.Namespace) -> int:
    names = [args.face] if args.face else list_presets()
    _print_json(
        {
            name: {
                "minute_policy": get_preset(name).minute_policy.value,
                "themes": [entry.name for entry in get_preset(name).themes],
            }
            for name in names
        }
    )
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    cfg = load_config()
    logger = get_logger()
    monitor = RenderBudgetMonitor(
        RenderTargets(frame_budget_ms=cfg.performance.frame_budget_ms, rss_mb_max=cfg.performance.rss_mb_max)
    )
    timer = LoopTimerHost()
    frames: list[float] = []
    out = Path(args.out).expanduser() if args.out else None
    holder: dict[str, WatchFaceSession] = {}

    def request_redraw() -> None:
        image = holder["session"].render_image()
        frames.append(timer.now())
        if out is not None:
            image.save(out, format="PNG")

    session = build_session(cfg, args, timer, request_redraw, monitor)
    holder["session"] = session
    session.on_ambient_mode_changed(args.ambient)
    session.on_visibility_changed(True)

    start = timer.now()
    timer.run_until(start + args.seconds)
    session.on_visibility_changed(False)
    session.destroy()
    logger.info(f"watch finished after {len(frames)} redraws", extra={"event": "watch_finished"})

    intervals = [b - a for a, b in zip(frames, frames[1:])]
    _print_json(
        {
            "seconds": args.seconds,
            "redraws": len(frames),
            "mean_interval_ms": (sum(intervals) / len(intervals) * 1000.0) if intervals else None,
            "scheduler": asdict(session.scheduler.stats),
            "pending_timers": timer.pending,
            "budget": asdict(monitor.status()),
            "process": asdict(monitor.sample_process()),
            "out": str(out) if out else None,
        }
    )
    return 0


def cmd_doctor(_args: argparse.Namespace) -> int:
    _print_json(build_doctor_payload(load_config()))
    return 0


def cmd_run(_args: argparse.Namespace) -> int:
    from .preview import run_preview

    return run_preview()


def _add_face_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--face", choices=list_presets(), default=None)
    cmd.add_argument("--theme", type=int, default=0, help="Theme index, wraps around")
    cmd.add_argument("--minute-policy", choices=[p.value for p in MinutePolicy], default=None)
    cmd.add_argument("--size", type=parse_size, default=None, help="Surface size, W or WxH")
    cmd.add_argument("--ambient", action="store_true")
    cmd.add_argument("--low-bit", action="store_true", help="Device has low-bit ambient mode")
    cmd.add_argument("--burn-in", action="store_true", help="Device needs burn-in protection")
    cmd.add_argument("--no-placeholders", action="store_true", help="Do not generate missing backgrounds")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dialface", description="Analog watch-face renderer and simulator")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Open the preview window")
    run_cmd.set_defaults(func=cmd_run)

    render_cmd = sub.add_parser("render", help="Render one frame to PNG")
    _add_face_args(render_cmd)
    render_cmd.add_argument("--time", type=parse_time, default=None, help="HH:MM[:SS[.mmm]], default now")
    render_cmd.add_argument("--muted", action="store_true")
    render_cmd.add_argument("--out", default="dialface.png")
    render_cmd.add_argument("--ops", action="store_true", help="Include the draw sequence in the output")
    render_cmd.set_defaults(func=cmd_render)

    themes_cmd = sub.add_parser("themes", help="List face presets and their themes")
    themes_cmd.add_argument("--face", choices=list_presets(), default=None)
    themes_cmd.set_defaults(func=cmd_themes)

    watch_cmd = sub.add_parser("watch", help="Run a session on the timer loop and report redraws")
    _add_face_args(watch_cmd)
    watch_cmd.add_argument("--seconds", type=float, default=5.0)
    watch_cmd.add_argument("--interval-ms", type=int, default=None)
    watch_cmd.add_argument("--out", default=None, help="Rewrite this PNG on every redraw")
    watch_cmd.set_defaults(func=cmd_watch)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
