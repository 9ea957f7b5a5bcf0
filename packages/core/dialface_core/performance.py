"""Frame-budget accounting for renders and process resource sampling."""

from __future__ import annotations

from dataclasses import dataclass

import psutil

from .logging_setup import get_logger


@dataclass(frozen=True)
class RenderTargets:
    frame_budget_ms: float = 16.0
    rss_mb_max: float = 200.0


@dataclass(frozen=True)
class ProcessSample:
    cpu_percent: float
    rss_mb: float


@dataclass(frozen=True)
class BudgetStatus:
    frames: int
    overruns: int
    last_ms: float
    max_ms: float
    mean_ms: float
    over_budget: bool
    warning: str | None


class RenderBudgetMonitor:
    def __init__(self, targets: RenderTargets | None = None) -> None:
        self.targets = targets or RenderTargets()
        self._process = psutil.Process()
        # Prime non-blocking CPU measurement.
        self._process.cpu_percent(interval=None)
        self._frames = 0
        self._overruns = 0
        self._total_ms = 0.0
        self._max_ms = 0.0
        self._last_ms = 0.0
        self._logger = get_logger()

    def record(self, duration_s: float) -> BudgetStatus:
        ms = max(0.0, duration_s) * 1000.0
        self._frames += 1
        self._total_ms += ms
        self._last_ms = ms
        self._max_ms = max(self._max_ms, ms)
        over = ms > self.targets.frame_budget_ms
        if over:
            self._overruns += 1
            self._logger.warning(
                f"render took {ms:.1f} ms (budget {self.targets.frame_budget_ms:.1f} ms)",
                extra={"event": "frame_over_budget", "duration_ms": ms},
            )
        return self.status()

    def status(self) -> BudgetStatus:
        over = self._last_ms > self.targets.frame_budget_ms
        return BudgetStatus(
            frames=self._frames,
            overruns=self._overruns,
            last_ms=self._last_ms,
            max_ms=self._max_ms,
            mean_ms=(self._total_ms / self._frames) if self._frames else 0.0,
            over_budget=over,
            warning="frame_over_budget" if over else None,
        )

    def sample_process(self) -> ProcessSample:
        return ProcessSample(
            cpu_percent=float(self._process.cpu_percent(interval=None)),
            rss_mb=float(self._process.memory_info().rss) / (1024 * 1024),
        )

    def memory_ok(self, sample: ProcessSample | None = None) -> bool:
        sample = sample or self.sample_process()
        return sample.rss_mb <= self.targets.rss_mb_max
