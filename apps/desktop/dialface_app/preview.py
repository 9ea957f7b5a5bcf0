"""Desktop preview window that plays the watch host for a session."""

from __future__ import annotations

import sys
from typing import Any, Callable

from PySide6.QtCore import QTimer, Qt
from PySide6.QtGui import QImage, QPainter
from PySide6.QtWidgets import QApplication, QWidget

from dialface_core import AppConfig, RenderBudgetMonitor, RenderTargets, TapType, TimerHost, WatchFaceSession, load_config
from dialface_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from dialface_renderer import Rect, get_preset

from .assets import BackgroundLibrary

AMBIENT_TICK_MS = 60_000


class QtTimerHost(TimerHost):
    def __init__(self, parent: QWidget) -> None:
        self._parent = parent

    def post_delayed(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        timer.timeout.connect(timer.deleteLater)
        timer.start(max(0, int(delay_ms)))
        return timer

    def cancel(self, handle: Any) -> None:
        handle.stop()
        handle.deleteLater()


class FacePreview(QWidget):
    """Click cycles themes, A toggles ambient, M toggles mute, P shows a peek card."""

    def __init__(self, cfg: AppConfig) -> None:
        super().__init__()
        self.logger = get_logger()
        preset = get_preset(cfg.face.preset)
        self.monitor = RenderBudgetMonitor(
            RenderTargets(frame_budget_ms=cfg.performance.frame_budget_ms, rss_mb_max=cfg.performance.rss_mb_max)
        )
        self.session = WatchFaceSession(
            preset,
            QtTimerHost(self),
            self.update,
            background_source=BackgroundLibrary(preset, cfg.backgrounds),
            interactive_update_ms=cfg.face.interactive_update_ms,
            budget=self.monitor,
        )
        self.session.on_properties_changed(cfg.display.low_bit_ambient, cfg.display.burn_in_protection)

        # The system only ticks once a minute while ambient.
        self._ambient_tick = QTimer(self)
        self._ambient_tick.setInterval(AMBIENT_TICK_MS)
        self._ambient_tick.timeout.connect(self.session.on_time_tick)

        self.setWindowTitle("Dialface")
        self.resize(cfg.display.width, cfg.display.height)

    def resizeEvent(self, event) -> None:  # noqa: N802 (Qt signature)
        self.session.on_surface_changed(self.width(), self.height())
        super().resizeEvent(event)

    def showEvent(self, event) -> None:  # noqa: N802
        self.session.on_visibility_changed(True)
        super().showEvent(event)

    def hideEvent(self, event) -> None:  # noqa: N802
        self.session.on_visibility_changed(False)
        super().hideEvent(event)

    def paintEvent(self, _event) -> None:  # noqa: N802
        image = self.session.render_image()
        data = image.tobytes("raw", "RGB")
        qimage = QImage(data, image.width, image.height, image.width * 3, QImage.Format.Format_RGB888).copy()
        painter = QPainter(self)
        painter.drawImage(0, 0, qimage)
        painter.end()

    def mousePressEvent(self, event) -> None:  # noqa: N802
        self.session.on_tap(TapType.TOUCH)

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802
        pos = event.position()
        self.session.on_tap(TapType.TAP, int(pos.x()), int(pos.y()))

    def keyPressEvent(self, event) -> None:  # noqa: N802
        key = event.key()
        if key == Qt.Key.Key_A:
            ambient = not self.session.state.ambient
            self.session.on_ambient_mode_changed(ambient)
            if ambient:
                self._ambient_tick.start()
            else:
                self._ambient_tick.stop()
        elif key == Qt.Key.Key_M:
            self.session.on_interruption_filter_changed(not self.session.state.muted)
        elif key == Qt.Key.Key_P:
            if self.session.peek_card is None:
                self.session.on_peek_card_position(Rect(0, self.height() * 2 // 3, self.width(), self.height()))
            else:
                self.session.on_peek_card_position(None)
            self.session.invalidate()
        elif key == Qt.Key.Key_Escape:
            self.close()
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event) -> None:  # noqa: N802
        self._ambient_tick.stop()
        self.session.destroy()
        status = self.monitor.status()
        self.logger.info(
            f"preview closed frames={status.frames} overruns={status.overruns}",
            extra={"event": "preview_closed"},
        )
        super().closeEvent(event)


def run_preview() -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files)
    install_crash_hooks()
    logger = get_logger()

    app = QApplication(sys.argv)
    app.setApplicationName("Dialface")

    window = FacePreview(cfg)
    window.show()

    exit_code = app.exec()
    logger.info("app shutdown", extra={"event": "shutdown"})
    return int(exit_code)
