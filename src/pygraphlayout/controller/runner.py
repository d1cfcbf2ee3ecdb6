"""Background driver that steps an iterative layout on a QThread."""

import logging
import time
from dataclasses import dataclass

from PyQt6.QtCore import QMutex, QMutexLocker, QThread, QWaitCondition, pyqtSignal

from pygraphlayout.errors import ValidationError
from pygraphlayout.layout.base import IterativeContext, is_iterative

logger = logging.getLogger(__name__)


@dataclass
class RunnerConfig:
    """Configuration for a LayoutRunner.

    Attributes:
        sleep_time: Pause between steps of the background loop, in milliseconds
        prerelax_budget_ms: Time spent stepping synchronously by ``prerelax()``
    """

    sleep_time: int = 100
    prerelax_budget_ms: int = 500


class LayoutRunner(QThread):
    """Worker thread that steps a layout until it is done or stopped.

    Structural changes to the graph should be made while the runner is
    paused; layouts read the graph through snapshots but do not lock it.
    """

    # Signals
    stepped = pyqtSignal(int)  # Emits the number of steps taken so far
    converged = pyqtSignal()  # Emitted once the layout reports done()
    error = pyqtSignal(str)  # Emits error messages

    def __init__(self, process: IterativeContext, config: RunnerConfig | None = None) -> None:
        """Initialize the runner.

        Args:
            process: Iterative layout to drive
            config: Runner options (defaults if None)

        Raises:
            ValidationError: If process cannot be stepped
        """
        super().__init__()
        if not is_iterative(process):
            raise ValidationError("process", type(process).__name__, "an iterative layout")
        self.process = process
        self.config = config or RunnerConfig()
        self.steps = 0
        self._running = False
        self._stop = False
        self._manual_suspend = False
        self._mutex = QMutex()
        self._resumed = QWaitCondition()
        logger.debug(f"LayoutRunner made for {process!r}")

    @property
    def sleep_time(self) -> int:
        return self.config.sleep_time

    @sleep_time.setter
    def sleep_time(self, value: int) -> None:
        self.config.sleep_time = value

    @property
    def is_running(self) -> bool:
        """Whether the background loop is currently executing."""
        return self._running

    def _step(self) -> None:
        self.process.step()
        self.steps += 1
        self.stepped.emit(self.steps)

    def prerelax(self, budget_ms: int | None = None) -> None:
        """Step synchronously on the calling thread for up to budget_ms milliseconds."""
        budget = self.config.prerelax_budget_ms if budget_ms is None else budget_ms
        logger.debug(f"Prerelaxing for up to {budget} ms")
        self._manual_suspend = True
        start = time.monotonic()
        try:
            while (time.monotonic() - start) * 1000 < budget and not self.process.done():
                self._step()
        finally:
            self._manual_suspend = False

    def relax(self) -> None:
        """Start (or restart) the background stepping loop."""
        logger.info("Starting layout relaxation")
        self.stop()
        self.wait()
        self._stop = False
        self.start(QThread.Priority.LowestPriority)

    def pause(self) -> None:
        """Suspend stepping after the current step."""
        self._manual_suspend = True

    def resume(self) -> None:
        """Continue a paused loop, or prerelax and start one if none is running."""
        self._manual_suspend = False
        if not self._running:
            self.prerelax()
            self.relax()
        else:
            with QMutexLocker(self._mutex):
                self._resumed.wakeAll()

    def stop(self) -> None:
        """Ask the loop to exit and wake it if it is paused."""
        self._manual_suspend = False
        self._stop = True
        self.requestInterruption()
        with QMutexLocker(self._mutex):
            self._resumed.wakeAll()

    def _wait_while_paused(self) -> None:
        with QMutexLocker(self._mutex):
            while self._manual_suspend and not self._stop:
                self._resumed.wait(self._mutex)

    def run(self) -> None:
        """Step the layout until it is done or stop() is requested."""
        self._running = True
        try:
            while not self.process.done() and not self._stop:
                self._wait_while_paused()
                if self._stop:
                    return
                self._step()
                if self._stop:
                    return
                if self.config.sleep_time > 0:
                    QThread.msleep(self.config.sleep_time)
            if self.process.done():
                logger.info(f"Layout converged after {self.steps} steps")
                self.converged.emit()
        except Exception as e:
            logger.exception("Layout step failed")
            self.error.emit(f"Layout step failed: {e}")
        finally:
            self._running = False
