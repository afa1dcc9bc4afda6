"""
Animation Scheduling
====================
Drives time-based gate animations one frame at a time.

Why is this file needed?
------------------------
1. Responsiveness: A gate rotation is shown as a smooth sweep instead of a
   jump. Frames are delivered by a timer, the event loop is never blocked.
2. Exclusivity: Only one gate may animate at a time. `BusyLock` is the token
   that gate dispatch must hold while it mutates the qubits.

Any scheduler exposes `start(duration, on_frame, on_complete)` and `cancel()`.
`QtAnimationScheduler` runs on the Qt event loop, `ManualScheduler` is
advanced by hand (headless use and tests).

Classes:
    BusyLock: Exclusive "animation in flight" token.
    AnimationScheduler: Frame/progress bookkeeping shared by the schedulers.
    ManualScheduler: Advanced with tick(dt).
    QtAnimationScheduler: QTimer-driven.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from PySide6.QtCore import QElapsedTimer, QObject, QTimer

from blochsim.config import FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]
CompleteCallback = Callable[[], None]


def ease_in_out(t: float) -> float:
    """Cubic ease-in-out: accelerate to the midpoint, then decelerate."""
    t = min(1.0, max(0.0, t))
    if t < 0.5:
        return 4.0 * t * t * t
    u = -2.0 * t + 2.0
    return 1.0 - u * u * u / 2.0


class LockBusyError(RuntimeError):
    """Raised by BusyLock.hold() when the lock is already taken."""


class BusyLock:
    """
    The single "a gate is in flight" flag.

    `on_change` is called with the new state whenever it flips.
    """

    def __init__(self, on_change: Optional[Callable[[bool], None]] = None) -> None:
        self._locked = False
        self._on_change = on_change

    @property
    def locked(self) -> bool:
        return self._locked

    def try_acquire(self) -> bool:
        if self._locked:
            return False
        self._set(True)
        return True

    def release(self) -> None:
        if self._locked:
            self._set(False)

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Acquire for the duration of the block, release even on error."""
        if not self.try_acquire():
            raise LockBusyError("An animation is already in flight.")
        try:
            yield
        finally:
            self.release()

    def _set(self, value: bool) -> None:
        self._locked = value
        if self._on_change is not None:
            self._on_change(value)


class AnimationScheduler(ABC):
    """
    Runs one animation at a time.

    `on_frame` receives the eased progress in [0, 1]. The last frame is always
    delivered with exactly 1.0, followed by `on_complete`. After `cancel()`
    neither callback fires again.
    """

    def __init__(self, easing: Callable[[float], float] = ease_in_out) -> None:
        self.easing = easing
        self._duration: float = 0.0
        self._on_frame: Optional[FrameCallback] = None
        self._on_complete: Optional[CompleteCallback] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self, duration: float, on_frame: FrameCallback, on_complete: CompleteCallback) -> None:
        if self._running:
            raise RuntimeError("Scheduler is already running an animation.")
        self._duration = max(0.0, float(duration))
        self._on_frame = on_frame
        self._on_complete = on_complete
        self._running = True
        logger.debug(f"Animation started ({self._duration:.3f} s).")

        if self._duration == 0.0:
            self._advance(0.0)
            return
        self._on_frame(self.easing(0.0))
        self._begin_timing()

    def cancel(self) -> None:
        """Stop in place. No rollback, no completion callback."""
        if not self._running:
            return
        self._stop_timing()
        self._clear()
        logger.debug("Animation cancelled.")

    def _advance(self, elapsed: float) -> None:
        """Deliver the frame for `elapsed` seconds and finish when done."""
        if not self._running:
            return
        progress = 1.0 if self._duration == 0.0 else min(1.0, elapsed / self._duration)
        on_frame = self._on_frame
        if progress >= 1.0:
            on_complete = self._on_complete
            self._stop_timing()
            self._clear()
            on_frame(1.0)
            on_complete()
            logger.debug("Animation completed.")
            return
        on_frame(self.easing(progress))

    def _clear(self) -> None:
        self._running = False
        self._on_frame = None
        self._on_complete = None

    @abstractmethod
    def _begin_timing(self) -> None:
        ...

    @abstractmethod
    def _stop_timing(self) -> None:
        ...


class ManualScheduler(AnimationScheduler):
    """Scheduler advanced explicitly with `tick(dt)`."""

    def __init__(self, easing: Callable[[float], float] = ease_in_out) -> None:
        super().__init__(easing)
        self._elapsed = 0.0

    def tick(self, dt: float) -> None:
        if not self._running:
            return
        self._elapsed += dt
        self._advance(self._elapsed)

    def run_to_end(self, dt: float = 1.0 / 60.0) -> int:
        """Tick until the current animation completes. Returns the number of ticks."""
        ticks = 0
        while self._running:
            self.tick(dt)
            ticks += 1
        return ticks

    def _begin_timing(self) -> None:
        self._elapsed = 0.0

    def _stop_timing(self) -> None:
        self._elapsed = 0.0


class QtAnimationScheduler(AnimationScheduler):
    """Frames are produced by a QTimer on the Qt event loop."""

    def __init__(
        self,
        parent: Optional[QObject] = None,
        interval_ms: int = FRAME_INTERVAL_MS,
        easing: Callable[[float], float] = ease_in_out,
    ) -> None:
        super().__init__(easing)
        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)
        self._clock = QElapsedTimer()

    def _on_timeout(self) -> None:
        self._advance(self._clock.elapsed() / 1000.0)

    def _begin_timing(self) -> None:
        self._clock.start()
        self._timer.start()

    def _stop_timing(self) -> None:
        self._timer.stop()
