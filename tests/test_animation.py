import time

import pytest

pytest.importorskip("PySide6")

from blochsim.controller.animation import (
    BusyLock, LockBusyError, ManualScheduler, QtAnimationScheduler, ease_in_out
)


def test_easing_end_points_and_midpoint():
    assert ease_in_out(0.0) == 0.0
    assert ease_in_out(1.0) == 1.0
    assert ease_in_out(0.5) == pytest.approx(0.5)


def test_easing_accelerates_then_decelerates():
    samples = [ease_in_out(i / 20) for i in range(21)]
    assert samples == sorted(samples)
    assert ease_in_out(0.1) < 0.1
    assert ease_in_out(0.9) > 0.9


def test_easing_clamps_input():
    assert ease_in_out(-1.0) == 0.0
    assert ease_in_out(2.0) == 1.0


class Recorder:
    def __init__(self):
        self.frames = []
        self.completed = 0

    def on_frame(self, alpha):
        self.frames.append(alpha)

    def on_complete(self):
        self.completed += 1


def test_manual_scheduler_runs_to_completion():
    rec = Recorder()
    scheduler = ManualScheduler()
    scheduler.start(1.0, rec.on_frame, rec.on_complete)
    assert scheduler.is_running
    assert rec.frames == [0.0]

    scheduler.tick(0.25)
    scheduler.tick(0.25)
    assert rec.frames[-1] == pytest.approx(0.5)
    assert rec.completed == 0

    scheduler.tick(0.6)
    assert rec.frames[-1] == 1.0
    assert rec.completed == 1
    assert not scheduler.is_running

    scheduler.tick(0.1)
    assert rec.completed == 1


def test_run_to_end_counts_ticks():
    rec = Recorder()
    scheduler = ManualScheduler()
    scheduler.start(1.0, rec.on_frame, rec.on_complete)
    assert scheduler.run_to_end(dt=0.25) == 4
    assert rec.completed == 1


def test_cancel_stops_in_place():
    rec = Recorder()
    scheduler = ManualScheduler()
    scheduler.start(1.0, rec.on_frame, rec.on_complete)
    scheduler.tick(0.3)
    frames = list(rec.frames)
    scheduler.cancel()
    scheduler.tick(1.0)
    assert rec.frames == frames
    assert rec.completed == 0
    assert not scheduler.is_running


def test_zero_duration_completes_immediately():
    rec = Recorder()
    scheduler = ManualScheduler()
    scheduler.start(0.0, rec.on_frame, rec.on_complete)
    assert rec.frames == [1.0]
    assert rec.completed == 1
    assert not scheduler.is_running


def test_start_while_running_is_an_error():
    rec = Recorder()
    scheduler = ManualScheduler()
    scheduler.start(1.0, rec.on_frame, rec.on_complete)
    with pytest.raises(RuntimeError):
        scheduler.start(1.0, rec.on_frame, rec.on_complete)


def test_scheduler_can_be_restarted_from_completion_callback():
    scheduler = ManualScheduler()
    done = []

    def second():
        done.append("second")

    def first():
        done.append("first")
        scheduler.start(0.5, lambda a: None, second)

    scheduler.start(0.5, lambda a: None, first)
    scheduler.run_to_end(0.1)
    assert done == ["first", "second"]


def test_busy_lock():
    changes = []
    lock = BusyLock(on_change=changes.append)
    assert lock.try_acquire()
    assert not lock.try_acquire()
    lock.release()
    lock.release()
    assert changes == [True, False]


def test_busy_lock_hold_releases_on_error():
    lock = BusyLock()
    with pytest.raises(ZeroDivisionError):
        with lock.hold():
            assert lock.locked
            1 / 0
    assert not lock.locked


def test_busy_lock_hold_when_taken():
    lock = BusyLock()
    lock.try_acquire()
    with pytest.raises(LockBusyError):
        with lock.hold():
            pass
    assert lock.locked


def test_qt_scheduler_reaches_the_end():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    rec = Recorder()
    scheduler = QtAnimationScheduler(interval_ms=5)
    scheduler.start(0.05, rec.on_frame, rec.on_complete)

    deadline = time.monotonic() + 5.0
    while scheduler.is_running and time.monotonic() < deadline:
        app.processEvents()
        time.sleep(0.002)

    assert rec.completed == 1
    assert rec.frames[0] == 0.0
    assert rec.frames[-1] == 1.0
