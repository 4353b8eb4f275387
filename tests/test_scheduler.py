from datetime import datetime, timedelta, timezone
import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop, QTimer

from learningjourney import scheduler
from learningjourney.scheduler import (
    FALLBACK_DELAY_SECONDS, MidnightScheduler, next_rollover, seconds_until_rollover,
)
from learningjourney.tracker import ActivityTracker


@pytest.fixture(scope="module")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def test_next_rollover():
    assert next_rollover(datetime(2025, 3, 10, 12, 0)) == datetime(2025, 3, 11, 0, 0, 1)
    assert next_rollover(datetime(2025, 3, 10, 0, 0, 0)) == datetime(2025, 3, 10, 0, 0, 1)
    # strikt danach
    assert next_rollover(datetime(2025, 3, 10, 0, 0, 1)) == datetime(2025, 3, 11, 0, 0, 1)
    assert next_rollover(datetime(2025, 12, 31, 23, 0)) == datetime(2026, 1, 1, 0, 0, 1)


def test_next_rollover_keeps_tzinfo():
    now = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
    assert next_rollover(now).tzinfo is timezone.utc


def test_seconds_until_rollover():
    assert seconds_until_rollover(datetime(2025, 3, 10, 23, 59, 59)) == 2.0
    assert seconds_until_rollover(datetime(2025, 3, 10, 0, 0, 1)) == 86400.0


def test_seconds_until_rollover_fallback(monkeypatch):
    monkeypatch.setattr(scheduler, "next_rollover", lambda now: now - timedelta(hours=1))
    assert seconds_until_rollover(datetime(2025, 3, 10, 12, 0)) == FALLBACK_DELAY_SECONDS


def test_schedule_keeps_single_timer(qapp):
    sched = MidnightScheduler(clock=lambda: datetime(2025, 3, 10, 12, 0))
    assert not sched.is_active
    sched.schedule()
    assert sched.is_active
    first = sched.remaining_ms
    assert 0 < first <= 12 * 3600 * 1000 + 1000
    sched.schedule()
    assert sched.is_active
    assert len(sched.findChildren(QTimer)) == 1
    sched.cancel()
    assert not sched.is_active


def test_timer_fires_and_reschedules(qapp):
    # 50 ms vor dem Tageswechsel
    sched = MidnightScheduler(clock=lambda: datetime(2025, 3, 10, 0, 0, 0, 950000))
    fired = []
    loop = QEventLoop()
    sched.day_changed.connect(lambda: fired.append(True))
    sched.day_changed.connect(loop.quit)
    guard = QTimer()
    guard.setSingleShot(True)
    guard.timeout.connect(loop.quit)
    guard.start(3000)
    sched.schedule()
    loop.exec()
    guard.stop()
    assert fired
    assert sched.is_active
    sched.cancel()


def test_day_changed_refreshes_tracker(qapp):
    now = [datetime(2025, 3, 10, 23, 59)]
    tracker = ActivityTracker(clock=lambda: now[0])
    sched = MidnightScheduler(clock=lambda: now[0])
    sched.day_changed.connect(tracker.refresh)
    tracker.log_learned()
    now[0] = datetime(2025, 3, 11, 0, 0, 1)
    sched.day_changed.emit()
    assert tracker.can_log_learned()
