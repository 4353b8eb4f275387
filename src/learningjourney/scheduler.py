import logging
from datetime import datetime, time, timedelta
from typing import Callable

from PySide6.QtCore import QObject, QTimer, Signal

ROLLOVER_TIME = time(0, 0, 1)
FALLBACK_DELAY_SECONDS = 86401


def next_rollover(now: datetime) -> datetime:
    """Nächster lokaler Zeitpunkt 00:00:01 strikt nach ``now``."""
    target = datetime.combine(now.date(), ROLLOVER_TIME, tzinfo=now.tzinfo)
    if target <= now:
        target = datetime.combine(now.date() + timedelta(days=1), ROLLOVER_TIME, tzinfo=now.tzinfo)
    return target


def seconds_until_rollover(now: datetime) -> float:
    """
    Wartezeit bis zum nächsten Tageswechsel. Liegt das Ziel durch Uhr- oder
    Zeitzonenwechsel nicht in der Zukunft, wird fest 86401 s gewartet.
    """
    try:
        delay = (next_rollover(now) - now).total_seconds()
    except (OverflowError, ValueError) as e:
        logging.error(f"Tageswechsel nicht berechenbar: {e}")
        return float(FALLBACK_DELAY_SECONDS)
    if delay <= 0:
        return float(FALLBACK_DELAY_SECONDS)
    return delay


class MidnightScheduler(QObject):
    """
    Sendet ``day_changed`` jeden Tag um 00:00:01 Ortszeit und plant sich danach
    selbst neu. Es gibt immer höchstens einen wartenden Timer.
    """
    day_changed = Signal()

    def __init__(self, parent=None, clock: Callable[[], datetime] = datetime.now):
        super().__init__(parent)
        self._clock = clock
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    @property
    def remaining_ms(self) -> int:
        return self._timer.remainingTime()

    def schedule(self):
        # alten Timer verwerfen, bevor neu gestartet wird
        self.cancel()
        delay = seconds_until_rollover(self._clock())
        msec = max(0, int(delay * 1000))
        self._timer.start(msec)
        logging.debug(f"Tageswechsel geplant in {delay:.1f} s")

    def cancel(self):
        if self._timer.isActive():
            self._timer.stop()

    def _on_timeout(self):
        logging.info("Tageswechsel erreicht")
        self.day_changed.emit()
        self.schedule()
