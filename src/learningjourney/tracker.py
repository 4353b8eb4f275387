import logging
from datetime import date, datetime
from typing import Callable, Dict, Optional, Tuple

from learningjourney import statistics
from learningjourney.calendar_logic import DEFAULT_FIRST_WEEKDAY, day_key, stat_window
from learningjourney.day_log import DayLog
from learningjourney.models import DayStatus, Plan


class PolicyViolation(ValueError):
    """Ein Eintrag verstößt gegen die Regeln des Trackers."""


class AlreadyLoggedError(PolicyViolation):
    pass


class FreezeLimitError(PolicyViolation):
    pass


class ActivityTracker:
    """
    Verbindet einen DayLog mit Plan, Uhr und optionaler Datenbank.

    Hier (und nicht im DayLog) werden die Regeln geprüft: heute nur ein
    Eintrag, Freeze nur solange das Kontingent des Plan-Fensters reicht.
    Der Tracker gehört dem UI-Thread.
    """

    def __init__(self, log: DayLog = None, plan: Plan = Plan.WEEK, db=None,
                 clock: Callable[[], datetime] = datetime.now,
                 first_weekday: int = DEFAULT_FIRST_WEEKDAY):
        self.log = log if log is not None else DayLog()
        self.plan = plan
        self.db = db
        self.clock = clock
        self.first_weekday = first_weekday
        self._today = day_key(clock())

    @property
    def today(self) -> date:
        return self._today

    @property
    def today_status(self) -> DayStatus:
        return self.log.status_for_date(self._today)

    def refresh(self):
        """Slot für MidnightScheduler.day_changed."""
        new_today = day_key(self.clock())
        if new_today != self._today:
            logging.info(f"Neuer Tag: {new_today.isoformat()}")
        self._today = new_today

    def set_plan(self, plan: Plan):
        self.plan = plan

    def stat_window(self) -> Tuple[date, date]:
        return stat_window(self.plan, self._today, self.first_weekday)

    @property
    def learned_count(self) -> int:
        return statistics.count_in_window(self.log, DayStatus.LEARNED, self.plan,
                                          self._today, self.first_weekday)

    @property
    def frozen_count(self) -> int:
        return statistics.count_in_window(self.log, DayStatus.FROZEN, self.plan,
                                          self._today, self.first_weekday)

    @property
    def used_freezes(self) -> int:
        return self.frozen_count

    @property
    def freezes_left(self) -> int:
        return statistics.freezes_left(self.log, self.plan, self._today, self.first_weekday)

    def summary(self) -> Dict[str, object]:
        return statistics.summarize_window(self.log, self.plan, self._today, self.first_weekday)

    def streak(self) -> int:
        return statistics.current_streak(self.log, self._today)

    def can_log_learned(self) -> bool:
        return self.today_status is DayStatus.NONE

    def can_log_frozen(self) -> bool:
        return self.today_status is DayStatus.NONE and self.freezes_left > 0

    def log_learned(self):
        if not self.can_log_learned():
            raise AlreadyLoggedError(
                f"{self._today.isoformat()} ist bereits als {self.today_status.value} erfasst")
        self._write(DayStatus.LEARNED)

    def log_frozen(self):
        if self.today_status is not DayStatus.NONE:
            raise AlreadyLoggedError(
                f"{self._today.isoformat()} ist bereits als {self.today_status.value} erfasst")
        if self.freezes_left <= 0:
            raise FreezeLimitError(
                f"Keine Freezes mehr übrig ({self.plan.freeze_allowance} pro {self.plan.value})")
        self._write(DayStatus.FROZEN)

    def _write(self, status: DayStatus, day: Optional[date] = None):
        day = day or self._today
        self.log.set_status(status, day)
        if self.db is not None:
            self.db.save_status(day, status)
        logging.info(f"{day.isoformat()} als {status.value} erfasst")

    def replace_log(self, log: DayLog):
        """Übernimmt einen (z. B. aus einem Backup) geladenen Log."""
        self.log = log
        logging.info(f"Tagesprotokoll ersetzt: {len(log)} Einträge")

    def reset_log(self):
        """Neues Lernziel: Serie beginnt von vorn."""
        self.log.clear()
        if self.db is not None:
            self.db.clear_status()
        logging.info("Tagesprotokoll zurückgesetzt")
