# src/learningjourney/models.py
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List


class DayStatus(Enum):
    """Ergebnis eines einzelnen Kalendertags."""
    NONE = "none"
    LEARNED = "learned"
    FROZEN = "frozen"


class Plan(Enum):
    """Zeitraum für Statistik und Freeze-Kontingent."""
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"

    @property
    def freeze_allowance(self) -> int:
        return _FREEZE_ALLOWANCE[self]

    @classmethod
    def from_id(cls, raw: str) -> "Plan":
        # unbekannte Werte aus den Einstellungen -> Woche
        try:
            return cls(raw)
        except ValueError:
            return cls.WEEK


_FREEZE_ALLOWANCE = {
    Plan.WEEK: 2,
    Plan.MONTH: 8,
    Plan.YEAR: 96,
}


@dataclass(frozen=True)
class CalendarDay:
    """Eine Zelle im Monatsraster."""
    date: date
    is_in_current_month: bool


@dataclass
class MonthSection:
    """Ein Monat im scrollbaren Kalender (immer 6x7 Tage)."""
    month_start: date                      # 1. des Monats
    days: List[CalendarDay] = field(default_factory=list)
    title: str = ""                        # z. B. "October 2025"


@dataclass
class Goal:
    """Lernziel, wie es in den Einstellungen abgelegt wird."""
    habit_name: str = "Swift"
    plan: Plan = Plan.WEEK
    has_set_goal: bool = False
