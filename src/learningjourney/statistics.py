from datetime import timedelta
from typing import Dict, List

from learningjourney.calendar_logic import DEFAULT_FIRST_WEEKDAY, day_key, stat_window
from learningjourney.day_log import DayLog
from learningjourney.models import DayStatus, Plan


def count_in_window(log: DayLog, status: DayStatus, plan: Plan, today,
                    first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> int:
    start, end = stat_window(plan, today, first_weekday)
    return log.count_in_range(status, start, end)


def used_freezes(log: DayLog, plan: Plan, today,
                 first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> int:
    return count_in_window(log, DayStatus.FROZEN, plan, today, first_weekday)


def freezes_left(log: DayLog, plan: Plan, today,
                 first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> int:
    return max(0, plan.freeze_allowance - used_freezes(log, plan, today, first_weekday))


def summarize_window(log: DayLog, plan: Plan, today,
                     first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> Dict[str, object]:
    """
    Zusammenfassung für das Plan-Fenster, das ``today`` enthält:
      learned          : Anzahl gelernter Tage
      frozen           : Anzahl Freeze-Tage
      freeze_allowance : Kontingent des Plans
      freezes_left     : verbleibende Freezes (nie negativ)
      window_start     : erster Tag des Fensters
      window_end       : erster Tag nach dem Fenster
    """
    start, end = stat_window(plan, today, first_weekday)
    learned = log.count_in_range(DayStatus.LEARNED, start, end)
    frozen = log.count_in_range(DayStatus.FROZEN, start, end)
    return {
        'learned': learned,
        'frozen': frozen,
        'freeze_allowance': plan.freeze_allowance,
        'freezes_left': freezes_left(log, plan, today, first_weekday),
        'window_start': start,
        'window_end': end,
    }


def current_streak(log: DayLog, today) -> int:
    """
    Gelernte Tage in Folge bis heute. Ist heute noch offen, zählt ab gestern.
    Freeze-Tage unterbrechen die Serie nicht, zählen aber auch nicht mit.
    """
    cursor = day_key(today)
    if log.status_for_date(cursor) is DayStatus.NONE:
        cursor -= timedelta(days=1)
    streak = 0
    while True:
        status = log.status_for_date(cursor)
        if status is DayStatus.NONE:
            break
        if status is DayStatus.LEARNED:
            streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(log: DayLog) -> int:
    best = 0
    run = 0
    previous = None
    for d, status in log.items():
        if previous is None or d - previous != timedelta(days=1):
            run = 0
        if status is DayStatus.LEARNED:
            run += 1
        best = max(best, run)
        previous = d
    return best


def count_by_weekday(log: DayLog, status: DayStatus) -> Dict[int, int]:
    """0=Montag … 6=Sonntag -> Anzahl Tage mit ``status``."""
    counts = {wd: 0 for wd in range(7)}
    for d in log.days_with(status):
        counts[d.weekday()] += 1
    return counts


def days_in_window(log: DayLog, plan: Plan, today,
                   first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> List[Dict[str, object]]:
    """Alle erfassten Tage im Plan-Fenster, sortiert, für Exporte."""
    start, end = stat_window(plan, today, first_weekday)
    return [{'day': d, 'status': s.value} for d, s in log.items() if start <= d < end]


def day_label(count: int, singular: str = "Day Learned", plural: str = "Days Learned") -> str:
    return f"{count} {singular if count == 1 else plural}"
