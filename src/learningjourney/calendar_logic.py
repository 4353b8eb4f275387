import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from .models import CalendarDay, MonthSection, Plan

# Wochenbeginn wie im Kalender des Geräts, Standard Sonntag
DEFAULT_FIRST_WEEKDAY = calendar.SUNDAY
GRID_DAYS = 42


def day_key(value) -> date:
    """Normalisiert date/datetime auf den lokalen Kalendertag."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def week_start(day, first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> date:
    d = day_key(day)
    return d - timedelta(days=(d.weekday() - first_weekday) % 7)


def month_start(day) -> date:
    return day_key(day).replace(day=1)


def next_month_start(day) -> date:
    return month_start(day) + relativedelta(months=1)


def _week_from(start: date) -> List[date]:
    return [start + timedelta(days=i) for i in range(7)]


def weeks_intersecting_month(anchor, first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> List[List[date]]:
    """
    Alle 7-Tage-Blöcke, die den Monat von ``anchor`` überschneiden.
    Abbruch, sobald ein Wochenbeginn das Monatsende erreicht.
    """
    first = month_start(anchor)
    end = next_month_start(anchor)
    weeks = []
    cursor = week_start(first, first_weekday)
    while cursor < end:
        weeks.append(_week_from(cursor))
        cursor += timedelta(days=7)
    return weeks


def weeks_intersecting_month_legacy(anchor, first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> List[List[date]]:
    """
    Alte Abbruchregel: weiter, solange der letzte Tag der aktuellen Woche oder
    der erste Tag der nächsten Woche noch im Monat liegt. Endet der Monat genau
    am letzten Wochentag, kommt eine komplette Woche des Folgemonats dazu.
    Nur noch für Vergleichstests.
    """
    first = month_start(anchor)
    month = first.month
    weeks = []
    cursor = week_start(first, first_weekday)
    while True:
        week = _week_from(cursor)
        weeks.append(week)
        nxt = cursor + timedelta(days=7)
        if week[6].month != month and nxt.month != month:
            break
        cursor = nxt
    return weeks


def month_grid(anchor, first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> List[CalendarDay]:
    """42 Tage (6x7) ab Wochenbeginn der Woche, die den Monatsersten enthält."""
    ref = day_key(anchor)
    start = week_start(month_start(ref), first_weekday)
    grid = []
    for i in range(GRID_DAYS):
        d = start + timedelta(days=i)
        grid.append(CalendarDay(d, (d.year, d.month) == (ref.year, ref.month)))
    return grid


def week_index_containing(day, weeks: Sequence[Sequence[date]]) -> Optional[int]:
    key = day_key(day)
    for i, week in enumerate(weeks):
        if key in week:
            return i
    return None


def same_month(a, b) -> bool:
    a, b = day_key(a), day_key(b)
    return (a.year, a.month) == (b.year, b.month)


def visible_week_index(anchor, today, offset: int,
                       first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> int:
    """
    Welche Woche angezeigt wird: im aktuellen Monat hat die Woche von heute
    Vorrang vor einem alten Offset, sonst wird der Offset begrenzt.
    """
    weeks = weeks_intersecting_month(anchor, first_weekday)
    if same_month(anchor, today):
        idx = week_index_containing(today, weeks)
        if idx is not None:
            return idx
    return min(max(0, offset), len(weeks) - 1)


def move_week(anchor, offset: int, delta: int,
              first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> Tuple[date, int]:
    """
    Wochenweise blättern, über Monatsgrenzen hinweg.
    Liefert (neuer Anker, neuer Offset).
    """
    weeks = weeks_intersecting_month(anchor, first_weekday)
    new = offset + delta
    if new < 0:
        prev_month = month_start(anchor) - relativedelta(months=1)
        prev_weeks = weeks_intersecting_month(prev_month, first_weekday)
        return prev_month, max(len(prev_weeks) - 1, 0)
    if new >= len(weeks):
        return next_month_start(anchor), 0
    return day_key(anchor), new


def stat_window(plan: Plan, today, first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> Tuple[date, date]:
    """Halboffenes Intervall [start, end) des Plans, das ``today`` enthält."""
    d = day_key(today)
    if plan is Plan.WEEK:
        start = week_start(d, first_weekday)
        return start, start + timedelta(days=7)
    if plan is Plan.MONTH:
        start = month_start(d)
        return start, start + relativedelta(months=1)
    start = date(d.year, 1, 1)
    return start, start + relativedelta(years=1)


def month_title(day) -> str:
    return day_key(day).strftime("%B %Y")


def month_from_picker(year: int, month: int) -> date:
    """Monats-/Jahresauswahl -> Erster des gewählten Monats."""
    return date(year, month, 1)


def build_month_sections(anchor, previous: int = 6, following: int = 6,
                         first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> List[MonthSection]:
    """Monate von ``anchor - previous`` bis ``anchor + following`` für den Kalender."""
    base = month_start(anchor)
    sections = []
    for offset in range(-previous, following + 1):
        start = base + relativedelta(months=offset)
        sections.append(MonthSection(start, month_grid(start, first_weekday), month_title(start)))
    return sections


def needs_prefetch(sections: Sequence[MonthSection], index: int, edge_threshold: int = 2) -> bool:
    """True, wenn der sichtbare Monat nah am Rand liegt und neu aufgebaut werden sollte."""
    count = len(sections)
    if count == 0 or not 0 <= index < count:
        return False
    return index <= edge_threshold or index >= count - 1 - edge_threshold
