from datetime import date, datetime, time
from typing import Dict, Iterator, List, Mapping, Tuple

from learningjourney.calendar_logic import day_key
from learningjourney.models import DayStatus


class DayLog:
    """
    Speicher für den Status pro Kalendertag.

    Schlüssel sind immer normalisierte Tage (siehe ``day_key``), daher liefern
    alle Zeitpunkte desselben Tages denselben Eintrag. Gespeichert werden nur
    Tage mit Status ungleich NONE. Der Log prüft keine Regeln (Freeze-Kontingent,
    bereits erfasster Tag), das ist Aufgabe des Aufrufers.
    """

    def __init__(self, entries: Mapping[date, DayStatus] = None):
        self._entries: Dict[date, DayStatus] = {}
        if entries:
            self.update(entries)

    def set_status(self, status: DayStatus, day: date) -> None:
        key = day_key(day)
        if status is DayStatus.NONE:
            self._entries.pop(key, None)
        else:
            self._entries[key] = status

    def status_for_date(self, day) -> DayStatus:
        return self._entries.get(day_key(day), DayStatus.NONE)

    def count_in_range(self, status: DayStatus, start, end) -> int:
        """Anzahl Einträge mit ``status`` im halboffenen Intervall [start, end)."""
        lo, hi = _as_bound(start), _as_bound(end)
        return sum(1 for d, s in self._entries.items()
                   if s is status and lo <= _key_at(d, lo) and _key_at(d, hi) < hi)

    def days_with(self, status: DayStatus) -> List[date]:
        return sorted(d for d, s in self._entries.items() if s is status)

    def items(self) -> List[Tuple[date, DayStatus]]:
        return sorted(self._entries.items())

    def update(self, entries: Mapping[date, DayStatus]) -> None:
        for d, s in entries.items():
            self.set_status(s, d)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, day) -> bool:
        return day_key(day) in self._entries

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DayLog({len(self._entries)} Tage)"


def _as_bound(value):
    # Intervallgrenzen bleiben wie übergeben, nur aware -> lokale Zeit
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _key_at(day: date, bound):
    """Tagesschlüssel als Mitternacht, wenn die Grenze eine Uhrzeit trägt."""
    if isinstance(bound, datetime):
        return datetime.combine(day, time())
    return day
