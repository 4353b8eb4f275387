import csv
import logging
import os
from datetime import date
from typing import Dict, List, Optional, Sequence

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from learningjourney.day_log import DayLog
from learningjourney.models import DayStatus, Goal
from learningjourney.statistics import day_label

_STATUS_MARKS = {
    DayStatus.NONE: ' ',
    DayStatus.LEARNED: 'L',
    DayStatus.FROZEN: 'F',
}

_WEEKDAYS = ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"]


def format_week(week: Sequence[date], log: DayLog, today: Optional[date] = None) -> str:
    """
    Eine Wochenzeile für die Konsole, z. B. ``So 09[L]  Mo 10[F] ...``.
    Der heutige Tag wird mit ``*`` markiert.
    """
    cells = []
    for d in week:
        mark = _STATUS_MARKS[log.status_for_date(d)]
        star = '*' if today is not None and d == today else ' '
        cells.append(f"{_WEEKDAYS[d.weekday()]} {d.day:02d}[{mark}]{star}")
    return ' '.join(cells)


def format_month_grid(grid, log: DayLog) -> str:
    """6 Zeilen á 7 Tage; Tage außerhalb des Monats in Klammern."""
    lines = []
    for row in range(6):
        cells = []
        for cell in grid[row * 7:(row + 1) * 7]:
            if cell.is_in_current_month:
                mark = _STATUS_MARKS[log.status_for_date(cell.date)]
                cells.append(f"{cell.date.day:2d}{mark}")
            else:
                cells.append(f"({cell.date.day})")
        lines.append(' '.join(c.rjust(4) for c in cells))
    return '\n'.join(lines)


def export_csv(rows: List[Dict], filename: str) -> str:
    """Schreibt ``day,status`` Zeilen (aus ``days_in_window``) als CSV."""
    with open(filename, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["day", "status"])
        writer.writeheader()
        for r in rows:
            writer.writerow({
                "day": r["day"].isoformat() if hasattr(r["day"], "isoformat") else r["day"],
                "status": r["status"],
            })
    return filename


def export_pdf(goal: Goal, summary: Dict, rows: List[Dict], filename: str,
               chart_png: Optional[str] = None, streak: Optional[int] = None) -> str:
    """PDF-Bericht für ein Plan-Fenster (reportlab)."""
    c = canvas.Canvas(filename, pagesize=letter)
    w, h = letter
    y = h - 50
    c.setFont('Helvetica-Bold', 14)
    c.drawString(50, y, f"LearningJourney Report: {goal.habit_name}")
    y -= 30
    c.setFont('Helvetica', 10)
    start, end = summary['window_start'], summary['window_end']
    c.drawString(50, y, f"Zeitraum ({goal.plan.value}): {start.isoformat()} bis {end.isoformat()} (exklusiv)")
    y -= 20
    c.drawString(50, y, day_label(summary['learned']))
    y -= 15
    c.drawString(50, y, day_label(summary['frozen'], "Day Freezed", "Days Freezed"))
    y -= 15
    c.drawString(50, y, f"{summary['frozen']}/{summary['freeze_allowance']} Freezes used")
    y -= 15
    if streak is not None:
        c.drawString(50, y, f"Aktuelle Serie: {streak}")
        y -= 15
    y -= 10
    for r in rows:
        if y < 100:
            c.showPage()
            c.setFont('Helvetica', 10)
            y = h - 50
        d = r['day']
        c.drawString(60, y, f"{d.isoformat()} ({_WEEKDAYS[d.weekday()]}): {r['status']}")
        y -= 15
    if chart_png:
        if os.path.exists(chart_png):
            c.showPage()
            size = 200
            c.drawImage(chart_png, w / 2 - size / 2, h - 100 - size, width=size, height=size)
        else:
            logging.error(f"Diagramm '{chart_png}' nicht gefunden, PDF ohne Diagramm")
    c.save()
    return filename
