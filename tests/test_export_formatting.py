from datetime import date

from learningjourney.calendar_logic import month_grid, weeks_intersecting_month
from learningjourney.charts import create_pie_chart, create_window_chart
from learningjourney.day_log import DayLog
from learningjourney.export_utils import export_csv, export_pdf, format_month_grid, format_week
from learningjourney.models import DayStatus, Goal, Plan
from learningjourney.statistics import days_in_window, summarize_window


def _log():
    return DayLog({date(2025, 3, 10): DayStatus.LEARNED, date(2025, 3, 11): DayStatus.FROZEN})


def test_format_week_marks_status_and_today():
    week = weeks_intersecting_month(date(2025, 3, 1))[2]
    txt = format_week(week, _log(), today=date(2025, 3, 10))
    assert txt.startswith("So 09[ ]")
    assert "Mo 10[L]*" in txt
    assert "Di 11[F] " in txt


def test_format_month_grid():
    txt = format_month_grid(month_grid(date(2025, 3, 1)), _log())
    lines = txt.split("\n")
    assert len(lines) == 6
    assert "(23)" in lines[0]
    assert "10L" in txt
    assert "11F" in txt


def test_export_csv(tmp_path):
    rows = days_in_window(_log(), Plan.WEEK, date(2025, 3, 10))
    csv_file = tmp_path / "stats_export.csv"
    export_csv(rows, str(csv_file))
    with open(csv_file, encoding="utf-8") as f:
        lines = f.read().splitlines()
    assert lines == ["day,status", "2025-03-10,learned", "2025-03-11,frozen"]


def test_export_pdf(tmp_path):
    log = _log()
    summary = summarize_window(log, Plan.WEEK, date(2025, 3, 10))
    rows = days_in_window(log, Plan.WEEK, date(2025, 3, 10))
    pdf_file = tmp_path / "report.pdf"
    export_pdf(Goal("Swift", Plan.WEEK, True), summary, rows, str(pdf_file),
               chart_png=str(tmp_path / "missing.png"), streak=1)
    assert pdf_file.exists() and pdf_file.stat().st_size > 0


def test_pie_charts(tmp_path):
    empty = tmp_path / "empty.png"
    create_pie_chart([0, 0], ["Gelernt", "Freeze"], str(empty))
    assert empty.exists()
    summary = summarize_window(_log(), Plan.MONTH, date(2025, 3, 10))
    chart = tmp_path / "window.png"
    assert create_window_chart(summary, str(chart), subtitle="Swift") == str(chart)
    assert chart.exists()
