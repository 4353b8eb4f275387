# src/learningjourney/main.py

import logging
import os

from PySide6.QtCore import QCoreApplication

from .calendar_logic import (
    month_grid, month_title, move_week, visible_week_index, weeks_intersecting_month,
    month_from_picker,
)
from .config import load_config, save_config, load_goal, apply_goal, update_goal
from .data import Database
from .export_utils import export_csv, format_month_grid, format_week
from .models import Goal, Plan
from .scheduler import MidnightScheduler
from .statistics import day_label, days_in_window
from .tracker import ActivityTracker, PolicyViolation
from .workers import BackupWorker, ExportWorker, RestoreWorker


def input_plan(default: Plan) -> Plan:
    options = ", ".join(p.value for p in Plan)
    raw = input(f"  Zeitraum ({options}) [{default.value}]: ").strip().capitalize()
    return Plan.from_id(raw) if raw else default


def input_goal(goal: Goal):
    print("\n✏️  Lernziel festlegen:")
    name = input(f"  Was möchtest du lernen? [{goal.habit_name}]: ").strip() or goal.habit_name
    plan = input_plan(goal.plan)
    return update_goal(goal, name, plan)


def print_week(tracker: ActivityTracker, anchor, offset):
    weeks = weeks_intersecting_month(anchor, tracker.first_weekday)
    idx = min(max(0, offset), len(weeks) - 1)
    print(f"\n📅 {month_title(anchor)}  (Woche {idx + 1}/{len(weeks)})")
    print("  " + format_week(weeks[idx], tracker.log, tracker.today))


def print_stats(tracker: ActivityTracker):
    s = tracker.summary()
    print(f"\n🔥 {day_label(s['learned'])}")
    print(f"🧊 {day_label(s['frozen'], 'Day Freezed', 'Days Freezed')}")
    print(f"   {s['frozen']}/{s['freeze_allowance']} Freezes used")
    print(f"   Aktuelle Serie: {tracker.streak()}")


def start_rollover(tracker: ActivityTracker) -> MidnightScheduler:
    """Tageswechsel über den Qt-Timer an den Tracker melden."""
    scheduler = MidnightScheduler()
    scheduler.day_changed.connect(tracker.refresh)
    scheduler.schedule()
    return scheduler


def run_worker(worker, on_finished):
    """
    Führt einen Worker im aktuellen Thread aus; die Konsole wartet ohnehin.
    Rückgabe: True bei Erfolg.
    """
    errors = []
    worker.finished.connect(on_finished)
    worker.error.connect(errors.append)
    worker.run()
    for msg in errors:
        print(f"⚠️  {msg}")
    return not errors


def run_backup(db: Database):
    fn = input("  Backup-Datei [learningjourney_backup.sql]: ").strip() or "learningjourney_backup.sql"
    run_worker(BackupWorker(db.db_path, fn),
               lambda path: print(f"✅ Backup gespeichert: {os.path.abspath(path)}"))


def run_restore(db: Database, tracker: ActivityTracker):
    fn = input("  Backup-Datei zum Einspielen: ").strip()
    if input("  Achtung: Alle aktuellen Einträge werden überschrieben. Weiter? (j/n) ").lower() != "j":
        return

    def on_restored(log):
        tracker.replace_log(log)
        print(f"✅ {len(log)} Einträge wiederhergestellt.")

    run_worker(RestoreWorker(db.db_path, fn), on_restored)


def run_export(goal: Goal, tracker: ActivityTracker):
    base = input("  Dateiname ohne Endung [learningjourney_report]: ").strip() or "learningjourney_report"
    rows = days_in_window(tracker.log, tracker.plan, tracker.today, tracker.first_weekday)
    export_csv(rows, f"{base}.csv")
    worker = ExportWorker(goal, tracker.summary(), rows, f"{base}.pdf",
                          chart_fn=f"{base}.png", streak=tracker.streak())
    run_worker(worker, lambda path: print(f"✅ Exportiert nach {os.path.abspath(base)}.csv/.pdf"))


def run_wizard():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    print("🎯 Willkommen bei LearningJourney 🎯")
    app = QCoreApplication.instance() or QCoreApplication([])

    cfg = load_config()
    goal = load_goal(cfg)
    db = Database()
    tracker = ActivityTracker(db.load_log(), goal.plan, db, first_weekday=cfg.get('first_weekday', 6))

    if not goal.has_set_goal:
        goal, _ = input_goal(goal)
        tracker.set_plan(goal.plan)
        save_config(apply_goal(cfg, goal))

    scheduler = start_rollover(tracker)
    anchor = tracker.today
    offset = visible_week_index(anchor, tracker.today, 0, tracker.first_weekday)

    try:
        while True:
            # fällige Timer (Tageswechsel) nach der letzten Eingabe abarbeiten
            app.processEvents()
            print(f"\n📚 {goal.habit_name} ({goal.plan.value})")
            print_week(tracker, anchor, offset)
            print_stats(tracker)
            choice = input(
                "\n[1] Heute gelernt  [2] Heute Freeze  [<] Woche zurück  [>] Woche vor\n"
                "[m] Monat  [w] Monat wählen  [z] Ziel ändern  [e] Export\n"
                "[b] Backup  [r] Restore  [q] Ende: "
            ).strip().lower()

            try:
                if choice == "1":
                    tracker.log_learned()
                    print("🔥 Heute als gelernt erfasst.")
                elif choice == "2":
                    tracker.log_frozen()
                    print("🧊 Heute als Freeze erfasst.")
                elif choice in ("<", ">"):
                    anchor, offset = move_week(anchor, offset, -1 if choice == "<" else 1,
                                               tracker.first_weekday)
                elif choice == "m":
                    print(f"\n{month_title(anchor)}")
                    print(format_month_grid(month_grid(anchor, tracker.first_weekday), tracker.log))
                elif choice == "w":
                    month = int(input("  Monat (1-12): "))
                    year = int(input("  Jahr: "))
                    anchor = month_from_picker(year, month)
                    offset = visible_week_index(anchor, tracker.today, 0, tracker.first_weekday)
                elif choice == "z":
                    new_goal, is_new = input_goal(goal)
                    if is_new and input("  Neues Ziel: deine Serie beginnt von vorn. Weiter? (j/n) ").lower() != "j":
                        continue
                    if is_new:
                        tracker.reset_log()
                    goal = new_goal
                    tracker.set_plan(goal.plan)
                    save_config(apply_goal(cfg, goal))
                elif choice == "e":
                    run_export(goal, tracker)
                elif choice == "b":
                    run_backup(db)
                elif choice == "r":
                    run_restore(db, tracker)
                elif choice == "q":
                    break
            except PolicyViolation as e:
                print(f"⚠️  {e}")
            except ValueError as e:
                print(f"⚠️  Ungültige Eingabe: {e}")
    finally:
        scheduler.cancel()
        db.close()


if __name__ == "__main__":
    run_wizard()
