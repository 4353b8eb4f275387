import logging

from PySide6.QtCore import QObject, Signal

from learningjourney.charts import create_window_chart
from learningjourney.data import Database
from learningjourney.export_utils import export_pdf


class BackupWorker(QObject):
    """Exportiert die Datenbank als SQL-Dump. Eigene Verbindung im Worker-Thread."""
    finished = Signal(str)
    error = Signal(str)

    def __init__(self, db_path, fn):
        super().__init__()
        self.db_path = db_path
        self.fn = fn
        self._stopped = False

    def stop(self):
        self._stopped = True

    def run(self):
        if self._stopped:
            return
        db = None
        try:
            db = Database(self.db_path)
            db.export_to_sql(self.fn)
            if not self._stopped:
                self.finished.emit(self.fn)
        except OSError as e:
            logging.error(f"BackupWorker OSError: {e}")
            if not self._stopped:
                self.error.emit(f"Dateifehler: {e}")
        except Exception as e:
            logging.error(f"BackupWorker error: {e}")
            if not self._stopped:
                self.error.emit(str(e))
        finally:
            if db is not None:
                db.close()


class RestoreWorker(QObject):
    """
    Spielt einen SQL-Dump ein und liefert den neu geladenen DayLog über
    ``finished``. Übernommen wird er im UI-Thread (ActivityTracker.replace_log).
    """
    finished = Signal(object)
    error = Signal(str)

    def __init__(self, db_path, fn):
        super().__init__()
        self.db_path = db_path
        self.fn = fn
        self._stopped = False

    def stop(self):
        self._stopped = True

    def run(self):
        if self._stopped:
            return
        db = None
        try:
            db = Database(self.db_path)
            db.import_from_sql(self.fn)
            log = db.load_log()
            if not self._stopped:
                self.finished.emit(log)
        except OSError as e:
            logging.error(f"RestoreWorker OSError: {e}")
            if not self._stopped:
                self.error.emit(f"Dateifehler: {e}")
        except Exception as e:
            logging.error(f"RestoreWorker error: {e}")
            if not self._stopped:
                self.error.emit(str(e))
        finally:
            if db is not None:
                db.close()


class ExportWorker(QObject):
    """Erstellt Diagramm und PDF-Bericht für ein Plan-Fenster."""
    finished = Signal(str)
    error = Signal(str)

    def __init__(self, goal, summary, rows, out_fn, chart_fn=None, streak=None):
        super().__init__()
        self.goal = goal
        self.summary = summary
        self.rows = rows
        self.out_fn = out_fn
        self.chart_fn = chart_fn
        self.streak = streak

    def run(self):
        logging.info("ExportWorker.run gestartet.")
        try:
            if self.chart_fn:
                create_window_chart(self.summary, self.chart_fn, subtitle=self.goal.habit_name)
            export_pdf(self.goal, self.summary, self.rows, self.out_fn,
                       chart_png=self.chart_fn, streak=self.streak)
            self.finished.emit(self.out_fn)
        except Exception as e:
            logging.error(f"ExportWorker error: {e}")
            self.error.emit(str(e))
