import os
import sqlite3
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional
from learningjourney.calendar_logic import day_key
from learningjourney.day_log import DayLog
from learningjourney.models import DayStatus
import logging


class Database:
    def __init__(self, db_path: str = None):
        try:
            self.db_path = db_path or os.path.join(os.path.expanduser("~"), ".learningjourney", "learningjourney.db")
            if self.db_path != ':memory:':
                os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self._ensure_tables()
        except sqlite3.Error as e:
            logging.error(f"Database connection error: {e}")
            raise

    def _ensure_tables(self):
        cur = self.conn.cursor()
        # Status pro Tag, nur Tage ungleich 'none'
        cur.execute("""
        CREATE TABLE IF NOT EXISTS day_status (
          day TEXT PRIMARY KEY,
          status TEXT NOT NULL
        )""")
        self.conn.commit()

    # Export/Import
    def export_to_sql(self, filename: str):
        """Dump aller Tabellen als SQL-Statements"""
        with open(filename, 'w', encoding='utf-8') as f:
            for line in self.conn.iterdump():
                f.write(f"{line}\n")

    def import_from_sql(self, filename: str):
        """
        Dump erst in eine temporäre Datenbank einlesen und prüfen, dann in einer
        Transaktion übernehmen. Bei fehlerhaftem Dump bleibt alles unverändert.
        """
        with open(filename, 'r', encoding='utf-8') as f:
            script = f.read()
        tmp = sqlite3.connect(':memory:')
        try:
            tmp.executescript(script)
            rows = tmp.execute("SELECT day, status FROM day_status").fetchall()
        except sqlite3.Error as e:
            logging.error(f"Restore abgebrochen, Dump ungültig: {e}")
            raise
        finally:
            tmp.close()

        with self.conn:
            self.conn.execute("DELETE FROM day_status")
            self.conn.executemany(
                "INSERT INTO day_status (day, status) VALUES (?,?)",
                [(row[0], row[1]) for row in rows]
            )
        logging.info(f"Restore: {len(rows)} Einträge aus {filename}")

    # Status-Methoden
    def load_all_status(self) -> Dict[date, DayStatus]:
        cur = self.conn.cursor()
        cur.execute("SELECT day, status FROM day_status")
        status = {}
        for row in cur.fetchall():
            try:
                status[date.fromisoformat(row['day'])] = DayStatus(row['status'])
            except ValueError:
                logging.error(f"Ungültiger Eintrag übersprungen: {dict(row)}")
        cur.close()
        return status

    def load_log(self) -> DayLog:
        return DayLog(self.load_all_status())

    def save_status(self, day, status: DayStatus):
        key = day_key(day).isoformat()
        cur = self.conn.cursor()
        if status is DayStatus.NONE:
            cur.execute("DELETE FROM day_status WHERE day=?", (key,))
        else:
            cur.execute(
                "REPLACE INTO day_status (day, status) VALUES (?,?)",
                (key, status.value)
            )
        self.conn.commit()

    def save_log(self, log: DayLog):
        """Ersetzt den gespeicherten Stand komplett durch ``log``."""
        cur = self.conn.cursor()
        cur.execute("DELETE FROM day_status")
        cur.executemany(
            "INSERT INTO day_status (day, status) VALUES (?,?)",
            [(d.isoformat(), s.value) for d, s in log.items()]
        )
        self.conn.commit()

    def delete_status(self, day):
        cur = self.conn.cursor()
        cur.execute("DELETE FROM day_status WHERE day=?", (day_key(day).isoformat(),))
        self.conn.commit()

    def clear_status(self):
        cur = self.conn.cursor()
        cur.execute("DELETE FROM day_status")
        self.conn.commit()

    def query_range(self, start, end, status: Optional[DayStatus] = None) -> List[dict]:
        """Einträge im halboffenen Intervall [start, end), optional nach Status gefiltert."""
        query = "SELECT day, status FROM day_status WHERE day >= ? AND day < ?"
        params = [_first_day_from(start).isoformat(), _first_day_from(end).isoformat()]
        if status is not None:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY day"

        results = []
        for row in self.conn.execute(query, params):
            results.append({
                "day": date.fromisoformat(row['day']),
                "status": DayStatus(row['status']),
            })
        return results

    def close(self):
        """Schließe die Datenbankverbindung sauber"""
        if self.conn:
            self.conn.close()
            self.conn = None


def _first_day_from(value) -> date:
    """Erster Tagesschlüssel (Mitternacht) ab ``value``; Uhrzeiten runden auf."""
    if isinstance(value, datetime):
        local = value.astimezone() if value.tzinfo is not None else value
        if local.time() != time(0):
            return local.date() + timedelta(days=1)
    return day_key(value)
