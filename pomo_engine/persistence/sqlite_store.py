"""SQLite-backed interval store for durable history."""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterator, Union

import structlog

from ..errors import InvalidIDError, NoIntervalsError, PersistenceError
from ..state.models import BREAK_CATEGORIES, Interval
from ..utils.time import from_microseconds, local_day, to_microseconds
from .base import normalize_filter

logger = structlog.get_logger(__name__)

_COLUMNS = "id, start_time, planned_duration, actual_duration, category, state"


class SQLiteIntervalStore:
    """SQLite-based interval persistence layer."""

    def __init__(self, db_path: Union[str, Path] = "pomo.db"):
        self.db_path = Path(db_path)
        self.logger = logger
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        if self.db_path.parent and not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._get_connection("init") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS intervals (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    start_time TEXT NOT NULL,
                    planned_duration INTEGER DEFAULT 0,
                    actual_duration INTEGER DEFAULT 0,
                    category TEXT NOT NULL,
                    state INTEGER DEFAULT 0
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_intervals_category ON intervals(category)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_intervals_start_time ON intervals(start_time)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str) -> Iterator[sqlite3.Connection]:
        """
        Get database connection, translating driver errors to PersistenceError.

        Uncommitted work is discarded when the connection closes.
        """
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            self.logger.error(
                "Database error",
                operation=operation,
                db_path=str(self.db_path),
                error=str(e)
            )
            raise PersistenceError(
                f"Database error during {operation}: {e}",
                operation=operation,
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def create(self, interval: Interval) -> int:
        """
        Store a new interval.

        Args:
            interval: Interval to store; its id is ignored

        Returns:
            The id assigned by the database
        """
        with self._lock:
            with self._get_connection("create") as conn:
                cursor = conn.execute("""
                    INSERT INTO intervals (
                        start_time, planned_duration, actual_duration, category, state
                    ) VALUES (?, ?, ?, ?, ?)
                """, (
                    interval.start_time.isoformat(),
                    to_microseconds(interval.planned_duration),
                    to_microseconds(interval.actual_duration),
                    interval.category.value,
                    int(interval.state)
                ))

                conn.commit()
                interval_id = cursor.lastrowid

        self.logger.debug(
            "Interval stored",
            interval_id=interval_id,
            category=interval.category.value
        )
        return interval_id

    def update(self, interval: Interval) -> None:
        """Rewrite progress and state; id, category, planned duration and start time stay as created."""
        if interval.id <= 0:
            raise InvalidIDError(interval.id)

        with self._lock:
            with self._get_connection("update") as conn:
                cursor = conn.execute("""
                    UPDATE intervals SET
                        actual_duration = ?,
                        state = ?
                    WHERE id = ?
                """, (
                    to_microseconds(interval.actual_duration),
                    int(interval.state),
                    interval.id
                ))

                if cursor.rowcount == 0:
                    raise InvalidIDError(interval.id)
                conn.commit()

    def by_id(self, interval_id: int) -> Interval:
        """Get an interval by ID."""
        if interval_id <= 0:
            raise InvalidIDError(interval_id)

        with self._get_connection("by_id") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM intervals WHERE id = ?",
                (interval_id,)
            ).fetchone()

        if row is None:
            raise InvalidIDError(interval_id)
        return self._row_to_interval(row)

    def last(self) -> Interval:
        """Get the most recently created interval."""
        with self._get_connection("last") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM intervals ORDER BY id DESC LIMIT 1"
            ).fetchone()

        if row is None:
            raise NoIntervalsError()
        return self._row_to_interval(row)

    def breaks(self, n: int) -> list[Interval]:
        """Get up to n most recent break intervals."""
        if n <= 0:
            return []

        categories = sorted(category.value for category in BREAK_CATEGORIES)
        placeholders = ", ".join("?" for _ in categories)

        with self._get_connection("breaks") as conn:
            rows = conn.execute(f"""
                SELECT {_COLUMNS} FROM intervals
                WHERE category IN ({placeholders})
                ORDER BY id DESC LIMIT ?
            """, (*categories, n)).fetchall()

        return [self._row_to_interval(row) for row in rows]

    def category_summary(self, day: Union[date, datetime], category_filter: str) -> timedelta:
        """Sum actual durations for one local calendar day and category filter."""
        with self._get_connection("category_summary") as conn:
            row = conn.execute("""
                SELECT SUM(actual_duration) FROM intervals
                WHERE instr(category, ?) > 0
                AND date(start_time, 'localtime') = ?
            """, (
                normalize_filter(category_filter),
                local_day(day).isoformat()
            )).fetchone()

        return from_microseconds(row[0])

    def _row_to_interval(self, row: sqlite3.Row) -> Interval:
        """Convert database row to Interval object."""
        return Interval(
            id=row["id"],
            start_time=datetime.fromisoformat(row["start_time"]),
            planned_duration=from_microseconds(row["planned_duration"]),
            actual_duration=from_microseconds(row["actual_duration"]),
            category=row["category"],
            state=row["state"]
        )
