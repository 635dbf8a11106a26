"""
Event Repository - Durable keyed store of Event records

Events are stored whole, as JSON documents keyed by event_id. The
repository loads every record on start into an in-memory cache and writes
through: the cache only changes after SQLite has committed, so a failed
write never leaves the cache ahead of the disk.

Callers always receive deep copies. Engines mutate the copy and hand it
back to save(), which is what makes every workflow step all-or-nothing.
"""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Protocol

from gigflow.kernel.errors import EventNotFound, StorageFailure
from gigflow.kernel.logging import get_logger
from gigflow.kernel.retry import retry_on_sqlite_lock
from gigflow.workflow.models import Event

logger = get_logger(__name__)


class EventRepository(Protocol):
    """What the engines need from event storage"""

    def get(self, event_id: str) -> Event:
        """Return a copy of the event or raise EventNotFound"""
        ...

    def save(self, event: Event) -> None:
        """Insert or replace one event"""
        ...

    def list_all(self) -> list[Event]:
        """Copies of all events"""
        ...

    def delete(self, event_id: str) -> None:
        """Administrative hard delete"""
        ...


class SQLiteEventRepository:
    """
    SQLite-backed event repository with a write-through cache

    Schema:
    - gig_events table: event_id, JSON document, last write time
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize the repository and load all events

        Args:
            db_path: Path to SQLite database file (shared with the offline
                queue and contractor registry)
        """
        self.db_path = Path(db_path)
        self._cache: dict[str, Event] = {}
        self._cache_lock = threading.Lock()
        self._initialize_schema()
        self._cache = {event.event_id: event for event in self._load_all()}
        logger.info("Event repository loaded", event_count=len(self._cache))

    def _initialize_schema(self) -> None:
        """Create tables if they don't exist"""
        try:
            with self._connect() as conn:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS gig_events (
                        event_id TEXT PRIMARY KEY,
                        document_json TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise StorageFailure("initialize_schema", str(e)) from e

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections"""
        conn = sqlite3.connect(str(self.db_path), timeout=5.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _load_all(self) -> list[Event]:
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "SELECT document_json FROM gig_events ORDER BY rowid"
                )
                return [
                    Event.model_validate_json(row["document_json"])
                    for row in cursor.fetchall()
                ]
        except sqlite3.Error as e:
            raise StorageFailure("load_events", str(e)) from e

    @retry_on_sqlite_lock()
    def _write(self, event: Event) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO gig_events (event_id, document_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(event_id) DO UPDATE SET
                    document_json = excluded.document_json,
                    updated_at = excluded.updated_at
            """,
                (
                    event.event_id,
                    event.model_dump_json(),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            conn.commit()

    @retry_on_sqlite_lock()
    def _write_all(self, events: list[Event]) -> None:
        with self._connect() as conn:
            try:
                conn.execute("DELETE FROM gig_events")
                now = datetime.now(timezone.utc).isoformat()
                conn.executemany(
                    "INSERT INTO gig_events (event_id, document_json, updated_at) "
                    "VALUES (?, ?, ?)",
                    [(e.event_id, e.model_dump_json(), now) for e in events],
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

    @retry_on_sqlite_lock()
    def _remove(self, event_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM gig_events WHERE event_id = ?", (event_id,))
            conn.commit()

    def get(self, event_id: str) -> Event:
        """
        Load an event for modification

        Returns:
            Deep copy of the cached event

        Raises:
            EventNotFound: If no such event exists
        """
        with self._cache_lock:
            event = self._cache.get(event_id)
            if event is None:
                raise EventNotFound(event_id)
            return event.model_copy(deep=True)

    def exists(self, event_id: str) -> bool:
        with self._cache_lock:
            return event_id in self._cache

    def save(self, event: Event) -> None:
        """
        Persist one event, then refresh the cache

        Raises:
            StorageFailure: If SQLite is unavailable after retries
        """
        try:
            self._write(event)
        except sqlite3.Error as e:
            logger.error("Event save failed", event_id=event.event_id, error=str(e))
            raise StorageFailure("save_event", str(e)) from e

        with self._cache_lock:
            self._cache[event.event_id] = event.model_copy(deep=True)

    def replace_all(self, events: list[Event]) -> None:
        """
        Replace the whole collection in one transaction

        Raises:
            StorageFailure: If SQLite is unavailable after retries
        """
        try:
            self._write_all(events)
        except sqlite3.Error as e:
            raise StorageFailure("replace_events", str(e)) from e

        with self._cache_lock:
            self._cache = {e.event_id: e.model_copy(deep=True) for e in events}

    def list_all(self) -> list[Event]:
        with self._cache_lock:
            return [e.model_copy(deep=True) for e in self._cache.values()]

    def delete(self, event_id: str) -> None:
        """
        Administrative removal - the only way an event disappears

        Raises:
            EventNotFound: If no such event exists
            StorageFailure: If SQLite is unavailable after retries
        """
        if not self.exists(event_id):
            raise EventNotFound(event_id)
        try:
            self._remove(event_id)
        except sqlite3.Error as e:
            raise StorageFailure("delete_event", str(e)) from e

        with self._cache_lock:
            self._cache.pop(event_id, None)

    def count(self) -> int:
        with self._cache_lock:
            return len(self._cache)
