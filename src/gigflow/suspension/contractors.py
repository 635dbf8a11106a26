"""
Contractor Ratings - One-star tallies and suspension flags per contractor

The workflow core only needs a narrow slice of a contractor's profile:
how many one-star reviews they have and whether they are suspended.
ContractorRatings is that slice; SQLiteContractorRegistry keeps it in
the same database file as the events.
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Protocol

from pydantic import BaseModel

from gigflow.kernel.errors import StorageFailure
from gigflow.kernel.logging import get_logger
from gigflow.kernel.retry import retry_on_sqlite_lock

logger = get_logger(__name__)


class ContractorProfile(BaseModel):
    contractor_id: str
    one_star_count: int = 0
    is_suspended: bool = False
    suspended_at: datetime | None = None
    suspension_reason: str | None = None


class ContractorRatings(Protocol):
    """What SuspensionPolicy needs from the profile subsystem"""

    def get_one_star_count(self, contractor_id: str) -> int:
        ...

    def record_one_star(
        self, contractor_id: str, review_id: str, event_id: str, recorded_at: datetime
    ) -> bool:
        """Count a one-star review once; False if review_id was already counted"""
        ...

    def is_suspended(self, contractor_id: str) -> bool:
        ...

    def set_suspended(self, contractor_id: str, reason: str, suspended_at: datetime) -> None:
        ...


class SQLiteContractorRegistry:
    """
    SQLite-backed contractor ratings

    Schema:
    - contractor_profiles: tally and suspension state per contractor
    - one_star_reviews: every counted review id (makes counting idempotent)
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._initialize_schema()

    def _initialize_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS contractor_profiles (
                        contractor_id TEXT PRIMARY KEY,
                        one_star_count INTEGER NOT NULL DEFAULT 0,
                        is_suspended INTEGER NOT NULL DEFAULT 0,
                        suspended_at TEXT,
                        suspension_reason TEXT
                    )
                """)
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS one_star_reviews (
                        review_id TEXT PRIMARY KEY,
                        contractor_id TEXT NOT NULL,
                        event_id TEXT NOT NULL,
                        recorded_at TEXT NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise StorageFailure("initialize_contractor_registry", str(e)) from e

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path), timeout=5.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def get_profile(self, contractor_id: str) -> ContractorProfile:
        """Profile of a contractor; unknown contractors have a clean record"""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM contractor_profiles WHERE contractor_id = ?",
                    (contractor_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageFailure("load_contractor_profile", str(e)) from e

        if row is None:
            return ContractorProfile(contractor_id=contractor_id)
        return ContractorProfile(
            contractor_id=row["contractor_id"],
            one_star_count=row["one_star_count"],
            is_suspended=bool(row["is_suspended"]),
            suspended_at=row["suspended_at"],
            suspension_reason=row["suspension_reason"],
        )

    def get_one_star_count(self, contractor_id: str) -> int:
        return self.get_profile(contractor_id).one_star_count

    def is_suspended(self, contractor_id: str) -> bool:
        return self.get_profile(contractor_id).is_suspended

    @retry_on_sqlite_lock()
    def _record(
        self, contractor_id: str, review_id: str, event_id: str, recorded_at: datetime
    ) -> bool:
        with self._connect() as conn:
            try:
                cursor = conn.execute(
                    "INSERT OR IGNORE INTO one_star_reviews "
                    "(review_id, contractor_id, event_id, recorded_at) VALUES (?, ?, ?, ?)",
                    (review_id, contractor_id, event_id, recorded_at.isoformat()),
                )
                if cursor.rowcount == 0:
                    conn.rollback()
                    return False

                conn.execute(
                    """
                    INSERT INTO contractor_profiles (contractor_id, one_star_count)
                    VALUES (?, 1)
                    ON CONFLICT(contractor_id) DO UPDATE SET
                        one_star_count = one_star_count + 1
                """,
                    (contractor_id,),
                )
                conn.commit()
                return True
            except sqlite3.Error:
                conn.rollback()
                raise

    def record_one_star(
        self, contractor_id: str, review_id: str, event_id: str, recorded_at: datetime
    ) -> bool:
        try:
            return self._record(contractor_id, review_id, event_id, recorded_at)
        except sqlite3.Error as e:
            raise StorageFailure("record_one_star", str(e)) from e

    @retry_on_sqlite_lock()
    def _suspend(self, contractor_id: str, reason: str, suspended_at: datetime) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO contractor_profiles
                    (contractor_id, is_suspended, suspended_at, suspension_reason)
                VALUES (?, 1, ?, ?)
                ON CONFLICT(contractor_id) DO UPDATE SET
                    is_suspended = 1,
                    suspended_at = excluded.suspended_at,
                    suspension_reason = excluded.suspension_reason
            """,
                (contractor_id, suspended_at.isoformat(), reason),
            )
            conn.commit()

    def set_suspended(self, contractor_id: str, reason: str, suspended_at: datetime) -> None:
        try:
            self._suspend(contractor_id, reason, suspended_at)
        except sqlite3.Error as e:
            raise StorageFailure("suspend_contractor", str(e)) from e
        logger.info("Contractor suspended", contractor_id=contractor_id)

    def list_suspended(self) -> list[ContractorProfile]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT contractor_id FROM contractor_profiles "
                    "WHERE is_suspended = 1 ORDER BY suspended_at"
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageFailure("list_suspended_contractors", str(e)) from e
        return [self.get_profile(row["contractor_id"]) for row in rows]
