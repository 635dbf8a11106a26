"""
Offline Action Queue - Durable FIFO of vendor updates made without a connection

While the device is offline, vendor updates are appended here instead of
being applied. When connectivity returns the queue is replayed in order
through the normal update path:

- a domain rejection (unknown vendor, stage out of order, ...) is
  recorded and the action is dropped, the pass continues
- a storage failure stops the pass; the failing action and everything
  after it stay queued for the next attempt

Fun fact: Store-and-forward is how telegraph relay stations worked in
the 1800s - messages waited on paper tape until the next line was free.
"""

import sqlite3
import threading
from collections.abc import Callable
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from gigflow.kernel.errors import StorageFailure, WorkflowRejection
from gigflow.kernel.logging import (
    LogOperation,
    generate_correlation_id,
    get_logger,
    set_correlation_id,
)
from gigflow.kernel.metrics import offline_actions_replayed_total, offline_queue_depth
from gigflow.kernel.retry import retry_on_sqlite_lock
from gigflow.offline.models import QueuedAction, ReplayError

logger = get_logger(__name__)


ApplyAction = Callable[[QueuedAction], object]


class SQLiteActionStore:
    """
    Persistent storage of queued actions

    Schema:
    - offline_actions table: autoincrement position (FIFO order), action id,
      JSON document
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._initialize_schema()

    def _initialize_schema(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS offline_actions (
                        position INTEGER PRIMARY KEY AUTOINCREMENT,
                        action_id TEXT NOT NULL UNIQUE,
                        action_json TEXT NOT NULL,
                        queued_at TEXT NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise StorageFailure("initialize_offline_queue", str(e)) from e

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path), timeout=5.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    @retry_on_sqlite_lock()
    def _insert(self, action: QueuedAction) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO offline_actions (action_id, action_json, queued_at) VALUES (?, ?, ?)",
                (action.action_id, action.model_dump_json(), action.queued_at.isoformat()),
            )
            conn.commit()

    @retry_on_sqlite_lock()
    def _delete(self, action_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM offline_actions WHERE action_id = ?", (action_id,))
            conn.commit()

    def append(self, action: QueuedAction) -> None:
        try:
            self._insert(action)
        except sqlite3.Error as e:
            raise StorageFailure("enqueue_action", str(e)) from e

    def pending(self) -> list[QueuedAction]:
        """All queued actions, oldest first"""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "SELECT action_json FROM offline_actions ORDER BY position"
                )
                return [
                    QueuedAction.model_validate_json(row["action_json"])
                    for row in cursor.fetchall()
                ]
        except sqlite3.Error as e:
            raise StorageFailure("load_offline_queue", str(e)) from e

    def remove(self, action_id: str) -> None:
        try:
            self._delete(action_id)
        except sqlite3.Error as e:
            raise StorageFailure("dequeue_action", str(e)) from e

    def count(self) -> int:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT COUNT(*) AS n FROM offline_actions").fetchone()
                return int(row["n"])
        except sqlite3.Error as e:
            raise StorageFailure("count_offline_queue", str(e)) from e


class OfflineActionQueue:
    """
    FIFO queue with serialized replay

    Only one replay pass runs at a time; a second caller waits for the
    running pass and then replays whatever is left (usually nothing).
    """

    def __init__(self, store: SQLiteActionStore) -> None:
        self.store = store
        self._replay_lock = threading.Lock()
        offline_queue_depth.set(self.store.count())

    def enqueue(self, action: QueuedAction) -> None:
        """
        Persist an action at the tail of the queue

        Raises:
            StorageFailure: If the action could not be stored
        """
        self.store.append(action)
        depth = self.store.count()
        offline_queue_depth.set(depth)
        logger.info(
            "Action queued for replay",
            action_id=action.action_id,
            action_type=action.action_type,
            event_id=action.event_id,
            vendor_id=action.vendor_id,
            queue_depth=depth,
        )

    def pending(self) -> list[QueuedAction]:
        return self.store.pending()

    def __len__(self) -> int:
        return self.store.count()

    def replay(self, apply: ApplyAction) -> list[ReplayError]:
        """
        Apply every queued action in order

        Args:
            apply: Applies one action; raises WorkflowRejection to reject it
                or StorageFailure when persistence is unavailable

        Returns:
            One ReplayError per action that was not applied. When a
            storage failure stopped the pass, it is the last entry.
        """
        with self._replay_lock:
            try:
                actions = self.store.pending()
            except StorageFailure as e:
                logger.error("Offline replay could not load queue", error=str(e))
                return [
                    ReplayError(
                        action_id="",
                        event_id="",
                        vendor_id="",
                        error_type=type(e).__name__,
                        message=str(e),
                        retained=True,
                    )
                ]

            if not actions:
                return []

            # Every action of one pass logs under the same correlation id
            set_correlation_id(generate_correlation_id())

            errors: list[ReplayError] = []
            with LogOperation(logger, "replay_offline_actions", queued=len(actions)):
                for action in actions:
                    try:
                        apply(action)
                    except WorkflowRejection as e:
                        offline_actions_replayed_total.labels(outcome="rejected").inc()
                        errors.append(self._error(action, e))
                        logger.warning(
                            "Queued action rejected",
                            action_id=action.action_id,
                            event_id=action.event_id,
                            reason=str(e),
                        )
                    except StorageFailure as e:
                        offline_actions_replayed_total.labels(outcome="storage_failure").inc()
                        errors.append(self._error(action, e, retained=True))
                        break
                    else:
                        offline_actions_replayed_total.labels(outcome="applied").inc()

                    try:
                        self.store.remove(action.action_id)
                    except StorageFailure as e:
                        errors.append(self._error(action, e, retained=True))
                        break

            remaining = self.store.count()
            offline_queue_depth.set(remaining)
            if remaining:
                logger.warning(
                    "Offline replay stopped early",
                    remaining=remaining,
                    errors=len(errors),
                )
            return errors

    @staticmethod
    def _error(
        action: QueuedAction, error: Exception, retained: bool = False
    ) -> ReplayError:
        return ReplayError(
            action_id=action.action_id,
            event_id=action.event_id,
            vendor_id=action.vendor_id,
            error_type=type(error).__name__,
            message=str(error),
            retained=retained,
        )


class Connectivity:
    """
    Explicit online/offline signal

    Whoever knows about the network (a platform hook, a CLI flag, a test)
    flips it. Listeners registered with on_online run on every
    offline → online edge, on the caller's thread.
    """

    def __init__(self, online: bool = True) -> None:
        self._online = online
        self._listeners: list[Callable[[], object]] = []
        self._lock = threading.Lock()

    @property
    def is_online(self) -> bool:
        with self._lock:
            return self._online

    def on_online(self, listener: Callable[[], object]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def set_online(self, online: bool) -> None:
        with self._lock:
            came_online = online and not self._online
            self._online = online
            listeners = list(self._listeners)

        logger.info("Connectivity changed", online=online)
        if not came_online:
            return

        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error(
                    "Connectivity listener failed",
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e),
                    exc_info=True,
                )
