from __future__ import annotations

import logging
import sqlite3
import uuid
from typing import List, Optional

from models.contact_event import ContactEvent, ContactEventDetail, RecordOutcome
from services.errors import AuthenticationRequired, LedgerUnavailable, NotFound
from utils.logging_setup import audit_extra


_INSERT_VIEW_SQL = (
    "INSERT OR IGNORE INTO contact_events (id, viewer_user_id, developer_id, day) "
    "VALUES (?, ?, ?, ?);"
)

# Same insert, but only while the viewer is under the cap; evaluated as one
# statement so the count and the insert share the write lock.
_INSERT_VIEW_UNDER_CAP_SQL = (
    "INSERT OR IGNORE INTO contact_events (id, viewer_user_id, developer_id, day) "
    "SELECT ?, ?, ?, ? "
    "WHERE (SELECT COUNT(DISTINCT developer_id) FROM contact_events "
    "       WHERE viewer_user_id = ? AND day = ?) < ?;"
)


class ContactLedger:
    """Durable record of which developers a viewer has contacted per UTC day."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def try_record_view(
        self,
        viewer_user_id: str,
        developer_id: str,
        day: str,
        limit: Optional[int] = None,
    ) -> RecordOutcome:
        """Insert the (viewer, developer, day) event if absent.

        Returns ``created=False`` when the event already exists, or when
        ``limit`` is given and the viewer already reached it for ``day``.
        """
        event_id = uuid.uuid4().hex
        if limit is None:
            sql = _INSERT_VIEW_SQL
            params: tuple = (event_id, viewer_user_id, developer_id, day)
        else:
            sql = _INSERT_VIEW_UNDER_CAP_SQL
            params = (event_id, viewer_user_id, developer_id, day, viewer_user_id, day, int(limit))
        try:
            cur = self.conn.execute(sql, params)
            created = cur.rowcount == 1
            self.conn.commit()
        except sqlite3.IntegrityError as exc:
            # Only foreign keys can fail here: the viewer or developer vanished
            self._rollback()
            if self._fetchone("SELECT 1 FROM developers WHERE id = ? LIMIT 1;", (developer_id,)) is None:
                raise NotFound("Developer not found") from exc
            raise AuthenticationRequired("Account no longer exists") from exc
        except sqlite3.Error as exc:
            self._rollback()
            logging.error(
                f"Ledger write failed: {exc}",
                extra=audit_extra(
                    "ledger.unavailable",
                    "error",
                    viewer=viewer_user_id,
                    developer_id=developer_id,
                    error=type(exc).__name__,
                ),
            )
            raise LedgerUnavailable() from exc
        return RecordOutcome(created=created)

    def has_viewed(self, viewer_user_id: str, developer_id: str, day: str) -> bool:
        sql = (
            "SELECT 1 FROM contact_events "
            "WHERE viewer_user_id = ? AND developer_id = ? AND day = ? LIMIT 1;"
        )
        row = self._fetchone(sql, (viewer_user_id, developer_id, day))
        return row is not None

    def count_distinct_developers(self, viewer_user_id: str, day: str) -> int:
        """Quota consumption: unique developers this viewer recorded on ``day``."""
        sql = (
            "SELECT COUNT(DISTINCT developer_id) FROM contact_events "
            "WHERE viewer_user_id = ? AND day = ?;"
        )
        row = self._fetchone(sql, (viewer_user_id, day))
        return int(row[0]) if row else 0

    def events_for(self, viewer_user_id: str, day: str) -> List[ContactEvent]:
        sql = (
            "SELECT id, viewer_user_id, developer_id, day, created_at FROM contact_events "
            "WHERE viewer_user_id = ? AND day = ? ORDER BY created_at, rowid;"
        )
        rows = self._fetchall(sql, (viewer_user_id, day))
        return [
            ContactEvent(id=r[0], viewer_user_id=r[1], developer_id=r[2], day=r[3], created_at=r[4])
            for r in rows
        ]

    def list_events(self, limit: int = 100) -> List[ContactEventDetail]:
        """Joined audit rows, newest first."""
        sql = (
            "SELECT event_id, viewer_user_id, viewer_name, viewer_email, developer_id, "
            "       developer_first_name, developer_last_name, developer_email, day, created_at "
            "FROM v_contact_events ORDER BY created_at DESC, event_id LIMIT ?;"
        )
        keys = [
            "event_id", "viewer_user_id", "viewer_name", "viewer_email", "developer_id",
            "developer_first_name", "developer_last_name", "developer_email", "day", "created_at",
        ]
        rows = self._fetchall(sql, (limit,))
        return [ContactEventDetail(**{k: r[i] for i, k in enumerate(keys)}) for r in rows]

    # --- internals ---
    def _fetchone(self, sql: str, params: tuple):
        try:
            cur = self.conn.execute(sql, params)
            return cur.fetchone()
        except sqlite3.Error as exc:
            raise LedgerUnavailable() from exc

    def _fetchall(self, sql: str, params: tuple):
        try:
            cur = self.conn.execute(sql, params)
            return cur.fetchall()
        except sqlite3.Error as exc:
            raise LedgerUnavailable() from exc

    def _rollback(self) -> None:
        try:
            self.conn.rollback()
        except sqlite3.Error:
            logging.debug("Ledger rollback failed", exc_info=True)
