from __future__ import annotations

import sqlite3
import uuid
from typing import List, Optional

from models.developer_record import DeveloperDraft, DeveloperRecord
from services.errors import LedgerUnavailable, ProfileAlreadyExists


_COLUMNS = [
    "id", "owner_user_id", "first_name", "last_name", "work_type", "field",
    "github", "linkedin", "email", "created_at",
]
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM developers"


def _to_record(row) -> DeveloperRecord:
    return DeveloperRecord(**{k: row[i] for i, k in enumerate(_COLUMNS)})


class DevelopersRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create(self, owner_user_id: str, draft: DeveloperDraft) -> DeveloperRecord:
        """Insert a profile for ``owner_user_id``; at most one per owner.

        Raises ProfileAlreadyExists when the owner already has one.
        """
        developer_id = uuid.uuid4().hex
        sql = (
            "INSERT INTO developers (id, owner_user_id, first_name, last_name, work_type, field, github, linkedin, email) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);"
        )
        try:
            self.conn.execute(sql, (
                developer_id, owner_user_id, draft.first_name, draft.last_name, draft.work_type,
                draft.field, draft.github, draft.linkedin, draft.email,
            ))
            self.conn.commit()
        except sqlite3.IntegrityError as exc:
            self.conn.rollback()
            if "owner_user_id" in str(exc):
                raise ProfileAlreadyExists() from exc
            raise
        record = self.get(developer_id)
        if record is None:
            raise RuntimeError("Failed to read back created developer row")
        return record

    def get(self, developer_id: str) -> Optional[DeveloperRecord]:
        row = self._fetchone(f"{_SELECT} WHERE id = ?;", (developer_id,))
        return _to_record(row) if row else None

    def get_by_owner(self, owner_user_id: str) -> Optional[DeveloperRecord]:
        row = self._fetchone(f"{_SELECT} WHERE owner_user_id = ?;", (owner_user_id,))
        return _to_record(row) if row else None

    def list_all(self, work_type: Optional[str] = None, field: Optional[str] = None) -> List[DeveloperRecord]:
        """All profiles, newest first, optionally filtered."""
        where = []
        params: list = []
        if work_type:
            where.append("work_type = ?")
            params.append(work_type)
        if field:
            where.append("field = ?")
            params.append(field)
        where_sql = (" WHERE " + " AND ".join(where)) if where else ""
        try:
            rows = self.conn.execute(
                f"{_SELECT}{where_sql} ORDER BY created_at DESC, rowid DESC;", tuple(params)
            ).fetchall()
        except sqlite3.Error as exc:
            raise LedgerUnavailable() from exc
        return [_to_record(r) for r in rows]

    def _fetchone(self, sql: str, params: tuple):
        # Storage read failures surface as a retryable error
        try:
            return self.conn.execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            raise LedgerUnavailable() from exc
