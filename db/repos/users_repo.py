from __future__ import annotations

import sqlite3
import uuid
from typing import List, Optional

from models.user_record import UserRecord
from services.errors import EmailAlreadyRegistered


_COLUMNS = ["user_id", "email", "name", "role", "created_at", "password_hash"]
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM users"


def _to_record(row) -> UserRecord:
    return UserRecord(**{k: row[i] for i, k in enumerate(_COLUMNS)})


class UsersRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create(self, email: str, password_hash: str, name: str, role: str) -> UserRecord:
        """Insert an account; email must already be normalized.

        Raises EmailAlreadyRegistered on the UNIQUE(email) conflict.
        """
        user_id = uuid.uuid4().hex
        sql = "INSERT INTO users (user_id, email, password_hash, name, role) VALUES (?, ?, ?, ?, ?);"
        try:
            self.conn.execute(sql, (user_id, email, password_hash, name, role))
            self.conn.commit()
        except sqlite3.IntegrityError as exc:
            self.conn.rollback()
            if "users.email" in str(exc):
                raise EmailAlreadyRegistered() from exc
            raise
        record = self.get(user_id)
        if record is None:
            raise RuntimeError("Failed to read back created user row")
        return record

    def get(self, user_id: str) -> Optional[UserRecord]:
        cur = self.conn.execute(f"{_SELECT} WHERE user_id = ?;", (user_id,))
        row = cur.fetchone()
        return _to_record(row) if row else None

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        cur = self.conn.execute(f"{_SELECT} WHERE email = ?;", (email,))
        row = cur.fetchone()
        return _to_record(row) if row else None

    def list_all(self) -> List[UserRecord]:
        cur = self.conn.execute(f"{_SELECT} ORDER BY created_at DESC, rowid DESC;")
        return [_to_record(r) for r in cur.fetchall()]
