from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create users, developers and contact ledger tables, indexes and views (idempotent)."""
    cur = conn.cursor()

    # Users table
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS users (\n"
            "  user_id TEXT PRIMARY KEY,\n"
            "  email TEXT NOT NULL UNIQUE,\n"
            "  password_hash TEXT NOT NULL,\n"
            "  name TEXT NOT NULL,\n"
            "  role TEXT NOT NULL CHECK (role IN ('student', 'company', 'admin')),\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);")

    # Developers table: one profile per owning user
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS developers (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  owner_user_id TEXT NOT NULL UNIQUE,\n"
            "  first_name TEXT NOT NULL,\n"
            "  last_name TEXT NOT NULL,\n"
            "  work_type TEXT NOT NULL CHECK (work_type IN ('remote', 'onsite', 'hybrid')),\n"
            "  field TEXT NOT NULL CHECK (field IN ('web', 'mobile', 'ai', 'backend', 'frontend', 'fullstack')),\n"
            "  github TEXT,\n"
            "  linkedin TEXT,\n"
            "  email TEXT NOT NULL,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  FOREIGN KEY(owner_user_id) REFERENCES users(user_id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_developers_work_type ON developers(work_type);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_developers_field ON developers(field);")

    # Contact ledger: the unique triple is the only duplicate guard
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS contact_events (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  viewer_user_id TEXT NOT NULL,\n"
            "  developer_id TEXT NOT NULL,\n"
            "  day TEXT NOT NULL,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  UNIQUE(viewer_user_id, developer_id, day),\n"
            "  FOREIGN KEY(viewer_user_id) REFERENCES users(user_id) ON DELETE CASCADE,\n"
            "  FOREIGN KEY(developer_id) REFERENCES developers(id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_contact_events_viewer_day ON contact_events(viewer_user_id, day);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_contact_events_developer ON contact_events(developer_id);")

    # View for joined audit reads
    cur.execute("DROP VIEW IF EXISTS v_contact_events;")
    cur.execute(
        (
            "CREATE VIEW v_contact_events AS\n"
            "SELECT\n"
            "  c.id AS event_id,\n"
            "  c.viewer_user_id,\n"
            "  u.name AS viewer_name,\n"
            "  u.email AS viewer_email,\n"
            "  c.developer_id,\n"
            "  d.first_name AS developer_first_name,\n"
            "  d.last_name AS developer_last_name,\n"
            "  d.email AS developer_email,\n"
            "  c.day,\n"
            "  c.created_at\n"
            "FROM contact_events c\n"
            "LEFT JOIN users u ON c.viewer_user_id = u.user_id\n"
            "LEFT JOIN developers d ON c.developer_id = d.id;"
        )
    )

    conn.commit()
