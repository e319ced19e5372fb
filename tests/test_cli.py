from __future__ import annotations

import json
import sys
from typing import List, Tuple

import pytest


def _run_cli_with_args(args_list: List[str], capsys) -> Tuple[int, dict]:
    """Run cli.py main() in-process; returns (exit_code, parsed JSON stdout)."""
    argv_backup = sys.argv[:]
    code = 0
    try:
        sys.argv = ["cli.py"] + args_list
        # Import fresh to ensure clean parser each time
        if "cli" in sys.modules:
            del sys.modules["cli"]
        import cli  # type: ignore
        try:
            cli.main()  # type: ignore[attr-defined]
        except SystemExit as e:
            code = int(getattr(e, "code", 0) or 0)
    finally:
        sys.argv = argv_backup
    out = capsys.readouterr().out
    return code, (json.loads(out) if out.strip().startswith("{") else {"raw": out})


def _register(db: str, capsys, email: str, role: str) -> str:
    code, payload = _run_cli_with_args([
        "--db", db, "register", "--email", email, "--password", "pw", "--name", email.split("@")[0], "--role", role,
    ], capsys)
    assert code == 0, payload
    return payload["token"]


def test_cli_contact_flow(db_path, capsys):
    code, payload = _run_cli_with_args(["--db", db_path, "bootstrap"], capsys)
    assert code == 0 and "Schema ready" in payload["raw"]

    student = _register(db_path, capsys, "stu@uni.example", "student")
    company = _register(db_path, capsys, "hr@acme.example", "company")

    code, created = _run_cli_with_args([
        "--db", db_path, "create-profile", "--token", student,
        "--first-name", "Ada", "--last-name", "Lovelace", "--work-type", "remote",
        "--field", "ai", "--email", "ada@uni.example", "--github", "https://github.com/ada",
    ], capsys)
    assert code == 0, created
    developer_id = created["data"]["id"]

    # Anonymous listing is redacted
    code, listing = _run_cli_with_args(["--db", db_path, "list-developers"], capsys)
    assert code == 0
    assert listing["data"][0]["first_name"] == "Ada"
    assert "email" not in listing["data"][0]

    code, contact = _run_cli_with_args([
        "--db", db_path, "contact", "--token", f"Bearer {company}", "--developer-id", developer_id,
    ], capsys)
    assert code == 0, contact
    assert contact["developer"]["email"] == "ada@uni.example"
    assert contact["remainingQuota"] == 9

    code, quota = _run_cli_with_args(["--db", db_path, "quota", "--token", company], capsys)
    assert code == 0
    assert quota["stats"]["consumedToday"] == 1
    assert quota["stats"]["remaining"] == 9
    assert quota["stats"]["limit"] == 10


def test_cli_errors_are_json_with_status(db_path, capsys):
    student = _register(db_path, capsys, "s1@uni.example", "student")

    code, payload = _run_cli_with_args([
        "--db", db_path, "contact", "--token", student, "--developer-id", "missing",
    ], capsys)
    assert code == 1
    assert payload["error"] == "not_found" and payload["status"] == 404

    code, payload = _run_cli_with_args(["--db", db_path, "quota"], capsys)
    assert code == 1
    assert payload["error"] == "authentication_required" and payload["status"] == 401

    code, payload = _run_cli_with_args(["--db", db_path, "quota", "--token", student], capsys)
    assert code == 1
    assert payload["error"] == "role_not_permitted" and payload["status"] == 403


def test_cli_quota_exceeded_payload(db_path, capsys, monkeypatch):
    monkeypatch.setenv("DAILY_CONTACT_LIMIT", "1")
    from config.settings import get_settings
    get_settings.cache_clear()

    company = _register(db_path, capsys, "hr@corp.example", "company")
    ids = []
    for n in range(2):
        token = _register(db_path, capsys, f"s{n}@uni.example", "student")
        code, created = _run_cli_with_args([
            "--db", db_path, "create-profile", "--token", token, "--first-name", f"S{n}",
            "--last-name", "Student", "--work-type", "hybrid", "--field", "web", "--email", f"s{n}@uni.example",
        ], capsys)
        assert code == 0, created
        ids.append(created["data"]["id"])

    code, _ = _run_cli_with_args(["--db", db_path, "contact", "--token", company, "--developer-id", ids[0]], capsys)
    assert code == 0
    code, payload = _run_cli_with_args(["--db", db_path, "contact", "--token", company, "--developer-id", ids[1]], capsys)
    assert code == 1
    assert payload["error"] == "quota_exceeded"
    assert payload["status"] == 429
    assert payload["remaining"] == 0
    assert payload["retryable"] is False
    assert "resetsAt" in payload


def test_cli_login_and_admin_contacts(db_path, capsys):
    _register(db_path, capsys, "root@corp.example", "admin")
    code, login = _run_cli_with_args([
        "--db", db_path, "login", "--email", "root@corp.example", "--password", "pw",
    ], capsys)
    assert code == 0
    assert login["user"]["role"] == "admin"
    assert "password_hash" not in login["user"]

    code, payload = _run_cli_with_args(["--db", db_path, "admin-contacts", "--token", login["token"]], capsys)
    assert code == 0
    assert payload["data"] == []

    code, payload = _run_cli_with_args([
        "--db", db_path, "login", "--email", "root@corp.example", "--password", "bad",
    ], capsys)
    assert code == 1
    assert payload["error"] == "invalid_credentials"


@pytest.mark.parametrize("summary", [False, True])
def test_cli_quota_summary(db_path, capsys, summary):
    company = _register(db_path, capsys, "hr@x.example", "company")
    args = ["--db", db_path, "quota", "--token", company] + (["--summary"] if summary else [])
    code, payload = _run_cli_with_args(args, capsys)
    assert code == 0
    if summary:
        assert "DAILY CONTACT QUOTA" in payload["raw"]
        assert "Remaining: 10 of 10" in payload["raw"]
    else:
        assert payload["stats"]["remaining"] == 10


def test_cli_contact_after_account_deletion_is_json_error(db_path, capsys):
    import sqlite3

    student = _register(db_path, capsys, "gone-dev@uni.example", "student")
    company = _register(db_path, capsys, "gone@corp.example", "company")
    code, created = _run_cli_with_args([
        "--db", db_path, "create-profile", "--token", student, "--first-name", "Grace",
        "--last-name", "Hopper", "--work-type", "onsite", "--field", "backend", "--email", "grace@uni.example",
    ], capsys)
    assert code == 0, created

    c = sqlite3.connect(db_path)
    c.execute("DELETE FROM users WHERE email = ?", ("gone@corp.example",))
    c.commit()
    c.close()

    code, payload = _run_cli_with_args([
        "--db", db_path, "contact", "--token", company, "--developer-id", created["data"]["id"],
    ], capsys)
    assert code == 1
    assert payload["error"] == "authentication_required"
    assert payload["status"] == 401
