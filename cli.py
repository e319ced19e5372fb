import argparse
import json
import os
import sys

from config.settings import get_settings
from db.connection import open_directory
from db.repos.contacts_repo import ContactLedger
from models.principal import Principal
from services.auth_service import AuthService
from services.contact_service import ContactService
from services.directory_service import DirectoryService
from services.errors import DirectoryError
from services.identity import TokenAuthenticator
from services.reporting import print_quota_summary
from utils.logging_setup import init_logging


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _open(args):
    return open_directory(args.db)


def _viewer(args):
    return TokenAuthenticator.from_settings().resolve_principal(getattr(args, "token", None))


def cmd_bootstrap(args):
    conn = _open(args)
    conn.close()
    print("Schema ready")


def cmd_register(args):
    conn = _open(args)
    try:
        result = AuthService.from_connection(conn).register(args.email, args.password, args.name, args.role)
        _emit({"success": True, "token": result.token, "user": result.user.model_dump()})
    finally:
        conn.close()


def cmd_login(args):
    conn = _open(args)
    try:
        result = AuthService.from_connection(conn).login(args.email, args.password)
        _emit({"success": True, "token": result.token, "user": result.user.model_dump()})
    finally:
        conn.close()


def cmd_me(args):
    conn = _open(args)
    try:
        user = AuthService.from_connection(conn).me(_viewer(args))
        _emit({"success": True, "user": user.model_dump()})
    finally:
        conn.close()


def cmd_create_profile(args):
    conn = _open(args)
    try:
        data = {
            "first_name": args.first_name,
            "last_name": args.last_name,
            "work_type": args.work_type,
            "field": args.field,
            "email": args.email,
            "github": args.github,
            "linkedin": args.linkedin,
        }
        record = DirectoryService.from_connection(conn).create_profile(_viewer(args), data)
        _emit({"success": True, "data": record.model_dump()})
    finally:
        conn.close()


def cmd_list_developers(args):
    conn = _open(args)
    try:
        views = DirectoryService.from_connection(conn).list_developers(
            _viewer(args), work_type=args.work_type, field=args.field
        )
        _emit({"success": True, "data": [v.as_dict() for v in views]})
    finally:
        conn.close()


def cmd_show_developer(args):
    conn = _open(args)
    try:
        view = DirectoryService.from_connection(conn).get_developer(_viewer(args), args.id)
        _emit({"success": True, "data": view.as_dict()})
    finally:
        conn.close()


def cmd_contact(args):
    conn = _open(args)
    try:
        result = ContactService.from_connection(conn).view_contact(_viewer(args), args.developer_id)
        _emit({"success": True, **result.as_dict()})
    finally:
        conn.close()


def cmd_quota(args):
    conn = _open(args)
    try:
        viewer = _viewer(args)
        status = ContactService.from_connection(conn).quota_status(viewer)
        if args.summary and isinstance(viewer, Principal):
            events = ContactLedger(conn).events_for(viewer.user_id, status.day)
            print_quota_summary(status, events)
            return
        _emit({
            "success": True,
            "stats": {
                "consumedToday": status.consumed_today,
                "remaining": status.remaining,
                "limit": status.limit,
                "day": status.day,
                "resetsAt": status.resets_at,
            },
        })
    finally:
        conn.close()


def cmd_admin_users(args):
    conn = _open(args)
    try:
        users = DirectoryService.from_connection(conn).list_users(_viewer(args))
        _emit({"success": True, "data": [u.model_dump() for u in users]})
    finally:
        conn.close()


def cmd_admin_contacts(args):
    conn = _open(args)
    try:
        events = DirectoryService.from_connection(conn).list_contact_events(_viewer(args), limit=args.limit)
        _emit({"success": True, "data": [e.model_dump() for e in events]})
    finally:
        conn.close()


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="Developer directory CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def _with_token(p):
        p.add_argument("--token", default=os.getenv("DIRECTORY_TOKEN"), help="Bearer token (default: $DIRECTORY_TOKEN)")

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_reg = sub.add_parser("register", help="Create an account and print its token")
    p_reg.add_argument("--email", required=True)
    p_reg.add_argument("--password", required=True)
    p_reg.add_argument("--name", required=True)
    p_reg.add_argument("--role", required=True, help="student, company or admin")
    p_reg.set_defaults(func=cmd_register)

    p_login = sub.add_parser("login", help="Exchange email/password for a token")
    p_login.add_argument("--email", required=True)
    p_login.add_argument("--password", required=True)
    p_login.set_defaults(func=cmd_login)

    p_me = sub.add_parser("me", help="Show the account behind a token")
    _with_token(p_me)
    p_me.set_defaults(func=cmd_me)

    p_cp = sub.add_parser("create-profile", help="Publish a developer profile (students only)")
    _with_token(p_cp)
    p_cp.add_argument("--first-name", required=True)
    p_cp.add_argument("--last-name", required=True)
    p_cp.add_argument("--work-type", required=True, help="remote, onsite or hybrid")
    p_cp.add_argument("--field", required=True, help="web, mobile, ai, backend, frontend or fullstack")
    p_cp.add_argument("--email", required=True)
    p_cp.add_argument("--github", default=None)
    p_cp.add_argument("--linkedin", default=None)
    p_cp.set_defaults(func=cmd_create_profile)

    p_ld = sub.add_parser("list-developers", help="List profiles (contact fields depend on role)")
    _with_token(p_ld)
    p_ld.add_argument("--work-type", default=None)
    p_ld.add_argument("--field", default=None)
    p_ld.set_defaults(func=cmd_list_developers)

    p_sd = sub.add_parser("show-developer", help="Show one profile (contact fields depend on role)")
    _with_token(p_sd)
    p_sd.add_argument("--id", required=True)
    p_sd.set_defaults(func=cmd_show_developer)

    p_ct = sub.add_parser("contact", help="Reveal a developer's contact details (uses daily quota)")
    _with_token(p_ct)
    p_ct.add_argument("--developer-id", required=True)
    p_ct.set_defaults(func=cmd_contact)

    p_q = sub.add_parser("quota", help="Show today's contact quota (companies only)")
    _with_token(p_q)
    p_q.add_argument("--summary", action="store_true", help="Print a readable summary instead of JSON")
    p_q.set_defaults(func=cmd_quota)

    p_au = sub.add_parser("admin-users", help="List accounts (admin only)")
    _with_token(p_au)
    p_au.set_defaults(func=cmd_admin_users)

    p_ac = sub.add_parser("admin-contacts", help="List contact events with names (admin only)")
    _with_token(p_ac)
    p_ac.add_argument("--limit", type=int, default=100)
    p_ac.set_defaults(func=cmd_admin_contacts)

    args = parser.parse_args()
    try:
        args.func(args)
    except DirectoryError as e:
        _emit(e.to_dict())
        sys.exit(1)


if __name__ == "__main__":
    main()
