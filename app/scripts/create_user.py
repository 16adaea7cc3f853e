"""
Create an account (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user FULLNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Site Admin" admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import ConflictError
from app.core.security import hash_password
from app.schemas.auth import (
    FULLNAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    normalize_email,
)
from app.services.accounts import create_account


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a Task Tracker account.")
    parser.add_argument("fullname", help=f"Display name (1-{FULLNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Login email")
    parser.add_argument(
        "password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)"
    )
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    fullname = args.fullname.strip()
    if not fullname or len(fullname) > FULLNAME_MAX_LEN:
        print("Invalid fullname length.", file=sys.stderr)
        return 1
    email = normalize_email(args.email)
    if "@" not in email:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        user = create_account(
            db,
            fullname=fullname,
            email=email,
            password_hash=hash_password(args.password),
            role=args.role,
        )
        print(f"Created account '{user.email}' (id={user.id}) with role '{user.role}'.")
        return 0
    except ConflictError:
        print(f"Account '{email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    sys.exit(main())
