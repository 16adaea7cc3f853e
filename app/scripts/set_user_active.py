"""
Activate or deactivate an account; the administrative toggle behind the
'Account is deactivated' login check. Run from project root:
  python -m app.scripts.set_user_active EMAIL --deactivate
  python -m app.scripts.set_user_active EMAIL --activate
"""

import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.services.accounts import find_by_email, set_active

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Toggle an account's active flag.")
    parser.add_argument("email", help="Account email")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--activate", dest="active", action="store_true")
    group.add_argument("--deactivate", dest="active", action="store_false")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = find_by_email(db, args.email)
        if user is None:
            logger.error("No account with email %s", args.email)
            return 1
        set_active(db, user.id, args.active)
        logger.info(
            "Account %s is now %s", user.email, "active" if args.active else "deactivated"
        )
        return 0
    except Exception as e:
        logger.exception("Activation change failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
