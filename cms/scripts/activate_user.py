"""
Activate accounts awaiting approval. Run from project root:
  python -m cms.scripts.activate_user                    # list users and their status
  python -m cms.scripts.activate_user USERNAME [role]    # activate one (role: user|admin)
  python -m cms.scripts.activate_user --all              # activate every pending account as 'user'
"""
import argparse
import logging
import sys

from cms.core.config import get_settings
from cms.core.database import Database
from cms.core.log import configure_logging
from cms.services.accounts import (
    VALID_ROLES,
    Activated,
    activate,
    activate_all_pending,
    activation_of,
    list_accounts,
)

logger = logging.getLogger(__name__)


def _print_accounts(database: Database) -> None:
    db = database.session()
    try:
        users = list_accounts(db)
    finally:
        db.close()
    if not users:
        print("No users found.")
        return
    for user in users:
        state = activation_of(user)
        status = f"active ({state.role})" if isinstance(state, Activated) else "pending"
        print(f"{user.username}\t{status}")


def main(argv: list[str] | None = None, database: Database | None = None) -> int:
    parser = argparse.ArgumentParser(description="Activate CMS user accounts.")
    parser.add_argument("username", nargs="?", help="Account to activate")
    parser.add_argument("role", nargs="?", default="user", choices=list(VALID_ROLES))
    parser.add_argument("--all", action="store_true", help="Activate all pending accounts")
    args = parser.parse_args(argv)

    if args.all and args.username:
        print("Pass either a username or --all, not both.", file=sys.stderr)
        return 1

    settings = get_settings()
    configure_logging(settings)
    owns_database = database is None
    if database is None:
        database = Database.from_settings(settings)
    try:
        if args.all:
            db = database.session()
            try:
                count = activate_all_pending(db)
            finally:
                db.close()
            print(f"Activated {count} pending account(s).")
            return 0

        if not args.username:
            _print_accounts(database)
            return 0

        username = args.username.strip()
        db = database.session()
        try:
            found = activate(db, username, args.role)
        finally:
            db.close()
        if not found:
            print(f"User '{username}' not found.", file=sys.stderr)
            return 1
        logger.info("Account activated", extra={"role": args.role})
        print(f"Activated '{username}' with role '{args.role}'.")
        return 0
    finally:
        if owns_database:
            database.dispose()


if __name__ == "__main__":
    sys.exit(main())
