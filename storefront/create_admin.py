"""
Create an admin account.

Usage:
    storefront-create-admin <email> <password>
    python -m storefront.create_admin <email> <password>
"""

import argparse
import sys

from storefront.database import SessionLocal, init_db
from storefront.logging_config import setup_logging
from storefront.result import Err
from storefront.services.accounts import create_admin


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create a storefront admin account")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args(argv)

    setup_logging()
    init_db()

    db = SessionLocal()
    try:
        result = create_admin(db, args.email, args.password)
    finally:
        db.close()

    if isinstance(result, Err):
        print(f"Could not create admin {args.email}. Email might already be taken.", file=sys.stderr)
        return 1
    print(f"Admin {args.email} created.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
