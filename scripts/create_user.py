"""Create an account directly in the DB.

Usage:
  python scripts/create_user.py --email alice@example.com --password '...'

NOTE: This is intended for local/dev. Unlike /auth/signup it reports duplicates.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from task_platform.auth.crud import create_account
from task_platform.config import load_config
from task_platform.db import connect, init_db
from task_platform.errors import Conflict


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    args = ap.parse_args()

    if len(args.password) < 8:
        sys.exit("password must be at least 8 characters")

    cfg = load_config()
    init_db(cfg.DB_DSN)

    try:
        with connect(cfg.DB_DSN) as conn:
            account = create_account(conn, email=args.email, password=args.password)
    except Conflict:
        sys.exit(f"An account with email {args.email} already exists")

    print("Created account:")
    print(account)


if __name__ == "__main__":
    main()
