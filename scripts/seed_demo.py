#!/usr/bin/env python3
"""
Seed the configured database with the demo school dataset
and print a bearer token for each demo user.

Usage: python scripts/seed_demo.py [--database-url sqlite:///./school.db]
"""
import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.db import DatabaseManager  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.models import User  # noqa: E402
from app.services.demo_seed import seed_demo_data  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Seed demo school data")
    parser.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")
    parser.add_argument("--no-tokens", action="store_true", help="Do not print demo tokens")
    args = parser.parse_args()

    manager = DatabaseManager(args.database_url)
    manager.create_all()
    print(f"Database: {manager.url}")

    with manager.transaction() as db:
        added = seed_demo_data(db)
        print(f"Rows added: {added}")

        if not args.no_tokens:
            print("-" * 40)
            for user in db.query(User).order_by(User.id).all():
                token = create_access_token(user.id, user.role, user.school_id)
                print(f"{user.role:<12} {user.id:<4} {token}")

    manager.close()


if __name__ == "__main__":
    main()
