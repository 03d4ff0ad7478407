#!/usr/bin/env python3
"""
Create the shop schema and seed the first admin account
=======================================================

Creates every table declared in app/models (idempotent) and, when the
admins table has no row for the given username, inserts it with a bcrypt
password hash.

Usage:
    python3 scripts/init_db.py --username admin --password 'secret'
"""
import os
import sys
import argparse

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.abspath(os.path.join(SCRIPT_DIR, '..')))

from app.core.auth import hash_password  # noqa: E402
from app.core.database import Base, Database, get_engine  # noqa: E402
from app.repositories.admin_repository import AdminRepository  # noqa: E402
import app.models  # noqa: E402,F401  (registers tables on Base.metadata)


def create_tables(database_url=None):
    engine = get_engine(database_url)
    Base.metadata.create_all(bind=engine)
    print(f"✅ Tables ready: {', '.join(sorted(Base.metadata.tables))}")


def seed_admin(username, password, database_url=None):
    database = Database(database_url=database_url)
    try:
        admins = AdminRepository(database)
        if admins.find_by_username(username):
            print(f"ℹ️  Admin '{username}' already exists")
            return
        admin_id = admins.create(username, hash_password(password))
        print(f"✅ Created admin '{username}' (id {admin_id})")
    finally:
        database.close()


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed an admin account")
    parser.add_argument("--database-url", default=os.getenv("DATABASE_URL"))
    parser.add_argument("--username", default=os.getenv("ADMIN_USERNAME", "admin"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    args = parser.parse_args()

    if not args.database_url:
        print("❌ DATABASE_URL environment variable is required")
        sys.exit(1)

    create_tables(args.database_url)

    if args.password:
        seed_admin(args.username, args.password, args.database_url)
    else:
        print("⚠️  No --password / ADMIN_PASSWORD given, skipping admin seed")


if __name__ == "__main__":
    main()
