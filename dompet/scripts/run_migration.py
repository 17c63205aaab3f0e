#!/usr/bin/env python3
"""
Apply a SQL migration file to the Dompet database.

The database is the one named by DATABASE_PATH. The whole file runs as a
single script; on failure everything is rolled back.

Usage:
    DATABASE_PATH=data/finance.db python -m dompet.scripts.run_migration migrations/001_transfer_account_indexes.sql
"""
import argparse
import os
import sqlite3
import sys
from pathlib import Path

from dompet.config import DEFAULT_DB_PATH


def migrate(migration_file, db_path=None):
    db_path = db_path or os.getenv("DATABASE_PATH", DEFAULT_DB_PATH)
    migration_file = Path(migration_file)

    print(f"Reading migration file: {migration_file}")
    sql = migration_file.read_text(encoding="utf-8")

    print(f"Connecting to database: {db_path}")
    conn = sqlite3.connect(db_path)

    try:
        print("Executing migration...")
        conn.executescript(f"BEGIN;\n{sql}\nCOMMIT;")
        print("Migration executed successfully!")
    except sqlite3.Error as e:
        print(f"Error running migration: {e}")
        if conn.in_transaction:
            conn.rollback()
        raise
    finally:
        conn.close()
        print("Connection closed.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Apply a SQL migration to DATABASE_PATH")
    parser.add_argument("migration_file", help="path to the .sql file")
    args = parser.parse_args(argv)

    try:
        migrate(args.migration_file)
    except (OSError, sqlite3.Error):
        sys.exit(1)


if __name__ == "__main__":
    main()
