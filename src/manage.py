"""FoodMarket database management CLI.

Creates and drops the database schema of the marketplace domain. Only SQL
providers (sqlite, postgresql) are touched; the in-memory provider needs no
schema.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from marketplace.domain import marketplace
    from marketplace.utils.db import setup_db

    print("Initializing marketplace domain...")
    marketplace.init()
    touched = setup_db(marketplace)
    if touched:
        print(f"  Schema ready for providers: {', '.join(touched)}")
    else:
        print("  No SQL providers configured; nothing to create.")
    print("Done.")


def drop_database():
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db

    print("Initializing marketplace domain...")
    marketplace.init()
    touched = drop_db(marketplace)
    if touched:
        print(f"  Schema dropped for providers: {', '.join(touched)}")
    else:
        print("  No SQL providers configured; nothing to drop.")
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="FoodMarket database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
