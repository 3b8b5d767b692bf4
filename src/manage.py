"""Storefront database management CLI.

Creates or drops the order store's tables when the ordering domain is
configured with a relational provider (see ``src/ordering/domain.toml``).
With the default in-memory provider both commands are no-ops.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the ordering domain's schema."""
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Creating ordering database schema...")
    providers = setup_db(ordering)
    if providers:
        print(f"  Schema ready on: {', '.join(providers)}.")
    else:
        print("  No relational provider configured, nothing to create.")

    print("Done.")


def drop_database():
    """Drop the ordering domain's schema."""
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Dropping ordering database schema...")
    providers = drop_db(ordering)
    if providers:
        print(f"  Schema dropped on: {', '.join(providers)}.")
    else:
        print("  No relational provider configured, nothing to drop.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
