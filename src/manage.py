"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables

Set PROTEAN_ENV=production to target the PostgreSQL database in DATABASE_URL.
"""

import argparse
import sys

import structlog

logger = structlog.get_logger(__name__)


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    logger.info("Creating storefront database schema")
    setup_db(domain)
    logger.info("Storefront schema ready")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    logger.info("Dropping storefront database schema")
    drop_db(domain)
    logger.info("Storefront schema dropped")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
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
