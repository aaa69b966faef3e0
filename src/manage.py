"""Zentro management CLI.

Creates and drops the database schema for the consulting domain, and
re-derives denormalized counters from source records. Also loads the
starter service catalogue.

Usage:
    python src/manage.py setup-db            # Create all tables
    python src/manage.py drop-db             # Drop all tables
    python src/manage.py reconcile-counters  # Recount category/consultant counters
    python src/manage.py seed-services       # Load the starter service catalogue
"""

import argparse
import sys


def _initialized_domain():
    from consulting.domain import consulting

    print("Initializing consulting domain...")
    consulting.init()
    return consulting


def setup_database():
    """Create the database schema."""
    from consulting.utils.db import setup_db

    domain = _initialized_domain()
    print("Creating consulting database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the database schema."""
    from consulting.utils.db import drop_db

    domain = _initialized_domain()
    print("Dropping consulting database schema...")
    drop_db(domain)
    print("Done.")


def reconcile_counters():
    """Recount consultant/booking counters and ratings from stored records."""
    from consulting.admin.reconciliation import ReconcileCounters

    domain = _initialized_domain()
    with domain.domain_context():
        result = domain.process(ReconcileCounters(), asynchronous=False)
    print(f"  categories fixed: {result['categories']}")
    print(f"  consultants fixed: {result['consultants']}")
    print("Done.")


def seed_catalogue():
    """Replace the service catalogue with the starter entries."""
    from consulting.catalog.seed import seed_services

    domain = _initialized_domain()
    with domain.domain_context():
        count = seed_services(domain)
    print(f"  services loaded: {count}")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Zentro management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("reconcile-counters", help="Re-derive denormalized counters")
    subparsers.add_parser("seed-services", help="Load the starter service catalogue")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "reconcile-counters":
        reconcile_counters()
    elif args.command == "seed-services":
        seed_catalogue()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
