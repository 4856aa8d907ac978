"""ShopStream database management CLI.

Creates and drops the relational schema of each context's domain. Cart and
idempotency data live in the key-value store and have no schema.

Usage:
    python src/manage.py setup-db                      # Create all tables
    python src/manage.py drop-db --domain payments     # Drop one context's tables
"""

import argparse
import sys

CONTEXTS = ("ordering", "payments", "notifications")


def _domains(names=None):
    from notifications.domain import notifications
    from ordering.domain import ordering
    from payments.domain import payments

    all_domains = {"ordering": ordering, "payments": payments, "notifications": notifications}
    return {name: all_domains[name] for name in (names or CONTEXTS)}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        providers = setup_db(domain)
        if providers:
            print(f"  {name} schema ready on {', '.join(providers)}.")
        else:
            print(f"  {name} uses no SQL provider, nothing to create.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name, domain in _domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="ShopStream database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=CONTEXTS,
            nargs="*",
            help="Specific domain(s) (default: all)",
        )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
