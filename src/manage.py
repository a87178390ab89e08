"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db         # Create all tables
    python src/manage.py drop-db          # Drop all tables
    python src/manage.py seed-catalogue   # Add demo products
"""

import argparse
import sys

DEMO_PRODUCTS = [
    {"name": "Wireless Mouse", "price": 24.99, "quantity": 50, "description": "Ergonomic 2.4GHz mouse"},
    {"name": "Mechanical Keyboard", "price": 89.00, "quantity": 20, "description": "Tenkeyless, brown switches"},
    {"name": "USB-C Hub", "price": 39.50, "quantity": 35, "description": "7-in-1 hub with HDMI"},
    {"name": "Laptop Stand", "price": 29.00, "quantity": 15, "description": "Adjustable aluminium stand"},
    {"name": "Noise Cancelling Headphones", "price": 149.99, "quantity": 8},
]


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def seed_catalogue():
    from storefront.catalogue.management import AddProduct

    domain = _domain()
    with domain.domain_context():
        for product in DEMO_PRODUCTS:
            product_id = domain.process(AddProduct(**product), asynchronous=False)
            print(f"  {product['name']}: {product_id}")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-catalogue", help="Add demo products to the catalogue")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-catalogue":
        seed_catalogue()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
