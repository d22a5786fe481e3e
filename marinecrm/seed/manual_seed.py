import argparse
import logging
import sys

from marinecrm.core.config import settings
from marinecrm.core.logging_config import setup_logging
from marinecrm.database import engine, Base
from marinecrm.models import *  # noqa: F401,F403 - register tables
from marinecrm.seed.seed_product_descriptions import seed_product_descriptions

logger = logging.getLogger("marinecrm.seed")


def main():
    parser = argparse.ArgumentParser(description="Seed the Marine CRM database with reference data.")
    parser.add_argument("--reset", action="store_true", help="replace all product descriptions")
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    args = parser.parse_args()

    setup_logging()
    print("WARNING: This script will seed the database with initial data.")
    print(f"Target Environment: {settings.environment}")
    print(f"Database: {settings.database_url.split('@')[-1] if settings.database_url else 'Unknown'}")

    if not args.yes:
        confirm = input("Are you sure you want to proceed? (yes/no): ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return

    try:
        Base.metadata.create_all(bind=engine)
        inserted = seed_product_descriptions(reset=args.reset)
        logger.info("Seeded %d product descriptions", inserted)
    except Exception:
        logger.exception("Seeding failed")
        sys.exit(1)

if __name__ == "__main__":
    main()
