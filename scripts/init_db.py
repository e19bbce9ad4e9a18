#!/usr/bin/env python3
"""
Standalone database initialization script
Creates the students and lunch_permissions tables in the configured store
"""

import sys
import argparse
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect
from sqlalchemy.exc import DBAPIError

from app.config import settings
from domain.models import create_store_engine, init_database

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the lunch ledger schema")
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy URL (defaults to DATABASE_URL / .env)",
    )
    parser.add_argument(
        "--drop", action="store_true", help="Drop existing tables before creating"
    )
    args = parser.parse_args(argv)

    engine = create_store_engine(args.database_url, settings.store_timeout_sec)
    try:
        init_database(engine, drop_existing=args.drop)
        tables = inspect(engine).get_table_names()
        logger.info(f"✓ Store ready with {len(tables)} tables: {', '.join(tables)}")
        return 0
    except DBAPIError as e:
        logger.error(f"✗ Failed to initialize store: {e}")
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
