# WORKFLOW: Bootstrap script that prepares the price database before the API starts.
# Used by: Container entrypoints, local development setup
# Functions:
# 1. setup_database() - Wait for the database (bounded retry) and create the prices table
# 2. validate_setup() - Ping the store and report how many prices it holds
#
# Bootstrap flow: wait_for_db -> init_db -> ping/count -> exit code

"""
Bootstrap script for the Price Archive API database.
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from db.session import dispose_engine, get_price_store, init_db, wait_for_db  # noqa: E402

logger = logging.getLogger(__name__)


def setup_database(wait: bool = True) -> None:
    """
    Initialize the database schema, optionally waiting for it to come up first.
    """
    if wait:
        logger.info("Waiting for database...")
        wait_for_db()
    init_db()


def validate_setup() -> bool:
    """
    Verify the price store answers and report its size.
    """
    store = get_price_store()
    if not store.ping():
        logger.error("Database is not reachable")
        return False
    logger.info(f"Price store ready with {store.count()} records")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Bootstrap the Price Archive API database')
    parser.add_argument('--skip-wait', action='store_true', help='Do not wait for the database to accept connections')
    parser.add_argument('--validate-only', action='store_true', help='Only check connectivity, do not create tables')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        if not args.validate_only:
            setup_database(wait=not args.skip_wait)
        return 0 if validate_setup() else 1
    except Exception as e:
        logger.error(f"Bootstrap failed: {e}")
        return 1
    finally:
        dispose_engine()


if __name__ == "__main__":
    sys.exit(main())
