"""
Initialize the credential database and seed the test accounts.

Creates the ``users`` table if it does not exist and inserts two test users.
Existing usernames are left untouched, so the script can be rerun safely.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --database-url sqlite+aiosqlite:///./data/login.db
    python scripts/init_db.py --no-seed
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(PROJECT_ROOT))

from auth.errors import DuplicateUsername  # noqa: E402
from auth.password import hash_password  # noqa: E402
from config.settings import config  # noqa: E402
from database.session import build_engine, build_session_factory  # noqa: E402
from database.store import CredentialStore  # noqa: E402

logger = logging.getLogger("init_db")

TEST_USERS = [
    ("test", "test123"),
    ("admin", "admin123"),
]


async def init_db(database_url: str, seed: bool = True, rounds: int = 12) -> list:
    """Create the schema and seed test users. Returns the usernames inserted."""
    engine = build_engine(database_url)
    store = CredentialStore(engine, build_session_factory(engine))
    inserted = []
    try:
        await store.create_tables()
        if not seed:
            return inserted
        for username, password in TEST_USERS:
            if await store.count_accounts(username):
                logger.info("User %s already present, skipping", username)
                continue
            # a concurrent seed can still win the race; the unique constraint decides
            try:
                await store.insert_account(username, hash_password(password, rounds))
                inserted.append(username)
            except DuplicateUsername:
                logger.info("User %s already present, skipping", username)
    finally:
        await store.close()
    return inserted


def main():
    parser = argparse.ArgumentParser(
        description="Create the users table and seed test accounts",
    )
    parser.add_argument(
        "--database-url",
        default=config.database_url,
        help="SQLAlchemy async URL (default: DATABASE_URL or %(default)s)",
    )
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Only create the table, do not insert test users",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=config.bcrypt_rounds,
        help="bcrypt work factor for the seeded passwords",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)-8s  %(message)s")

    inserted = asyncio.run(init_db(args.database_url, seed=not args.no_seed, rounds=args.rounds))

    logger.info("Database initialized at %s", args.database_url)
    if inserted:
        logger.info("Seeded test users: %s", ", ".join(inserted))


if __name__ == "__main__":
    main()
