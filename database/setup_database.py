import logging
import os
import sqlite3

logger = logging.getLogger(__name__)


def setup_database(db_path: str) -> None:
    """Create the database file and the accounts table if they are missing."""

    # Make sure the parent directory exists
    parent = os.path.dirname(db_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        conn.execute('''
        CREATE TABLE IF NOT EXISTS accounts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            label TEXT NOT NULL,
            secret TEXT NOT NULL,
            issuer TEXT NOT NULL DEFAULT '',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        ''')
        conn.commit()
    finally:
        conn.close()
    logger.debug("Database ready at %s", db_path)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    setup_database(os.environ.get("AUTHENTICATOR_DATABASE", "database/authenticator.db"))
    logger.info("Database setup completed successfully!")
