import logging
import sqlite3
from typing import Optional

from database.setup_database import setup_database
# Used in: backend/routes.py, backend/cli.py

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_FILE = 'database/authenticator.db'


class AccountNotFoundError(LookupError):
    """No account with the requested id."""


def init_db(db_path: str = DEFAULT_DATABASE_FILE) -> None:
    setup_database(db_path)


def get_db_connection(db_path: str = DEFAULT_DATABASE_FILE) -> sqlite3.Connection:
    """Open a connection whose rows behave like dictionaries."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _row_to_account(row: sqlite3.Row) -> dict:
    return {
        'id': row['id'],
        'label': row['label'],
        'secret': row['secret'],
        'issuer': row['issuer'],
        'created_at': row['created_at'],
    }


def add_account(label: str, secret: str, issuer: str = '',
                db_path: str = DEFAULT_DATABASE_FILE) -> int:
    """Insert an account and return its new id."""
    conn = get_db_connection(db_path)
    try:
        cursor = conn.execute(
            "INSERT INTO accounts (label, secret, issuer) VALUES (?, ?, ?)",
            (label, secret, issuer or ''),
        )
        conn.commit()
        account_id = cursor.lastrowid
    finally:
        conn.close()
    logger.info("Account '%s' added with id %s", label, account_id)
    return account_id


def list_accounts(db_path: str = DEFAULT_DATABASE_FILE) -> list[dict]:
    """All accounts, oldest first."""
    conn = get_db_connection(db_path)
    try:
        rows = conn.execute(
            "SELECT id, label, secret, issuer, created_at FROM accounts ORDER BY id"
        ).fetchall()
    finally:
        conn.close()
    return [_row_to_account(row) for row in rows]


def get_account(account_id: int, db_path: str = DEFAULT_DATABASE_FILE) -> Optional[dict]:
    conn = get_db_connection(db_path)
    try:
        row = conn.execute(
            "SELECT id, label, secret, issuer, created_at FROM accounts WHERE id = ?",
            (account_id,),
        ).fetchone()
    finally:
        conn.close()

    if row:
        return _row_to_account(row)
    return None


def delete_account(account_id: int, db_path: str = DEFAULT_DATABASE_FILE) -> None:
    """
    Delete an account by id.

    Raises:
        AccountNotFoundError: if no row matched
    """
    conn = get_db_connection(db_path)
    try:
        cursor = conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
        conn.commit()
        deleted = cursor.rowcount
    finally:
        conn.close()

    if not deleted:
        raise AccountNotFoundError(f"Account {account_id} not found")
    logger.info("Account %s deleted", account_id)
