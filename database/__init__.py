"""sqlite3 storage for authenticator accounts."""
