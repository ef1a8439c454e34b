"""
Default settings for the Flask app and CLI.

Every key can be overridden with an AUTHENTICATOR_-prefixed environment
variable, e.g. AUTHENTICATOR_DATABASE=/var/lib/authenticator.db
(values are parsed as JSON when possible, so AUTHENTICATOR_QR_BOX_SIZE=8
becomes an int).
"""

import logging
import os

from database.db_manager import DEFAULT_DATABASE_FILE

ENV_PREFIX = "AUTHENTICATOR"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


class Config:
    DATABASE = DEFAULT_DATABASE_FILE
    LOG_LEVEL = "INFO"
    CORS_ORIGINS = "*"
    QR_BOX_SIZE = 10
    QR_BORDER = 4
    DEFAULT_ISSUER = ""


def env_setting(name: str, default=None):
    """Read a single AUTHENTICATOR_* variable (used outside the Flask app)."""
    return os.environ.get(f"{ENV_PREFIX}_{name}", default)


def configure_logging(level="INFO") -> None:
    """Root logger setup shared by the server and the CLI."""
    logging.basicConfig(level=str(level).upper(), format=LOG_FORMAT)
