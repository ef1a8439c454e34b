"""
BACKEND PACKAGE

Flask API over the account store plus the terminal display/CLI.
Integrates with the pure functions in the core package.
"""

from .app import create_app

__all__ = ['create_app']
