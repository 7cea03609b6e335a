"""
DATABASE PACKAGE

JSON-file persistence for authinator's named TOTP secrets.
Used in: authinator/cli.py, authinator/backend/routes.py
"""

from .store import Entry, SecretStore, Store

__all__ = ["Entry", "SecretStore", "Store"]
