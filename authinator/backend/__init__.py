"""
BACKEND PACKAGE

Flask HTTP API for authinator, built on the core derivation functions and
the JSON secret store.
"""

from .app import create_app

__all__ = ["create_app"]
