"""
authinator
==========

Named TOTP secrets with a CLI and a small REST API.

- authinator.core      HOTP/TOTP derivation + base32 decoding
- authinator.database  JSON secret store
- authinator.backend   Flask API
- authinator.cli       command line
"""

__version__ = "1.0.0"
