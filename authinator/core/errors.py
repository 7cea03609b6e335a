"""
errors.py — Typed failures raised by the core.

The core never logs and never exits; every problem reaches the caller as one
of the exceptions below. The CLI prints them, the HTTP layer maps them to
status codes.
"""


class AuthinatorError(Exception):
    """Base class for every error raised by authinator."""


# --- Derivation ------------------------------------------------------------
class DerivationError(AuthinatorError):
    """A code could not be derived from a stored secret."""


class DecodeError(DerivationError, ValueError):
    """Secret text is not valid base32 (or decodes to nothing)."""


class InvalidKeyError(DerivationError, ValueError):
    """HMAC key is empty."""


# --- Store -----------------------------------------------------------------
class DuplicateNameError(AuthinatorError):
    def __init__(self, name: str):
        super().__init__(f"Entry with this name already exists: {name}")
        self.name = name


class NotFoundError(AuthinatorError, LookupError):
    def __init__(self, name: str):
        super().__init__(f"No entry found with the name: {name}")
        self.name = name


class StorageError(AuthinatorError):
    """Data file is unreadable, malformed or could not be written."""
