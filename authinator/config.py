"""
config.py — Defaults for the CLI and HTTP server.

Precedence: command-line flag > environment variable > default below.
Only the outer layer reads these; the core always receives its storage
location explicitly.
"""

import os

DEFAULT_DATA_FILE = "totp.json"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8055

DATA_FILE_ENV = "AUTHINATOR_DATA_FILE"
HOST_ENV = "AUTHINATOR_HOST"
PORT_ENV = "AUTHINATOR_PORT"


def data_file(explicit: str = None) -> str:
    if explicit:
        return explicit
    return os.environ.get(DATA_FILE_ENV) or DEFAULT_DATA_FILE


def host(explicit: str = None) -> str:
    if explicit:
        return explicit
    return os.environ.get(HOST_ENV) or DEFAULT_HOST


def port(explicit: int = None) -> int:
    if explicit is not None:
        return explicit
    value = os.environ.get(PORT_ENV)
    if not value:
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{PORT_ENV} must be an integer, got {value!r}") from None
