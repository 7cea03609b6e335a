"""
otp_core.py — HOTP (RFC 4226) and TOTP (RFC 6238) derivation.

Pure functions only: no file access, no clock reads except when derive() is
called without a timestamp. The storage side lives in authinator.database.

Fixed configuration, the one every mainstream authenticator app uses:
HMAC-SHA1, 6 digits, 30 second step, T0 = 0.
"""

import hashlib
import hmac
import math
import struct
import time
from datetime import datetime, timezone
from typing import NamedTuple, Union

from . import base32
from .errors import InvalidKeyError

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6
TIME_STEP = 30            # seconds
MAX_COUNTER = 2 ** 64 - 1

Timestamp = Union[int, float, datetime]


class DerivedCode(NamedTuple):
    code: str
    expires_in: int
    next_code: str


# --- RFC 4226 helpers ------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """8-byte big-endian counter, e.g. int_to_bytes(1) -> b'\\x00' * 7 + b'\\x01'."""
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = last_byte & 0x0F
    - 4 bytes from offset, MSB of the first one cleared
    - read as a big-endian unsigned 31-bit integer
    """
    offset = hmac_digest[-1] & 0x0F
    return struct.unpack(">I", hmac_digest[offset:offset + 4])[0] & 0x7FFFFFFF


def hotp(key: bytes, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """
    Compute a HOTP code.

    Steps:
    1. Message = 8-byte counter (big-endian)
    2. HMAC-SHA1(key, message)
    3. Dynamic truncate -> dbc
    4. otp = dbc % 10^digits, zero-padded to "digits" characters

    Arguments:
        key: raw key bytes (already base32-decoded)
        counter: 0 <= counter < 2^64
        digits: code length

    Returns:
        str: zero-padded decimal code

    Raises:
        InvalidKeyError: key is empty
        ValueError: counter or digits out of range
    """
    if not key:
        raise InvalidKeyError("HOTP key must not be empty")
    if not 0 <= counter <= MAX_COUNTER:
        raise ValueError(f"HOTP counter out of range: {counter}")
    if not 1 <= digits <= 10:
        raise ValueError(f"Unsupported number of digits: {digits}")

    digest = hmac.new(key, int_to_bytes(counter), hashlib.sha1).digest()
    dbc = dynamic_truncate(digest)
    return str(dbc % (10 ** digits)).zfill(digits)


# --- RFC 6238 --------------------------------------------------------------
def unix_seconds(timestamp: Timestamp) -> int:
    """Whole Unix seconds; sub-second parts are floored away, naive datetimes are UTC."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        timestamp = timestamp.timestamp()
    return math.floor(timestamp)


def time_counter(timestamp: Timestamp) -> int:
    return unix_seconds(timestamp) // TIME_STEP


def current_code(key: bytes, timestamp: Timestamp) -> str:
    """Code for the time step containing `timestamp`."""
    return hotp(key, time_counter(timestamp))


def seconds_remaining(timestamp: Timestamp) -> int:
    """
    Seconds left in the current window, in [1, TIME_STEP].

    At a step boundary (unix % 30 == 0) the window has just started, so the
    result is the full 30 and never 0.
    """
    return TIME_STEP - (unix_seconds(timestamp) % TIME_STEP)


def next_code(key: bytes, timestamp: Timestamp) -> str:
    """Code for the step immediately after the one containing `timestamp`."""
    now = unix_seconds(timestamp)
    return current_code(key, now + seconds_remaining(now))


def derive(secret_b32: str, timestamp: Timestamp = None) -> DerivedCode:
    """
    Decode a stored secret and derive everything a caller displays.

    All three figures come from the same instant, so the code, the remaining
    seconds and the next code are always consistent with one another.

    Arguments:
        secret_b32: base32 secret as stored
        timestamp: Unix seconds or datetime (None -> time.time())

    Raises:
        DecodeError: secret is not valid base32
        InvalidKeyError: secret decodes to an empty key
    """
    if timestamp is None:
        timestamp = time.time()
    now = unix_seconds(timestamp)
    key = base32.decode(secret_b32)
    return DerivedCode(
        code=current_code(key, now),
        expires_in=seconds_remaining(now),
        next_code=next_code(key, now),
    )
