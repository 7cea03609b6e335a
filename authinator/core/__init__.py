"""
authinator.core
===============

Passcode derivation for authinator, per RFC 4226 (HOTP) and RFC 6238 (TOTP).

──────────────────────────────────────────────
Algorithm
──────────────────────────────────────────────
- HOTP: code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^6
- TOTP: HOTP with counter = floor(unix_time / 30)
- Dynamic truncation: 4 bytes of the HMAC at offset (last byte & 0x0F),
  top bit cleared.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from authinator.core import derive
>>> derive("JBSWY3DPEHPK3PXP", timestamp=59).expires_in
1
"""
from .base32 import decode as decode_secret, encode as encode_secret
from .errors import (
    AuthinatorError,
    DecodeError,
    DerivationError,
    DuplicateNameError,
    InvalidKeyError,
    NotFoundError,
    StorageError,
)
from .otp_core import (
    DEFAULT_DIGITS,
    TIME_STEP,
    DerivedCode,
    current_code,
    derive,
    hotp,
    next_code,
    seconds_remaining,
)

__all__ = [
    "AuthinatorError",
    "DEFAULT_DIGITS",
    "DecodeError",
    "DerivationError",
    "DerivedCode",
    "DuplicateNameError",
    "InvalidKeyError",
    "NotFoundError",
    "StorageError",
    "TIME_STEP",
    "current_code",
    "decode_secret",
    "derive",
    "encode_secret",
    "hotp",
    "next_code",
    "seconds_remaining",
]
