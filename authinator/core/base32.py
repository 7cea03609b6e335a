"""
base32.py — Base32 (RFC 4648) text <-> raw key bytes.

Secrets are usually copied by hand out of a provider's setup page, so the
decoder is lenient about formatting:

- case-insensitive
- whitespace anywhere is dropped ("JBSW Y3DP ..." works)
- trailing "=" padding is optional

Anything else outside the alphabet is rejected, non-ASCII text included.
Unlike base64.b32decode the input length does not need to be a multiple
of 8: the output is always floor(len(cleaned) * 5 / 8) bytes and leftover
bits are discarded.
"""

import base64

from .errors import DecodeError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_VALUES = {ch: i for i, ch in enumerate(ALPHABET)}


def clean(text: str) -> str:
    """Upper-case, drop whitespace and strip trailing padding."""
    return "".join(text.split()).upper().rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode base32 secret text into key bytes.

    Arguments:
        text: base32 secret, e.g. "JBSWY3DPEHPK3PXP"

    Returns:
        bytes: floor(len(cleaned) * 5 / 8) bytes

    Raises:
        DecodeError: a character outside A-Z / 2-7 (a "=" that is not
            trailing padding included), or nothing left to decode
    """
    if not text.isascii():
        # upper-casing would map e.g. "\u017f" to "S"
        raise DecodeError("Base32 secret must be ASCII")
    cleaned = clean(text)

    out = bytearray()
    buffer = 0
    bits = 0
    for pos, ch in enumerate(cleaned):
        try:
            value = _VALUES[ch]
        except KeyError:
            raise DecodeError(f"Invalid base32 character {ch!r} at position {pos}") from None
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1

    if not out:
        raise DecodeError("Base32 secret decodes to zero bytes")
    return bytes(out)


def encode(data: bytes, padding: bool = False) -> str:
    # otpauth-style secrets are unpadded
    text = base64.b32encode(data).decode("ascii")
    return text if padding else text.rstrip("=")
