"""
base32.py - RFC 4648 Base32 decoder for user-entered OTP secrets.

Secrets copied out of a provider's setup page often arrive lowercase, split
into groups by spaces or dashes, with or without '=' padding. The decoder
here accepts all of that: characters outside the alphabet are skipped and the
first '=' ends the input.
"""

import pyotp

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
PADDING = "="

_INDEX = {ch: i for i, ch in enumerate(ALPHABET)}
_ACC_MASK = 0xFFFF  # never holds more than 12 significant bits


class Base32DecodeError(ValueError):
    """Raised by decode(strict=True) on a character outside the alphabet."""


def decode(encoded: str, strict: bool = False) -> bytes:
    """
    Decode a Base32 string into raw bytes.

    - Case-insensitive.
    - The first '=' terminates processing (anything after it is ignored).
    - Unknown characters are skipped; with strict=True they raise
      Base32DecodeError instead (whitespace is always skipped).
    - A trailing group of fewer than 8 bits is discarded.

    Arguments:
        encoded: Base32 text, e.g. "JBSW Y3DP EHPK 3PXP"
        strict: reject characters outside the alphabet

    Returns:
        bytes: decoded key material, possibly empty
    """
    acc = 0
    bits = 0
    out = bytearray()

    for pos, ch in enumerate(encoded):
        if ch == PADDING:
            break
        index = _INDEX.get(ch.upper())
        if index is None:
            if strict and not ch.isspace():
                raise Base32DecodeError(
                    f"Invalid Base32 character {ch!r} at position {pos}"
                )
            continue
        acc = ((acc << 5) | index) & _ACC_MASK
        bits += 5
        if bits >= 8:
            out.append((acc >> (bits - 8)) & 0xFF)
            bits -= 8
            # keep only the bits not yet emitted
            acc &= (1 << bits) - 1

    return bytes(out)


def random_secret() -> str:
    """Return a fresh 32-character Base32 secret (160 bits)."""
    return pyotp.random_base32()
