"""
core package
============

TOTP code generation (RFC 6238, HMAC-SHA1, 30 s step, 6 digits) with a
lenient RFC 4648 Base32 decoder for user-entered secrets.

──────────────────────────────────────────────
Algorithm
──────────────────────────────────────────────
- counter = floor(timestamp / 30), serialized as 8 bytes big-endian
- digest  = HMAC-SHA1(key = Base32-decoded secret, msg = counter)
- offset  = digest[19] & 0x0F; 31-bit value from digest[offset:offset + 4]
- code    = value mod 10^6, zero-padded to 6 digits

Everything here is pure: the caller supplies the time.

>>> from core import generate_code
>>> generate_code("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", 59)
'287082'
"""

from core.base32 import Base32DecodeError, decode, random_secret
from core.otp_core import (
    DEFAULT_TIME_STEP,
    DIGITS,
    InvalidSecretError,
    format_otpauth_uri,
    generate_code,
    normalize_secret,
    remaining_seconds,
    totp,
    validate_secret,
)

__all__ = [
    "Base32DecodeError",
    "DEFAULT_TIME_STEP",
    "DIGITS",
    "InvalidSecretError",
    "decode",
    "format_otpauth_uri",
    "generate_code",
    "normalize_secret",
    "random_secret",
    "remaining_seconds",
    "totp",
    "validate_secret",
]
