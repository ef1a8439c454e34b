"""
otp_core.py - Core library for TOTP codes (RFC 6238 over RFC 4226 HOTP).

Goals:
- Pure functions only: no file, database or clock access. The caller always
  passes the timestamp in, so the same (secret, timestamp) always yields the
  same code.
- HMAC-SHA1, 30 second step, 6 digits: the parameters used by Google
  Authenticator, Authy and friends.

Security note:
- Never log a full secret. Use `mask_secret` when a secret has to appear in
  a log line.
"""

import hmac
import hashlib
import struct
from urllib.parse import quote, urlencode

from core.base32 import decode

# --- Config / constants ----------------------------------------------------
DIGITS = 6                  # fixed: 6-digit codes
DEFAULT_TIME_STEP = 30      # TOTP step (seconds)
ALGORITHM = "SHA1"
_MODULUS = 10 ** DIGITS


class InvalidSecretError(ValueError):
    """The secret decodes to no usable key material."""


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Convert the counter to the 8-byte big-endian message RFC 4226 signs.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'

    Raises:
        ValueError: if the counter does not fit an unsigned 64-bit integer
    """
    if i < 0 or i > 0xFFFFFFFFFFFFFFFF:
        raise ValueError(f"Counter out of range for 64-bit unsigned: {i}")
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = last byte & 0x0F
    - read 4 bytes from offset, clear the top bit (0x7F) of the first one
    - returns a non-negative 31-bit integer
    """
    # offset in range 0..15 (SHA1 digest is 20 bytes)
    offset = hmac_digest[-1] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


def hotp(key: bytes, counter: int) -> str:
    """
    HOTP value for raw key bytes and a counter (RFC 4226).

    Steps:
    1. Message = 8-byte counter (big-endian)
    2. HMAC-SHA1(key, message)
    3. Dynamic truncate -> dbc
    4. otp = dbc % 10^6, zero-padded to 6 characters

    Raises:
        InvalidSecretError: if key is empty
    """
    # hmac.new happily signs with an empty key; a code from it is meaningless
    if not key:
        raise InvalidSecretError("Secret key is empty after Base32 decoding")
    msg = int_to_bytes(counter)
    digest = hmac.new(key, msg, hashlib.sha1).digest()
    return str(dynamic_truncate(digest) % _MODULUS).zfill(DIGITS)


def time_counter(timestamp, timestep: int = DEFAULT_TIME_STEP) -> int:
    """
    floor(timestamp / timestep); timestamp may be an int or a float.

    Raises:
        ValueError: if timestep is not positive
    """
    if timestep <= 0:
        raise ValueError("timestep must be positive")
    return int(timestamp // timestep)


def totp(secret_b32: str, timestamp, timestep: int = DEFAULT_TIME_STEP) -> str:
    """
    TOTP code for a Base32 secret at a given time (RFC 6238, T0 = 0).

    Arguments:
        secret_b32: Base32 secret as entered by the user (lenient decoding)
        timestamp: epoch seconds, int or float
        timestep: X in seconds, 30 unless the caller overrides it

    Returns:
        str: exactly 6 decimal digits

    Raises:
        InvalidSecretError: if the secret decodes to zero bytes
        ValueError: if timestamp is before the epoch
    """
    key = decode(secret_b32)
    return hotp(key, time_counter(timestamp, timestep))


def generate_code(secret: str, now_epoch_seconds) -> str:
    """The current 6-digit code for an account secret (30 s step)."""
    return totp(secret, now_epoch_seconds, DEFAULT_TIME_STEP)


def remaining_seconds(timestamp, timestep: int = DEFAULT_TIME_STEP) -> int:
    """Seconds until the code at `timestamp` rolls over, in 1..timestep."""
    return int(timestep - (int(timestamp) % timestep))


def validate_secret(secret_b32: str) -> None:
    """
    Check that a secret can produce a code at all.

    Computes one code (at epoch 0, the value is irrelevant) and lets
    InvalidSecretError propagate.
    """
    totp(secret_b32, 0)


def normalize_secret(secret: str) -> str:
    """Strip all whitespace and uppercase, the form secrets are stored in."""
    return "".join(secret.split()).upper()


def mask_secret(secret: str) -> str:
    return f"{secret[:4]}..." if secret else ""


def format_otpauth_uri(secret_b32: str, label: str, issuer: str = "") -> str:
    """
    otpauth:// URI so an account can be imported into an authenticator app.

    otpauth://totp/{issuer}:{label}?secret=...&issuer=...&algorithm=SHA1&digits=6&period=30

    Label and issuer are percent-encoded; without an issuer the path is just
    the label and the issuer parameter is omitted.
    """
    path = quote(f"{issuer}:{label}" if issuer else label, safe=":@")
    params = {"secret": secret_b32}
    if issuer:
        params["issuer"] = issuer
    params.update(algorithm=ALGORITHM, digits=DIGITS, period=DEFAULT_TIME_STEP)
    return f"otpauth://totp/{path}?{urlencode(params, quote_via=quote)}"
