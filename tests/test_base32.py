import base64

import pytest

from core.base32 import Base32DecodeError, decode, random_secret


def test_empty_input_decodes_to_empty_bytes():
    assert decode("") == b""


def test_decode_is_case_insensitive():
    assert decode("gezdgnbv") == decode("GEZDGNBV") == b"12345"


def test_padding_terminates_input():
    assert decode("MFRGG===") == decode("MFRGG") == b"abc"
    # anything after the first '=' is ignored
    assert decode("MFRGG=ZZZZZZZZ") == b"abc"


@pytest.mark.parametrize("raw", [b"f", b"fooba", b"Hello!\xde\xad\xbe\xef", bytes(range(20))])
def test_roundtrip_with_stdlib_encoder(raw):
    encoded = base64.b32encode(raw).decode("ascii")
    assert decode(encoded) == raw
    assert decode(encoded.rstrip("=")) == raw


def test_unknown_characters_are_skipped():
    assert decode("JBSW Y3DP-EHPK 3PXP") == decode("JBSWY3DPEHPK3PXP")
    assert decode("!!!") == b""


def test_partial_trailing_group_is_discarded():
    assert decode("M") == b""
    assert decode("MY") == b"f"
    # 16 symbols carry 80 bits -> 10 bytes; 17 symbols still 10 bytes
    assert len(decode("A" * 16)) == 10
    assert len(decode("A" * 17)) == 10


def test_strict_mode_rejects_unknown_characters():
    with pytest.raises(Base32DecodeError) as exc:
        decode("JBSW!Y3DP", strict=True)
    assert "position 4" in str(exc.value)
    assert isinstance(exc.value, ValueError)


def test_strict_mode_still_allows_whitespace_and_padding():
    assert decode("mfrg g===", strict=True) == b"abc"


def test_random_secret_is_valid_base32():
    secret = random_secret()
    assert len(secret) == 32
    assert len(decode(secret, strict=True)) == 20
    assert random_secret() != secret
