import pytest
from itsdangerous import URLSafeTimedSerializer
from unittest.mock import patch

from auth.session.codec import CookieCodec
from auth.session.errors import ConfigurationError

SECRET = "test-secret-key-that-is-long-enough-for-signing"


@pytest.fixture
def codec():
    return CookieCodec(SECRET)


def _replace_char(value: str, index: int) -> str:
    replacement = "A" if value[index] != "A" else "B"
    return value[:index] + replacement + value[index + 1:]


def test_encode_decode(codec):
    value = codec.encode("0123456789abcdef0123456789abcdef")

    assert value != "0123456789abcdef0123456789abcdef"
    assert codec.decode(value) == "0123456789abcdef0123456789abcdef"


@pytest.mark.parametrize("value", [None, "", "garbage", "a.b.c", "...."])
def test_decode_malformed(codec, value):
    assert codec.decode(value) is None


def test_decode_tampered_payload(codec):
    value = codec.encode("0123456789abcdef0123456789abcdef")

    assert codec.decode(_replace_char(value, 0)) is None
    assert codec.decode(_replace_char(value, 5)) is None


def test_decode_tampered_signature(codec):
    value = codec.encode("0123456789abcdef0123456789abcdef")
    signature_start = value.rindex(".") + 1

    assert codec.decode(_replace_char(value, signature_start)) is None
    assert codec.decode(value[:-3]) is None


def test_decode_rejects_every_single_bit_flip(codec):
    value = codec.encode("0123456789abcdef0123456789abcdef")

    accepted = []
    for index, char in enumerate(value):
        for bit in range(8):
            flipped = value[:index] + chr(ord(char) ^ (1 << bit)) + value[index + 1:]
            if codec.decode(flipped) is not None:
                accepted.append((index, bit))

    assert accepted == []


def test_decode_with_other_secret(codec):
    other = CookieCodec("another-secret-key-that-is-long-enough-too")

    assert other.decode(codec.encode("abc")) is None


def test_decode_rejects_envelope_without_sid():
    signer = URLSafeTimedSerializer(SECRET, salt="session-cookie")
    codec = CookieCodec(SECRET)

    assert codec.decode(signer.dumps({"user": "alice"})) is None
    assert codec.decode(signer.dumps(["abc"])) is None
    assert codec.decode(signer.dumps({"sid": 42})) is None


def test_decode_expired_signature():
    codec = CookieCodec(SECRET, max_age=60)
    with patch("itsdangerous.timed.time.time", return_value=1_700_000_000):
        value = codec.encode("abc")

    with patch("itsdangerous.timed.time.time", return_value=1_700_000_000 + 61):
        assert codec.decode(value) is None
    with patch("itsdangerous.timed.time.time", return_value=1_700_000_000 + 30):
        assert codec.decode(value) == "abc"


def test_missing_secret():
    with pytest.raises(ConfigurationError):
        CookieCodec("")


def test_short_secret_warns(caplog):
    with caplog.at_level("WARNING", logger="sessions.codec"):
        CookieCodec("short")

    assert "shorter than" in caplog.text
