import hashlib

import pytest

from totpkit import HOTP, Algorithm, DigitsOutOfRange, DisposedError, InvalidAccountName, InvalidIssuer
from totpkit.otp import compute, int_to_bytestring

RFC4226_SECRET = b"12345678901234567890"

RFC4226_CODES = [
    "755224",
    "287082",
    "359152",
    "969429",
    "338314",
    "254676",
    "287922",
    "162583",
    "399871",
    "520489",
]


def test_int_to_bytestring():
    assert int_to_bytestring(0) == b"\x00" * 8
    assert int_to_bytestring(12345) == b"\x00\x00\x00\x00\x00\x00\x30\x39"
    assert int_to_bytestring(2**64 - 1) == b"\xff" * 8


@pytest.mark.parametrize("counter,expected", list(enumerate(RFC4226_CODES)))
def test_compute_rfc4226_vectors(counter, expected):
    assert compute(Algorithm.SHA1, RFC4226_SECRET, counter, 6) == expected


def test_compute_accepts_bytearray_key():
    assert compute(Algorithm.SHA1, bytearray(RFC4226_SECRET), 1, 6) == "287082"


def test_compute_pads_with_leading_zeros():
    # RFC 6238, T = 1111111109, SHA1
    assert compute(Algorithm.SHA1, RFC4226_SECRET, 1111111109 // 30, 8) == "07081804"


def test_compute_rejects_negative_counter():
    with pytest.raises(ValueError):
        compute(Algorithm.SHA1, RFC4226_SECRET, -1, 6)


def test_algorithm_lookup():
    assert Algorithm.from_name("SHA256") is Algorithm.SHA256
    assert Algorithm.SHA512.digest is hashlib.sha512
    assert [a.digest_size for a in Algorithm] == [20, 32, 64]
    assert str(Algorithm.SHA1) == "SHA1"
    with pytest.raises(ValueError):
        Algorithm.from_name("MD5")


def test_hotp_at_and_verify():
    hotp = HOTP(RFC4226_SECRET)
    assert [hotp.at(i) for i in range(10)] == RFC4226_CODES
    assert hotp.verify("755224", 0)
    assert not hotp.verify("755224", 1)
    assert not hotp.verify("000000", 0)
    assert not hotp.verify("\ud800", 0)


def test_hotp_initial_count():
    hotp = HOTP(RFC4226_SECRET, initial_count=3)
    assert hotp.at(0) == "969429"
    with pytest.raises(ValueError):
        HOTP(RFC4226_SECRET, initial_count=-1)


@pytest.mark.parametrize("digits", [5, 9, 0, "6", True])
def test_digits_out_of_range(digits):
    with pytest.raises(DigitsOutOfRange):
        HOTP(RFC4226_SECRET, digits=digits)


def test_labels_must_not_contain_colon():
    with pytest.raises(InvalidAccountName):
        HOTP(RFC4226_SECRET, account_name="mock:example.com")
    with pytest.raises(InvalidIssuer):
        HOTP(RFC4226_SECRET, issuer="Github:")


def test_empty_issuer_is_absent():
    assert HOTP(RFC4226_SECRET, issuer="").issuer is None


def test_dispose_zeroes_secret():
    hotp = HOTP(RFC4226_SECRET)
    buffer = hotp.byte_secret()
    hotp.dispose()
    assert buffer == bytearray(len(RFC4226_SECRET))
    assert hotp.disposed
    with pytest.raises(DisposedError):
        hotp.at(0)
    # idempotent
    hotp.dispose()


def test_context_manager_disposes():
    with HOTP(RFC4226_SECRET) as hotp:
        buffer = hotp.byte_secret()
        assert hotp.at(0) == "755224"
    assert hotp.disposed
    assert not any(buffer)


def test_constructor_copies_caller_buffer():
    key = bytearray(RFC4226_SECRET)
    hotp = HOTP(key)
    hotp.dispose()
    assert key == bytearray(RFC4226_SECRET)
