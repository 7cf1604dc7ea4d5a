import pytest

from totpkit import TOTP, DisposedError, EmptySecret, InvalidBase32, Secret, SecretError, random_base32
from totpkit.secret import b32decode, b32encode, canonicalize

RFC_SECRET = b"12345678901234567890"
RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def test_from_raw_is_verbatim():
    assert Secret.from_raw(RFC_SECRET).to_bytes() == bytearray(RFC_SECRET)


def test_from_encoded_decodes():
    assert Secret.from_encoded(RFC_SECRET_B32).to_bytes() == bytearray(RFC_SECRET)


def test_encoded_is_case_insensitive():
    assert Secret.from_encoded(RFC_SECRET_B32.lower()).to_bytes() == bytearray(RFC_SECRET)


@pytest.mark.parametrize(
    "encoded", ["KRSXG5CTMVRXEZLUKN2XAZLSKNSWG4TFOQ", "KRSXG5CTMVRXEZLUKN2XAZLSKNSWG4TFOQ======"]
)
def test_padded_and_unpadded(encoded):
    assert Secret.from_encoded(encoded).to_bytes() == bytearray(b"TestSecretSuperSecret")


def test_invalid_base32():
    secret = Secret.from_encoded("not-base32!!")
    with pytest.raises(InvalidBase32):
        secret.to_bytes()


@pytest.mark.parametrize("encoded", ["ABC1", "A", "ÄBCDEFGH", "JBSW Y3DP"])
def test_invalid_base32_variants(encoded):
    with pytest.raises(InvalidBase32):
        b32decode(encoded)


def test_invalid_base32_message_does_not_echo_secret():
    with pytest.raises(InvalidBase32) as excinfo:
        b32decode("SUPERSECRET1")
    assert "SUPERSECRET1" not in str(excinfo.value)


def test_empty_secret():
    with pytest.raises(EmptySecret):
        Secret.from_raw(b"").to_bytes()
    with pytest.raises(EmptySecret):
        Secret.from_encoded("").to_bytes()


def test_errors_are_value_errors():
    assert issubclass(InvalidBase32, SecretError)
    assert issubclass(EmptySecret, ValueError)


def test_to_bytes_returns_fresh_buffer():
    secret = Secret.from_raw(RFC_SECRET)
    first = secret.to_bytes()
    first[:] = bytes(len(first))
    assert secret.to_bytes() == bytearray(RFC_SECRET)


def test_to_encoded():
    assert Secret.from_raw(RFC_SECRET).to_encoded() == RFC_SECRET_B32
    assert Secret.from_encoded("krsxg5ctmvrxezlukn2xazlsknswg4tfoq").to_encoded() == "KRSXG5CTMVRXEZLUKN2XAZLSKNSWG4TFOQ"


def test_wipe():
    secret = Secret.from_raw(bytearray(RFC_SECRET))
    secret.wipe()
    with pytest.raises(DisposedError):
        secret.to_bytes()


def test_generate():
    secret = Secret.generate()
    assert len(secret.to_bytes()) == 20
    assert secret.to_bytes() != Secret.generate().to_bytes()
    with pytest.raises(ValueError):
        Secret.generate(8)


def test_rejects_wrong_types():
    with pytest.raises(TypeError):
        Secret.from_raw("text")
    with pytest.raises(TypeError):
        Secret.from_encoded(b"GEZDGNBV")
    with pytest.raises(TypeError):
        canonicalize(12345)


def test_canonicalize_inputs():
    assert canonicalize(RFC_SECRET) == bytearray(RFC_SECRET)
    assert canonicalize(RFC_SECRET_B32) == bytearray(RFC_SECRET)
    assert canonicalize(Secret.from_raw(RFC_SECRET)) == bytearray(RFC_SECRET)
    with pytest.raises(EmptySecret):
        canonicalize(b"")


def test_b32encode_strips_padding():
    assert b32encode(b"TestSecretSuperSecret") == "KRSXG5CTMVRXEZLUKN2XAZLSKNSWG4TFOQ"


def test_random_base32():
    value = random_base32()
    assert len(value) == 32
    assert len(Secret.from_encoded(value).to_bytes()) == 20
    with pytest.raises(ValueError):
        random_base32(length=16)


def test_from_canonical():
    secret = Secret.from_canonical(RFC_SECRET)
    assert secret.kind == Secret.CANONICAL
    first = secret.to_bytes()
    assert first == bytearray(RFC_SECRET)
    first[:] = bytes(len(first))
    assert secret.to_bytes() == bytearray(RFC_SECRET)
    assert TOTP(secret).generate(59) == "287082"


def test_from_canonical_rejects_empty_on_construction():
    with pytest.raises(EmptySecret):
        Secret.from_canonical(b"")


def test_generated_secret_is_canonical():
    assert Secret.generate().kind == Secret.CANONICAL
