import base64
import binascii
import secrets
from typing import Optional, Union

from .exceptions import DisposedError, EmptySecret, InvalidBase32


def b32decode(encoded: str) -> bytearray:
    """
    Decodes an RFC 4648 base32 string, case-insensitively, with or without
    its trailing padding.

    :raises InvalidBase32: on characters outside the alphabet or an impossible length
    """
    if not isinstance(encoded, str):
        raise InvalidBase32("base32 secret must be a str, not {}".format(type(encoded).__name__))
    missing_padding = len(encoded) % 8
    if missing_padding != 0:
        encoded += "=" * (8 - missing_padding)
    try:
        return bytearray(base64.b32decode(encoded, casefold=True))
    except (binascii.Error, ValueError):
        # binascii's message may quote the input; keep it out of the traceback
        raise InvalidBase32("secret is not a valid base32 string") from None


def b32encode(data: Union[bytes, bytearray]) -> str:
    """Uppercase base32 without padding, as the otpauth scheme expects."""
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


class Secret(object):
    """
    A shared secret in one of the forms it reaches us in.

    Raw secrets are byte sequences used verbatim; encoded secrets are base32
    strings whose decoding is deferred until :meth:`to_bytes`. Canonical
    secrets are key bytes already checked at construction, so they never
    fail later.
    """

    RAW = "raw"
    ENCODED = "encoded"
    CANONICAL = "canonical"

    def __init__(self, kind: str, value: Union[bytes, bytearray, str]) -> None:
        if kind in (self.RAW, self.CANONICAL):
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise TypeError("{} secret must be bytes-like, not {}".format(kind, type(value).__name__))
            value = bytearray(value)
            if kind == self.CANONICAL and not value:
                raise EmptySecret("secret must not be empty")
        elif kind == self.ENCODED:
            if not isinstance(value, str):
                raise TypeError("encoded secret must be a str, not {}".format(type(value).__name__))
        else:
            raise ValueError("unknown secret kind {!r}".format(kind))
        self.kind = kind
        self._value: Optional[Union[bytearray, str]] = value

    @classmethod
    def from_raw(cls, data: Union[bytes, bytearray]) -> "Secret":
        return cls(cls.RAW, data)

    @classmethod
    def from_encoded(cls, encoded: str) -> "Secret":
        return cls(cls.ENCODED, encoded)

    @classmethod
    def from_canonical(cls, data: Union[bytes, bytearray]) -> "Secret":
        """
        Key bytes that are known to be usable as they are.

        :raises EmptySecret: ``data`` is empty
        """
        return cls(cls.CANONICAL, data)

    @classmethod
    def generate(cls, length: int = 20) -> "Secret":
        """
        Random canonical secret from the OS CSPRNG.

        :param length: size in bytes; RFC 4226 asks for at least 128 bits and recommends 160
        """
        if length < 16:
            raise ValueError("Secrets should be at least 128 bits")
        return cls.from_canonical(secrets.token_bytes(length))

    def to_bytes(self) -> bytearray:
        """
        Canonical key bytes. The caller owns the returned buffer and should
        zero it once done (see :meth:`TOTP.dispose`).

        :raises InvalidBase32: encoded form does not decode
        :raises EmptySecret: the secret has no bytes
        """
        if self._value is None:
            raise DisposedError("secret has been wiped")
        if self.kind != self.ENCODED:
            data = bytearray(self._value)  # type: ignore
        else:
            data = b32decode(self._value)  # type: ignore
        if not data:
            raise EmptySecret("secret must not be empty")
        return data

    def to_encoded(self) -> str:
        """The secret as unpadded uppercase base32."""
        data = self.to_bytes()
        try:
            return b32encode(data)
        finally:
            zero_fill(data)

    def wipe(self) -> None:
        """
        Zeroes a raw or canonical secret and drops the reference. Encoded secrets are
        immutable str objects and can only be released.
        """
        if isinstance(self._value, bytearray):
            zero_fill(self._value)
        self._value = None

    def __repr__(self) -> str:
        return "<Secret kind={}>".format(self.kind)


def zero_fill(buffer: bytearray) -> None:
    """Overwrites a buffer in place with zeros."""
    buffer[:] = bytes(len(buffer))


def canonicalize(secret: Union["Secret", bytes, bytearray, str]) -> bytearray:
    """
    Turns any accepted secret input into a fresh canonical buffer.

    bytes and bytearray are taken as raw secrets, str as base32.
    """
    if isinstance(secret, Secret):
        return secret.to_bytes()
    if isinstance(secret, str):
        return Secret.from_encoded(secret).to_bytes()
    if isinstance(secret, (bytes, bytearray, memoryview)):
        data = bytearray(secret)
        if not data:
            raise EmptySecret("secret must not be empty")
        return data
    raise TypeError("secret must be a Secret, bytes or base32 str, not {}".format(type(secret).__name__))
