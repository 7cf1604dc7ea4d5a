import hmac
import logging
import struct
from typing import Any, Optional, Union

from .algorithm import DEFAULT_ALGORITHM, Algorithm
from .exceptions import DigitsOutOfRange, DisposedError, InvalidAccountName, InvalidIssuer
from .secret import Secret, canonicalize, zero_fill

log = logging.getLogger(__name__)

MIN_DIGITS = 6
MAX_DIGITS = 8
DEFAULT_DIGITS = 6
MAX_COUNTER = 2**64 - 1

SecretInput = Union[Secret, bytes, bytearray, str]


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns a counter into the OATH specified bytestring, which is fed to the
    HMAC along with the secret: unsigned, big-endian, eight bytes.
    """
    return i.to_bytes(padding, "big")


def compute(algorithm: Algorithm, key: Union[bytes, bytearray], counter: int, digits: int) -> str:
    """
    RFC 4226 HOTP value for one counter.

    :param algorithm: hash function used in the HMAC
    :param key: canonical secret bytes, non-empty
    :param counter: moving factor, 0 <= counter < 2**64
    :param digits: code length, already validated
    :returns: decimal code, left-padded with zeros to ``digits`` characters
    """
    if counter < 0:
        raise ValueError("counter must be a positive integer")
    hmac_hash = hmac.new(key, int_to_bytestring(counter), algorithm.digest).digest()
    offset = hmac_hash[-1] & 0x0F
    code = struct.unpack(">I", hmac_hash[offset : offset + 4])[0] & 0x7FFFFFFF
    return str(code % 10**digits).zfill(digits)


def validate_digits(digits: Any) -> int:
    if isinstance(digits, bool) or not isinstance(digits, int) or not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise DigitsOutOfRange(
            "digits must be an integer between {} and {}, not {!r}".format(MIN_DIGITS, MAX_DIGITS, digits)
        )
    return digits


def validate_account_name(name: Any) -> str:
    if not isinstance(name, str):
        raise InvalidAccountName("account name must be a str, not {}".format(type(name).__name__))
    if ":" in name:
        raise InvalidAccountName("account name {!r} must not contain a colon".format(name))
    return name


def validate_issuer(issuer: Any) -> Optional[str]:
    if issuer is None or issuer == "":
        return None
    if not isinstance(issuer, str):
        raise InvalidIssuer("issuer must be a str, not {}".format(type(issuer).__name__))
    if ":" in issuer:
        raise InvalidIssuer("issuer {!r} must not contain a colon".format(issuer))
    return issuer


class OTP(object):
    """
    Base class for OTP handlers.

    Owns the canonical secret buffer. Call :meth:`dispose` (or use the
    instance as a context manager) once the handler is no longer needed so
    the key bytes are overwritten; the finalizer only does this on a best
    effort basis.
    """

    def __init__(
        self,
        secret: SecretInput,
        digits: int = DEFAULT_DIGITS,
        algorithm: Algorithm = DEFAULT_ALGORITHM,
        account_name: str = "",
        issuer: Optional[str] = None,
    ) -> None:
        self._secret: Optional[bytearray] = None
        if not isinstance(algorithm, Algorithm):
            raise TypeError("algorithm must be an Algorithm, not {}".format(type(algorithm).__name__))
        self.digits = validate_digits(digits)
        self.algorithm = algorithm
        self.account_name = validate_account_name(account_name)
        self.issuer = validate_issuer(issuer)
        # last, so a validation error above never leaves a copy of the key behind
        self._secret = canonicalize(secret)

    def generate_otp(self, counter: int) -> str:
        """
        :param counter: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        return compute(self.algorithm, self.byte_secret(), counter, self.digits)

    def byte_secret(self) -> bytearray:
        """The canonical secret buffer; owned by this instance, do not keep it."""
        if self._secret is None:
            raise DisposedError("{} has been disposed".format(type(self).__name__))
        return self._secret

    @property
    def disposed(self) -> bool:
        return self._secret is None

    def dispose(self) -> None:
        """
        Overwrites the secret with zeros and releases it. Idempotent.
        """
        if self._secret is not None:
            zero_fill(self._secret)
            self._secret = None
            log.debug("disposed %s secret", type(self).__name__)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    def __del__(self) -> None:
        secret = getattr(self, "_secret", None)
        if secret is not None:
            zero_fill(secret)
