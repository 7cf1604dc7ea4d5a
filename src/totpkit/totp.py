import datetime
from typing import Any, Dict, Iterator, Optional, Union

from . import utils
from .algorithm import DEFAULT_ALGORITHM, Algorithm
from .exceptions import InvalidSkew, InvalidStep
from .otp import DEFAULT_DIGITS, MAX_COUNTER, OTP, SecretInput
from .secret import b32encode

DEFAULT_STEP = 30
DEFAULT_SKEW = 0
MAX_SKEW = 255

Timestamp = Union[int, float, datetime.datetime]


def validate_step(step: Any) -> int:
    if isinstance(step, bool) or not isinstance(step, int) or step <= 0:
        raise InvalidStep("step must be a positive number of seconds, not {!r}".format(step))
    return step


def validate_skew(skew: Any) -> int:
    if isinstance(skew, bool) or not isinstance(skew, int) or not 0 <= skew <= MAX_SKEW:
        raise InvalidSkew("skew must be a number of steps between 0 and {}, not {!r}".format(MAX_SKEW, skew))
    return skew


def skew_offsets(skew: int) -> Iterator[int]:
    """Counter offsets to try when verifying: 0, -1, +1, -2, +2, ..."""
    yield 0
    for i in range(1, skew + 1):
        yield -i
        yield i


class TOTP(OTP):
    """
    Handler for time-based OTP counters.

    Be aware that some authenticator apps accept SHA256 and SHA512 but
    silently compute SHA1, which makes :meth:`check` fail with an otherwise
    correct secret. Verification always uses the configured algorithm only.
    """

    def __init__(
        self,
        secret: SecretInput,
        digits: int = DEFAULT_DIGITS,
        algorithm: Algorithm = DEFAULT_ALGORITHM,
        skew: int = DEFAULT_SKEW,
        step: int = DEFAULT_STEP,
        account_name: str = "",
        issuer: Optional[str] = None,
    ) -> None:
        """
        :param secret: raw secret bytes, a base32 string or a :class:`Secret`
        :param digits: number of integers in the OTP, 6 to 8
        :param algorithm: hash function to use in the HMAC
        :param skew: steps before and after the current one also accepted by
            :meth:`check`. RFC 6238 recommends at most 1
        :param step: the time interval in seconds for OTP. This defaults to 30.
        :param account_name: account name, typically an email address; must not contain ':'
        :param issuer: name of the service; must not contain ':'
        """
        self.skew = validate_skew(skew)
        self.step = validate_step(step)
        super().__init__(secret, digits=digits, algorithm=algorithm, account_name=account_name, issuer=issuer)

    @classmethod
    def from_secret_base32(cls, secret: str, account_name: str = "", issuer: Optional[str] = None) -> "TOTP":
        """TOTP with the RFC 6238 defaults for a base32 secret."""
        return cls(secret, account_name=account_name, issuer=issuer)

    @classmethod
    def from_uri(cls, uri: str, skew: int = DEFAULT_SKEW) -> "TOTP":
        from . import uri as uri_codec

        return uri_codec.decode(uri, skew=skew)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TOTP":
        """
        Inverse of :meth:`to_dict`. Missing optional keys take the defaults.

        :raises KeyError: no ``secret`` key
        """
        return cls(
            data["secret"],
            digits=data.get("digits", DEFAULT_DIGITS),
            algorithm=Algorithm.from_name(data.get("algorithm", DEFAULT_ALGORITHM.value)),
            skew=data.get("skew", DEFAULT_SKEW),
            step=data.get("step", DEFAULT_STEP),
            account_name=data.get("account_name", ""),
            issuer=data.get("issuer"),
        )

    def timecode(self, for_time: Timestamp) -> int:
        """
        Accepts either a timezone naive (local time) or aware datetime, or a
        Unix timestamp, and returns the counter of the step it falls into.
        """
        if isinstance(for_time, datetime.datetime):
            for_time = for_time.timestamp()
        if for_time < 0:
            raise ValueError("timestamp must not be before the Unix epoch")
        return int(for_time // self.step)

    def generate(self, for_time: Timestamp) -> str:
        """
        Generates the OTP for the given time.

        :param for_time: Unix timestamp in seconds, or a datetime
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time))

    def generate_current(self) -> str:
        """
        Generates the current OTP.

        :raises ClockError: system clock unavailable
        """
        return self.generate(utils.system_time())

    def check(self, candidate: str, for_time: Timestamp) -> bool:
        """
        Verifies the OTP passed in against the code for the given time,
        also accepting the ``skew`` neighbouring steps on either side.

        A candidate of the wrong length or with non-digit characters is
        simply not a match.

        :param candidate: the OTP to check against
        :param for_time: Unix timestamp in seconds, or a datetime
        """
        candidate = str(candidate)
        counter = self.timecode(for_time)
        for offset in skew_offsets(self.skew):
            if not 0 <= counter + offset <= MAX_COUNTER:
                continue
            if utils.strings_equal(candidate, self.generate_otp(counter + offset)):
                return True
        return False

    def check_current(self, candidate: str) -> bool:
        """
        :raises ClockError: system clock unavailable
        """
        return self.check(candidate, utils.system_time())

    def next_step(self, for_time: Timestamp) -> int:
        """Timestamp of the first second of the step after ``for_time``."""
        return (self.timecode(for_time) + 1) * self.step

    def next_step_current(self) -> int:
        return self.next_step(utils.system_time())

    def ttl(self, for_time: Optional[Timestamp] = None) -> int:
        """Seconds the code for ``for_time`` (default: now) stays valid."""
        if for_time is None:
            for_time = utils.system_time()
        elif isinstance(for_time, datetime.datetime):
            for_time = for_time.timestamp()
        return self.next_step(for_time) - int(for_time)

    def secret_base32(self) -> str:
        """
        The secret as unpadded uppercase base32, for users who want to type
        it into their authenticator by hand.
        """
        return b32encode(self.byte_secret())

    def provisioning_uri(self) -> str:
        """
        Returns the provisioning URI for the OTP. This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format
        """
        from . import uri as uri_codec

        return uri_codec.encode(self)

    def to_dict(self) -> Dict[str, Any]:
        """JSON compatible form of every attribute; the secret is base32."""
        return {
            "algorithm": self.algorithm.value,
            "digits": self.digits,
            "skew": self.skew,
            "step": self.step,
            "secret": self.secret_base32(),
            "account_name": self.account_name,
            "issuer": self.issuer,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TOTP):
            return NotImplemented
        same_secret = utils.bytes_equal(self.byte_secret(), other.byte_secret())
        return same_secret and (
            self.algorithm,
            self.digits,
            self.skew,
            self.step,
            self.account_name,
            self.issuer,
        ) == (
            other.algorithm,
            other.digits,
            other.skew,
            other.step,
            other.account_name,
            other.issuer,
        )

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        return "<TOTP {}{} algorithm={} digits={} step={} skew={}>".format(
            self.issuer + ":" if self.issuer else "",
            self.account_name,
            self.algorithm,
            self.digits,
            self.step,
            self.skew,
        )
