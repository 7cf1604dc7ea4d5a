import logging
import secrets
from typing import Sequence

from . import uri
from .algorithm import Algorithm as Algorithm
from .exceptions import ClockError as ClockError
from .exceptions import ConfigError as ConfigError
from .exceptions import DigitsOutOfRange as DigitsOutOfRange
from .exceptions import DisposedError as DisposedError
from .exceptions import EmptySecret as EmptySecret
from .exceptions import InvalidAccountName as InvalidAccountName
from .exceptions import InvalidBase32 as InvalidBase32
from .exceptions import InvalidDigits as InvalidDigits
from .exceptions import InvalidIssuer as InvalidIssuer
from .exceptions import InvalidPeriod as InvalidPeriod
from .exceptions import InvalidScheme as InvalidScheme
from .exceptions import InvalidSkew as InvalidSkew
from .exceptions import InvalidStep as InvalidStep
from .exceptions import MalformedUri as MalformedUri
from .exceptions import MissingSecret as MissingSecret
from .exceptions import OTPError as OTPError
from .exceptions import SecretError as SecretError
from .exceptions import UnsupportedAlgorithm as UnsupportedAlgorithm
from .exceptions import UriError as UriError
from .hotp import HOTP as HOTP
from .rfc6238 import Rfc6238 as Rfc6238
from .secret import Secret as Secret
from .totp import TOTP as TOTP

logging.getLogger(__name__).addHandler(logging.NullHandler())


def random_base32(length: int = 32, chars: Sequence[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567") -> str:
    # Note: the otpauth scheme DOES NOT use base32 padding for secret lengths not divisible by 8.
    # Some third-party tools have bugs when dealing with such secrets.
    if length < 32:
        raise ValueError("Secrets should be at least 160 bits")

    return "".join(secrets.choice(chars) for _ in range(length))


def parse_uri(uri_string: str, skew: int = 0) -> TOTP:
    """
    Parses the provisioning URI for a TOTP.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri_string: the totp URI to parse
    :param skew: verification skew for the returned TOTP
    :returns: TOTP object
    """
    return uri.decode(uri_string, skew=skew)
