"""
The ``otpauth://`` provisioning URI, as consumed by authenticator apps
(usually through a QR code)::

    otpauth://totp/FooCorp:alice%40example.com?secret=JBSWY3DPEHPK3PXP&issuer=FooCorp&algorithm=SHA1&digits=6&period=30

See also:
    https://github.com/google/google-authenticator/wiki/Key-Uri-Format
"""
import logging
import re
from typing import Any, Dict, Optional, Union
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit

from .algorithm import DEFAULT_ALGORITHM, Algorithm
from .exceptions import (
    ConfigError,
    EmptySecret,
    InvalidBase32,
    InvalidDigits,
    InvalidPeriod,
    InvalidScheme,
    MalformedUri,
    MissingSecret,
    UnsupportedAlgorithm,
)
from .otp import DEFAULT_DIGITS, MAX_DIGITS, MIN_DIGITS
from .secret import b32decode, zero_fill
from .totp import DEFAULT_SKEW, DEFAULT_STEP, TOTP, validate_skew

log = logging.getLogger(__name__)

_NUMBER = re.compile(r"[0-9]+")
_LABEL_SEPARATOR = re.compile(r":|%3A", re.IGNORECASE)


def encode(totp: TOTP) -> str:
    """
    Returns the provisioning URI for a TOTP.

    The label is ``issuer:account_name`` (or just the account name), each
    part percent-encoded; every parameter is written out, defaults included,
    in the order secret, issuer, algorithm, digits, period.
    """
    label = quote(totp.account_name, safe="")
    url_args: Dict[str, Union[int, str]] = {"secret": totp.secret_base32()}
    if totp.issuer is not None:
        label = quote(totp.issuer, safe="") + ":" + label
        url_args["issuer"] = totp.issuer
    url_args["algorithm"] = totp.algorithm.value
    url_args["digits"] = totp.digits
    url_args["period"] = totp.step

    return "otpauth://totp/{0}?{1}".format(label, urlencode(url_args).replace("+", "%20"))


def _parse_number(value: str) -> Optional[int]:
    if not _NUMBER.fullmatch(value):
        return None
    return int(value)


def decode(uri: str, skew: int = DEFAULT_SKEW) -> TOTP:
    """
    Parses a TOTP provisioning URI.

    Parameters may come in any order; missing ``algorithm``, ``digits`` and
    ``period`` default to SHA1, 6 and 30. An ``issuer`` parameter takes
    precedence over the issuer prefix of the label. Unknown parameters are
    ignored.

    :param uri: the totp URI to parse
    :param skew: verification skew of the returned TOTP; it is not part of the URI
    :returns: TOTP object
    """
    skew = validate_skew(skew)
    if not isinstance(uri, str):
        raise MalformedUri("URI must be a str, not {}".format(type(uri).__name__))
    try:
        parsed_uri = urlsplit(uri)
    except ValueError as e:
        raise MalformedUri("Could not parse URI: {}".format(e)) from e

    if parsed_uri.scheme != "otpauth":
        raise InvalidScheme("Not an otpauth URI, scheme is {!r}".format(parsed_uri.scheme))
    if parsed_uri.netloc.lower() != "totp":
        raise InvalidScheme("Not a TOTP URI, type is {!r}".format(parsed_uri.netloc))
    if not parsed_uri.path.startswith("/"):
        raise MalformedUri("otpauth URI has no label")

    otp_data: Dict[str, Any] = {}
    try:
        accountinfo_parts = _LABEL_SEPARATOR.split(parsed_uri.path[1:], maxsplit=1)
        if len(accountinfo_parts) == 1:
            otp_data["account_name"] = unquote(accountinfo_parts[0], errors="strict")
        else:
            otp_data["issuer"] = unquote(accountinfo_parts[0], errors="strict")
            otp_data["account_name"] = unquote(accountinfo_parts[1], errors="strict")
        params = parse_qsl(parsed_uri.query, keep_blank_values=True, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedUri("otpauth URI is not valid percent-encoded UTF-8") from e

    secret = None
    for key, value in params:
        if key == "secret":
            secret = value
        elif key == "issuer":
            if value:
                otp_data["issuer"] = value
        elif key == "algorithm":
            try:
                otp_data["algorithm"] = Algorithm.from_name(value)
            except ValueError:
                raise UnsupportedAlgorithm("Algorithm can only be SHA1, SHA256 or SHA512, not {!r}".format(value)) from None
        elif key == "digits":
            digits = _parse_number(value)
            if digits is None or not MIN_DIGITS <= digits <= MAX_DIGITS:
                raise InvalidDigits("Digits may only be {} to {}, not {!r}".format(MIN_DIGITS, MAX_DIGITS, value))
            otp_data["digits"] = digits
        elif key == "period":
            period = _parse_number(value)
            if not period:
                raise InvalidPeriod("Period must be a positive number of seconds, not {!r}".format(value))
            otp_data["step"] = period
        else:
            log.debug("ignoring otpauth parameter %r", key)

    if not secret:
        raise MissingSecret("No secret found in URI")
    try:
        key_bytes = b32decode(secret)
    except InvalidBase32 as e:
        raise MissingSecret("Secret in URI is not valid base32") from e

    try:
        return TOTP(
            key_bytes,
            digits=otp_data.get("digits", DEFAULT_DIGITS),
            algorithm=otp_data.get("algorithm", DEFAULT_ALGORITHM),
            skew=skew,
            step=otp_data.get("step", DEFAULT_STEP),
            account_name=otp_data["account_name"],
            issuer=otp_data.get("issuer"),
        )
    except ConfigError as e:
        raise MalformedUri(str(e)) from e
    except EmptySecret as e:
        raise MissingSecret(str(e)) from e
    finally:
        zero_fill(key_bytes)
