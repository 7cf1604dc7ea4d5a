class OTPError(Exception):
    """
    Base class for every error raised by totpkit.
    """


class DisposedError(OTPError):
    """
    The secret of this instance has already been wiped.
    """


# Secret canonicalization


class SecretError(OTPError, ValueError):
    pass


class InvalidBase32(SecretError):
    pass


class EmptySecret(SecretError):
    pass


# Construction and builder validation


class ConfigError(OTPError, ValueError):
    pass


class DigitsOutOfRange(ConfigError):
    pass


class InvalidStep(ConfigError):
    pass


class InvalidSkew(ConfigError):
    pass


class InvalidAccountName(ConfigError):
    pass


class InvalidIssuer(ConfigError):
    pass


# otpauth URI decoding


class UriError(OTPError, ValueError):
    pass


class InvalidScheme(UriError):
    pass


class MissingSecret(UriError):
    pass


class UnsupportedAlgorithm(UriError):
    pass


class InvalidDigits(UriError):
    pass


class InvalidPeriod(UriError):
    pass


class MalformedUri(UriError):
    pass


class ClockError(OTPError, OSError):
    """
    The system clock could not be read, or reported a time before the epoch.
    """
