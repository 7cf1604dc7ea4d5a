from typing import Optional

from .algorithm import DEFAULT_ALGORITHM, Algorithm
from .otp import DEFAULT_DIGITS, SecretInput, validate_account_name, validate_digits, validate_issuer
from .secret import canonicalize, zero_fill
from .totp import DEFAULT_SKEW, DEFAULT_STEP, TOTP, validate_skew, validate_step


class Rfc6238(object):
    """
    Builds a :class:`TOTP` from the RFC 6238 defaults (SHA1, 6 digits,
    30 second step, no skew) plus validated overrides.

    Every ``with_*`` method checks its value straight away and raises the
    matching :class:`ConfigError`, so a builder never holds an invalid
    setting and :meth:`to_totp` cannot fail on one::

        totp = Rfc6238(secret, account_name="alice@example.com").with_digits(8).with_skew(1).to_totp()
    """

    def __init__(self, secret: SecretInput, account_name: str = "", issuer: Optional[str] = None) -> None:
        # decode once to surface a bad secret here rather than at to_totp()
        zero_fill(canonicalize(secret))
        self._secret = secret
        self.algorithm = DEFAULT_ALGORITHM
        self.digits = DEFAULT_DIGITS
        self.skew = DEFAULT_SKEW
        self.step = DEFAULT_STEP
        self.account_name = validate_account_name(account_name)
        self.issuer = validate_issuer(issuer)

    def with_digits(self, digits: int) -> "Rfc6238":
        self.digits = validate_digits(digits)
        return self

    def with_skew(self, skew: int) -> "Rfc6238":
        self.skew = validate_skew(skew)
        return self

    def with_step(self, step: int) -> "Rfc6238":
        self.step = validate_step(step)
        return self

    def with_algorithm(self, algorithm: Algorithm) -> "Rfc6238":
        if not isinstance(algorithm, Algorithm):
            raise TypeError("algorithm must be an Algorithm, not {}".format(type(algorithm).__name__))
        self.algorithm = algorithm
        return self

    def with_account_name(self, account_name: str) -> "Rfc6238":
        self.account_name = validate_account_name(account_name)
        return self

    def with_issuer(self, issuer: Optional[str]) -> "Rfc6238":
        self.issuer = validate_issuer(issuer)
        return self

    def to_totp(self) -> TOTP:
        return TOTP(
            self._secret,
            digits=self.digits,
            algorithm=self.algorithm,
            skew=self.skew,
            step=self.step,
            account_name=self.account_name,
            issuer=self.issuer,
        )
