from typing import Optional

from . import utils
from .algorithm import DEFAULT_ALGORITHM, Algorithm
from .otp import DEFAULT_DIGITS, OTP, SecretInput


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters.
    """

    def __init__(
        self,
        secret: SecretInput,
        digits: int = DEFAULT_DIGITS,
        algorithm: Algorithm = DEFAULT_ALGORITHM,
        account_name: str = "",
        issuer: Optional[str] = None,
        initial_count: int = 0,
    ) -> None:
        """
        :param secret: raw secret bytes, a base32 string or a :class:`Secret`
        :param digits: number of integers in the OTP, 6 to 8
        :param algorithm: hash function to use in the HMAC
        :param account_name: account name
        :param issuer: issuer
        :param initial_count: starting HMAC counter value, defaults to 0
        """
        if isinstance(initial_count, bool) or not isinstance(initial_count, int) or initial_count < 0:
            raise ValueError("initial_count must be a non-negative integer")
        super().__init__(secret, digits=digits, algorithm=algorithm, account_name=account_name, issuer=issuer)
        self.initial_count = initial_count

    def at(self, count: int) -> str:
        """
        Generates the OTP for the given count.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(self.initial_count + count)

    def verify(self, otp: str, counter: int) -> bool:
        """
        Verifies the OTP passed in against the OTP for the given counter.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        """
        return utils.strings_equal(str(otp), self.at(counter))
