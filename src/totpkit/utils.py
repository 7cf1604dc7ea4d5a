import time
from hmac import compare_digest

from .exceptions import ClockError


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.

    No Unicode normalization is applied: an OTP is ASCII digits only, and
    anything else, lone surrogates included, is simply a mismatch.
    """
    return compare_digest(s1.encode("utf-8", "surrogatepass"), s2.encode("utf-8", "surrogatepass"))


def system_time() -> int:
    """
    Current Unix time in whole seconds.

    :raises ClockError: the clock cannot be read or is set before the epoch
    """
    try:
        now = time.time()
    except (OSError, OverflowError, ValueError) as e:
        raise ClockError("system clock is unavailable: {}".format(e)) from e
    if now < 0:
        raise ClockError("system clock is set before the Unix epoch ({})".format(now))
    return int(now)


def bytes_equal(b1: bytes, b2: bytes) -> bool:
    """Constant time comparison of two byte strings, e.g. secrets."""
    return compare_digest(b1, b2)
