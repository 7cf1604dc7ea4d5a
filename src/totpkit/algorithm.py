import hashlib
from enum import Enum
from typing import Any, Callable, Dict


class Algorithm(Enum):
    """
    Hash functions an authenticator may be asked to compute the HMAC with.

    Be aware that some authenticator apps accept SHA256 and SHA512 in the
    provisioning URI but silently fall back to SHA1, so verification fails
    even though the secret is right. Use SHA1 unless you control the client.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    def __str__(self) -> str:
        return self.value

    @property
    def digest(self) -> Callable[..., Any]:
        """The hashlib constructor handed to hmac.new()."""
        return _DIGESTS[self]

    @property
    def digest_size(self) -> int:
        return _DIGEST_SIZES[self]

    @classmethod
    def from_name(cls, name: str) -> "Algorithm":
        """
        Looks up an algorithm by its otpauth token (SHA1, SHA256 or SHA512).

        :raises ValueError: for any other token
        """
        try:
            return cls(name)
        except ValueError:
            raise ValueError("Invalid value for algorithm, must be SHA1, SHA256 or SHA512, not {!r}".format(name))


_DIGESTS: Dict[Algorithm, Callable[..., Any]] = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}

_DIGEST_SIZES: Dict[Algorithm, int] = {
    Algorithm.SHA1: 20,
    Algorithm.SHA256: 32,
    Algorithm.SHA512: 64,
}

DEFAULT_ALGORITHM = Algorithm.SHA1
