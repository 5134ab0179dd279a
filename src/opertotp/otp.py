import logging
from typing import Any, Optional

from . import base32
from .hashes import MIN_DIGEST_SIZE, HashProvider, ProviderReference

logger = logging.getLogger(__name__)

MAX_COUNTER = 2**64 - 1


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(
        self,
        s: str,
        digits: int = 6,
        digest: Any = "sha1",
        name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP
        :param digest: hash name, hashlib constructor, HashProvider, or a
            shared ProviderReference. None leaves the handler without a
            provider, in which case no code can be generated.
        :param name: account name
        :param issuer: issuer
        """
        if not 1 <= digits <= 10:
            raise ValueError("digits must be between 1 and 10")
        self.digits = digits
        if isinstance(digest, ProviderReference):
            self.hash = digest
        else:
            self.hash = ProviderReference(digest)
        self.secret = s
        self.name = name or "Secret"
        self.issuer = issuer

    def generate_otp(self, input: int) -> Optional[str]:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        :returns: the code, or None when no hash provider is available
        """
        provider = self.hash.get()
        if provider is None:
            logger.debug("no hash provider configured, cannot generate OTP")
            return None
        return self.generate_with(provider, input)

    def generate_with(self, provider: HashProvider, input: int) -> str:
        """
        Generates the OTP for ``input`` using an explicit provider snapshot.
        """
        # Implements RFC 4226
        if not 0 <= input <= MAX_COUNTER:
            raise ValueError("input must be an unsigned 64-bit integer")
        if provider.out_size < MIN_DIGEST_SIZE:
            raise ValueError("{!r} digest size is lower than {} bytes".format(provider, MIN_DIGEST_SIZE))

        hmac_hash = bytearray(provider.hmac(self.byte_secret(), self.int_to_bytestring(input)))
        offset = hmac_hash[provider.out_size - 1] & 0xF
        code = int.from_bytes(hmac_hash[offset : offset + 4], "big") & 0x7FFFFFFF
        return str(code % 10**self.digits).rjust(self.digits, "0")

    def byte_secret(self) -> bytes:
        return base32.decode(self.secret)

    @staticmethod
    def int_to_bytestring(i: int, padding: int = 8) -> bytes:
        """
        Turns an integer to the OATH specified
        bytestring, which is fed to the HMAC
        along with the secret
        """
        return i.to_bytes(padding, "big")
