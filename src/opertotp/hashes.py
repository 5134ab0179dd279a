import hashlib
import hmac
import logging
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

# Dynamic truncation reads four bytes from offset 15 at most.
MIN_DIGEST_SIZE = 19


class HashProvider(object):
    """
    Keyed hash used to compute one-time passwords.

    Subclasses supply ``name``, ``out_size`` (digest length in bytes) and
    :meth:`hmac`.
    """

    name = ""
    out_size = 0

    def hmac(self, key: bytes, message: bytes) -> bytes:
        raise NotImplementedError

    def __repr__(self) -> str:
        return "<{} {}>".format(type(self).__name__, self.name)


class HashlibProvider(HashProvider):
    """
    HMAC over any hash constructor known to :mod:`hashlib`.

    :param digest: algorithm name (``"sha256"``) or hashlib constructor
        (``hashlib.sha256``)
    """

    def __init__(self, digest: Any) -> None:
        if digest in [hashlib.md5, hashlib.shake_128, hashlib.shake_256, "md5", "shake_128", "shake_256"]:
            raise ValueError("selected digest function must generate digest size of at least 19 bytes")
        self.digest = digest
        sample = hmac.new(b"", b"", digest)
        if sample.digest_size < MIN_DIGEST_SIZE:
            raise ValueError("digest size is lower than 19 bytes, which will trigger error on otp generation")
        self.name = sample.name[len("hmac-") :] if sample.name.startswith("hmac-") else sample.name
        self.out_size = sample.digest_size

    def hmac(self, key: bytes, message: bytes) -> bytes:
        return hmac.new(key, message, self.digest).digest()


def find_provider(name: str) -> Optional[HashProvider]:
    """
    Resolves a configured hash name such as ``"sha256"`` or ``"hash/sha256"``.

    :returns: the provider, or None if the name is unknown or unusable
    """
    name = name.strip().lower()
    if name.startswith("hash/"):
        name = name[len("hash/") :]
    try:
        return HashlibProvider(name)
    except ValueError as e:
        logger.warning("hash provider %r is not usable for TOTP: %s", name, e)
        return None


class ProviderReference(object):
    """
    A possibly-empty, rebindable reference to a :class:`HashProvider`.

    Several OTP objects may share one reference; rebinding it (for instance
    on configuration reload) switches all of them at once. Callers take a
    single :meth:`get` snapshot per operation so one computation never sees
    two providers.
    """

    def __init__(self, provider: Union[None, str, HashProvider, Any] = None) -> None:
        self._provider: Optional[HashProvider] = None
        if provider is not None:
            self.set_provider(provider)

    def set_provider(self, provider: Union[None, str, HashProvider, Any]) -> None:
        if provider is None or isinstance(provider, HashProvider):
            resolved = provider
        elif isinstance(provider, str):
            resolved = find_provider(provider)
        else:
            resolved = HashlibProvider(provider)
        logger.debug("hash provider set to %r", resolved)
        self._provider = resolved

    def get(self) -> Optional[HashProvider]:
        return self._provider

    @property
    def name(self) -> Optional[str]:
        provider = self._provider
        return provider.name if provider is not None else None

    def __bool__(self) -> bool:
        return self._provider is not None
