from typing import Any, Callable, Optional

from . import base32
from .config import TOTPConfig as TOTPConfig
from .config import load_config as load_config
from .hashes import HashProvider as HashProvider
from .hashes import ProviderReference as ProviderReference
from .hashes import find_provider as find_provider
from .hotp import HOTP as HOTP
from .login import LoginResult as LoginResult
from .login import check_login as check_login
from .login import split_credentials as split_credentials
from .otp import OTP as OTP
from .secret import generate_secret as generate_secret
from .totp import TOTP as TOTP


def encode_secret(data: bytes, length: Optional[int] = None) -> str:
    return base32.encode(data, length)


def decode_secret(secret: str) -> bytes:
    return base32.decode(secret)


def generate_code(secret: str, counter: int, digest: Any = "sha1") -> Optional[str]:
    """
    Returns the 6 digit code for ``counter``, or None if ``digest`` does not
    resolve to a hash provider.
    """
    return HOTP(secret, digest=digest).at(counter)


def validate_code(
    secret: str,
    code: str,
    window: int = 5,
    digest: Any = "sha1",
    clock: Optional[Callable[[], float]] = None,
) -> bool:
    """
    Checks ``code`` against the time steps within ``window`` of the current time.
    """
    return TOTP(secret, digest=digest, window=window, clock=clock).verify(code)
