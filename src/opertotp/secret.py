from random import SystemRandom
from typing import Callable, Optional, Tuple

from . import base32

DEFAULT_SECRET_BYTES = 10

_random = SystemRandom()


def system_random_byte() -> int:
    return _random.randint(0, 0xFF)


def generate_secret(
    length: int = DEFAULT_SECRET_BYTES, random_byte: Optional[Callable[[], int]] = None
) -> Tuple[bytes, str]:
    """
    Generates a new shared secret.

    :param length: number of random bytes, 10 (80 bits) by default
    :param random_byte: returns one byte value in [0, 255]. It must be fit
        for security tokens; defaults to the OS random source.
    :returns: (raw secret, base32 secret)
    """
    if length < 1:
        raise ValueError("secret length must be at least 1 byte")
    if random_byte is None:
        random_byte = system_random_byte

    raw = bytes(random_byte() & 0xFF for _ in range(length))
    return raw, base32.encode(raw, length)
