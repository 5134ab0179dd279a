from hmac import compare_digest
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode


def build_uri(
    secret: str,
    name: str,
    initial_count: Optional[int] = None,
    issuer: Optional[str] = None,
    algorithm: Optional[str] = None,
    digits: Optional[int] = None,
    period: Optional[int] = None,
) -> str:
    """
    Returns the otpauth key URI for a secret; works for either TOTP or HOTP.

    Authenticator apps read it from a QR code. Parameters left at the values
    those apps assume (sha1, 6 digits, 30 seconds) are omitted.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param secret: the base32 secret
    :param name: account label
    :param initial_count: HOTP starting counter; None makes it a TOTP URI
    :param issuer: organisation shown above the entry in the app
    :param algorithm: hash name, e.g. "sha256"
    :param digits: code length
    :param period: TOTP interval in seconds
    :returns: provisioning uri
    """
    args: Dict[str, Union[int, str]] = {"secret": secret}

    label = quote(name)
    if issuer is not None:
        label = quote(issuer) + ":" + label
        args["issuer"] = issuer

    # initial_count may be 0
    if initial_count is not None:
        args["counter"] = initial_count
    if algorithm is not None and algorithm.lower() != "sha1":
        args["algorithm"] = algorithm.upper()
    if digits is not None and digits != 6:
        args["digits"] = digits
    if period is not None and period != 30:
        args["period"] = period

    otp_type = "totp" if initial_count is None else "hotp"
    return "otpauth://{0}/{1}?{2}".format(otp_type, label, urlencode(args).replace("+", "%20"))


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length. No normalisation is applied: the result is always ``s1 == s2``.
    """
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
