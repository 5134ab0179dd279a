import logging
import time
from typing import Any, Callable, Optional

from . import utils
from .otp import OTP

logger = logging.getLogger(__name__)


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        s: str,
        digits: int = 6,
        digest: Any = "sha1",
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = 30,
        window: int = 5,
        clock: Optional[Callable[[], float]] = None,
        constant_time: bool = True,
    ) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP
        :param digest: hash used in the HMAC, see :class:`OTP`
        :param name: account name
        :param issuer: issuer
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        :param window: number of intervals accepted on either side of the
            current one by :meth:`verify`
        :param clock: returns the current Unix time, defaults to time.time
        :param constant_time: compare codes with :func:`utils.strings_equal`
            instead of ``==``
        """
        if interval < 1:
            raise ValueError("interval must be a positive number of seconds")
        if window < 0:
            raise ValueError("window must not be negative")
        self.interval = interval
        self.window = window
        self.clock = clock or time.time
        self.constant_time = constant_time
        super().__init__(s=s, digits=digits, digest=digest, name=name, issuer=issuer)

    def timestamp(self, for_time: Optional[int] = None) -> int:
        if for_time is None:
            for_time = self.clock()
        return int(for_time)

    def timecode(self, for_time: Optional[int] = None) -> int:
        """
        Number of intervals elapsed since the epoch at ``for_time``.
        """
        return self.timestamp(for_time) // self.interval

    def at(self, for_time: Optional[int] = None, counter_offset: int = 0) -> Optional[str]:
        """
        Generates the OTP valid at the given time.

        :param for_time: Unix time, defaults to the clock
        :param counter_offset: intervals to shift the counter by
        :returns: OTP, or None without a hash provider
        """
        return self.generate_otp(self.timecode(for_time) + counter_offset)

    def now(self) -> Optional[str]:
        """
        Generate the current time OTP
        """
        return self.at()

    def remaining(self, for_time: Optional[int] = None) -> int:
        """
        Seconds until the current code expires.
        """
        return self.interval - self.timestamp(for_time) % self.interval

    def verify(self, otp: str, for_time: Optional[int] = None, window: Optional[int] = None) -> bool:
        """
        Verifies the OTP passed in against the codes around the current time.

        The accepted counters run from ``(now - interval * window) // interval``
        up to, but not including, ``(now + interval * window) // interval``.

        :param otp: the OTP to check against
        :param for_time: time to check OTP at (defaults to now)
        :param window: overrides the handler's window
        :returns: True if verification succeeded, False otherwise
        """
        if window is None:
            window = self.window
        if window < 0:
            raise ValueError("window must not be negative")
        provider = self.hash.get()
        if provider is None:
            logger.debug("no hash provider configured, rejecting OTP")
            return False

        now = self.timestamp(for_time)
        start = max((now - self.interval * window) // self.interval, 0)
        end = (now + self.interval * window) // self.interval
        otp = str(otp)
        for counter in range(start, end):
            expected = self.generate_with(provider, counter)
            if self.constant_time:
                matched = utils.strings_equal(otp, expected)
            else:
                matched = otp == expected
            if matched:
                logger.debug("OTP accepted at counter offset %d", counter - now // self.interval)
                return True
        logger.debug("OTP rejected, checked counters %d to %d", start, end - 1)
        return False

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format

        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name if name else self.name,
            issuer=issuer_name if issuer_name else self.issuer,
            algorithm=self.hash.name,
            digits=self.digits,
            period=self.interval,
        )
