import logging
from typing import NamedTuple, Optional, Tuple

from .totp import TOTP

logger = logging.getLogger(__name__)

TOKEN_REQUIRED = "This oper login requires a TOTP token."
INVALID_CREDENTIALS = "Invalid oper credentials"


class LoginResult(NamedTuple):
    """
    Outcome of :func:`check_login`. On success ``password`` holds the
    password with the token removed; on failure ``denial`` holds the message
    to send back.
    """

    password: Optional[str]
    denial: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.denial is None


def split_credentials(password: str) -> Tuple[str, Optional[str]]:
    """
    Splits ``"<password> <token>"`` at the last space.

    :returns: (password, token), with token None when there is no space
    """
    pos = password.rfind(" ")
    if pos == -1:
        return password, None
    return password[:pos], password[pos + 1 :]


def check_login(totp: TOTP, password: str) -> LoginResult:
    """
    Checks the TOTP token appended to an oper password.

    :param totp: handler holding the account's secret
    :param password: the submitted password, token last
    """
    password, token = split_credentials(password)
    if token is None:
        logger.debug("oper login without a TOTP token")
        return LoginResult(None, TOKEN_REQUIRED)
    if not totp.verify(token):
        logger.warning("oper login with an invalid TOTP token")
        return LoginResult(None, INVALID_CREDENTIALS)
    return LoginResult(password)
