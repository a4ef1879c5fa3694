"""Challenge-response login for the FRITZ!Box session endpoint.

The login endpoint hands out a challenge together with the invalid SID.
The client answers with ``<challenge>-<md5>``, where the MD5 digest is
computed over the UTF-16LE encoding of ``<challenge>-<password>``. Only
MD5 challenges are answered; PBKDF2 challenges (prefixed ``2$``) raise
AhaUnsupportedChallengeError.
"""

import hashlib
import logging

from .const import LOGIN_VERSION, PBKDF2_CHALLENGE_PREFIX
from .exceptions import AhaUnsupportedChallengeError
from .models import SID, SessionInfo

_LOGGER = logging.getLogger(__name__)


def is_pbkdf2_challenge(challenge: str) -> bool:
    """Check if a login challenge requests the PBKDF2 scheme.

    Args:
        challenge: Challenge of the login endpoint.

    Returns:
        True if the challenge starts with "2$", False otherwise.

    """
    return challenge.startswith(PBKDF2_CHALLENGE_PREFIX)


def compute_response(challenge: str, password: str) -> str:
    """Compute the login response for an MD5 challenge.

    Args:
        challenge: Challenge of the login endpoint.
        password: Password of the FRITZ!Box user.

    Returns:
        The response in the form ``<challenge>-<md5 hex digest>``.

    Raises:
        AhaUnsupportedChallengeError: If the challenge is a PBKDF2 challenge.

    """
    if is_pbkdf2_challenge(challenge):
        message = "PBKDF2 login challenges are not supported"
        raise AhaUnsupportedChallengeError(message)
    payload = f"{challenge}-{password}".encode("utf-16-le")
    digest = hashlib.md5(payload).hexdigest()  # noqa: S324
    return f"{challenge}-{digest}"


def create_challenge_params() -> dict[str, str]:
    """Create query parameters requesting a fresh challenge."""
    return {"version": LOGIN_VERSION}


def create_login_params(challenge: str, username: str, password: str) -> dict[str, str]:
    """Create query parameters answering a login challenge.

    Args:
        challenge: Challenge of the login endpoint.
        username: FRITZ!Box user; omitted from the request when empty.
        password: Password of the FRITZ!Box user.

    Returns:
        Query parameters for the second login request.

    Raises:
        AhaUnsupportedChallengeError: If the challenge is a PBKDF2 challenge.

    """
    params = {"version": LOGIN_VERSION}
    if username:
        params["username"] = username
    params["response"] = compute_response(challenge, password)
    return params


def create_logout_params(sid: SID) -> dict[str, str]:
    """Create query parameters invalidating a session."""
    return {"version": LOGIN_VERSION, "logout": "1", "sid": str(sid)}


def is_logged_in(session_info: SessionInfo) -> bool:
    """Check if a login answer grants a usable session.

    Args:
        session_info: Parsed answer of the login endpoint.

    Returns:
        True if the SID is valid and at least one right is granted.

    """
    if session_info.block_time:
        _LOGGER.debug("Login blocked for %d seconds", session_info.block_time)
    return session_info.sid.is_valid_session() and session_info.has_rights
