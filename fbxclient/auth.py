"""Session login with the application token.

The login is a challenge/response: the appliance hands out a challenge and
the client answers with hmac-sha1(app_token, challenge). The application token
itself is never sent. A granted session returns a short-lived session token
which must be presented on every further call, see
:class:`~fbxclient.transport.AuthenticatedTransport`.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from .credentials import DEFAULT_APP_IDENTITY, ApplicationIdentity, PairingCredential
from .exceptions import LoginChallengeError, LoginError
from .transport import AuthenticatedTransport, Transport, check_response

_LOGGER = logging.getLogger(__name__)


def compute_password(app_token: str, challenge: str) -> str:
    """Return the login password for a challenge, lowercase hex."""
    return hmac.new(
        app_token.encode(), challenge.encode(), hashlib.sha1
    ).hexdigest()


class SessionAuthenticator:
    """Open sessions using the credential obtained by pairing."""

    LOGIN_PATH = "login"
    SESSION_PATH = "login/session"

    def __init__(
        self,
        transport: Transport,
        identity: ApplicationIdentity = DEFAULT_APP_IDENTITY,
    ) -> None:
        self._transport = transport
        self._identity = identity

    async def get_challenge(self) -> str:
        """Return a fresh login challenge."""
        resp_dict = await self._transport.get(self.LOGIN_PATH)
        result = check_response(
            resp_dict,
            "Error requesting login challenge",
            LoginChallengeError,
            required=("challenge",),
        )
        return result["challenge"]

    async def login(self, credential: PairingCredential) -> AuthenticatedTransport:
        """Open a session and return a transport authenticated with it."""
        challenge = await self.get_challenge()
        password = compute_password(credential.app_token, challenge)

        resp_dict = await self._transport.post(
            self.SESSION_PATH,
            json={"app_id": self._identity.app_id, "password": password},
        )
        result = check_response(
            resp_dict,
            "Error opening session",
            LoginError,
            required=("session_token",),
        )

        _LOGGER.debug("Session opened for %s", self._identity.app_id)
        return AuthenticatedTransport(
            self._transport,
            result["session_token"],
            permissions=result.get("permissions"),
        )
