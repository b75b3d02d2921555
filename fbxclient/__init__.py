"""Python client for the local api of Freebox appliances.

Pairing and login are handled by :class:`Freebox`::

>>> from fbxclient import Freebox
>>> async with Freebox() as fbx:
>>>     await fbx.connect()
>>>     players = await fbx.get_players()

The first connection needs the pairing request to be confirmed on the
appliance. Errors raised by the library derive from `FreeboxException`.
"""

from importlib.metadata import version

from fbxclient.auth import SessionAuthenticator, compute_password
from fbxclient.config import ClientConfig, ConnectionInfo, PersistedAuth
from fbxclient.credentials import (
    DEFAULT_APP_IDENTITY,
    ApplicationIdentity,
    PairingCredential,
)
from fbxclient.discover import Discover
from fbxclient.exceptions import (
    ApiError,
    ApiErrorCode,
    AuthenticationError,
    AuthorizeCheckError,
    AuthorizeError,
    FreeboxException,
    LoginChallengeError,
    LoginError,
    PairingRejected,
    ResolutionError,
    TimeoutError,
)
from fbxclient.freebox import Freebox
from fbxclient.models import LanHost, Player, PlayerStatus
from fbxclient.pairing import PairingOrchestrator, PairingStatus
from fbxclient.store import CredentialStore
from fbxclient.transport import AuthenticatedTransport, Transport

__version__ = version("python-fbxclient")


__all__ = [
    "Freebox",
    "Discover",
    "Transport",
    "AuthenticatedTransport",
    "PairingOrchestrator",
    "PairingStatus",
    "SessionAuthenticator",
    "compute_password",
    "CredentialStore",
    "ClientConfig",
    "ConnectionInfo",
    "PersistedAuth",
    "ApplicationIdentity",
    "PairingCredential",
    "DEFAULT_APP_IDENTITY",
    "LanHost",
    "Player",
    "PlayerStatus",
    "FreeboxException",
    "ApiError",
    "ApiErrorCode",
    "AuthenticationError",
    "AuthorizeError",
    "AuthorizeCheckError",
    "LoginChallengeError",
    "LoginError",
    "PairingRejected",
    "ResolutionError",
    "TimeoutError",
]
