"""Interface to the appliance.

:class:`Freebox` ties the pieces together: it loads the persisted pairing,
pairs when there is none, opens a session and then serves the resource calls.

>>> from fbxclient import Freebox
>>> async with Freebox() as fbx:
>>>     await fbx.connect()
>>>     hosts = await fbx.get_lan_hosts()
>>>     print(len([h for h in hosts if h.active]))
12

The first :meth:`Freebox.connect` blocks until the pairing request is
confirmed on the appliance. The result is saved to
:attr:`ClientConfig.auth_file` so later runs log in directly.

An expired session shows up as :class:`AuthenticationError` on a resource
call. Call :meth:`Freebox.login` to open a new one, pairing is not needed
again for that.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from .auth import SessionAuthenticator
from .config import ClientConfig, PersistedAuth
from .credentials import DEFAULT_APP_IDENTITY, ApplicationIdentity
from .discover import Discover
from .exceptions import REPAIR_REQUIRED_ERRORS, FreeboxException, LoginError
from .models import LanHost, Player, PlayerStatus
from .pairing import PairingOrchestrator
from .store import CredentialStore
from .transport import AuthenticatedTransport, Transport

_LOGGER = logging.getLogger(__name__)


class Freebox:
    """Client for the local api of the appliance."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        identity: ApplicationIdentity = DEFAULT_APP_IDENTITY,
    ) -> None:
        self._config = config or ClientConfig()
        self._identity = identity
        self._store = CredentialStore(self._config.auth_file)
        self._persisted: PersistedAuth | None = None
        self._transport: Transport | None = None
        self._session: AuthenticatedTransport | None = None

    async def __aenter__(self) -> Freebox:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def config(self) -> ClientConfig:
        """The client configuration."""
        return self._config

    @property
    def persisted_auth(self) -> PersistedAuth | None:
        """The pairing in use, None before connect."""
        return self._persisted

    @property
    def session(self) -> AuthenticatedTransport | None:
        """The authenticated transport, None before login."""
        return self._session

    async def _build_transport(self, base_url: str) -> Transport:
        if self._transport is not None:
            if str(self._transport.base_url) == base_url:
                return self._transport
            await self._transport.close()
        self._transport = await Transport.build(base_url, self._config)
        return self._transport

    async def connect(self) -> AuthenticatedTransport:
        """Load or create the pairing and open a session."""
        persisted = await self._store.load()
        if persisted is None:
            _LOGGER.info("No pairing found, pairing with the appliance...")
            persisted = await self.pair()
            _LOGGER.info("Pairing ok")
        else:
            self._persisted = persisted

        try:
            return await self.login()
        except LoginError as ex:
            if (
                not self._config.repair_on_invalid_token
                or ex.error_code not in REPAIR_REQUIRED_ERRORS
            ):
                raise
            _LOGGER.warning(
                "Application token refused (%s), pairing again", ex.error_code
            )

        await self._store.clear()
        await self.pair()
        return await self.login()

    async def pair(self) -> PersistedAuth:
        """Pair with the appliance and persist the result."""
        connection_info = await Discover.resolve(self._config)
        transport = await self._build_transport(connection_info.base_url)
        orchestrator = PairingOrchestrator(
            transport,
            self._identity,
            poll_interval=self._config.poll_interval,
            max_attempts=self._config.max_poll_attempts,
            timeout=self._config.pairing_timeout,
        )
        credential = await orchestrator.pair()
        persisted = PersistedAuth(infos=connection_info, auth=credential)
        await self._store.save(persisted)
        self._persisted = persisted
        self._session = None
        return persisted

    async def login(self) -> AuthenticatedTransport:
        """Open a new session with the persisted pairing."""
        if self._persisted is None:
            raise FreeboxException("Not paired, call connect() first")
        transport = await self._build_transport(self._persisted.infos.base_url)
        authenticator = SessionAuthenticator(transport, self._identity)
        self._session = await authenticator.login(self._persisted.auth)
        _LOGGER.info("Logged in")
        return self._session

    async def _query(self, method: str, path: str, json: dict | None = None) -> Any:
        if self._session is None:
            raise FreeboxException("Not logged in, call connect() first")
        return await self._session.query(method, path, json=json)

    async def get_lan_hosts(self, interface: str = "pub") -> list[LanHost]:
        """Return the hosts seen on a lan interface."""
        result = await self._query("GET", f"lan/browser/{interface}/")
        return [LanHost.from_dict(host) for host in result or []]

    async def get_players(self) -> list[Player]:
        """Return the player units attached to the appliance."""
        result = await self._query("GET", "player")
        return [Player.from_dict(player) for player in result or []]

    async def _player_api_path(self, player_id: int) -> str:
        api_major = Player.DEFAULT_API_MAJOR
        for player in await self.get_players():
            if player.id == player_id:
                api_major = player.api_major
                break
        return f"player/{player_id}/api/v{api_major}"

    async def get_player_status(self, player_id: int) -> PlayerStatus:
        """Return the current state of a player."""
        api_path = await self._player_api_path(player_id)
        result = await self._query("GET", f"{api_path}/status/")
        return PlayerStatus.from_dict(result or {})

    async def launch(self, player_id: int, url: str) -> None:
        """Open an url, such as a channel or an app, on a player."""
        api_path = await self._player_api_path(player_id)
        await self._query("POST", f"{api_path}/control/open", json={"url": url})

    async def close(self) -> None:
        """Close the transport."""
        self._session = None
        transport = self._transport
        self._transport = None
        if transport:
            await transport.close()
