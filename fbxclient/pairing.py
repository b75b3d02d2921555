"""Pairing of the application with the appliance.

Pairing registers the application and then waits for a human to confirm the
request on the appliance itself. The wait has no limit on the appliance side,
callers bound it with ``timeout`` or ``max_attempts`` or by cancelling the task:

>>> transport = await Transport.build(info.base_url, config)
>>> orchestrator = PairingOrchestrator(transport, timeout=120)
>>> credential = await orchestrator.pair()

A pairing that is not granted has to be started again from the registration.
"""

from __future__ import annotations

import asyncio
import logging
from asyncio import timeout as asyncio_timeout
from enum import Enum

from .credentials import DEFAULT_APP_IDENTITY, ApplicationIdentity, PairingCredential
from .exceptions import (
    AuthorizeCheckError,
    AuthorizeError,
    PairingRejected,
    TimeoutError,
)
from .transport import Transport, check_response

_LOGGER = logging.getLogger(__name__)


class PairingStatus(Enum):
    """Status of a pending authorization request."""

    Pending = "pending"
    Granted = "granted"
    Denied = "denied"
    Timeout = "timeout"
    Unknown = "unknown"

    @staticmethod
    def from_value(value: str | None) -> PairingStatus:
        """Return the status, unknown for unexpected values."""
        try:
            return PairingStatus(value)
        except ValueError:
            _LOGGER.debug("Unexpected authorization status: %s", value)
            return PairingStatus.Unknown


class PairingOrchestrator:
    """Drive the registration and manual confirmation handshake."""

    AUTHORIZE_PATH = "login/authorize"
    DEFAULT_POLL_INTERVAL = 1.0

    def __init__(
        self,
        transport: Transport,
        identity: ApplicationIdentity = DEFAULT_APP_IDENTITY,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self._transport = transport
        self._identity = identity
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._timeout = timeout
        self._status: PairingStatus | None = None
        self._poll_count = 0

    @property
    def status(self) -> PairingStatus | None:
        """Last status reported by the appliance."""
        return self._status

    @property
    def poll_count(self) -> int:
        """Number of status polls sent."""
        return self._poll_count

    async def register(self) -> tuple[str, int]:
        """Register the application and return the app token and track id."""
        identity = self._identity
        resp_dict = await self._transport.post(
            self.AUTHORIZE_PATH,
            json={
                "app_id": identity.app_id,
                "app_name": identity.app_name,
                "app_version": identity.app_version,
                "device_name": identity.device_name,
            },
        )
        result = check_response(
            resp_dict,
            "Error requesting authorization",
            AuthorizeError,
            required=("app_token", "track_id"),
        )
        self._status = PairingStatus.Pending
        return result["app_token"], result["track_id"]

    async def check(self, track_id: int) -> tuple[PairingStatus, dict]:
        """Poll the status of the authorization request once."""
        self._poll_count += 1
        resp_dict = await self._transport.get(f"{self.AUTHORIZE_PATH}/{track_id}")
        result = check_response(
            resp_dict,
            "Error checking authorization status",
            AuthorizeCheckError,
            required=("status",),
        )
        self._status = PairingStatus.from_value(result["status"])
        return self._status, result

    async def _wait_for_confirmation(self, track_id: int) -> dict:
        while True:
            status, result = await self.check(track_id)
            if status is not PairingStatus.Pending:
                return result
            if self._max_attempts is not None and (
                self._poll_count >= self._max_attempts
            ):
                self._status = PairingStatus.Timeout
                raise TimeoutError(
                    f"Authorization status = {PairingStatus.Timeout.value}: "
                    f"still pending after {self._poll_count} status checks"
                )
            await asyncio.sleep(self._poll_interval)

    async def pair(self) -> PairingCredential:
        """Pair with the appliance, returns the credential once granted."""
        self._status = None
        self._poll_count = 0
        app_token, track_id = await self.register()

        _LOGGER.info("Waiting for manual confirmation on the appliance...")
        try:
            async with asyncio_timeout(self._timeout):
                result = await self._wait_for_confirmation(track_id)
        except TimeoutError:
            raise
        except asyncio.TimeoutError as ex:
            self._status = PairingStatus.Timeout
            raise TimeoutError(
                f"Authorization status = {PairingStatus.Timeout.value}: "
                f"not confirmed within {self._timeout} seconds",
            ) from ex

        status = self._status
        if status is not PairingStatus.Granted:
            raise PairingRejected(
                f"Authorization status = {status.value if status else None}",
                status=status,
            )

        _LOGGER.debug("Authorization granted after %s checks", self._poll_count)
        return PairingCredential(
            app_token=app_token, password_salt=result.get("password_salt")
        )
