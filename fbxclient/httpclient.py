"""Module for HttpClient class."""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any

import aiohttp
from yarl import URL

from .config import ClientConfig
from .exceptions import (
    FreeboxException,
    TimeoutError,
    _ConnectionError,
)
from .json import loads as json_loads

_LOGGER = logging.getLogger(__name__)


class HttpClient:
    """HttpClient Class."""

    def __init__(self, config: ClientConfig) -> None:
        self._config = config
        self._client_session: aiohttp.ClientSession | None = None

    @property
    def client(self) -> aiohttp.ClientSession:
        """Return the underlying http client."""
        if self._config.http_client and issubclass(
            self._config.http_client.__class__, aiohttp.ClientSession
        ):
            return self._config.http_client

        if not self._client_session:
            self._client_session = aiohttp.ClientSession()
        return self._client_session

    async def request(
        self,
        method: str,
        url: URL | str,
        *,
        json: dict | None = None,
        headers: dict[str, str] | None = None,
        ssl: ssl.SSLContext | bool = True,
    ) -> tuple[int, dict | bytes | None]:
        """Send an http request to the appliance.

        The body is returned decoded when it is json, raw otherwise.
        """
        _LOGGER.debug("%s %s", method, url)
        response_data: dict | bytes | None = None
        if self._config.timeout is None:
            _LOGGER.warning("Request timeout is set to None.")
        client_timeout = aiohttp.ClientTimeout(total=self._config.timeout)

        try:
            resp = await self.client.request(
                method,
                url,
                json=json,
                timeout=client_timeout,
                headers=headers,
                ssl=ssl,
                proxy=self._config.proxy,
            )
            async with resp:
                response_data = await resp.read()

        except (aiohttp.ServerDisconnectedError, aiohttp.ClientOSError) as ex:
            raise _ConnectionError(
                f"Appliance connection error: {self._config.host}: {ex}", ex
            ) from ex
        except (aiohttp.ServerTimeoutError, asyncio.TimeoutError) as ex:
            raise TimeoutError(
                "Unable to query the appliance, "
                + f"timed out: {self._config.host}: {ex}",
                ex,
            ) from ex
        except Exception as ex:
            raise FreeboxException(
                f"Unable to query the appliance: {self._config.host}: {ex}", ex
            ) from ex

        if response_data:
            try:
                response_data = json_loads(response_data.decode())
            except Exception:
                _LOGGER.debug(
                    "Appliance %s response to %s could not be parsed as json",
                    self._config.host,
                    url,
                )

        if resp.status != 200:
            _LOGGER.debug(
                "Appliance %s received status code %s with response %s",
                self._config.host,
                resp.status,
                str(response_data),
            )

        return resp.status, response_data

    async def get(self, url: URL | str, **kwargs: Any) -> tuple[int, Any]:
        """Send an http get request to the appliance."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: URL | str, **kwargs: Any) -> tuple[int, Any]:
        """Send an http post request to the appliance."""
        return await self.request("POST", url, **kwargs)

    async def close(self) -> None:
        """Close the ClientSession."""
        client = self._client_session
        self._client_session = None
        if client:
            await client.close()
