"""Transports bound to the versioned api of the appliance.

The appliance presents a certificate issued by its own private authority, so
the transport trusts a single pinned root certificate instead of the system
store. Logging in returns an :class:`AuthenticatedTransport` which attaches the
session token to every call made through it.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any

from yarl import URL

from .config import ClientConfig
from .exceptions import (
    AUTHENTICATION_ERRORS,
    ApiError,
    ApiErrorCode,
    AuthenticationError,
    FreeboxException,
)
from .httpclient import HttpClient

_LOGGER = logging.getLogger(__name__)

SESSION_HEADER = "X-Fbx-App-Auth"


def create_ssl_context(ca_file: str) -> ssl.SSLContext:
    """Return a client context trusting only the certificate in ca_file."""
    # PROTOCOL_TLS_CLIENT verifies hostname and chain, with an empty store
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.load_verify_locations(cafile=ca_file)
    return context


def get_response_error(resp_dict: dict[str, Any]) -> ApiErrorCode | None:
    """Return the error code of a failed envelope."""
    error_code_raw = resp_dict.get("error_code")
    if error_code_raw is None:
        return None
    try:
        return ApiErrorCode.from_str(error_code_raw)
    except ValueError:
        _LOGGER.warning("Received unknown error code: %s", error_code_raw)
        return ApiErrorCode.INTERNAL_UNKNOWN_ERROR


def check_response(
    resp_dict: dict[str, Any],
    msg: str,
    error_cls: type[ApiError] | None = None,
    required: tuple[str, ...] = (),
) -> Any:
    """Return the result of a response envelope or raise on failure.

    Without an explicit error_cls, authorization codes raise
    :class:`AuthenticationError` and everything else :class:`ApiError`.
    When required keys are given the result must be an object holding them,
    a successful envelope without them raises error_cls as well.
    """
    if resp_dict.get("success") is True:
        result = resp_dict.get("result")
        if not required:
            return result
        if isinstance(result, dict) and all(key in result for key in required):
            return result
        raise (error_cls or ApiError)(
            f"{msg}: malformed result, expected {', '.join(required)}"
        )

    error_code = get_response_error(resp_dict)
    appliance_msg = resp_dict.get("msg")
    if error_cls is None:
        error_cls = (
            AuthenticationError if error_code in AUTHENTICATION_ERRORS else ApiError
        )
    if appliance_msg:
        msg = f"{msg}: {appliance_msg}"
    raise error_cls(msg, error_code=error_code, msg=appliance_msg)


class Transport:
    """Https transport to the versioned api of the appliance."""

    def __init__(
        self,
        base_url: URL | str,
        *,
        config: ClientConfig,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        self._base_url = URL(str(base_url))
        self._config = config
        self._ssl_context = ssl_context
        self._http_client = HttpClient(config)

    @classmethod
    async def build(cls, base_url: URL | str, config: ClientConfig) -> Transport:
        """Create a transport trusting the certificate in config.ca_file."""
        loop = asyncio.get_running_loop()
        try:
            ssl_context = await loop.run_in_executor(
                None, create_ssl_context, config.ca_file
            )
        except (OSError, ssl.SSLError) as ex:
            raise FreeboxException(
                f"Unable to load the root certificate {config.ca_file}: {ex}"
            ) from ex
        _LOGGER.debug("Created transport for %s", base_url)
        return cls(base_url, config=config, ssl_context=ssl_context)

    @property
    def base_url(self) -> URL:
        """The versioned api base url."""
        return self._base_url

    def url(self, path: str) -> URL:
        """Return the absolute url of an api path."""
        return URL(str(self._base_url).rstrip("/") + "/" + path.lstrip("/"))

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the response envelope."""
        ssl_context: ssl.SSLContext | bool = (
            self._ssl_context if self._ssl_context is not None else True
        )
        status_code, resp_dict = await self._http_client.request(
            method, self.url(path), json=json, headers=headers, ssl=ssl_context
        )
        if not isinstance(resp_dict, dict):
            raise FreeboxException(
                f"{self._config.host} responded with an unexpected "
                + f"status code {status_code} to {method} {path}"
            )
        return resp_dict

    async def get(self, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send a get request and return the response envelope."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: dict, **kwargs: Any) -> dict[str, Any]:
        """Send a post request and return the response envelope."""
        return await self.request("POST", path, json=json, **kwargs)

    async def close(self) -> None:
        """Close the transport."""
        await self._http_client.close()


class AuthenticatedTransport:
    """A transport carrying a session token on every call."""

    def __init__(
        self,
        transport: Transport,
        session_token: str,
        *,
        permissions: dict[str, bool] | None = None,
    ) -> None:
        self._transport = transport
        self._session_token = session_token
        self.permissions = permissions or {}

    @property
    def transport(self) -> Transport:
        """The unauthenticated transport."""
        return self._transport

    @property
    def session_token(self) -> str:
        """The session token attached to every call."""
        return self._session_token

    async def request(
        self, method: str, path: str, *, json: dict | None = None
    ) -> dict[str, Any]:
        """Send a request with the session token and return the envelope."""
        return await self._transport.request(
            method, path, json=json, headers={SESSION_HEADER: self._session_token}
        )

    async def get(self, path: str) -> dict[str, Any]:
        """Send an authenticated get request."""
        return await self.request("GET", path)

    async def post(self, path: str, json: dict) -> dict[str, Any]:
        """Send an authenticated post request."""
        return await self.request("POST", path, json=json)

    async def query(self, method: str, path: str, *, json: dict | None = None) -> Any:
        """Send an authenticated request and return the unwrapped result."""
        resp_dict = await self.request(method, path, json=json)
        return check_response(resp_dict, f"Error querying {method} {path}")
