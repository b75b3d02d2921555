"""Resolve the versioned api endpoint of the appliance.

The appliance answers a plaintext request on ``/api_version`` with the base
path and the version of its api. Only the major version is part of the url:

>>> from fbxclient import Discover
>>> info = await Discover.resolve()
>>> info.base_url
'https://mafreebox.freebox.fr/api/v8/'

Discovery of the appliance itself on the network is not performed, it is
expected to be reachable under its well-known name.
"""

from __future__ import annotations

import logging
from typing import Any

from yarl import URL

from .config import ClientConfig, ConnectionInfo
from .exceptions import FreeboxException, ResolutionError
from .httpclient import HttpClient

_LOGGER = logging.getLogger(__name__)


class Discover:
    """Class for resolving the api endpoint."""

    DISCOVERY_PATH = "/api_version"

    @staticmethod
    def build_base_url(host: str, api_base_url: str, api_version: str) -> str:
        """Return the versioned https base url.

        Only the part of api_version before the first dot is used.
        """
        major = api_version.split(".", 1)[0]
        try:
            major_int = int(major)
        except ValueError as ex:
            raise ResolutionError(f"Unsupported api version: {api_version!r}") from ex
        return f"https://{host}{api_base_url}v{major_int}/"

    @staticmethod
    def _parse_discovery_response(host: str, info: Any) -> ConnectionInfo:
        if not isinstance(info, dict):
            raise ResolutionError(
                f"Unable to parse the api version response from {host}: {info!r}"
            )
        api_base_url = info.get("api_base_url")
        api_version = info.get("api_version")
        if not isinstance(api_base_url, str) or not isinstance(api_version, str):
            raise ResolutionError(
                f"Api version response from {host} is missing "
                f"api_base_url or api_version: {info}"
            )
        return ConnectionInfo(
            base_url=Discover.build_base_url(host, api_base_url, api_version)
        )

    @staticmethod
    async def resolve(config: ClientConfig | None = None) -> ConnectionInfo:
        """Resolve the versioned api base url of the appliance.

        :param config: Client configuration, the well-known host is used if
            not provided.
        :return: The connection info holding the base url.
        """
        if config is None:
            config = ClientConfig()
        url = URL.build(scheme="http", host=config.host, path=Discover.DISCOVERY_PATH)

        http_client = HttpClient(config)
        try:
            status_code, info = await http_client.get(url, ssl=False)
        except FreeboxException as ex:
            raise ResolutionError(
                f"Unable to reach the appliance at {url}: {ex}"
            ) from ex
        finally:
            await http_client.close()

        if status_code != 200:
            raise ResolutionError(
                f"{config.host} responded with status code {status_code} to {url}"
            )

        connection_info = Discover._parse_discovery_response(config.host, info)
        _LOGGER.debug("Resolved api base url %s", connection_info.base_url)
        return connection_info
