"""Configuration for connecting to the appliance.

:class:`ClientConfig` holds everything needed to reach and authenticate to
the appliance, :class:`PersistedAuth` is the record written to disk after a
successful pairing:

>>> from fbxclient import ClientConfig, Freebox
>>> config = ClientConfig(auth_file="/var/lib/fbx/auth.json")
>>> async with Freebox(config) as fbx:
>>>     await fbx.connect()
>>>     hosts = await fbx.get_lan_hosts()

The persisted record keeps the layout used since the first releases:

>>> PersistedAuth.from_json(open("auth.json").read()).to_dict()
{'infos': {'baseURL': 'https://mafreebox.freebox.fr/api/v8/'}, \
'auth': {'app_token': '...', 'password_salt': '...'}}

"""

from __future__ import annotations

from dataclasses import dataclass, field

from aiohttp import ClientSession
from mashumaro import field_options
from mashumaro.config import BaseConfig

from .credentials import PairingCredential
from .json import DataClassJSONMixin

DEFAULT_HOST = "mafreebox.freebox.fr"


class _ConfigBaseMixin(DataClassJSONMixin):
    """Base class for serialization mixin."""

    class Config(BaseConfig):
        """Serialization config."""

        omit_none = True
        serialize_by_alias = True


@dataclass
class ConnectionInfo(_ConfigBaseMixin):
    """Resolved location of the versioned api."""

    #: Versioned https base url, e.g. https://mafreebox.freebox.fr/api/v8/
    base_url: str = field(metadata=field_options(alias="baseURL"))


@dataclass
class PersistedAuth(_ConfigBaseMixin):
    """Pairing result stored between runs."""

    infos: ConnectionInfo
    auth: PairingCredential


@dataclass
class ClientConfig:
    """Class to represent parameters that determine how to reach the appliance."""

    DEFAULT_TIMEOUT = 10
    DEFAULT_POLL_INTERVAL = 1.0

    #: Well-known name of the appliance
    host: str = DEFAULT_HOST
    #: Timeout for a single request
    timeout: int | None = DEFAULT_TIMEOUT
    #: Root certificate the appliance certificate must chain to
    ca_file: str = "freebox.pem"
    #: Where the pairing result is persisted
    auth_file: str = "auth.json"
    #: Delay between two pairing status polls
    poll_interval: float = DEFAULT_POLL_INTERVAL
    #: Overall limit in seconds on waiting for the manual confirmation
    pairing_timeout: float | None = None
    #: Maximum number of pairing status polls
    max_poll_attempts: int | None = None
    #: Optional http proxy used for all requests
    proxy: str | None = None
    #: Pair again when login reports the application token unusable
    repair_on_invalid_token: bool = True

    # compare=False will be excluded from object comparison.
    #: Set a custom http_client for the client to use.
    http_client: ClientSession | None = field(default=None, compare=False)
