"""Application identity and pairing credentials."""

from __future__ import annotations

from dataclasses import dataclass, field

from mashumaro.config import BaseConfig

from .json import DataClassJSONMixin


@dataclass(frozen=True)
class ApplicationIdentity:
    """Identifies this client to the appliance when requesting authorization."""

    #: Unique application identifier, also sent when opening a session
    app_id: str
    #: Application name shown on the appliance
    app_name: str
    #: Application version
    app_version: str
    #: Name of the device running the application
    device_name: str


DEFAULT_APP_IDENTITY = ApplicationIdentity(
    app_id="fr.fbxclient.python",
    app_name="python-fbxclient",
    app_version="0.1.0",
    device_name="fbxclient",
)


@dataclass
class PairingCredential(DataClassJSONMixin):
    """Result of a granted pairing."""

    class Config(BaseConfig):
        """Serialization config."""

        omit_none = True

    #: Long-lived application token, proves the pairing on every login
    app_token: str = field(repr=False)
    #: Salt returned by the appliance, kept but not used by the login
    password_salt: str | None = None
