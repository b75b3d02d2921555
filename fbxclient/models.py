"""Data returned by the resource calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mashumaro.config import BaseConfig

from .json import DataClassJSONMixin


class _ModelBaseMixin(DataClassJSONMixin):
    class Config(BaseConfig):
        omit_none = True


@dataclass
class LanHost(_ModelBaseMixin):
    """A host seen by the lan browser."""

    id: str
    primary_name: str = ""
    host_type: str | None = None
    active: bool = False
    reachable: bool = False
    vendor_name: str | None = None


@dataclass
class Player(_ModelBaseMixin):
    """A player unit attached to the appliance."""

    DEFAULT_API_MAJOR = 6

    id: int
    device_name: str = ""
    device_model: str | None = None
    api_version: str | None = None
    api_available: bool = False
    reachable: bool = False

    @property
    def api_major(self) -> int:
        """Major version of the player api."""
        if self.api_version:
            try:
                return int(self.api_version.split(".", 1)[0])
            except ValueError:
                pass
        return self.DEFAULT_API_MAJOR


@dataclass
class PlayerStatus(_ModelBaseMixin):
    """Current state of a player."""

    power_state: str | None = None
    foreground_app: dict[str, Any] | None = None
