"""Persistence of the pairing result."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import tempfile
from pathlib import Path

from .config import PersistedAuth

_LOGGER = logging.getLogger(__name__)


class CredentialStore:
    """Load and save the :class:`PersistedAuth` record in a json file.

    A missing or unreadable file means the application is not paired yet.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the record."""
        return self._path

    def _load(self) -> PersistedAuth | None:
        try:
            if not self._path.is_file():
                _LOGGER.debug("No pairing record at %s", self._path)
                return None
            auth = PersistedAuth.from_json(self._path.read_text(encoding="utf-8"))
        except Exception as ex:
            _LOGGER.warning(
                "Ignoring unreadable pairing record %s: %s", self._path, ex
            )
            return None
        if not auth.auth.app_token or not auth.infos.base_url:
            _LOGGER.warning("Ignoring incomplete pairing record %s", self._path)
            return None
        return auth

    def _save(self, auth: PersistedAuth) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=directory, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(auth.to_json())
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise

    def _clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()

    async def load(self) -> PersistedAuth | None:
        """Return the persisted record or None if not paired."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._load)

    async def save(self, auth: PersistedAuth) -> None:
        """Atomically replace the persisted record."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._save, auth)
        _LOGGER.debug("Saved pairing record to %s", self._path)

    async def clear(self) -> None:
        """Forget the persisted record."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._clear)
