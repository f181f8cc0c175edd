"""Location sources — platform access checks and pull-based fix providers."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from pathlib import Path


class PermissionState(str, enum.Enum):
    """Platform permission state, shared by geolocation and notifications."""

    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"
    """Not yet decided by the user (the browser reports ``"prompt"`` for geolocation)."""

    @classmethod
    def parse(cls, value: str | PermissionState | None) -> PermissionState:
        """Map a platform string to a state; ``"prompt"``/unknown → DEFAULT."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.DEFAULT


class FixError(RuntimeError):
    """Raised by a fix provider when the underlying stream has failed."""


@dataclass
class DeclaredAccess:
    """Location access as reported by a remote client (e.g. the browser).

    ``permission`` may be None when the client could not query it.
    """

    geolocation_available: bool = True
    permission_state: PermissionState | None = PermissionState.GRANTED

    def available(self) -> bool:
        return self.geolocation_available

    def permission(self) -> PermissionState:
        if self.permission_state is None:
            raise LookupError("Geolocation permission state is unknown")
        return self.permission_state


class FileFixProvider:
    """Reads fixes from a JSON-lines log, one raw fix dict per line.

    ``read_fix()`` returns None once the log is exhausted.  A line holding
    ``{"error": "..."}`` raises :class:`FixError`, mimicking a device error
    callback; so does a line that is not valid JSON.  Blank lines are
    skipped.

    Also acts as its own location access: the file must exist, and
    permission is always granted.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._fh = None
        self.exhausted = False

    def available(self) -> bool:
        return self._path.is_file()

    def permission(self) -> PermissionState:
        return PermissionState.GRANTED

    def read_fix(self) -> dict | None:
        if self._fh is None:
            self._fh = self._path.open(encoding="utf-8")
        for line in self._fh:
            line = line.strip()
            if not line:
                continue
            try:
                raw = json.loads(line)
            except json.JSONDecodeError as exc:
                raise FixError(f"Unreadable fix log line: {exc}") from exc
            if "error" in raw:
                raise FixError(str(raw["error"]))
            return raw
        self.exhausted = True
        return None

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

