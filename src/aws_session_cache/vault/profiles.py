"""Profile lookup against the AWS shared config."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

import botocore.session
from botocore.exceptions import BotoCoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Profile:
    name: str
    settings: Mapping[str, Any] = field(default_factory=dict)

    def get(self, option: str, default: Any = None) -> Any:
        return self.settings.get(option, default)


class ProfileResolver(Protocol):
    def resolve_profile(self, name: str) -> Profile | None: ...


class StaticProfileResolver:
    """Resolver over an in-memory mapping of profile name to settings."""

    def __init__(self, profiles: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._profiles = {name: dict(values) for name, values in (profiles or {}).items()}

    def resolve_profile(self, name: str) -> Profile | None:
        values = self._profiles.get(name)
        if values is None:
            return None
        return Profile(name=name, settings=values)


class BotocoreProfileResolver:
    """Resolve profiles from ``~/.aws/config`` (or ``config_file``) via botocore.

    The file is read once, on first lookup. An unreadable or malformed file
    leaves every profile unresolved rather than failing the caller.
    """

    def __init__(self, config_file: str | None = None) -> None:
        self._config_file = config_file
        self._profiles: dict[str, dict[str, Any]] | None = None
        self._lock = threading.Lock()

    def _load_profiles(self) -> dict[str, dict[str, Any]]:
        if self._profiles is not None:
            return self._profiles
        with self._lock:
            if self._profiles is not None:
                return self._profiles
            session = botocore.session.Session()
            if self._config_file:
                session.set_config_variable("config_file", self._config_file)
            try:
                profiles = session.full_config.get("profiles", {})
            except BotoCoreError as exc:
                logger.warning("Failed to read AWS config: %s", exc)
                profiles = {}
            self._profiles = {name: dict(values) for name, values in profiles.items()}
            logger.debug("Loaded %d profile(s) from AWS config", len(self._profiles))
            return self._profiles

    def resolve_profile(self, name: str) -> Profile | None:
        values = self._load_profiles().get(name)
        if values is None:
            return None
        return Profile(name=name, settings=values)
