"""Session store assembly."""

from __future__ import annotations

from functools import lru_cache

from aws_session_cache.config import Settings, load_settings
from aws_session_cache.logging_utils import get_logger
from aws_session_cache.vault.backend import KeyringBackend, MemoryKeyring
from aws_session_cache.vault.events import LoggingEventSink
from aws_session_cache.vault.profiles import BotocoreProfileResolver
from aws_session_cache.vault.sessions import SessionStore
from aws_session_cache.vault.sqlite_backend import SqliteKeyring


def build_backend(settings: Settings) -> KeyringBackend:
    if settings.keyring.backend == "memory":
        return MemoryKeyring()
    return SqliteKeyring(settings.keyring.sqlite_path, wal=settings.keyring.sqlite_wal)


def build_session_store(settings: Settings | None = None) -> SessionStore:
    """Assemble a SessionStore from settings.

    Uses the configured keyring backend, profiles from the AWS shared config,
    and an event sink that writes to the configured log handlers.
    """
    if settings is None:
        settings = load_settings()
    return SessionStore(
        backend=build_backend(settings),
        profiles=BotocoreProfileResolver(settings.aws.config_file),
        events=LoggingEventSink(get_logger("aws_session_cache.sessions")),
    )


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Get or create the process-wide session store."""
    return build_session_store()
