"""Keyring-backed cache of short-lived AWS session credentials."""

from aws_session_cache.vault.backend import (
    KeyNotFoundError,
    KeyringBackend,
    KeyringError,
    KeyringItem,
    MemoryKeyring,
)
from aws_session_cache.vault.credentials import CredentialPayloadError, SessionCredentials
from aws_session_cache.vault.events import (
    EventSink,
    LoggingEventSink,
    RecordingEventSink,
    SessionEvent,
)
from aws_session_cache.vault.keys import (
    KeyFormat,
    SessionKey,
    SessionKeyError,
    classify_session_key,
    format_session_key,
    is_session_key,
    parse_session_key,
)
from aws_session_cache.vault.profiles import (
    BotocoreProfileResolver,
    Profile,
    ProfileResolver,
    StaticProfileResolver,
)
from aws_session_cache.vault.sessions import Session, SessionStore
from aws_session_cache.vault.sqlite_backend import SqliteKeyring

__all__ = [
    "BotocoreProfileResolver",
    "CredentialPayloadError",
    "EventSink",
    "KeyFormat",
    "KeyNotFoundError",
    "KeyringBackend",
    "KeyringError",
    "KeyringItem",
    "LoggingEventSink",
    "MemoryKeyring",
    "Profile",
    "ProfileResolver",
    "RecordingEventSink",
    "Session",
    "SessionCredentials",
    "SessionEvent",
    "SessionKey",
    "SessionKeyError",
    "SessionStore",
    "SqliteKeyring",
    "StaticProfileResolver",
    "classify_session_key",
    "format_session_key",
    "is_session_key",
    "parse_session_key",
]
