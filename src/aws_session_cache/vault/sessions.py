"""Session store over a flat keyring.

Every read derives the session list from the keyring's key enumeration, so
there is no in-memory state to invalidate. Stale entries (undecodable keys,
legacy keys, keys whose embedded expiration has passed) are removed as a side
effect of enumeration.

No locking is done here. Concurrent processes sharing a keyring can race;
a key reaped by one process between another's enumeration and read shows up
as a cache miss.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from aws_session_cache.utils.time import utc_now
from aws_session_cache.vault.backend import (
    KeyNotFoundError,
    KeyringBackend,
    KeyringError,
    KeyringItem,
)
from aws_session_cache.vault.credentials import SessionCredentials
from aws_session_cache.vault.events import EventSink, LoggingEventSink, SessionEvent
from aws_session_cache.vault.keys import (
    SessionKeyError,
    format_session_key,
    is_session_key,
    parse_session_key,
)
from aws_session_cache.vault.profiles import Profile, ProfileResolver

LABEL_PREFIX = "aws session for "


@dataclass(frozen=True)
class Session:
    profile: Profile | None
    key: str
    expiration: datetime
    mfa_serial: str

    @property
    def profile_name(self) -> str | None:
        return self.profile.name if self.profile is not None else None

    def expires_in(self, now: datetime | None = None) -> timedelta:
        return self.expiration - (now or utc_now())

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) > self.expiration


class SessionStore:
    """List, retrieve, store and delete cached sessions."""

    def __init__(
        self,
        backend: KeyringBackend,
        profiles: ProfileResolver,
        events: EventSink | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._backend = backend
        self._profiles = profiles
        self._events = events or LoggingEventSink()
        self._clock = clock

    def _reap(self, key: str, reason: str) -> bool:
        self._events.emit(SessionEvent.STALE_SESSION, key=key, reason=reason)
        try:
            self._backend.remove(key)
        except KeyringError as exc:
            self._events.emit(SessionEvent.CLEANUP_FAILED, key=key, error=exc)
            return False
        return True

    def _enumerate(self) -> tuple[list[Session], int]:
        self._events.emit(SessionEvent.LOOKUP, scope="all")
        keys = self._backend.list_keys()
        now = self._clock()

        sessions: list[Session] = []
        reaped = 0
        for key in keys:
            if not is_session_key(key):
                continue

            try:
                decoded = parse_session_key(key)
            except SessionKeyError as exc:
                if self._reap(key, str(exc)):
                    reaped += 1
                continue

            session = Session(
                profile=self._profiles.resolve_profile(decoded.profile_name),
                key=key,
                expiration=decoded.expiration,
                mfa_serial=decoded.mfa_serial,
            )
            self._events.emit(
                SessionEvent.SESSION_EXPIRES, key=key, expires_in=session.expires_in(now)
            )
            if session.is_expired(now):
                if self._reap(key, "expired"):
                    reaped += 1
                continue

            sessions.append(session)

        return sessions, reaped

    def sessions(self) -> list[Session]:
        """Return every live session, purging stale keys on the way.

        Only a failure to list keys propagates. Removal failures during the
        purge are reported to the event sink and otherwise ignored.
        """
        sessions, _ = self._enumerate()
        return sessions

    def prune(self) -> int:
        """Purge stale keys and return how many were removed."""
        _, reaped = self._enumerate()
        return reaped

    def retrieve(self, profile: str, mfa_serial: str = "") -> SessionCredentials | None:
        """Return cached credentials for ``profile`` + ``mfa_serial``, or None.

        The payload's own expiration is checked as well as the key's; an
        entry whose payload has expired is removed and reported as a miss.

        Raises:
            KeyringError: If reading or removing the entry fails.
            CredentialPayloadError: If the stored payload is malformed.
        """
        for session in self.sessions():
            if session.profile_name != profile or session.mfa_serial != mfa_serial:
                continue

            try:
                item = self._backend.get(session.key)
            except KeyNotFoundError:
                break

            creds = SessionCredentials.from_payload(item.data)
            if creds.is_expired(self._clock()):
                self._events.emit(SessionEvent.PAYLOAD_EXPIRED, key=session.key)
                try:
                    self._backend.remove(session.key)
                except KeyNotFoundError:
                    pass
                break

            self._events.emit(SessionEvent.CACHE_HIT, profile=profile, key=session.key)
            return creds

        self._events.emit(SessionEvent.CACHE_MISS, profile=profile, mfa_serial=mfa_serial)
        return None

    def store(self, profile: str, mfa_serial: str, credentials: SessionCredentials) -> str:
        """Write ``credentials`` under a key derived from their expiration.

        An existing entry with the same key is overwritten.
        """
        data = credentials.to_payload()
        key = format_session_key(profile, mfa_serial, credentials.expiration)
        self._backend.set(
            KeyringItem(
                key=key,
                data=data,
                label=LABEL_PREFIX + profile,
                description=LABEL_PREFIX + profile,
            )
        )
        self._events.emit(SessionEvent.STORED, profile=profile, key=key)
        return key

    def delete(self, profile: str) -> int:
        """Remove every session for ``profile`` and return how many went.

        Stops at the first removal error; sessions already removed stay removed.
        """
        self._events.emit(SessionEvent.LOOKUP, scope="profile", profile=profile)
        deleted = 0
        for session in self.sessions():
            if session.profile_name != profile:
                continue
            self._backend.remove(session.key)
            deleted += 1
        self._events.emit(SessionEvent.DELETED, profile=profile, count=deleted)
        return deleted

    def remove(self, key: str) -> None:
        """Remove a single session by its raw keyring key.

        Raises:
            ValueError: If ``key`` is not a session key.
            KeyringError: If the removal fails, including a missing key.
        """
        if not is_session_key(key):
            raise ValueError(f"Not a session key: {key!r}")
        self._backend.remove(key)
        self._events.emit(SessionEvent.REMOVED, key=key)
