"""Session key codec.

A session is addressed by a single flat keyring key that embeds the profile
name, the MFA serial and the expiration time::

    session,<b64url(profile)>,<b64url(mfa_serial)>,<unix seconds>

Both strings are URL-safe base64 without padding, so profile names and
serials containing ``,`` or arbitrary bytes never break the field layout.

Two older layouts may still be present in existing keyrings::

    session:<profile>:<mfa_serial>:<expiration>
    <name> session (<n>)

They are recognised as session keys but never decoded or written. Callers
that enumerate the keyring treat them as undecodable and purge them.
"""

from __future__ import annotations

import base64
import binascii
import enum
import re
from dataclasses import dataclass
from datetime import datetime

from aws_session_cache.utils.time import from_unix_seconds, to_unix_seconds

_CURRENT_PATTERN = re.compile(
    r"session,(?P<profile>[^,]+),(?P<mfa_serial>[^,]*),(?P<expiration>[^:]+)"
)
_LEGACY_COLON_PATTERN = re.compile(
    r"session:(?P<profile>[^ ]+):(?P<mfa_serial>[^ ]*):(?P<expiration>[^:]+)"
)
_LEGACY_PARENTHETICAL_PATTERN = re.compile(r"(?P<name>.+?) session \((?P<index>[0-9]+)\)")

_B64_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")
_INTEGER = re.compile(r"[+-]?[0-9]+")

_TEXT_ENCODING = "utf-8"
_TEXT_ERRORS = "surrogateescape"


class SessionKeyError(ValueError):
    """Raised when a key cannot be decoded as a current-format session key."""


class KeyFormat(enum.Enum):
    CURRENT = "current"
    LEGACY_COLON = "legacy-colon"
    LEGACY_PARENTHETICAL = "legacy-parenthetical"

    @property
    def pattern(self) -> re.Pattern[str]:
        return _PATTERNS[self]

    @property
    def decodable(self) -> bool:
        return self is KeyFormat.CURRENT

    def matches(self, key: str) -> bool:
        return self.pattern.fullmatch(key) is not None


_PATTERNS = {
    KeyFormat.CURRENT: _CURRENT_PATTERN,
    KeyFormat.LEGACY_COLON: _LEGACY_COLON_PATTERN,
    KeyFormat.LEGACY_PARENTHETICAL: _LEGACY_PARENTHETICAL_PATTERN,
}


@dataclass(frozen=True)
class SessionKey:
    """Decoded identity of a cached session."""

    profile_name: str
    mfa_serial: str
    expiration: datetime

    def format(self) -> str:
        return format_session_key(self.profile_name, self.mfa_serial, self.expiration)


def classify_session_key(key: str) -> KeyFormat | None:
    """Return the first key layout that matches, or None for foreign keys."""
    for key_format in KeyFormat:
        if key_format.matches(key):
            return key_format
    return None


def is_session_key(key: str) -> bool:
    return classify_session_key(key) is not None


def _encode_field(value: str) -> str:
    raw = value.encode(_TEXT_ENCODING, _TEXT_ERRORS)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _decode_field(field: str, name: str) -> str:
    if _B64_ALPHABET.fullmatch(field) is None or len(field) % 4 == 1:
        raise SessionKeyError(f"Invalid base64 in {name} field")
    padded = field + "=" * (-len(field) % 4)
    try:
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as exc:
        raise SessionKeyError(f"Invalid base64 in {name} field") from exc
    return raw.decode(_TEXT_ENCODING, _TEXT_ERRORS)


def format_session_key(profile_name: str, mfa_serial: str, expiration: datetime) -> str:
    """Build the current-format key for a session.

    Raises:
        ValueError: If ``profile_name`` is empty.
    """
    if not profile_name:
        raise ValueError("Session profile name cannot be empty")
    return "session,{},{},{}".format(
        _encode_field(profile_name),
        _encode_field(mfa_serial),
        to_unix_seconds(expiration),
    )


def parse_session_key(key: str) -> SessionKey:
    """Decode a current-format key.

    Legacy keys are recognised by :func:`is_session_key` but fail here.

    Raises:
        SessionKeyError: On any structural, base64 or integer failure.
    """
    match = _CURRENT_PATTERN.fullmatch(key)
    if match is None:
        raise SessionKeyError("Failed to parse session key")

    profile_name = _decode_field(match.group("profile"), "profile")
    mfa_serial = _decode_field(match.group("mfa_serial"), "mfa_serial")

    raw_expiration = match.group("expiration")
    if _INTEGER.fullmatch(raw_expiration) is None:
        raise SessionKeyError(f"Invalid expiration {raw_expiration!r}")
    try:
        expiration = from_unix_seconds(int(raw_expiration))
    except (OverflowError, OSError, ValueError) as exc:
        raise SessionKeyError(f"Expiration out of range: {raw_expiration}") from exc

    return SessionKey(
        profile_name=profile_name,
        mfa_serial=mfa_serial,
        expiration=expiration,
    )
