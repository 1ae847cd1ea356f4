"""Stored credential payload."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from aws_session_cache.utils.serialization import json_default
from aws_session_cache.utils.time import ensure_utc, parse_timestamp, utc_now

_STRING_FIELDS = ("AccessKeyId", "SecretAccessKey", "SessionToken")


class CredentialPayloadError(ValueError):
    """Raised when a stored credential payload cannot be decoded."""


@dataclass(frozen=True)
class SessionCredentials:
    """Immutable temporary AWS credentials as cached in the keyring."""

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "expiration", ensure_utc(self.expiration))

    def __repr__(self) -> str:
        return (
            f"SessionCredentials(access_key_id={self.access_key_id[:8]}***, "
            f"expiration={self.expiration.isoformat()})"
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expiration < (now or utc_now())

    def to_payload(self) -> bytes:
        document = {
            "AccessKeyId": self.access_key_id,
            "SecretAccessKey": self.secret_access_key,
            "SessionToken": self.session_token,
            "Expiration": self.expiration,
        }
        return json.dumps(document, default=json_default).encode("utf-8")

    @classmethod
    def from_payload(cls, data: bytes) -> "SessionCredentials":
        try:
            document = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CredentialPayloadError(f"Malformed credential payload: {exc}") from exc
        if not isinstance(document, dict):
            raise CredentialPayloadError("Credential payload must be a JSON object")
        return cls.from_mapping(document)

    @classmethod
    def from_mapping(cls, document: Mapping[str, Any]) -> "SessionCredentials":
        """Build from an STS ``Credentials`` block or a decoded payload."""
        for name in _STRING_FIELDS:
            if not isinstance(document.get(name), str):
                raise CredentialPayloadError(f"Credential payload field {name} is missing")
        if "Expiration" not in document:
            raise CredentialPayloadError("Credential payload field Expiration is missing")
        try:
            expiration = parse_timestamp(document["Expiration"])
        except ValueError as exc:
            raise CredentialPayloadError(f"Invalid Expiration in payload: {exc}") from exc
        return cls(
            access_key_id=document["AccessKeyId"],
            secret_access_key=document["SecretAccessKey"],
            session_token=document["SessionToken"],
            expiration=expiration,
        )
