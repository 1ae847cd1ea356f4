from __future__ import annotations

import pytest

from aws_session_cache.vault.backend import MemoryKeyring
from aws_session_cache.vault.events import RecordingEventSink
from aws_session_cache.vault.profiles import StaticProfileResolver
from aws_session_cache.vault.sessions import SessionStore


@pytest.fixture(autouse=True)
def _isolate_aws_files(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep botocore away from the developer's real ~/.aws files.
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "missing-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "missing-credentials"))


@pytest.fixture
def keyring() -> MemoryKeyring:
    return MemoryKeyring()


@pytest.fixture
def profiles() -> StaticProfileResolver:
    return StaticProfileResolver(
        {
            "work": {"region": "eu-west-1"},
            "home": {"region": "us-east-1"},
        }
    )


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def store(keyring, profiles, events) -> SessionStore:
    return SessionStore(keyring, profiles, events=events)
