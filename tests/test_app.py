from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from aws_session_cache import app
from aws_session_cache.config import AWSSettings, KeyringSettings, Settings
from aws_session_cache.vault.backend import MemoryKeyring
from aws_session_cache.vault.credentials import SessionCredentials
from aws_session_cache.vault.sqlite_backend import SqliteKeyring


@pytest.fixture(autouse=True)
def _plain_loggers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app, "get_logger", logging.getLogger)


def test_build_backend_memory() -> None:
    settings = Settings(keyring=KeyringSettings(backend="memory"))

    assert isinstance(app.build_backend(settings), MemoryKeyring)


def test_build_backend_sqlite(tmp_path: Path) -> None:
    settings = Settings(
        keyring=KeyringSettings(backend="sqlite", sqlite_path=str(tmp_path / "k.sqlite"))
    )

    backend = app.build_backend(settings)
    try:
        assert isinstance(backend, SqliteKeyring)
        assert (tmp_path / "k.sqlite").exists()
    finally:
        backend.close()


def test_build_session_store_resolves_profiles_from_aws_config(tmp_path: Path) -> None:
    aws_config = tmp_path / "config"
    aws_config.write_text("[profile work]\nregion = eu-west-1\n")
    settings = Settings(
        keyring=KeyringSettings(backend="memory"),
        aws=AWSSettings(config_file=str(aws_config)),
    )
    store = app.build_session_store(settings)
    creds = SessionCredentials(
        access_key_id="ASIAEXAMPLE",
        secret_access_key="secret",
        session_token="token",
        expiration=datetime.now(timezone.utc) + timedelta(hours=1),
    )

    store.store("work", "", creds)

    assert store.retrieve("work", "") == creds
    assert store.sessions()[0].profile.get("region") == "eu-west-1"


def test_get_session_store_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        app, "load_settings", lambda: Settings(keyring=KeyringSettings(backend="memory"))
    )
    app.get_session_store.cache_clear()
    try:
        assert app.get_session_store() is app.get_session_store()
    finally:
        app.get_session_store.cache_clear()
