from datetime import datetime, timedelta, timezone

import pytest

from aws_session_cache.vault.backend import KeyNotFoundError, KeyringError, KeyringItem
from aws_session_cache.vault.credentials import SessionCredentials
from aws_session_cache.vault.events import RecordingEventSink
from aws_session_cache.vault.profiles import StaticProfileResolver
from aws_session_cache.vault.sessions import SessionStore
from aws_session_cache.vault.sqlite_backend import SqliteKeyring


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "nested" / "keyring.db")


@pytest.fixture
def keyring(db_path):
    sqlite_keyring = SqliteKeyring(db_path)
    yield sqlite_keyring
    sqlite_keyring.close()


def test_set_and_get(keyring):
    keyring.set(KeyringItem(key="k1", data=b"\x00payload", label="L", description="D"))

    item = keyring.get("k1")
    assert item == KeyringItem(key="k1", data=b"\x00payload", label="L", description="D")


def test_list_keys_keeps_insertion_order_across_overwrite(keyring):
    keyring.set(KeyringItem(key="b", data=b"1"))
    keyring.set(KeyringItem(key="a", data=b"2"))
    keyring.set(KeyringItem(key="b", data=b"3"))

    assert keyring.list_keys() == ["b", "a"]
    assert keyring.get("b").data == b"3"


def test_get_missing_key(keyring):
    with pytest.raises(KeyNotFoundError) as exc_info:
        keyring.get("missing")

    assert exc_info.value.key == "missing"
    assert isinstance(exc_info.value, KeyError)


def test_remove(keyring):
    keyring.set(KeyringItem(key="k1", data=b"x"))

    keyring.remove("k1")

    assert keyring.list_keys() == []
    with pytest.raises(KeyNotFoundError):
        keyring.remove("k1")


def test_items_persist_across_connections(db_path):
    first = SqliteKeyring(db_path, wal=False)
    first.set(KeyringItem(key="k1", data=b"x"))
    first.close()

    second = SqliteKeyring(db_path, wal=False)
    try:
        assert second.list_keys() == ["k1"]
    finally:
        second.close()


def test_closed_keyring_raises_keyring_error(db_path):
    sqlite_keyring = SqliteKeyring(db_path)
    sqlite_keyring.close()
    sqlite_keyring.close()

    with pytest.raises(KeyringError):
        sqlite_keyring.list_keys()


def test_session_store_over_sqlite(keyring):
    store = SessionStore(
        keyring,
        StaticProfileResolver({"work": {}}),
        events=RecordingEventSink(),
    )
    creds = SessionCredentials(
        access_key_id="ASIAEXAMPLE",
        secret_access_key="secret",
        session_token="token",
        expiration=datetime.now(timezone.utc) + timedelta(hours=1),
    )
    keyring.set(KeyringItem(key="session,bXlwcm9maWxl,,1000", data=b"{}"))

    store.store("work", "", creds)

    assert store.retrieve("work", "") == creds
    assert len(keyring.list_keys()) == 1
    assert store.delete("work") == 1
    assert keyring.list_keys() == []
