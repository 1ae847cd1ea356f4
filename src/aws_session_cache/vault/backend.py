"""Flat key/value keyring interface and an in-memory implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class KeyringError(Exception):
    """Raised when the keyring backend fails."""


class KeyNotFoundError(KeyringError, KeyError):
    """Raised when a key is not present in the keyring."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Key not found in keyring: {self.key!r}"


@dataclass
class KeyringItem:
    key: str
    data: bytes
    label: str = ""
    description: str = ""


class KeyringBackend(Protocol):
    def list_keys(self) -> list[str]: ...

    def get(self, key: str) -> KeyringItem: ...

    def set(self, item: KeyringItem) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyring:
    """Process-local keyring; keys are listed in insertion order."""

    def __init__(self, items: list[KeyringItem] | None = None) -> None:
        self._items: dict[str, KeyringItem] = {}
        for item in items or []:
            self.set(item)

    def list_keys(self) -> list[str]:
        return list(self._items)

    def get(self, key: str) -> KeyringItem:
        try:
            return self._items[key]
        except KeyError:
            raise KeyNotFoundError(key) from None

    def set(self, item: KeyringItem) -> None:
        self._items[item.key] = item

    def remove(self, key: str) -> None:
        if self._items.pop(key, None) is None:
            raise KeyNotFoundError(key)
