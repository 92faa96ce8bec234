"""TOML-backed settings store and collection load/save."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

import tomli_w

from logtint.collection import HighlighterSetCollection
from logtint.config import get_settings_path

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)


class SettingsError(Exception):
    """Raised when the settings file cannot be written back safely."""


class SettingsStore(MutableMapping[str, Any]):
    """Key/value store of TOML-compatible records, persisted to a single file.

    Nothing touches the disk until ``load`` or ``save`` is called.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else get_settings_path()
        self._data: dict[str, Any] = {}
        self._read_error: str | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_writable(self) -> bool:
        """False after a load that could not read an existing file."""
        return self._read_error is None

    def load(self) -> None:
        """Read the file, starting empty if it is missing or unreadable.

        An existing file that cannot be read or parsed is never overwritten:
        ``save`` raises SettingsError until a later ``load`` succeeds.
        """
        self._read_error = None
        if not self._path.exists():
            self._data = {}
            return
        try:
            self._data = tomllib.loads(self._path.read_text())
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Cannot read settings from %s: %s", self._path, e)
            self._data = {}
            self._read_error = str(e)

    def save(self) -> Path:
        """Write the store to its file. Returns the file path."""
        if self._read_error is not None:
            msg = f"Refusing to overwrite unreadable settings file {self._path}: {self._read_error}"
            raise SettingsError(msg)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(tomli_w.dumps(self._data).encode())
        return self._path

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


def open_settings(path: Path | None = None) -> SettingsStore:
    """Create a store for the given file (default: the config dir) and load it."""
    store = SettingsStore(path)
    store.load()
    return store


def load_collection(store: SettingsStore) -> HighlighterSetCollection:
    """Hydrate a collection from the store."""
    collection = HighlighterSetCollection()
    collection.retrieve_from_storage(store)
    return collection


def save_collection(collection: HighlighterSetCollection, store: SettingsStore) -> Path:
    """Write the collection into the store and persist it. Returns the file path."""
    collection.save_to_storage(store)
    return store.save()
