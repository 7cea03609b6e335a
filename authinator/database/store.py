"""
store.py — Durable storage of named TOTP secrets in a single JSON file.

Layout of the file:

    {
      "entries": [
        {"name": "github", "secret": "JBSWY3DPEHPK3PXP"}
      ]
    }

Every call is a complete load -> (mutate) -> save cycle; nothing is cached
between calls. Mutations hold a lock for the whole cycle so two concurrent
requests cannot each load a stale snapshot and overwrite one another. Saves
go through a temporary file and os.replace, so a reader sees either the old
file or the new one, never a half-written one.

The writer lock is per process. A CLI `create` run against the same file as
a running `authinator serve` is not serialized with the server and can
still lose an update.

Secrets are stored as given, in clear text, and are not validated here:
a bad secret only fails once a code is derived from it.
"""

import json
import os
import tempfile
import threading
from dataclasses import asdict, dataclass, field
from typing import Dict, List

from ..core.errors import DuplicateNameError, NotFoundError, StorageError


@dataclass
class Entry:
    name: str
    secret: str


@dataclass
class Store:
    entries: List[Entry] = field(default_factory=list)

    def index(self, name: str) -> int:
        for i, entry in enumerate(self.entries):
            if entry.name == name:
                return i
        return -1

    def to_dict(self) -> dict:
        return {"entries": [asdict(e) for e in self.entries]}

    @classmethod
    def from_dict(cls, data) -> "Store":
        if not isinstance(data, dict):
            raise StorageError("Data file must contain a JSON object")
        raw = data.get("entries")
        if raw is None:
            raw = []
        if not isinstance(raw, list):
            raise StorageError("'entries' must be a list")

        entries = []
        for item in raw:
            if not isinstance(item, dict):
                raise StorageError(f"Malformed entry: {item!r}")
            name = item.get("name")
            secret = item.get("secret")
            if not isinstance(name, str) or not isinstance(secret, str):
                raise StorageError(f"Entry needs string 'name' and 'secret': {item!r}")
            entries.append(Entry(name=name, secret=secret))
        return cls(entries=entries)


# One writer lock per data file, shared by every SecretStore in the process.
_locks: Dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: str) -> threading.RLock:
    key = os.path.realpath(path)
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


class SecretStore:
    """CRUD over the entries kept in `path`."""

    def __init__(self, path: str):
        self.path = os.fspath(path)
        self._lock = _lock_for(self.path)

    def __repr__(self) -> str:
        return f"SecretStore({self.path!r})"

    # --- I/O ---------------------------------------------------------------
    def load(self) -> Store:
        """
        Read the data file.

        A missing file is the first-use case and yields an empty Store.

        Raises:
            StorageError: file exists but cannot be read or parsed
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return Store()
        except (OSError, ValueError) as e:
            raise StorageError(f"Error reading data file {self.path}: {e}") from e
        return Store.from_dict(data)

    def save(self, store: Store) -> None:
        """
        Rewrite the whole data file atomically.

        The new content goes to a temporary file next to the target, is
        flushed to disk and then moved over it with os.replace. If anything
        fails the previous file is left untouched.

        Raises:
            StorageError: directory not writable, disk full, ...
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        payload = json.dumps(store.to_dict(), indent=2) + "\n"
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix="." + os.path.basename(self.path) + ".",
                suffix=".tmp",
                dir=directory,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise StorageError(f"Error writing data file {self.path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

    # --- Operations ----------------------------------------------------------
    def add(self, name: str, secret: str) -> Entry:
        """
        Append a new entry and persist it.

        Raises:
            ValueError: empty name or secret
            DuplicateNameError: an entry with exactly this name exists
        """
        if not name:
            raise ValueError("Entry name must not be empty")
        if not secret:
            raise ValueError("Entry secret must not be empty")

        with self._lock:
            store = self.load()
            if store.index(name) >= 0:
                raise DuplicateNameError(name)
            entry = Entry(name=name, secret=secret)
            store.entries.append(entry)
            self.save(store)
        return entry

    def remove(self, name: str) -> Entry:
        """Delete the entry called `name`; the others keep their order."""
        with self._lock:
            store = self.load()
            i = store.index(name)
            if i < 0:
                raise NotFoundError(name)
            entry = store.entries.pop(i)
            self.save(store)
        return entry

    def list(self) -> List[Entry]:
        return self.load().entries

    def find(self, name: str) -> Entry:
        store = self.load()
        i = store.index(name)
        if i < 0:
            raise NotFoundError(name)
        return store.entries[i]
