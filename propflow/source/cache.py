"""In-memory parse cache.

Keeps one SyntaxModel per file path so repeated hops over the same files do not
re-parse them. An entry is reused only while the accessor reports the same
version for its path (mtime and size on disk, or the overlay sequence number).

Entries are immutable and the mapping is replaced copy-on-write under a lock,
so several traces may share one cache: a reader always sees either the old or
the new model for a path, never a partially updated one. Nothing is persisted.
"""

import itertools
import logging
import os
import threading
from dataclasses import dataclass
from typing import Hashable

from .files import FileAccessor
from .syntax import SyntaxModel

logger = logging.getLogger(__name__)

_text_seq = itertools.count(1)


@dataclass(frozen=True)
class CacheEntry:
    """A parsed model and the file version it was parsed from."""

    model: SyntaxModel
    version: Hashable


class ParseCache:
    """Path-keyed cache of parsed syntax trees."""

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, path: str, files: FileAccessor) -> SyntaxModel:
        """Return the model for path, re-parsing when the file changed.

        Raises:
            OSError: If the file cannot be read.
        """
        key = os.path.abspath(path)
        version = files.version(key)
        entry = self._entries.get(key)
        if entry is not None and entry.version == version:
            self.hits += 1
            return entry.model

        self.misses += 1
        if entry is not None:
            logger.debug(f"Cache entry for {key} is stale, re-parsing")
        model = SyntaxModel.parse(key, files.read(key))
        self._store(key, CacheEntry(model=model, version=version))
        return model

    def put_text(self, path: str, text: str) -> SyntaxModel:
        """Parse supplied text for path and replace any cached tree.

        The entry is tagged with a version no accessor produces, so the next
        get() for the path goes back to the accessor.
        """
        key = os.path.abspath(path)
        model = SyntaxModel.parse(key, text)
        self._store(key, CacheEntry(model=model, version=("text", next(_text_seq))))
        return model

    def invalidate(self, path: str):
        key = os.path.abspath(path)
        with self._lock:
            if key in self._entries:
                entries = dict(self._entries)
                del entries[key]
                self._entries = entries

    def clear(self):
        with self._lock:
            self._entries = {}

    def _store(self, key: str, entry: CacheEntry):
        with self._lock:
            entries = dict(self._entries)
            entries[key] = entry
            self._entries = entries

    def __contains__(self, path: str) -> bool:
        return os.path.abspath(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
