"""File access with in-memory overlays.

Overlays stand in for unsaved editor buffers: while one is set for a path it is
returned instead of the disk content.
"""

import itertools
import os
import threading
from typing import Hashable, Optional, Protocol

# Shared across accessors so two overlays never get the same version
_overlay_seq = itertools.count(1)


class FileAccessor(Protocol):
    """Reads source text."""

    def read(self, path: str) -> str:
        """Return the current text of path."""
        ...

    def version(self, path: str) -> Hashable:
        """Return a token that changes whenever read(path) would change."""
        ...


class DiskFileAccessor:
    """Reads files from disk, preferring overlays when present."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._overlays: dict[str, tuple[int, str]] = {}
        self._lock = threading.Lock()

    def set_overlay(self, path: str, text: str):
        """Use text instead of the disk content of path."""
        with self._lock:
            self._overlays[os.path.abspath(path)] = (next(_overlay_seq), text)

    def clear_overlay(self, path: str):
        with self._lock:
            self._overlays.pop(os.path.abspath(path), None)

    def overlay(self, path: str) -> Optional[str]:
        entry = self._overlays.get(os.path.abspath(path))
        return entry[1] if entry else None

    def overlay_paths(self) -> list[str]:
        return sorted(self._overlays)

    def read(self, path: str) -> str:
        entry = self._overlays.get(os.path.abspath(path))
        if entry is not None:
            return entry[1]
        with open(path, "rb") as f:
            return f.read().decode(self.encoding, errors="replace")

    def version(self, path: str) -> Hashable:
        entry = self._overlays.get(os.path.abspath(path))
        if entry is not None:
            return ("overlay", entry[0])
        st = os.stat(path)
        return ("disk", st.st_mtime_ns, st.st_size)
