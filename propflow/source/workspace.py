"""Workspace context shared by queries.

A Workspace bundles what a trace needs: the root directory, config, a file
accessor, a tag search and a parse cache. Queries receive it explicitly, so
several independent workspaces (or a per-request cache) can coexist.
"""

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from ..config import PropFlowConfig, find_config
from ..extract import find_prop_usage, list_components
from ..models import ComponentInfo, PropUsage, TagLocation
from .cache import ParseCache
from .files import DiskFileAccessor, FileAccessor
from .search import SyntaxTagSearch, TextTagSearch, WorkspaceSearch
from .syntax import SyntaxModel

logger = logging.getLogger(__name__)


class Workspace:
    """A source tree under one root directory."""

    def __init__(
        self,
        root: str,
        config: Optional[PropFlowConfig] = None,
        files: Optional[FileAccessor] = None,
        search: Optional[WorkspaceSearch] = None,
        cache: Optional[ParseCache] = None,
    ):
        self.root = os.path.abspath(root)
        self.config = config if config is not None else find_config(self.root)
        self.files = files if files is not None else DiskFileAccessor()
        self.cache = cache if cache is not None else ParseCache()
        if search is None:
            if self.config.search == "syntax":
                search = SyntaxTagSearch(self.root, self.config, self.files, self.cache)
            else:
                search = TextTagSearch(self.root, self.config, self.files)
        self.search = search

    def normalize(self, path: str) -> str:
        """Absolute path, relative paths taken from the workspace root."""
        if os.path.isabs(path):
            return os.path.normpath(path)
        return os.path.normpath(os.path.join(self.root, path))

    def relative(self, path: str) -> str:
        """Path relative to the root when inside it, otherwise unchanged."""
        absolute = self.normalize(path)
        if absolute == self.root or absolute.startswith(self.root + os.sep):
            return os.path.relpath(absolute, self.root)
        return absolute

    def model(self, path: str, text: Optional[str] = None) -> SyntaxModel:
        """Parsed model of a file.

        Args:
            path: File path (relative to the root or absolute).
            text: In-memory content that replaces the cached tree for path.

        Raises:
            FileNotFoundError: If path does not exist and no text is given.
        """
        path = self.normalize(path)
        if text is not None:
            return self.cache.put_text(path, text)
        return self.cache.get(path, self.files)

    def list_components(self, path: str, text: Optional[str] = None) -> list[ComponentInfo]:
        return list_components(self.model(path, text))

    def find_prop_usage(
        self,
        path: str,
        component_name: str,
        prop_name: str,
        near_line: Optional[int] = None,
    ) -> Optional[PropUsage]:
        return find_prop_usage(self.model(path), component_name, prop_name, near_line)

    def find_tag_usages(self, tag_name: str) -> list[TagLocation]:
        return self.search.find_tag_usages(tag_name)

    def set_overlay(self, path: str, text: str):
        """Use unsaved text for path until clear_overlay() is called."""
        path = self.normalize(path)
        if not isinstance(self.files, DiskFileAccessor):
            raise TypeError("Overlays need a DiskFileAccessor")
        self.files.set_overlay(path, text)
        self.cache.invalidate(path)

    def clear_overlay(self, path: str):
        path = self.normalize(path)
        if isinstance(self.files, DiskFileAccessor):
            self.files.clear_overlay(path)
        self.cache.invalidate(path)

    @contextmanager
    def overlaid(self, path: str, text: Optional[str]) -> Iterator[bool]:
        """Serve text for path while the block runs, then restore the previous content.

        Yields True when the overlay is in place. Accessors without overlay
        support yield False and leave the files untouched.
        """
        if text is None or not isinstance(self.files, DiskFileAccessor):
            yield False
            return
        path = self.normalize(path)
        previous = self.files.overlay(path)
        self.set_overlay(path, text)
        try:
            yield True
        finally:
            if previous is None:
                self.clear_overlay(path)
            else:
                self.set_overlay(path, previous)

    def __repr__(self) -> str:
        return f"Workspace({self.root!r})"
