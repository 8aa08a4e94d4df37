"""Workspace-wide search for component tags.

Two implementations share the same file enumeration:

- TextTagSearch matches raw text ``<Tag`` followed by whitespace, ``/`` or
  ``>``. It does not know about comments or string literals, so ``<Button``
  inside a comment or a string is reported too.
- SyntaxTagSearch uses the text match as a prefilter, then parses the file and
  reports only real JSX tags.

Results are ordered by file path, then line, so repeated calls on unchanged
files return the same sequence.
"""

import logging
import os
import re
from pathlib import Path
from typing import Iterator, Optional, Protocol

from ..config import PropFlowConfig
from ..models import TagLocation
from .cache import ParseCache
from .files import DiskFileAccessor, FileAccessor
from .syntax import SyntaxModel

logger = logging.getLogger(__name__)


class WorkspaceSearch(Protocol):
    """Finds the places where a component tag is used."""

    def find_tag_usages(self, tag_name: str) -> list[TagLocation]:
        ...


def tag_pattern(tag_name: str) -> re.Pattern:
    return re.compile(rf"<{re.escape(tag_name)}[\s/>]")


def iter_source_files(
    root: str,
    config: PropFlowConfig,
    files: Optional[FileAccessor] = None,
) -> Iterator[str]:
    """Yield absolute paths of source files under root, sorted, capped.

    Overlay buffers under root are included even when not on disk yet.
    """
    root = os.path.abspath(root)
    extensions = {e.lower() for e in config.extensions}
    excluded = set(config.exclude_dirs)

    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in filenames:
            if Path(filename).suffix.lower() in extensions:
                found.append(os.path.join(dirpath, filename))

    if isinstance(files, DiskFileAccessor):
        for path in files.overlay_paths():
            if path.startswith(root + os.sep) and path not in found:
                if Path(path).suffix.lower() in extensions:
                    found.append(path)

    found.sort()
    if len(found) > config.max_search_files:
        logger.debug(f"Search capped at {config.max_search_files} of {len(found)} files")
    yield from found[: config.max_search_files]


class TextTagSearch:
    """Lexical tag search over the workspace."""

    def __init__(self, root: str, config: Optional[PropFlowConfig] = None, files: Optional[FileAccessor] = None):
        self.root = os.path.abspath(root)
        self.config = config or PropFlowConfig()
        self.files = files or DiskFileAccessor()

    def _read(self, path: str) -> Optional[str]:
        try:
            return self.files.read(path)
        except OSError as e:
            logger.debug(f"Skipping unreadable file {path}: {e}")
            return None

    def _text_matches(self, tag_name: str) -> Iterator[tuple[str, str, list[int]]]:
        """Yield (path, text, lines) for files whose text mentions the tag."""
        pattern = tag_pattern(tag_name)
        for path in iter_source_files(self.root, self.config, self.files):
            text = self._read(path)
            if text is None:
                continue
            lines = [text.count("\n", 0, m.start()) + 1 for m in pattern.finditer(text)]
            if lines:
                yield path, text, lines

    def find_tag_usages(self, tag_name: str) -> list[TagLocation]:
        logger.debug(f"Searching for <{tag_name}> under {self.root}")
        results = []
        for path, _text, lines in self._text_matches(tag_name):
            results.extend(TagLocation(file_path=path, line=line) for line in lines)
        logger.debug(f"  {len(results)} match(es) for <{tag_name}>")
        return results


class SyntaxTagSearch(TextTagSearch):
    """Tag search that ignores matches inside comments and strings."""

    def __init__(
        self,
        root: str,
        config: Optional[PropFlowConfig] = None,
        files: Optional[FileAccessor] = None,
        cache: Optional[ParseCache] = None,
    ):
        super().__init__(root, config, files)
        self.cache = cache if cache is not None else ParseCache()

    def find_tag_usages(self, tag_name: str) -> list[TagLocation]:
        # Local import: extract depends on source, not the other way round
        from ..extract import find_tags

        logger.debug(f"Searching for <{tag_name}> tags under {self.root}")
        results = []
        for path, _text, _lines in self._text_matches(tag_name):
            try:
                model: SyntaxModel = self.cache.get(path, self.files)
            except OSError as e:
                logger.debug(f"Skipping unreadable file {path}: {e}")
                continue
            results.extend(
                TagLocation(file_path=path, line=SyntaxModel.line_of(tag)) for tag in find_tags(model, tag_name)
            )
        logger.debug(f"  {len(results)} tag(s) for <{tag_name}>")
        return results
