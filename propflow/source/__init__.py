"""Source access: parsing, caching, file reads and workspace search.

Workspace lives in ``propflow.source.workspace`` and is not re-exported here,
since it depends on ``propflow.extract``, which depends on this package.
"""

from .cache import ParseCache
from .files import DiskFileAccessor, FileAccessor
from .search import SyntaxTagSearch, TextTagSearch, WorkspaceSearch, iter_source_files
from .syntax import SyntaxModel

__all__ = [
    "ParseCache",
    "DiskFileAccessor",
    "FileAccessor",
    "SyntaxTagSearch",
    "TextTagSearch",
    "WorkspaceSearch",
    "iter_source_files",
    "SyntaxModel",
]
