"""Path display helpers."""

import os
from typing import Optional


def display_path(path: str, root: Optional[str] = None) -> str:
    """Path relative to root when it lies inside root, otherwise unchanged."""
    if root is None:
        return path
    root = os.path.abspath(root)
    absolute = os.path.abspath(path)
    if absolute.startswith(root + os.sep):
        return os.path.relpath(absolute, root)
    return path
