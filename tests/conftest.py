"""Shared fixtures: small TSX projects written into tmp_path."""

from pathlib import Path
from textwrap import dedent

import pytest

from propflow.source.syntax import SyntaxModel
from propflow.source.workspace import Workspace


@pytest.fixture
def parse():
    """Parse dedented source as the contents of a file."""

    def parse_source(source: str, path: str = "component.tsx") -> SyntaxModel:
        return SyntaxModel.parse(path, dedent(source))

    return parse_source


@pytest.fixture
def write_project(tmp_path):
    """Write {relative path: source} into tmp_path and return the root."""

    def write(files: dict[str, str]) -> Path:
        for rel, source in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(source), encoding="utf-8")
        return tmp_path

    return write


@pytest.fixture
def make_workspace(write_project):
    """Write files and open a Workspace on them."""

    def make(files: dict[str, str], **kwargs) -> Workspace:
        root = write_project(files)
        return Workspace(str(root), **kwargs)

    return make
