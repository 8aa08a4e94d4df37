"""Tests for workspace tag search."""

import os

import pytest

from propflow.config import PropFlowConfig
from propflow.source import DiskFileAccessor, SyntaxTagSearch, TextTagSearch, iter_source_files


@pytest.fixture
def project(write_project):
    return write_project({
        "src/App.tsx": """\
            import { Button } from "./Button";
            export function App() {
              return <Button label="hi" />;
            }
        """,
        "src/Toolbar.tsx": """\
            // Renders <Button label="x" /> twice
            export function Toolbar() {
              const hint = "<Button>";
              return (
                <div>
                  <Button label="a"/>
                  <Button
                    label="b"
                  />
                </div>
              );
            }
        """,
        "src/ButtonGroup.tsx": """\
            export function Group() {
              return <ButtonGroup />;
            }
        """,
        "src/notes.md": "<Button label='docs' />\n",
        "node_modules/lib/index.js": "const x = <Button />;\n",
    })


def locations(results, root):
    return [(os.path.relpath(r.file_path, root), r.line) for r in results]


class TestSourceFiles:
    def test_sorted_filtered_and_excluded(self, project):
        files = [os.path.relpath(p, project) for p in iter_source_files(str(project), PropFlowConfig())]
        assert files == [
            os.path.join("src", "App.tsx"),
            os.path.join("src", "ButtonGroup.tsx"),
            os.path.join("src", "Toolbar.tsx"),
        ]

    def test_capped(self, project):
        config = PropFlowConfig(max_search_files=1)
        files = list(iter_source_files(str(project), config))
        assert len(files) == 1

    def test_overlay_only_file_included(self, project):
        files = DiskFileAccessor()
        new_path = os.path.join(str(project), "src", "Draft.tsx")
        files.set_overlay(new_path, "const a = <Button />;\n")
        found = list(iter_source_files(str(project), PropFlowConfig(), files))
        assert new_path in found


class TestTextTagSearch:
    def test_finds_every_textual_match(self, project):
        search = TextTagSearch(str(project))
        results = search.find_tag_usages("Button")
        assert locations(results, project) == [
            (os.path.join("src", "App.tsx"), 3),
            (os.path.join("src", "Toolbar.tsx"), 1),
            (os.path.join("src", "Toolbar.tsx"), 3),
            (os.path.join("src", "Toolbar.tsx"), 6),
            (os.path.join("src", "Toolbar.tsx"), 7),
        ]

    def test_stable_order(self, project):
        search = TextTagSearch(str(project))
        assert search.find_tag_usages("Button") == search.find_tag_usages("Button")

    def test_prefix_is_not_a_match(self, project):
        search = TextTagSearch(str(project))
        results = search.find_tag_usages("ButtonGroup")
        assert locations(results, project) == [(os.path.join("src", "ButtonGroup.tsx"), 2)]

    def test_reads_overlays(self, project):
        files = DiskFileAccessor()
        files.set_overlay(os.path.join(str(project), "src", "App.tsx"), "export const App = () => null;\n")
        search = TextTagSearch(str(project), files=files)
        paths = {r.file_path for r in search.find_tag_usages("Button")}
        assert os.path.join(str(project), "src", "App.tsx") not in paths


class TestSyntaxTagSearch:
    def test_skips_comments_and_strings(self, project):
        search = SyntaxTagSearch(str(project))
        results = search.find_tag_usages("Button")
        assert locations(results, project) == [
            (os.path.join("src", "App.tsx"), 3),
            (os.path.join("src", "Toolbar.tsx"), 6),
            (os.path.join("src", "Toolbar.tsx"), 7),
        ]

    def test_shares_parse_cache(self, project):
        search = SyntaxTagSearch(str(project))
        search.find_tag_usages("Button")
        assert os.path.join(str(project), "src", "App.tsx") in search.cache
