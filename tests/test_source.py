"""Tests for the syntax model, parse cache, file overlays and workspace."""

import os
import threading

import pytest

from propflow.source import DiskFileAccessor, ParseCache, SyntaxModel
from propflow.source.syntax import TS_LANGUAGE, TSX_LANGUAGE, language_for
from propflow.source.workspace import Workspace


class TestSyntaxModel:
    def test_grammar_by_extension(self):
        assert language_for("a.tsx") is TSX_LANGUAGE
        assert language_for("a.jsx") is TSX_LANGUAGE
        assert language_for("a.js") is TSX_LANGUAGE
        assert language_for("a.ts") is TS_LANGUAGE
        assert language_for("A.MTS") is TS_LANGUAGE

    def test_walk_in_document_order(self, parse):
        model = parse("const a = <A><B /></A>;\nconst c = <C />;\n")
        kinds = ("jsx_opening_element", "jsx_self_closing_element")
        names = [SyntaxModel.text_of(n.child_by_field_name("name")) for n in model.walk(types=kinds)]
        assert names == ["A", "B", "C"]

    def test_lines_are_one_based(self, parse):
        model = parse("\n\nconst a = 1;\n")
        decl = model.root.named_children[0]
        assert SyntaxModel.line_of(decl) == 3
        assert model.line_at(model.text.index("const")) == 3

    def test_has_errors(self, parse):
        assert not parse("const a = <A />;\n").has_errors
        assert parse("const a = <A ;\n").has_errors


class TestDiskFileAccessor:
    def test_overlay_wins_over_disk(self, tmp_path):
        path = tmp_path / "A.tsx"
        path.write_text("disk")
        files = DiskFileAccessor()
        assert files.read(str(path)) == "disk"

        files.set_overlay(str(path), "buffer")
        assert files.read(str(path)) == "buffer"
        assert files.overlay(str(path)) == "buffer"

        files.clear_overlay(str(path))
        assert files.read(str(path)) == "disk"

    def test_version_changes_with_overlay(self, tmp_path):
        path = tmp_path / "A.tsx"
        path.write_text("disk")
        files = DiskFileAccessor()
        disk_version = files.version(str(path))
        files.set_overlay(str(path), "one")
        first = files.version(str(path))
        files.set_overlay(str(path), "two")
        assert first != disk_version
        assert files.version(str(path)) != first

    def test_undecodable_bytes_are_replaced(self, tmp_path):
        path = tmp_path / "A.tsx"
        path.write_bytes(b"const a = '\xff';\n")
        assert "�" in DiskFileAccessor().read(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DiskFileAccessor().version(str(tmp_path / "missing.tsx"))


class TestParseCache:
    def test_reuses_unchanged_file(self, tmp_path):
        path = tmp_path / "A.tsx"
        path.write_text("const A = () => <div />;\n")
        cache = ParseCache()
        files = DiskFileAccessor()
        first = cache.get(str(path), files)
        second = cache.get(str(path), files)
        assert first is second
        assert cache.hits == 1
        assert cache.misses == 1

    def test_reparses_changed_file(self, tmp_path):
        path = tmp_path / "A.tsx"
        path.write_text("const A = () => <div />;\n")
        cache = ParseCache()
        files = DiskFileAccessor()
        first = cache.get(str(path), files)
        path.write_text("const A = () => <section />;\n")
        second = cache.get(str(path), files)
        assert second is not first
        assert "section" in second.text

    def test_put_text_replaces_entry(self, tmp_path):
        path = tmp_path / "A.tsx"
        path.write_text("const A = () => <div />;\n")
        cache = ParseCache()
        files = DiskFileAccessor()
        cache.get(str(path), files)

        model = cache.put_text(str(path), "const B = () => null;\n")
        assert "const B" in model.text
        # The next read goes back to the accessor
        assert "const A" in cache.get(str(path), files).text

    def test_invalidate_and_clear(self, tmp_path):
        path = tmp_path / "A.tsx"
        path.write_text("const A = 1;\n")
        cache = ParseCache()
        cache.get(str(path), DiskFileAccessor())
        assert str(path) in cache
        cache.invalidate(str(path))
        assert str(path) not in cache
        cache.get(str(path), DiskFileAccessor())
        cache.clear()
        assert len(cache) == 0

    def test_concurrent_readers(self, tmp_path):
        paths = []
        for i in range(8):
            path = tmp_path / f"C{i}.tsx"
            path.write_text(f"export const C{i} = ({{ v }}) => <div>{{v}}</div>;\n")
            paths.append(str(path))
        cache = ParseCache()
        files = DiskFileAccessor()
        errors = []

        def worker():
            try:
                for _ in range(5):
                    for p in paths:
                        assert cache.get(p, files).path == os.path.abspath(p)
            except AssertionError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert len(cache) == len(paths)


class TestWorkspace:
    def test_relative_paths_resolve_from_root(self, make_workspace):
        ws = make_workspace({"src/A.tsx": "export function A({ x }) { return null; }\n"})
        components = ws.list_components("src/A.tsx")
        assert components[0].name == "A"
        assert components[0].file_path == os.path.join(ws.root, "src", "A.tsx")
        assert ws.relative(components[0].file_path) == os.path.join("src", "A.tsx")

    def test_supplied_text_wins(self, make_workspace):
        ws = make_workspace({"A.tsx": "export function A({ x }) { return null; }\n"})
        components = ws.list_components("A.tsx", text="export function B({ y }) { return null; }\n")
        assert [c.name for c in components] == ["B"]

    def test_overlay(self, make_workspace):
        ws = make_workspace({"A.tsx": "export function A({ x }) { return null; }\n"})
        assert ws.list_components("A.tsx")[0].props == ["x"]
        ws.set_overlay("A.tsx", "export function A({ x, y }) { return null; }\n")
        assert ws.list_components("A.tsx")[0].props == ["x", "y"]
        ws.clear_overlay("A.tsx")
        assert ws.list_components("A.tsx")[0].props == ["x"]

    def test_missing_file_raises(self, make_workspace):
        ws = make_workspace({})
        with pytest.raises(FileNotFoundError):
            ws.list_components("missing.tsx")

    def test_search_from_config(self, write_project):
        root = write_project({"propflow.json": '{"search": "syntax"}'})
        ws = Workspace(str(root))
        assert ws.config.search == "syntax"
        assert type(ws.search).__name__ == "SyntaxTagSearch"
        assert ws.search.cache is ws.cache
