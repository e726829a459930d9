"""Tests for the directory scanner."""

import logging
import os
import sys

import pytest

from archive_manifest.errors import MultiplePrimaryConflict, RootNotFound
from archive_manifest.nodes import Branch, Document, Missing
from archive_manifest.scanner import BRANCH, EMPTY, LEAF, classify_directory, scan_tree

pytestmark = pytest.mark.unit

META = "{}"


class TestClassifyDirectory:
    """Leaf / branch / empty classification."""

    def test_pdf_makes_leaf(self, build, settings):
        root = build({"d": {"x.pdf": ""}})
        assert classify_directory(str(root / "d"), settings) == LEAF

    def test_meta_alone_makes_leaf(self, build, settings):
        root = build({"d": {"meta.json": META}})
        assert classify_directory(str(root / "d"), settings) == LEAF

    def test_subdirectories_make_branch(self, build, settings):
        root = build({"d": {"child": {}, "notes.txt": ""}})
        assert classify_directory(str(root / "d"), settings) == BRANCH

    def test_nothing_is_empty(self, build, settings):
        root = build({"d": {"notes.txt": ""}})
        assert classify_directory(str(root / "d"), settings) == EMPTY


class TestScanTree:
    """Tree shape produced by scan_tree."""

    def test_root_not_found(self, tmp_path, settings):
        settings.root = str(tmp_path / "nope")
        with pytest.raises(RootNotFound):
            scan_tree(settings)

    def test_root_is_a_file(self, tmp_path, settings):
        (tmp_path / "file").write_text("")
        settings.root = str(tmp_path / "file")
        with pytest.raises(RootNotFound):
            scan_tree(settings)

    def test_empty_root(self, settings):
        result = scan_tree(settings)
        assert result.tree == Branch()
        assert result.leaves == []

    def test_branch_keys_are_sorted_subdirectories(self, build, settings):
        build({"b": {"x": {}}, "a": {}, "C": {}, "ä": {}, "loose.txt": ""})

        result = scan_tree(settings)

        assert list(result.tree.children) == ["C", "a", "b", "ä"]
        assert result.tree.children["b"] == Branch({"x": Branch()})
        assert result.tree.children["a"] == Branch()

    def test_nested_leaves(self, build, settings):
        build({
            "Devarim": {
                "Ki Seitzei": {"5785.pdf": "", "meta.json": META},
                "Eikev": {"meta.json": META},
            },
            "Bereishis": {"Noach": {"Noach.pdf": "", "meta.json": META}},
        })

        result = scan_tree(settings)

        assert result.tree == Branch({
            "Bereishis": Branch({"Noach": Document("Noach.pdf")}),
            "Devarim": Branch({
                "Eikev": Missing(),
                "Ki Seitzei": Document("5785.pdf"),
            }),
        })
        assert [r.rel_path for r in result.leaves] == [
            "Bereishis/Noach",
            "Devarim/Eikev",
            "Devarim/Ki Seitzei",
        ]
        assert result.warning_count == 1

    def test_leaf_subdirectories_are_not_descended(self, build, settings):
        build({"Leaf": {"X.pdf": "", "meta.json": META, "scans": {"Y.pdf": ""}}})

        result = scan_tree(settings)

        assert result.tree == Branch({"Leaf": Document("X.pdf")})

    def test_scan_does_not_rename(self, build, settings):
        root = build({"Leaf": {"X.pdf": "", "Y.mp3": "", "meta.json": META}})

        result = scan_tree(settings)

        assert (root / "Leaf" / "Y.mp3").exists()
        assert len(result.pending_renames) == 1

    def test_lenient_multiple_primaries(self, build, settings):
        build({"Leaf": {"B.pdf": "", "A.pdf": "", "meta.json": META}})

        result = scan_tree(settings)

        assert result.tree.children["Leaf"] == Document("A.pdf")
        assert result.warning_count == 1

    def test_strict_multiple_primaries_lists_every_conflict(self, build, settings):
        root = build({
            "one": {"A.pdf": "", "B.pdf": ""},
            "two": {"C.pdf": "", "D.pdf": "", "E.pdf": ""},
            "ok": {"X.pdf": "", "Y.mp3": ""},
        })
        settings.strict = True

        with pytest.raises(MultiplePrimaryConflict) as exc_info:
            scan_tree(settings)

        assert exc_info.value.conflicts == {
            "one": ["A.pdf", "B.pdf"],
            "two": ["C.pdf", "D.pdf", "E.pdf"],
        }
        assert "one/B.pdf" in str(exc_info.value)
        assert (root / "ok" / "Y.mp3").exists()

    def test_depth_cap_stops_descent(self, build, settings, caplog):
        build({"a": {"b": {"c": {"Leaf": {"X.pdf": ""}}}}})
        settings.max_depth = 2
        caplog.set_level(logging.INFO)

        result = scan_tree(settings)

        assert result.tree == Branch({"a": Branch({"b": Branch()})})
        assert result.skipped == ["a/b"]
        assert result.leaves == []
        assert "max depth 2 reached" in caplog.text

    def test_progress_output(self, build, settings, caplog):
        build({"Sefer": {"Leaf": {"X.pdf": ""}}})
        caplog.set_level(logging.INFO)

        scan_tree(settings)

        assert "📚 Processing: Sefer" in caplog.text
        assert "📖 ⚠️ Leaf (missing meta.json)" in caplog.text

    def test_strict_progress_reports_conflict(self, build, settings, caplog):
        build({"Leaf": {"A.pdf": "", "B.pdf": ""}})
        settings.strict = True
        caplog.set_level(logging.INFO)

        with pytest.raises(MultiplePrimaryConflict):
            scan_tree(settings)

        assert "conflict: 2 primary files (A.pdf, B.pdf)" in caplog.text
        assert "using first" not in caplog.text

    def test_pending_rename_progress_glyph(self, build, settings, caplog):
        build({"Leaf": {"X.pdf": "", "Y.mp3": "", "meta.json": META}})
        caplog.set_level(logging.INFO)

        scan_tree(settings)

        assert "📚 📝 Leaf" in caplog.text
        assert "✅ Leaf" not in caplog.text


@pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that accepts raw bytes names")
class TestNonUtf8Names:
    """Names os.listdir can only return with surrogate escapes."""

    def test_directory_is_left_out(self, build, settings, content_root, caplog):
        build({"Good": {"X.pdf": "", "meta.json": META}})
        bad_dir = os.path.join(os.fsencode(str(content_root)), b"Leaf\xff")
        os.mkdir(bad_dir)
        open(os.path.join(bad_dir, b"doc.pdf"), "wb").close()
        caplog.set_level(logging.INFO)

        result = scan_tree(settings)

        assert result.tree == Branch({"Good": Document("X.pdf")})
        assert result.invalid_names == ["Leaf\\xff"]
        assert "Leaf\\xff (name is not valid UTF-8" in caplog.text

    def test_file_is_skipped_with_warning(self, build, settings, content_root):
        build({"Good": {"X.pdf": "", "meta.json": META}})
        leaf = os.path.join(os.fsencode(str(content_root)), b"Good")
        open(os.path.join(leaf, b"doc\xfe.pdf"), "wb").close()

        result = scan_tree(settings)

        assert result.tree == Branch({"Good": Document("X.pdf")})
        assert result.leaves[0].warnings == ["skipped 1 file name(s) that are not valid UTF-8"]
