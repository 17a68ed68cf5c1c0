# sidediff/tests/test_session.py
"""Tests for DiffSession and lock-step file reading."""

import io

import pytest

from ..errors import AuxiliaryFileError
from ..renderer import RenderOptions
from ..session import DiffSession, LockstepFiles


def _render(diff, options, lockstep=None):
    out = io.StringIO()
    session = DiffSession(options, out=out, lockstep=lockstep)
    differs = session.run(io.StringIO(diff))
    return session, differs, out.getvalue().splitlines()


def _words(lines):
    return [line.split() for line in lines]


class TestDiffSession:
    """Tests for rendering whole diff streams."""

    def test_normal_change(self, narrow_options):
        _, differs, lines = _render("3c3\n< foo\n---\n> bar\n", narrow_options)

        assert differs is True
        assert lines == ["foo      -+ bar     "]

    def test_unified_rows(self, narrow_options):
        session, _, lines = _render(
            "@@ -1,2 +1,3 @@\n common\n-old\n+new1\n+new2\n", narrow_options
        )

        assert _words(lines) == [
            ["common", "common"],
            ["old", "-+", "new1"],
            ["+", "new2"],
        ]
        assert session.counters.old == 3
        assert session.counters.new == 4

    def test_counters_follow_hunk_ranges(self, narrow_options):
        session, _, _ = _render(
            "2,3c2\n< a\n< b\n---\n> c\n7a7,8\n> x\n> y\n", narrow_options
        )
        assert session.counters.old == 8
        assert session.counters.new == 9

    def test_headers_written_with_command(self):
        options = RenderOptions(width=21)
        _, _, lines = _render("--- a\n+++ b\n@@ -1 +1 @@\n-x\n+y\n", options)

        assert lines[:3] == ["--- a", "+++ b", "@@ -1 +1 @@"]
        assert _words(lines[3:]) == [["x", "-+", "y"]]

    def test_headers_skipped_without_command(self, narrow_options):
        _, _, lines = _render("@@ -1 +1 @@\n-x\n+y\n", narrow_options)
        assert len(lines) == 1

    def test_no_hunks(self, narrow_options):
        _, differs, lines = _render("just some text\n", narrow_options)
        assert differs is False
        assert lines == ["just some text"]

    def test_view_mode_hides_marks(self):
        options = RenderOptions(width=21, command=False, view=True)
        _, _, lines = _render("1c1\n< a\n---\n> b\n", options)
        assert _words(lines) == [["a", "b"]]

    def test_line_numbers(self):
        options = RenderOptions(width=41, number=True, digits=3, command=False)
        _, _, lines = _render("12c12\n< a\n---\n> b\n", options)
        assert _words(lines) == [["12", "a", "-+", "12", "b"]]

    def test_combined_hunk_three_columns(self):
        options = RenderOptions(width=60, command=False)
        diff = "@@@ -1,2 -1,2 +1,3 @@@\n  a\n- b\n+ c\n++d\n"

        session, _, lines = _render(diff, options)

        assert _words(lines) == [
            ["a", "a", "a"],
            ["b", "-", "+", "c", "+", "c"],
            ["++", "d"],
        ]
        assert session.counters.as_list(3) == [3, 3, 4]


class TestLockstep:
    """Tests for rendering with the compared files read alongside."""

    def _files(self, tmp_path, old_text, new_text):
        old = tmp_path / "old.txt"
        new = tmp_path / "new.txt"
        old.write_text(old_text)
        new.write_text(new_text)
        return LockstepFiles(str(old), str(new))

    def test_unchanged_text_shown(self, tmp_path, narrow_options):
        with self._files(tmp_path, "a\nb\nc\n", "a\nB\nc\n") as files:
            _, _, lines = _render("2c2\n< b\n---\n> B\n", narrow_options, files)

        assert _words(lines) == [["a", "a"], ["b", "-+", "B"], ["c", "c"]]

    def test_insertion(self, tmp_path, narrow_options):
        with self._files(tmp_path, "a\nb\n", "a\nnew\nb\n") as files:
            _, _, lines = _render("1a2\n> new\n", narrow_options, files)

        assert _words(lines) == [["a", "a"], ["+", "new"], ["b", "b"]]

    def test_identical_files(self, tmp_path, narrow_options):
        with self._files(tmp_path, "x\ny\n", "x\ny\n") as files:
            _, differs, lines = _render("", narrow_options, files)

        assert differs is False
        assert _words(lines) == [["x", "x"], ["y", "y"]]

    def test_missing_file(self, tmp_path):
        existing = tmp_path / "old.txt"
        existing.write_text("a\n")
        missing = str(tmp_path / "missing.txt")

        with pytest.raises(AuxiliaryFileError) as exc_info:
            LockstepFiles(str(existing), missing)
        assert exc_info.value.path == missing
        assert str(exc_info.value).startswith(missing + ": ")
