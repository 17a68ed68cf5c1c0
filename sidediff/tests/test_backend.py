# sidediff/tests/test_backend.py
"""Tests for running diff and filter processes."""

import shutil

import pytest

from ..backend import DiffProcess, build_diff_command, normalize_exit_status
from ..errors import DiffProcessError

needs_diff = pytest.mark.skipif(shutil.which("diff") is None, reason="diff not installed")


class TestBuildDiffCommand:
    """Tests for build_diff_command."""

    def test_default_program(self):
        assert build_diff_command("a", "b") == ["diff", "a", "b"]

    def test_options_before_files(self):
        assert build_diff_command("a", "b", ["-u", "-w"]) == ["diff", "-u", "-w", "a", "b"]

    def test_program_with_arguments(self):
        command = build_diff_command("a", "b", program="git diff --no-index")
        assert command == ["git", "diff", "--no-index", "a", "b"]


class TestNormalizeExitStatus:
    """Tests for normalize_exit_status."""

    def test_no_differences(self):
        assert normalize_exit_status(["diff"], 0) is False

    def test_differences(self):
        assert normalize_exit_status(["diff"], 1) is True

    def test_trouble(self):
        with pytest.raises(DiffProcessError) as exc_info:
            normalize_exit_status(["diff", "a", "b"], 2)
        assert exc_info.value.returncode == 2
        assert "exit status 2" in str(exc_info.value)


class TestDiffProcess:
    """Tests for DiffProcess."""

    def test_missing_program(self):
        with pytest.raises(DiffProcessError) as exc_info:
            with DiffProcess(["sidediff-no-such-program"]):
                pass
        assert exc_info.value.original_error

    @needs_diff
    def test_reads_diff_output(self, tmp_path):
        old = tmp_path / "old.txt"
        new = tmp_path / "new.txt"
        old.write_text("a\nb\n")
        new.write_text("a\nc\n")

        with DiffProcess(build_diff_command(str(old), str(new))) as proc:
            output = proc.stdout.read()

        assert proc.differs is True
        assert output.splitlines() == ["2c2", "< b", "---", "> c"]

    @needs_diff
    def test_identical_files(self, tmp_path):
        same = tmp_path / "same.txt"
        same.write_text("x\n")

        with DiffProcess(build_diff_command(str(same), str(same))) as proc:
            assert proc.stdout.read() == ""

        assert proc.differs is False

    @needs_diff
    def test_missing_input_file(self, tmp_path):
        command = build_diff_command(str(tmp_path / "nope1"), str(tmp_path / "nope2"))
        with pytest.raises(DiffProcessError):
            with DiffProcess(command) as proc:
                proc.stdout.read()

    @needs_diff
    @pytest.mark.skipif(shutil.which("tr") is None, reason="tr not installed")
    def test_filter(self, tmp_path):
        old = tmp_path / "old.txt"
        new = tmp_path / "new.txt"
        old.write_text("a\n")
        new.write_text("b\n")

        with DiffProcess(build_diff_command(str(old), str(new)), "tr a-z A-Z") as proc:
            output = proc.stdout.read()

        assert output.splitlines() == ["1C1", "< A", "---", "> B"]
        assert proc.differs is True
