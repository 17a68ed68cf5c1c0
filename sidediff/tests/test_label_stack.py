# sidediff/tests/test_label_stack.py
"""Tests for combined diff segment grouping."""

import pytest

from ..label_stack import LabelStack, in_parent, in_result, mark_weight, partition
from ..models import Line, Origin


def _line(label, text):
    origin = Origin.COMMON if not label.strip() else Origin.OLD if "-" in label else Origin.MERGE
    return Line(text, origin, label)


def _texts(lines):
    return [line.text for line in lines]


class TestLabelClasses:
    """Tests for label membership helpers."""

    @pytest.mark.parametrize("label,expected", [
        ("  ", 3),
        ("- ", 1),
        (" -", 1),
        ("--", 2),
        ("+ ", 2),
        (" +", 2),
        ("++", 1),
    ])
    def test_mark_weight(self, label, expected):
        assert mark_weight(label) == expected

    def test_in_result(self):
        assert in_result("  ")
        assert in_result("++")
        assert not in_result("- ")

    def test_in_parent(self):
        assert in_parent("- ", 0)
        assert not in_parent("- ", 1)
        assert in_parent("+ ", 1)
        assert not in_parent("+ ", 0)
        assert in_parent("  ", 0) and in_parent("  ", 1)


class TestLabelStack:
    """Tests for segment opening rules."""

    def test_same_label_stays_in_segment(self):
        stack = LabelStack()
        stack.append("- ", _line("- ", "a"))
        stack.append("- ", _line("- ", "b"))
        assert len(stack) == 1
        assert _texts(stack.segments[0].lines["- "]) == ["a", "b"]

    def test_new_label_joins_current_segment(self):
        stack = LabelStack()
        stack.append("  ", _line("  ", "a"))
        stack.append("- ", _line("- ", "b"))
        stack.append("+ ", _line("+ ", "c"))
        assert len(stack) == 1
        assert stack.segments[0].last_label == "+ "

    def test_returning_label_opens_segment(self):
        stack = LabelStack()
        stack.append("- ", _line("- ", "a"))
        stack.append("+ ", _line("+ ", "b"))
        stack.append("- ", _line("- ", "c"))
        assert len(stack) == 2
        assert _texts(stack.segments[1].lines["- "]) == ["c"]


class TestPartition:
    """Tests for splitting segments into three-way groups."""

    def test_merge_hunk(self):
        stack = LabelStack()
        for label, text in [("  ", "a"), ("- ", "b"), ("+ ", "c"), ("++", "d")]:
            stack.append(label, _line(label, text))

        groups = stack.groups()
        assert len(groups) == 1
        group = groups[0]
        assert _texts(group.common) == ["a"]
        assert _texts(group.old) == ["b"]
        assert _texts(group.new) == ["c"]
        assert _texts(group.merge) == ["c", "d"]

    def test_common_after_changes_starts_group(self):
        stack = LabelStack()
        stack.append("- ", _line("- ", "x"))
        stack.append("  ", _line("  ", "y"))

        groups = partition(stack.segments[0])
        assert len(groups) == 2
        assert _texts(groups[0].old) == ["x"]
        assert groups[0].common == []
        assert _texts(groups[1].common) == ["y"]

    def test_groups_have_full_arity(self):
        stack = LabelStack()
        stack.append("  ", _line("  ", "only"))
        group = stack.groups()[0]
        assert group.arity == 4
        assert group.old == [] and group.new == [] and group.merge == []

    def test_removed_from_both_parents(self):
        stack = LabelStack()
        stack.append("--", _line("--", "gone"))
        group = stack.groups()[0]
        assert _texts(group.old) == ["gone"]
        assert _texts(group.new) == ["gone"]
        assert group.merge == []
