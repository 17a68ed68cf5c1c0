# sidediff/label_stack.py
"""Segment grouping for combined (three-way) diff hunks.

A combined diff prefixes every line with one mark column per parent. Tools
do not always emit lines of the same origin in strict file order, so lines
are collected into segments: a segment keeps one ordered list per label and
a new segment is opened when a label comes back after another label took
over.

Label semantics (two parents):

- ``"  "``: in both parents and in the merge result
- ``"- "`` / ``" -"`` / ``"--"``: removed, present in the parents marked ``-``
- ``"+ "`` / ``" +"`` / ``"++"``: added, present in the merge result and in
  the parents whose column is blank
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .models import Line, Origin, RowGroup

COMMON_LABEL = "  "


@dataclass
class Segment:
    """Lines of one contiguous label run, keyed by label in first-seen order."""
    lines: Dict[str, List[Line]] = field(default_factory=dict)
    last_label: Optional[str] = None

    def accepts(self, label: str) -> bool:
        return label == self.last_label or label not in self.lines

    def add(self, label: str, line: Line) -> None:
        self.lines.setdefault(label, []).append(line)
        self.last_label = label


class LabelStack:
    """Ordered list of segments built from labelled lines."""

    def __init__(self):
        self.segments: List[Segment] = []

    def append(self, label: str, line: Line) -> None:
        """Add a line under ``label``.

        The line joins the current segment when ``label`` is the segment's
        last-used label or has not appeared in it yet; otherwise a new
        segment is opened.
        """
        if not self.segments or not self.segments[-1].accepts(label):
            self.segments.append(Segment())
        self.segments[-1].add(label, line)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def groups(self) -> List[RowGroup]:
        """Partition every segment into three-way row groups."""
        result: List[RowGroup] = []
        for segment in self.segments:
            result.extend(partition(segment))
        return result


def in_result(label: str) -> bool:
    """Whether a line with this label is part of the merge result."""
    return "-" not in label


def in_parent(label: str, index: int) -> bool:
    """Whether a line with this label is present in parent ``index``."""
    if in_result(label):
        return label[index] == " "
    return label[index] == "-"


def mark_weight(label: str) -> int:
    """Number of the hunk's declared line counts a line consumes.

    A line counts once for every parent that holds it and once more when it
    is part of the merge result, so the weights of a complete hunk add up
    to the header's old + old + merge counts. An all-blank label is one
    unchanged line present everywhere.
    """
    weight = sum(1 for index in range(len(label)) if in_parent(label, index))
    if in_result(label):
        weight += 1
    return weight


def partition(segment: Segment) -> List[RowGroup]:
    """Split one segment into row groups by label class.

    Common lines open the group; a common run that shows up after changed
    labels in the same segment starts a new group. Changed lines are copied
    into every column that holds them: first parent, second parent, merge.
    """
    groups: List[RowGroup] = []
    current = RowGroup.with_arity(4)
    for label, lines in segment.lines.items():
        if label.strip() == "":
            if current.has_changes:
                groups.append(current)
                current = RowGroup.with_arity(4)
            current.common.extend(lines)
            continue
        columns = current.sides
        for line in lines:
            for index in range(len(label)):
                if in_parent(label, index):
                    columns[index].append(_on_side(line, Origin.OLD if index == 0 else Origin.NEW))
            if in_result(label):
                columns[2].append(_on_side(line, Origin.MERGE))
    groups.append(current)
    return [group for group in groups if group.common or group.has_changes]


def _on_side(line: Line, origin: Origin) -> Line:
    return Line(line.text, origin, line.mark)
