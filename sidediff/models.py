# sidediff/models.py
"""Data model shared by the parser, merger, label stack and flattener."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Origin(Enum):
    """Where a diff line comes from, derived from its format prefix."""
    COMMON = "common"
    OLD = "old"
    NEW = "new"
    CHANGED = "changed"
    MERGE = "merge"


class DiffFormat(Enum):
    """The diff grammars understood by the parser."""
    NORMAL = "normal"
    CONTEXT = "context"
    UNIFIED = "unified"
    COMBINED = "combined"


DEFAULT_MARKS = {
    Origin.COMMON: " ",
    Origin.OLD: "-",
    Origin.NEW: "+",
    Origin.CHANGED: "!",
}


@dataclass
class Line:
    """A single diff line with its prefix stripped."""
    text: str
    origin: Origin
    mark: str = ""

    def __post_init__(self):
        if not self.mark:
            self.mark = DEFAULT_MARKS.get(self.origin, " ")


@dataclass(frozen=True)
class LineRange:
    """A line range of one file.

    An empty range (``count == 0``) starts at the line after the one it is
    anchored to, so ``start + count`` is always the first line after it.
    """
    start: int
    count: int

    @property
    def end(self) -> int:
        return self.start + self.count - 1

    @property
    def next_line(self) -> int:
        return self.start + self.count

    @classmethod
    def inclusive(cls, first: int, last: Optional[int] = None) -> "LineRange":
        """Range written as ``N`` or ``N,M`` (normal and context diffs)."""
        if last is None:
            last = first
        if first == 0 and last == 0:
            return cls(1, 0)
        return cls(first, max(0, last - first + 1))

    @classmethod
    def after(cls, line: int) -> "LineRange":
        """Empty range following ``line`` (normal diff ``a``/``d`` anchors)."""
        return cls(line + 1, 0)

    @classmethod
    def counted(cls, start: int, count: Optional[int] = None) -> "LineRange":
        """Range written as ``start,count`` (unified and combined diffs)."""
        if count is None:
            count = 1
        if count == 0:
            return cls(start + 1, 0)
        return cls(start, count)


@dataclass
class RowGroup:
    """Lines of one aligned unit: context first, then the change."""
    common: List[Line] = field(default_factory=list)
    old: List[Line] = field(default_factory=list)
    new: List[Line] = field(default_factory=list)
    merge: Optional[List[Line]] = None

    @classmethod
    def with_arity(cls, arity: int, *sections: List[Line]) -> "RowGroup":
        """Build a group, padding missing sections with empty lists.

        Args:
            arity: 3 for two-way groups, 4 for three-way groups.
            sections: common, old, new and merge lines, in that order.
        """
        padded = list(sections) + [[] for _ in range(arity - len(sections))]
        group = cls(padded[0], padded[1], padded[2])
        if arity == 4:
            group.merge = padded[3]
        return group

    @property
    def arity(self) -> int:
        return 3 if self.merge is None else 4

    @property
    def sides(self) -> List[List[Line]]:
        """Change sections in column order."""
        if self.merge is None:
            return [self.old, self.new]
        return [self.old, self.new, self.merge]

    @property
    def has_changes(self) -> bool:
        return any(self.sides)


@dataclass
class Passthrough:
    """A line copied to the output unchanged (optionally colored)."""
    text: str
    color: Optional[str] = None


@dataclass
class Hunk:
    """One parsed change unit."""
    format: DiffFormat
    old: LineRange
    new: LineRange
    merge: Optional[LineRange] = None
    header: List[Passthrough] = field(default_factory=list)
    groups: List[RowGroup] = field(default_factory=list)

    @property
    def columns(self) -> int:
        return 2 if self.merge is None else 3
