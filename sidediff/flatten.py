# sidediff/flatten.py
"""Flattening of aligned row groups into renderable rows.

Each row group becomes its common lines, shown on every column, followed by
the changed lines zipped positionally: the i-th deleted line sits next to
the i-th inserted line and the shorter side is filled with blank cells.
Line numbers come from the session's running counters, which advance only
for the sides that actually consume a line.
"""

from dataclasses import dataclass, replace
from itertools import zip_longest
from typing import Iterable, List, Optional, Sequence

from .models import Line, RowGroup
from .renderer import Cell

Row = List[Cell]


@dataclass
class LineCounters:
    """Next line number of each input (old, new, merge)."""
    old: int = 1
    new: int = 1
    merge: int = 1

    def as_list(self, columns: int) -> List[int]:
        return [self.old, self.new, self.merge][:columns]

    def advance(self, index: int, by: int = 1) -> int:
        """Return the current number of side ``index`` and move past it."""
        name = ("old", "new", "merge")[index]
        value = getattr(self, name)
        setattr(self, name, value + by)
        return value


def flatten(
    groups: Iterable[RowGroup],
    counters: LineCounters,
    view: bool = False,
) -> List[Row]:
    """Turn row groups into rows of cells.

    Args:
        groups: Aligned groups of one hunk, all of the same arity.
        counters: Running line numbers, advanced in place.
        view: Blank every mark (view mode shows plain context coloring).

    Returns:
        Rows, one cell per column.
    """
    rows: List[Row] = []
    for group in groups:
        columns = len(group.sides)
        for line in group.common:
            rows.append([
                Cell(" ", counters.advance(i), line.text) for i in range(columns)
            ])
        for position in zip_longest(*group.sides):
            row = []
            for i, line in enumerate(position):
                if line is None:
                    row.append(Cell())
                    continue
                mark = " " * len(line.mark) if view else line.mark
                row.append(Cell(mark, counters.advance(i), line.text))
            rows.append(row)
    return rows


def flatten_identical(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    counters: LineCounters,
) -> List[Row]:
    """Rows for unchanged text read directly from the two compared files."""
    rows: List[Row] = []
    for old_text, new_text in zip_longest(old_lines, new_lines):
        row = []
        for i, text in enumerate((old_text, new_text)):
            if text is None:
                row.append(Cell())
            else:
                row.append(Cell(" ", counters.advance(i), text))
        rows.append(row)
    return rows


def view_fold(groups: Sequence[RowGroup]) -> List[RowGroup]:
    """Re-associate every change with the context that follows it.

    A left fold with one group of look-ahead: the accumulated group absorbs
    the next one as ``old = old + next.common + next.old`` (same for new and
    merge), so each column reads its own file top to bottom.
    """
    if not groups:
        return []
    folded: Optional[RowGroup] = None
    for group in groups:
        if folded is None:
            folded = _copy(group)
            continue
        folded = _absorb(folded, group)
    return [folded]


def _copy(group: RowGroup) -> RowGroup:
    return replace(
        group,
        common=list(group.common),
        old=list(group.old),
        new=list(group.new),
        merge=None if group.merge is None else list(group.merge),
    )


def _absorb(previous: RowGroup, following: RowGroup) -> RowGroup:
    def joined(mine: List[Line], theirs: List[Line]) -> List[Line]:
        return mine + following.common + theirs

    merged = RowGroup(
        common=previous.common,
        old=joined(previous.old, following.old),
        new=joined(previous.new, following.new),
    )
    if previous.merge is not None:
        merged.merge = joined(previous.merge, following.merge or [])
    return merged
