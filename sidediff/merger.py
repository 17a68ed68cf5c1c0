# sidediff/merger.py
"""Alignment of context diff old/new blocks.

A context diff hunk lists the old lines (prefixed ``"  "``, ``"- "`` or
``"! "``) and then the new lines (``"  "``, ``"+ "`` or ``"! "``). This
module walks both blocks together and cuts them into row groups of common
context followed by one deletion, insertion or change run.
"""

import logging
from typing import List, Sequence

from .errors import MergeError
from .models import Line, Origin, RowGroup

logger = logging.getLogger(__name__)

OLD_PREFIXES = " -!"
NEW_PREFIXES = " +!"


class _Block:
    """Cursor over one side's prefixed lines."""

    def __init__(self, lines: Sequence[str], side: str, allowed: str):
        self._lines = list(lines)
        self._pos = 0
        self.side = side
        for line in self._lines:
            if not line or line[0] not in allowed:
                raise MergeError(line, side)

    def __bool__(self) -> bool:
        return self._pos < len(self._lines)

    def leads_with(self, prefix: str) -> bool:
        return bool(self) and self._lines[self._pos][0] == prefix

    def pop(self) -> str:
        line = self._lines[self._pos]
        self._pos += 1
        return line[2:]

    def drain(self, prefix: str) -> List[str]:
        taken = []
        while self.leads_with(prefix):
            taken.append(self.pop())
        return taken

    def peek(self) -> str:
        return self._lines[self._pos]


def merge_context_blocks(old: Sequence[str], new: Sequence[str]) -> List[RowGroup]:
    """Align the two blocks of a context diff hunk.

    Args:
        old: Old block lines, prefix included. Empty when diff omitted it.
        new: New block lines, prefix included. Empty when diff omitted it.

    Returns:
        Row groups in file order. Every input line appears exactly once.

    Raises:
        MergeError: If a line has no valid prefix for its block.
    """
    old_block = _Block(old, "old", OLD_PREFIXES)
    new_block = _Block(new, "new", NEW_PREFIXES)
    groups: List[RowGroup] = []

    while old_block or new_block:
        group = RowGroup()

        while old_block.leads_with(" ") and new_block.leads_with(" "):
            group.common.append(Line(old_block.pop(), Origin.COMMON))
            new_block.pop()
        if not new_block:
            group.common.extend(Line(t, Origin.COMMON) for t in old_block.drain(" "))
        if not old_block:
            group.common.extend(Line(t, Origin.COMMON) for t in new_block.drain(" "))

        deleted = old_block.drain("-")
        if deleted:
            group.old.extend(Line(t, Origin.OLD) for t in deleted)
        else:
            inserted = new_block.drain("+")
            if inserted:
                group.new.extend(Line(t, Origin.NEW) for t in inserted)
            else:
                group.old.extend(Line(t, Origin.CHANGED) for t in old_block.drain("!"))
                group.new.extend(Line(t, Origin.CHANGED) for t in new_block.drain("!"))

        if not group.common and not group.has_changes:
            # Only possible when the blocks disagree, e.g. old leads with
            # context while new leads with a change of another kind.
            stuck = old_block if old_block else new_block
            raise MergeError(stuck.peek(), stuck.side)
        groups.append(group)

    logger.debug("Merged context hunk into %d groups", len(groups))
    return groups
