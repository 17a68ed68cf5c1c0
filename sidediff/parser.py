# sidediff/parser.py
"""Stream parser for diff output.

Recognizes four diff grammars and turns each hunk into aligned row groups:

- normal (``3c3``, ``5a6,7``, ``2,4d1``)
- context (``*** 1,5 ****`` / ``--- 1,6 ----``)
- unified (``@@ -1,5 +1,6 @@``)
- combined three-way (``diff --cc`` ... ``@@@ -1,3 -1,3 +1,4 @@@``)

Everything that is not a hunk, and any hunk that turns out not to match
its grammar, is passed through unchanged; the parser then resumes scanning
for the next header. Malformed input is never fatal here.

Usage:
    for event in DiffParser(lines).events():
        if isinstance(event, Hunk):
            ...
"""

import logging
import re
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Union

from .label_stack import LabelStack, mark_weight
from .merger import merge_context_blocks
from .models import DiffFormat, Hunk, Line, LineRange, Origin, Passthrough, RowGroup

logger = logging.getLogger(__name__)

Event = Union[Passthrough, Hunk]

# Regex patterns for hunk headers
NORMAL_HEADER = re.compile(r"^(\d+)(?:,(\d+))?([acd])(\d+)(?:,(\d+))?$")
CONTEXT_OLD_HEADER = re.compile(r"^\*\*\* (\d+)(?:,(\d+))? \*\*\*\*$")
CONTEXT_NEW_HEADER = re.compile(r"^--- (\d+)(?:,(\d+))? ----$")
UNIFIED_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(?: .*)?$")
COMBINED_INTRO = re.compile(r"^diff --(?:cc|combined)(?: |$)")
COMBINED_HEADER = re.compile(
    r"^@@@ -(\d+)(?:,(\d+))? -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@@(?: .*)?$"
)

CONTEXT_OLD_LINE = re.compile(r"^[ \-!](?: |$)")
CONTEXT_NEW_LINE = re.compile(r"^[ +!](?: |$)")
COMBINED_LABEL = re.compile(r"^(?:[ \-]{2}|[ +]{2})")


class ParserState(Enum):
    SCANNING = "scanning"
    IN_NORMAL = "normal"
    IN_CONTEXT = "context"
    IN_UNIFIED = "unified"
    IN_COMBINED = "combined"


class LineReader:
    """Line source with push-back, stripping line terminators."""

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self._pushed: List[str] = []

    def readline(self) -> Optional[str]:
        if self._pushed:
            return self._pushed.pop()
        line = next(self._lines, None)
        if line is None:
            return None
        return chomp(line)

    def unread(self, line: str) -> None:
        self._pushed.append(line)


def chomp(line: str) -> str:
    """Strip one trailing newline (and a carriage return before it)."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _int(value: Optional[str]) -> Optional[int]:
    return None if value is None else int(value)


def file_header_color(line: str, combined: bool = False) -> Optional[str]:
    """Color field for a non-hunk line."""
    if line.startswith("--- ") or line.startswith("*** "):
        return "OFILE"
    if line.startswith("+++ "):
        return "MFILE" if combined else "NFILE"
    return None


class DiffParser:
    """State machine over a diff stream.

    Args:
        lines: Diff output lines, with or without trailing newlines.
    """

    def __init__(self, lines: Iterable[str]):
        self._reader = LineReader(lines)
        self.state = ParserState.SCANNING
        self.hunk_count = 0

    def events(self) -> Iterator[Event]:
        """Yield pass-through lines and parsed hunks in stream order."""
        while True:
            self.state = ParserState.SCANNING
            line = self._reader.readline()
            if line is None:
                return

            match = NORMAL_HEADER.match(line)
            if match:
                self.state = ParserState.IN_NORMAL
                yield from self._read_normal(match, line)
                continue

            match = CONTEXT_OLD_HEADER.match(line)
            if match:
                self.state = ParserState.IN_CONTEXT
                yield from self._read_context(match, line)
                continue

            match = UNIFIED_HEADER.match(line)
            if match:
                self.state = ParserState.IN_UNIFIED
                yield from self._read_unified(match, line)
                continue

            match = COMBINED_HEADER.match(line)
            if match:
                self.state = ParserState.IN_COMBINED
                yield from self._read_combined(match, line)
                continue

            if COMBINED_INTRO.match(line):
                self.state = ParserState.IN_COMBINED
                yield from self._read_combined_intro(line)
                continue

            yield Passthrough(line, file_header_color(line))

    # ==================== Shared helpers ====================

    def _resync(self, consumed: List[str], reason: str) -> List[Event]:
        """Give up on a hunk: its lines so far are passed through as-is."""
        logger.debug("Resynchronizing after %d lines: %s", len(consumed), reason)
        return [Passthrough(line) for line in consumed]

    def _skip_no_newline(self, consumed: List[str]) -> None:
        line = self._reader.readline()
        if line is None:
            return
        if line.startswith("\\"):
            consumed.append(line)
        else:
            self._reader.unread(line)

    def _read_prefixed(self, prefix: str, count: int, consumed: List[str]) -> Optional[List[str]]:
        """Read exactly ``count`` lines starting with ``prefix`` + space."""
        texts: List[str] = []
        while len(texts) < count:
            line = self._reader.readline()
            if line is None:
                return None
            if line.startswith("\\"):
                consumed.append(line)
                continue
            if line != prefix and not line.startswith(prefix + " "):
                self._reader.unread(line)
                return None
            consumed.append(line)
            texts.append(line[2:])
        self._skip_no_newline(consumed)
        return texts

    def _hunk(self, hunk: Hunk) -> List[Event]:
        self.hunk_count += 1
        return [hunk]

    # ==================== Normal diff ====================

    def _read_normal(self, match: "re.Match", header: str) -> List[Event]:
        old_first, old_last, command, new_first, new_last = match.groups()
        old = (
            LineRange.after(int(old_first)) if command == "a"
            else LineRange.inclusive(int(old_first), _int(old_last))
        )
        new = (
            LineRange.after(int(new_first)) if command == "d"
            else LineRange.inclusive(int(new_first), _int(new_last))
        )

        consumed = [header]
        old_texts = self._read_prefixed("<", old.count, consumed)
        if old_texts is None:
            return self._resync(consumed, "short old block in normal diff")

        if command == "c":
            separator = self._reader.readline()
            if separator != "---":
                if separator is not None:
                    self._reader.unread(separator)
                return self._resync(consumed, "missing --- separator")
            consumed.append(separator)

        new_texts = self._read_prefixed(">", new.count, consumed)
        if new_texts is None:
            return self._resync(consumed, "short new block in normal diff")

        group = RowGroup(
            common=[],
            old=[Line(text, Origin.OLD) for text in old_texts],
            new=[Line(text, Origin.NEW) for text in new_texts],
        )
        return self._hunk(Hunk(
            format=DiffFormat.NORMAL,
            old=old,
            new=new,
            header=[Passthrough(header, "OCOMMAND")],
            groups=[group],
        ))

    # ==================== Context diff ====================

    def _read_block(self, pattern: "re.Pattern", limit: int, consumed: List[str]) -> List[str]:
        block: List[str] = []
        while len(block) < limit:
            line = self._reader.readline()
            if line is None:
                break
            if line.startswith("\\"):
                consumed.append(line)
                continue
            if not pattern.match(line):
                self._reader.unread(line)
                break
            consumed.append(line)
            block.append(line.ljust(2))
        return block

    def _read_context(self, match: "re.Match", header: str) -> List[Event]:
        old_first, old_last = int(match.group(1)), _int(match.group(2))
        consumed = [header]
        old_block = self._read_block(
            CONTEXT_OLD_LINE, LineRange.inclusive(old_first, old_last).count, consumed
        )

        new_header = self._reader.readline()
        new_match = CONTEXT_NEW_HEADER.match(new_header) if new_header is not None else None
        if new_match is None:
            if new_header is not None:
                self._reader.unread(new_header)
            return self._resync(consumed, "context new header missing")
        consumed.append(new_header)

        new_first, new_last = int(new_match.group(1)), _int(new_match.group(2))
        new_block = self._read_block(
            CONTEXT_NEW_LINE, LineRange.inclusive(new_first, new_last).count, consumed
        )

        groups = merge_context_blocks(old_block, new_block)
        old_used = sum(len(g.common) + len(g.old) for g in groups)
        new_used = sum(len(g.common) + len(g.new) for g in groups)

        # Empty ranges are written as the line they follow ("*** 5 ****").
        old = LineRange(old_first, old_used) if old_used else LineRange.after(old_first)
        new = LineRange(new_first, new_used) if new_used else LineRange.after(new_first)

        return self._hunk(Hunk(
            format=DiffFormat.CONTEXT,
            old=old,
            new=new,
            header=[Passthrough(header, "OCOMMAND"), Passthrough(new_header, "NCOMMAND")],
            groups=groups,
        ))

    # ==================== Unified diff ====================

    def _read_unified(self, match: "re.Match", header: str) -> List[Event]:
        old = LineRange.counted(int(match.group(1)), _int(match.group(2)))
        new = LineRange.counted(int(match.group(3)), _int(match.group(4)))
        old_left, new_left = old.count, new.count

        consumed = [header]
        groups = [RowGroup()]
        while old_left > 0 or new_left > 0:
            line = self._reader.readline()
            if line is None:
                return self._resync(consumed, "unified hunk cut short")
            if line.startswith("\\"):
                consumed.append(line)
                continue

            tag, text = line[:1], line[1:]
            current = groups[-1]
            if tag in (" ", "") and old_left and new_left:
                if current.has_changes:
                    current = RowGroup()
                    groups.append(current)
                current.common.append(Line(text, Origin.COMMON))
                old_left -= 1
                new_left -= 1
            elif tag == "-" and old_left:
                if current.new:
                    current = RowGroup()
                    groups.append(current)
                current.old.append(Line(text, Origin.OLD))
                old_left -= 1
            elif tag == "+" and new_left:
                current.new.append(Line(text, Origin.NEW))
                new_left -= 1
            else:
                self._reader.unread(line)
                return self._resync(consumed, f"unexpected line in unified hunk: {line!r}")
            consumed.append(line)

        self._skip_no_newline(consumed)
        return self._hunk(Hunk(
            format=DiffFormat.UNIFIED,
            old=old,
            new=new,
            header=[Passthrough(header, "OCOMMAND")],
            groups=[g for g in groups if g.common or g.has_changes],
        ))

    # ==================== Combined diff ====================

    def _read_combined_intro(self, intro: str) -> Iterator[Event]:
        """Pass the combined diff file header through, up to ``+++``."""
        yield Passthrough(intro, "MFILE")
        while True:
            line = self._reader.readline()
            if line is None:
                return
            if COMBINED_HEADER.match(line) or line.startswith("diff "):
                self._reader.unread(line)
                return
            yield Passthrough(line, file_header_color(line, combined=True))
            if line.startswith("+++ "):
                return

    def _read_combined(self, match: "re.Match", header: str) -> List[Event]:
        numbers = [_int(value) for value in match.groups()]
        first, second, merge = (
            LineRange.counted(numbers[i], numbers[i + 1]) for i in (0, 2, 4)
        )
        total = first.count + second.count + merge.count

        consumed = [header]
        stack = LabelStack()
        weight = 0
        while weight < total:
            line = self._reader.readline()
            if line is None:
                return self._resync(consumed, "combined hunk cut short")
            if line.startswith("\\"):
                consumed.append(line)
                continue
            label = line[:2].ljust(2)
            if not COMBINED_LABEL.match(label):
                self._reader.unread(line)
                return self._resync(consumed, f"unexpected line in combined hunk: {line!r}")
            consumed.append(line)

            if not label.strip():
                origin = Origin.COMMON
            elif "-" in label:
                origin = Origin.OLD
            else:
                origin = Origin.MERGE
            stack.append(label, Line(line[2:], origin, label))
            weight += mark_weight(label)

        if weight != total:
            logger.warning(
                "Combined hunk %r consumed weight %d, header declares %d",
                header, weight, total,
            )

        self._skip_no_newline(consumed)
        return self._hunk(Hunk(
            format=DiffFormat.COMBINED,
            old=first,
            new=second,
            merge=merge,
            header=[Passthrough(header, "MCOMMAND")],
            groups=stack.groups(),
        ))
