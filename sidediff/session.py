# sidediff/session.py
"""Rendering session: owns the line counters and drives the parser.

A session consumes one diff stream. Pass-through lines are written as they
arrive; every hunk is flattened into rows and rendered in columns. In
lock-step mode the two compared files are read alongside the diff so the
unchanged text between hunks is shown too.
"""

import logging
import sys
from typing import IO, Iterable, List, Optional, TextIO

from .colormap import ColorMap
from .errors import AuxiliaryFileError
from .flatten import LineCounters, flatten, flatten_identical, view_fold
from .models import Hunk, Passthrough
from .parser import DiffParser, Event, chomp
from .renderer import ColumnRenderer, RenderOptions

logger = logging.getLogger(__name__)


class LockstepFiles:
    """The two compared files, read in step with the diff.

    Args:
        old_path: Path of the old file.
        new_path: Path of the new file.

    Raises:
        AuxiliaryFileError: If either file cannot be opened.
    """

    def __init__(self, old_path: str, new_path: str):
        self.paths = (old_path, new_path)
        self._files: List[IO[str]] = []
        for path in self.paths:
            try:
                self._files.append(open(path, "r", encoding="utf-8", errors="replace"))
            except OSError as e:
                self.close()
                raise AuxiliaryFileError(path, e) from e

    def read(self, index: int, count: int) -> List[str]:
        """Read up to ``count`` lines from file ``index`` (0 old, 1 new)."""
        lines = []
        handle = self._files[index]
        while len(lines) < count:
            line = handle.readline()
            if not line:
                logger.warning("%s ended before the expected line", self.paths[index])
                break
            lines.append(chomp(line))
        return lines

    def skip(self, index: int, count: int) -> None:
        self.read(index, count)

    def read_rest(self, index: int) -> List[str]:
        return [chomp(line) for line in self._files[index]]

    def close(self) -> None:
        for handle in self._files:
            handle.close()
        self._files = []

    def __enter__(self) -> "LockstepFiles":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class DiffSession:
    """Renders one diff stream.

    Args:
        options: Rendering options.
        colors: Color map; plain output when None.
        out: Output stream, stdout by default.
        lockstep: Open compared files for lock-step mode, or None.
    """

    def __init__(
        self,
        options: RenderOptions,
        colors: Optional[ColorMap] = None,
        out: Optional[TextIO] = None,
        lockstep: Optional[LockstepFiles] = None,
    ):
        self.options = options
        self.renderer = ColumnRenderer(options, colors)
        self.counters = LineCounters()
        self.out = out if out is not None else sys.stdout
        self.lockstep = lockstep
        self.hunk_count = 0

    def run(self, lines: Iterable[str]) -> bool:
        """Render a whole diff stream.

        Returns:
            True if the stream held at least one hunk.
        """
        for event in DiffParser(lines).events():
            self.handle(event)
        self.finish()
        return self.hunk_count > 0

    def handle(self, event: Event) -> None:
        if isinstance(event, Passthrough):
            self._write([self.renderer.render_line(event.text, event.color)])
        else:
            self._render_hunk(event)

    def finish(self) -> None:
        """Flush the unchanged tail of the compared files."""
        if self.lockstep is None:
            return
        rows = flatten_identical(
            self.lockstep.read_rest(0), self.lockstep.read_rest(1), self.counters
        )
        self._write(self.renderer.render_rows(rows))

    def _render_hunk(self, hunk: Hunk) -> None:
        self.hunk_count += 1
        lockstep = self.lockstep if hunk.columns == 2 else None
        if lockstep is not None:
            self._fill_gap(lockstep, hunk)

        if self.options.command:
            self._write([
                self.renderer.render_line(line.text, line.color) for line in hunk.header
            ])

        counters = self.counters
        counters.old = hunk.old.start
        counters.new = hunk.new.start
        if hunk.merge is not None:
            counters.merge = hunk.merge.start

        groups = view_fold(hunk.groups) if self.options.view else hunk.groups
        rows = flatten(groups, counters, view=self.options.view)
        self._write(self.renderer.render_rows(rows))

        self._sync_counters(hunk)
        if lockstep is not None:
            lockstep.skip(0, hunk.old.count)
            lockstep.skip(1, hunk.new.count)

    def _fill_gap(self, lockstep: LockstepFiles, hunk: Hunk) -> None:
        old_gap = hunk.old.start - self.counters.old
        new_gap = hunk.new.start - self.counters.new
        if old_gap <= 0 and new_gap <= 0:
            return
        rows = flatten_identical(
            lockstep.read(0, max(old_gap, 0)),
            lockstep.read(1, max(new_gap, 0)),
            self.counters,
        )
        self._write(self.renderer.render_rows(rows))

    def _sync_counters(self, hunk: Hunk) -> None:
        counters = self.counters
        expected = [hunk.old.next_line, hunk.new.next_line]
        if hunk.merge is not None:
            expected.append(hunk.merge.next_line)
        actual = counters.as_list(len(expected))
        if actual != expected:
            logger.warning(
                "Hunk %r consumed lines up to %s, header declares %s",
                hunk.header[0].text if hunk.header else "", actual, expected,
            )
        counters.old, counters.new = expected[0], expected[1]
        if hunk.merge is not None:
            counters.merge = expected[2]

    def _write(self, lines: List[str]) -> None:
        for line in lines:
            self.out.write(line + "\n")
