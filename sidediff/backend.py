# sidediff/backend.py
"""Running ``diff`` (and an optional filter) for the command line tool.

The diff process writes to a pipe; when a filter command is given (for
example a word-diff highlighter) the diff output is piped through it and
the filter's output is what gets parsed.

Usage:
    command = build_diff_command("a.txt", "b.txt", ["-u"])
    with DiffProcess(command) as proc:
        session.run(proc.stdout)
    differs = proc.differs
"""

import logging
import shlex
import subprocess
from typing import List, Optional, Sequence

from .errors import DiffProcessError

logger = logging.getLogger(__name__)


def build_diff_command(
    old: str,
    new: str,
    diff_options: Sequence[str] = (),
    program: str = "diff",
) -> List[str]:
    """Argument vector comparing ``old`` with ``new``."""
    return shlex.split(program) + list(diff_options) + [old, new]


def normalize_exit_status(command: Sequence[str], returncode: int) -> bool:
    """Map a diff exit status to "files differ".

    Raises:
        DiffProcessError: For any status other than 0 or 1.
    """
    if returncode == 0:
        return False
    if returncode == 1:
        return True
    raise DiffProcessError(list(command), returncode)


class DiffProcess:
    """A running diff, optionally piped through a filter command.

    Args:
        command: Diff argument vector.
        filter_command: Shell-style filter command line, or None.
    """

    def __init__(self, command: Sequence[str], filter_command: Optional[str] = None):
        self.command = list(command)
        self.filter_command = shlex.split(filter_command) if filter_command else None
        self.differs: Optional[bool] = None
        self._diff: Optional[subprocess.Popen] = None
        self._filter: Optional[subprocess.Popen] = None

    @property
    def stdout(self):
        """Text stream the session reads from."""
        proc = self._filter if self._filter is not None else self._diff
        return proc.stdout

    def _spawn(self, argv: List[str], stdin=None) -> subprocess.Popen:
        logger.debug("Starting %s", " ".join(argv))
        try:
            return subprocess.Popen(
                argv,
                stdin=stdin,
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise DiffProcessError(argv, original_error=str(e)) from e

    def __enter__(self) -> "DiffProcess":
        self._diff = self._spawn(self.command)
        if self.filter_command:
            try:
                self._filter = self._spawn(self.filter_command, stdin=self._diff.stdout)
            except DiffProcessError:
                self._diff.kill()
                self._diff.wait()
                raise
            # The filter owns the read end now.
            self._diff.stdout.close()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._filter is not None:
            self._filter.stdout.close()
            filter_status = self._filter.wait()
        else:
            filter_status = 0
        self._diff.stdout.close()
        status = self._diff.wait()
        if exc_type is not None:
            return
        if filter_status != 0:
            raise DiffProcessError(self.filter_command, filter_status)
        self.differs = normalize_exit_status(self.command, status)
        logger.debug("%s exited with %d", self.command[0], status)
