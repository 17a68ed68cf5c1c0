# sidediff/errors.py
"""Custom exceptions for sidediff.

Provides descriptive error messages for the failures that stop a run.
Recoverable input problems (a missing paired header, a line that does not
fit the grammar) are never raised: those lines pass through unchanged.
"""

from typing import List, Optional


class SideDiffError(Exception):
    """Base exception for sidediff errors."""

    pass


class MergeError(SideDiffError):
    """Raised when a context diff block holds a line of unknown class."""

    def __init__(self, line: str, side: str):
        self.line = line
        self.side = side
        super().__init__(
            f"Malformed context diff {side} block line: {line!r}"
        )


class FoldWidthError(SideDiffError, ValueError):
    """Raised when folding is asked for a non-positive width."""

    def __init__(self, width: int):
        self.width = width
        super().__init__(f"Fold width must be at least 1, got {width}")


class AuxiliaryFileError(SideDiffError):
    """Raised when a lock-step input file cannot be opened."""

    def __init__(self, path: str, original_error: OSError):
        self.path = path
        self.original_error = original_error
        reason = original_error.strerror or str(original_error)
        super().__init__(f"{path}: {reason}")


class DiffProcessError(SideDiffError):
    """Raised when the diff (or filter) process fails."""

    def __init__(
        self,
        command: List[str],
        returncode: Optional[int] = None,
        original_error: Optional[str] = None,
    ):
        self.command = command
        self.returncode = returncode
        self.original_error = original_error

        message = f"Command failed: {' '.join(command)}"
        if returncode is not None:
            message += f" (exit status {returncode})"
        if original_error:
            message += f"\nOriginal error: {original_error}"
        super().__init__(message)


class ConfigValidationError(SideDiffError):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")
