# sidediff/renderer.py
"""Column renderer for side-by-side diff rows.

Lays out two (old/new) or three (first parent/second parent/merge) cells
per row. Each cell is a mark, an optional line number and the line text;
long text is folded (or truncated) to the column width, so one row can
produce several output lines.

Output format with ``mark_position="center"`` and line numbers::

       1 common line            1 common line
       2 removed text         - + 2 added text
                              + 3 only on the new side

Column widths depend only on the number of columns and the options, so they
are computed once per column count and cached on the renderer.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .colormap import SIDES, ColorMap
from .display_width import ambiguous_width, pad_to_width
from .errors import ConfigValidationError
from .fold import FoldState, fold_state

logger = logging.getLogger(__name__)


class FoldMode(str, Enum):
    """What to do with text wider than its column."""
    TRUNCATE = "truncate"
    FOLD = "fold"
    WORD = "word"


class MarkPosition(str, Enum):
    """Where the change mark sits inside each column."""
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    SIDE = "side"
    NO = "no"


@dataclass
class RenderOptions:
    """Caller-supplied rendering options."""
    width: int = 160
    number: bool = False
    digits: int = 4
    fold_mode: FoldMode = FoldMode.FOLD
    mark_position: MarkPosition = MarkPosition.CENTER
    view: bool = False
    ambiguous: str = "narrow"
    tabstop: int = 8
    command: bool = True


@dataclass
class Cell:
    """One column of a row. ``text`` is None for an absent (blank) cell."""
    mark: str = " "
    number: Optional[int] = None
    text: Optional[str] = None

    @property
    def changed(self) -> bool:
        return bool(self.mark.strip())


@dataclass(frozen=True)
class ColumnLayout:
    """Resolved geometry for one column count."""
    columns: int
    mark_width: int
    mark_first: Tuple[Optional[bool], ...]  # None: no mark shown
    separators: Tuple[str, ...]
    text_width: int


class ColumnRenderer:
    """Turns rows of cells into output lines."""

    def __init__(self, options: RenderOptions, colors: Optional[ColorMap] = None):
        self.options = options
        self.colors = colors if colors is not None else ColorMap.plain()
        self._ambiguous = ambiguous_width(options.ambiguous)
        self._layouts: Dict[int, ColumnLayout] = {}

    def layout(self, columns: int) -> ColumnLayout:
        """Geometry for ``columns`` columns, computed on first use."""
        if columns not in self._layouts:
            self._layouts[columns] = self._compute_layout(columns)
        return self._layouts[columns]

    def _compute_layout(self, columns: int) -> ColumnLayout:
        options = self.options
        position = MarkPosition(options.mark_position)
        mark_width = 1 if columns == 2 else columns - 1

        if position == MarkPosition.NO:
            mark_first: Tuple[Optional[bool], ...] = (None,) * columns
        elif position == MarkPosition.LEFT:
            mark_first = (True,) * columns
        elif position == MarkPosition.RIGHT:
            mark_first = (False,) * columns
        elif position == MarkPosition.CENTER:
            mark_first = tuple(i > 0 for i in range(columns))
        else:  # side
            mark_first = tuple(i < columns - 1 for i in range(columns))

        # Marks that face each other are not separated.
        separators = tuple(
            "" if mark_first[i] is False and mark_first[i + 1] else " "
            for i in range(columns - 1)
        )

        mark_field = 0 if position == MarkPosition.NO else mark_width + 1
        number_field = options.digits + 1 if options.number else 0
        column_width = (options.width - len("".join(separators))) // columns
        text_width = column_width - mark_field - number_field
        if text_width < 1:
            raise ConfigValidationError(
                [f"Width {options.width} is too narrow for {columns} columns"]
            )

        logger.debug(
            "Layout for %d columns: text width %d, separators %r",
            columns, text_width, separators,
        )
        return ColumnLayout(columns, mark_width, mark_first, separators, text_width)

    def render_row(self, cells: Sequence[Cell]) -> List[str]:
        """Render one row, folding every cell until all are exhausted.

        In truncate mode only the first display line of each cell is kept.
        """
        layout = self.layout(len(cells))
        word = self.options.fold_mode == FoldMode.WORD
        truncate = self.options.fold_mode == FoldMode.TRUNCATE
        states = [FoldState(self._expand(cell.text or "")) for cell in cells]

        lines = []
        first = True
        while True:
            parts = []
            for i, cell in enumerate(cells):
                head, states[i] = fold_state(
                    states[i], layout.text_width, word, True, self._ambiguous
                )
                if truncate:
                    states[i] = FoldState("")
                parts.append(self._format_cell(i, cell, head, first, layout))
                if i < len(cells) - 1:
                    parts.append(layout.separators[i])
            lines.append("".join(parts))
            first = False
            if all(state.done for state in states):
                return lines

    def render_rows(self, rows: Sequence[Sequence[Cell]]) -> List[str]:
        lines: List[str] = []
        for row in rows:
            lines.extend(self.render_row(row))
        return lines

    def render_line(self, text: str, color: Optional[str] = None) -> str:
        """Render a full-width line (file header, command, pass-through)."""
        if color is None:
            return text
        return self.colors.colorize(color, text)

    def _expand(self, text: str) -> str:
        if "\t" in text:
            return text.expandtabs(self.options.tabstop)
        return text

    def _format_cell(
        self, index: int, cell: Cell, text: str, first: bool, layout: ColumnLayout
    ) -> str:
        side = SIDES[index]
        changed = cell.changed
        colors = self.colors

        number = ""
        if self.options.number:
            digits = self.options.digits
            if first and cell.number is not None and cell.text is not None:
                number = f"{cell.number:>{digits}} "
            else:
                number = " " * (digits + 1)

        rest = (
            colors.colorize(colors.field_for(side, "LINE", changed), number)
            + colors.colorize(colors.field_for(side, "TEXT", changed), text)
        )
        mark_first = layout.mark_first[index]
        if mark_first is None:
            return rest

        mark = pad_to_width(cell.mark, layout.mark_width, ambiguous=self._ambiguous)
        mark = colors.colorize(colors.field_for(side, "MARK", changed), mark)
        if mark_first:
            return mark + " " + rest
        return rest + " " + mark
