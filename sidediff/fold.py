# sidediff/fold.py
"""Width-aware folding of ANSI-colored text.

Cuts one display line's worth of text at a time. Escape sequences are
copied verbatim and take no room, wide glyphs and grapheme clusters are
never split, and colors that are still open at the cut are closed on the
slice and reopened on the remainder so every slice renders on its own.

Usage:
    from sidediff.fold import fold, iter_fold

    head, rest = fold("\\x1b[31mhello world\\x1b[0m", 5)
    for line in iter_fold(text, 40, word_boundary=True, pad=True):
        print(line)
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .display_width import display_width, grapheme_width, iter_graphemes
from .errors import FoldWidthError

RESET = "\x1b[0m"

# OSC strings end with ST (ESC \) or BEL. SGR must be tried before the
# generic CSI pattern.
_CONTROL_PATTERN = re.compile(
    r"(?P<osc>\x1b\][^\x07\x1b]*(?:\x1b\\|\x07))"
    r"|(?P<sgr>\x1b\[[0-9;:]*m)"
    r"|(?P<csi>\x1b\[[0-9;?]*[A-Za-z~])"
    r"|(?P<brk>[\f\r])"
)
_RESET_PATTERN = re.compile(r"\x1b\[0*m")
_PLAIN_RUN = re.compile(r"[^\x1b\f\r]+|\x1b")
_WORD_HEAD = re.compile(r"\w+")
_WORD_TAIL = re.compile(r"\w+$")


@dataclass(frozen=True)
class FoldState:
    """Text still to be folded and the color sequences open at its start."""
    text: str
    styles: Tuple[str, ...] = ()

    @property
    def done(self) -> bool:
        return not self.text

    def as_text(self) -> str:
        """Remainder as a self-contained string (open colors reapplied)."""
        if not self.text:
            return ""
        return "".join(self.styles) + self.text


def is_reset(sequence: str) -> bool:
    """Check whether an SGR sequence resets all attributes."""
    return bool(_RESET_PATTERN.fullmatch(sequence))


def strip_controls(text: str) -> str:
    """Remove escape sequences, form feeds and carriage returns."""
    return _CONTROL_PATTERN.sub("", text)


def _has_visible(text: str, pos: int, ambiguous_width: int) -> bool:
    return display_width(strip_controls(text[pos:]), ambiguous_width) > 0


def _take(run: str, room: int, ambiguous_width: int, force: bool) -> Tuple[str, int]:
    """Take whole graphemes from ``run`` while they fit in ``room``.

    With ``force`` the first grapheme is taken even if it is too wide, so
    a column narrower than a glyph still makes progress.
    """
    if run.isascii() and run.isprintable():
        taken = run[:room]
        return taken, len(taken)

    pieces: List[str] = []
    used = 0
    for grapheme in iter_graphemes(run):
        gw = grapheme_width(grapheme, ambiguous_width)
        if used + gw > room and not (force and not pieces):
            break
        pieces.append(grapheme)
        used += gw
    return "".join(pieces), used


def fold_state(
    state: FoldState,
    width: int,
    word_boundary: bool = False,
    pad: bool = False,
    ambiguous_width: int = 1,
) -> Tuple[str, FoldState]:
    """Cut one display line off ``state``.

    Args:
        state: Text to fold and the colors open before it.
        width: Target display width in cells.
        word_boundary: Avoid cutting a word that would fit on the next line.
        pad: Right-pad the slice with spaces to exactly ``width`` cells.
        ambiguous_width: Cell count for East Asian Ambiguous characters.

    Returns:
        Tuple of (slice, remaining state).

    Raises:
        FoldWidthError: If width is less than 1.
    """
    if width < 1:
        raise FoldWidthError(width)

    text = state.text
    styles = list(state.styles)
    out = list(styles)
    room = width
    placed = False
    pos = 0
    last_plain = -1

    while pos < len(text) and room > 0:
        match = _CONTROL_PATTERN.match(text, pos)
        if match:
            sequence = match.group()
            kind = match.lastgroup
            if kind == "sgr":
                if is_reset(sequence):
                    styles.clear()
                else:
                    styles.append(sequence)
            elif kind == "brk":
                room = width
            out.append(sequence)
            pos = match.end()
            continue

        run = _PLAIN_RUN.match(text, pos).group()
        taken, used = _take(run, room, ambiguous_width, force=not placed)
        if taken:
            out.append(taken)
            last_plain = len(out) - 1
            room -= used
            pos += len(taken)
            placed = placed or used > 0
        if len(taken) < len(run):
            break

    # A full slice still swallows resets, and trailing sequences that have
    # no visible text after them.
    while pos < len(text):
        match = _CONTROL_PATTERN.match(text, pos)
        if not match or match.lastgroup == "brk":
            break
        sequence = match.group()
        if match.lastgroup == "sgr" and is_reset(sequence):
            styles.clear()
        elif _has_visible(text, match.end(), ambiguous_width):
            break
        elif match.lastgroup == "sgr":
            styles.append(sequence)
        out.append(sequence)
        pos = match.end()

    if word_boundary and pos < len(text) and last_plain == len(out) - 1:
        head = _WORD_HEAD.match(text, pos)
        tail = _WORD_TAIL.search(out[last_plain])
        if head and tail:
            tail_width = display_width(tail.group(), ambiguous_width)
            word_width = tail_width + display_width(head.group(), ambiguous_width)
            if word_width <= width and width - room - tail_width > 0:
                out[last_plain] = out[last_plain][:tail.start()]
                pos -= len(tail.group())
                room += tail_width

    remainder = text[pos:]
    if remainder and styles:
        out.append(RESET)
    if pad and room > 0:
        out.append(" " * room)

    if not remainder:
        return "".join(out), FoldState("")
    return "".join(out), FoldState(remainder, tuple(styles))


def fold(
    text: str,
    width: int,
    word_boundary: bool = False,
    pad: bool = False,
    ambiguous_width: int = 1,
) -> Tuple[str, str]:
    """Cut one display line off ``text``.

    Calling ``fold`` again on the returned remainder continues where the
    previous call stopped; colors open at the cut are reopened at the start
    of the remainder.

    Returns:
        Tuple of (slice, remainder).
    """
    head, state = fold_state(
        FoldState(text), width, word_boundary, pad, ambiguous_width
    )
    return head, state.as_text()


def iter_fold(
    text: str,
    width: int,
    word_boundary: bool = False,
    pad: bool = False,
    ambiguous_width: int = 1,
) -> Iterator[str]:
    """Yield every folded line of ``text`` (at least one)."""
    state = FoldState(text)
    while True:
        head, state = fold_state(state, width, word_boundary, pad, ambiguous_width)
        yield head
        if state.done:
            return
