# sidediff/display_width.py
"""Display width utilities for terminal rendering.

Provides display width measurement for strings containing wide characters
(CJK), ambiguous-width characters (box-drawing, Greek, Cyrillic in CJK
locales) and zero-width characters, plus grapheme splitting so that text is
never cut between a base character and its combining marks.
"""

import unicodedata
from typing import Iterator

import wcwidth

ZWJ = "\u200d"

# Emoji skin tone modifiers attach to the preceding emoji.
_EMOJI_MODIFIERS = range(0x1F3FB, 0x1F400)
_REGIONAL_INDICATORS = range(0x1F1E6, 0x1F200)

AMBIGUOUS_POLICIES = ("narrow", "wide")


def ambiguous_width(policy: str) -> int:
    """Map an ambiguous-width policy name to a cell count.

    Args:
        policy: "narrow" (Western terminals) or "wide" (CJK terminals).

    Returns:
        1 or 2.
    """
    if policy not in AMBIGUOUS_POLICIES:
        raise ValueError(f"Unknown ambiguous width policy: {policy}")
    return 2 if policy == "wide" else 1


def char_width(char: str, ambiguous: int = 1) -> int:
    """Calculate the display width of a single character.

    Uses unicodedata.east_asian_width() to handle:
    - Fullwidth (F) and Wide (W) characters: 2 columns
    - Ambiguous (A) characters: ``ambiguous`` columns
    - Halfwidth (H), Narrow (Na), Neutral (N): 1 column
    - Zero-width and non-printable characters (via wcwidth): 0 columns
    """
    wc = wcwidth.wcwidth(char)
    if wc <= 0:
        return 0

    eaw = unicodedata.east_asian_width(char)
    if eaw in ("F", "W"):
        return 2
    if eaw == "A":
        return ambiguous
    return wc


def _joins_previous(char: str, previous: str) -> bool:
    """Check whether ``char`` continues the grapheme ending in ``previous``."""
    if previous == ZWJ:
        return True
    code = ord(char)
    if code in _EMOJI_MODIFIERS:
        return True
    if char == ZWJ:
        return True
    return wcwidth.wcwidth(char) == 0 and not char.isspace()


def iter_graphemes(text: str) -> Iterator[str]:
    """Split text into user-perceived characters.

    A grapheme here is a base character followed by every zero-width
    character attached to it (combining marks, variation selectors, ZWJ and
    the character joined by it, emoji modifiers). Regional indicator pairs
    (flags) are kept together.
    """
    cluster = ""
    for char in text:
        if cluster:
            previous = cluster[-1]
            if _joins_previous(char, previous):
                cluster += char
                continue
            if (
                len(cluster) == 1
                and ord(previous) in _REGIONAL_INDICATORS
                and ord(char) in _REGIONAL_INDICATORS
            ):
                cluster += char
                continue
            yield cluster
        cluster = char
    if cluster:
        yield cluster


def grapheme_width(grapheme: str, ambiguous: int = 1) -> int:
    """Display width of one grapheme: the width of its base character."""
    return char_width(grapheme[0], ambiguous) if grapheme else 0


def display_width(text: str, ambiguous: int = 1) -> int:
    """Calculate the display width of a plain string (no escape sequences).

    Args:
        text: The string to measure.
        ambiguous: Cell count for East Asian Ambiguous characters.

    Returns:
        The display width in terminal columns.
    """
    if text.isascii() and text.isprintable():
        return len(text)
    return sum(grapheme_width(g, ambiguous) for g in iter_graphemes(text))


def pad_to_width(text: str, target_width: int, align: str = "left", ambiguous: int = 1) -> str:
    """Pad a string to a target display width, accounting for wide characters.

    Args:
        text: The string to pad.
        target_width: The desired display width.
        align: Alignment - 'left', 'right', or 'center'.
        ambiguous: Cell count for East Asian Ambiguous characters.

    Returns:
        The padded string.
    """
    current_width = display_width(text, ambiguous)
    padding_needed = max(0, target_width - current_width)

    if align == "right":
        return " " * padding_needed + text
    elif align == "center":
        left_pad = padding_needed // 2
        right_pad = padding_needed - left_pad
        return " " * left_pad + text + " " * right_pad
    else:  # left
        return text + " " * padding_needed
