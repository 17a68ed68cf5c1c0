# sidediff/colormap.py
"""Named color map for side-by-side diff output.

Each semantic field (old command line, new mark, unchanged text, ...) maps
to a Rich style string such as ``"bold #333300 on #ffff66"``. Styles are
rendered to SGR sequences through Rich so the same map works for truecolor,
256-color and 16-color terminals.

Field names are a side letter plus a role:

- side: ``O`` (old / first parent), ``N`` (new / second parent),
  ``M`` (merge result), ``U`` (unchanged lines, any side)
- role: ``COMMAND``, ``FILE``, ``MARK``, ``LINE`` (line number), ``TEXT``

``U`` only exists for MARK, LINE and TEXT. When an unchanged variant is not
configured, the side's own field is used instead.

Usage:
    cm = ColorMap()
    cm.update(["OTEXT=red", "NTEXT=bold green"])
    cm.colorize("OTEXT", "removed line")
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style

from .errors import ConfigValidationError

logger = logging.getLogger(__name__)

SIDES = ("O", "N", "M")
ROLES = ("COMMAND", "FILE", "MARK", "LINE", "TEXT")
UNCHANGED_ROLES = ("MARK", "LINE", "TEXT")

FIELDS = tuple(
    [side + role for role in ROLES for side in SIDES]
    + ["U" + role for role in UNCHANGED_ROLES]
)

COLOR_SYSTEMS = {
    "truecolor": ColorSystem.TRUECOLOR,
    "256": ColorSystem.EIGHT_BIT,
    "standard": ColorSystem.STANDARD,
}

DEFAULT_COLOR_MAP: Dict[str, str] = {
    "OCOMMAND": "#333300 on #ffffaa",
    "NCOMMAND": "#333300 on #ffffaa",
    "MCOMMAND": "#333300 on #ffffaa",
    "OFILE": "bold #333300 on #ffff66",
    "NFILE": "bold #333300 on #ffff66",
    "MFILE": "bold #333300 on #ffff66",
    "OMARK": "#555555 on #ffcccc",
    "NMARK": "#555555 on #ccffcc",
    "MMARK": "#555555 on #ccccff",
    "UMARK": "",
    "OLINE": "#888844",
    "NLINE": "#888844",
    "MLINE": "#888844",
    "ULINE": "#888888",
    "OTEXT": "on #ffeeee",
    "NTEXT": "on #eeffee",
    "MTEXT": "on #eeeeff",
    "UTEXT": "",
}


def parse_style(spec: str) -> Style:
    """Parse a Rich style string, raising ConfigValidationError if invalid."""
    try:
        return Style.parse(spec)
    except StyleSyntaxError as e:
        raise ConfigValidationError([f"Invalid style {spec!r}: {e}"]) from e


class ColorMap:
    """Mapping from semantic field names to styles.

    A disabled map (``enabled=False``) returns text unchanged, which is what
    the renderer uses for plain output.
    """

    def __init__(
        self,
        styles: Optional[Mapping[str, str]] = None,
        color_system: str = "truecolor",
        enabled: bool = True,
    ):
        if color_system not in COLOR_SYSTEMS:
            raise ConfigValidationError([f"Unknown color system: {color_system}"])
        self._styles: Dict[str, str] = {}
        self._parsed: Dict[str, Style] = {}
        self.color_system = color_system
        self.enabled = enabled
        for name, spec in (DEFAULT_COLOR_MAP if styles is None else styles).items():
            self.set(name, spec)

    @classmethod
    def plain(cls) -> "ColorMap":
        """A color map that never emits escape sequences."""
        return cls(styles={}, enabled=False)

    def __contains__(self, name: str) -> bool:
        return name in self._styles

    def get(self, name: str) -> Optional[str]:
        """Style string configured for a field, or None if unset."""
        return self._styles.get(name)

    def set(self, name: str, spec: str) -> None:
        """Configure one field.

        Raises:
            ConfigValidationError: If the field name or style is invalid.
        """
        if name not in FIELDS:
            raise ConfigValidationError([f"Unknown color field: {name}"])
        self._parsed[name] = parse_style(spec)
        self._styles[name] = spec

    def unset(self, name: str) -> None:
        """Remove a field so lookups fall back to the side's own field."""
        self._styles.pop(name, None)
        self._parsed.pop(name, None)

    def update(self, specs: Iterable[str]) -> None:
        """Apply ``FIELD=style`` assignments (as given on the command line).

        Several fields may share a style: ``OTEXT,NTEXT=bold``. An empty
        style (``UTEXT=``) turns coloring off for that field.
        """
        errors = []
        for item in specs:
            names, sep, spec = item.partition("=")
            if not sep:
                errors.append(f"Color map entry must be FIELD=STYLE: {item!r}")
                continue
            for name in names.split(","):
                try:
                    self.set(name.strip(), spec.strip())
                except ConfigValidationError as e:
                    errors.extend(e.errors)
        if errors:
            raise ConfigValidationError(errors)

    def field_for(self, side: str, role: str, changed: bool) -> str:
        """Pick the field for a cell part.

        Args:
            side: "O", "N" or "M".
            role: "MARK", "LINE" or "TEXT".
            changed: Whether the cell's mark is non-blank.

        Returns:
            ``<side><role>`` for changed cells, otherwise ``U<role>`` when it
            is configured, falling back to ``<side><role>``.
        """
        if not changed and "U" + role in self._styles:
            return "U" + role
        return side + role

    def colorize(self, name: str, text: str) -> str:
        """Wrap text in the SGR sequences of a field's style."""
        if not self.enabled or not text:
            return text
        style = self._parsed.get(name)
        if style is None or not self._styles.get(name):
            return text
        return style.render(text, color_system=COLOR_SYSTEMS[self.color_system])

    def to_dict(self) -> Dict[str, str]:
        """Export the configured fields."""
        return dict(self._styles)
