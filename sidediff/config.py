# sidediff/config.py
"""Configuration loading and validation for sidediff.

A config file is JSON. Every key is optional:

    {
        "version": "1.0",
        "width": 200,
        "number": true,
        "digits": 4,
        "fold": "word",
        "mark": "center",
        "ambiguous": "narrow",
        "tabstop": 8,
        "command": true,
        "color": {
            "mode": "auto",
            "system": "256",
            "map": {"OTEXT": "on #ffdddd", "UTEXT": ""}
        },
        "diff": {"program": "diff", "options": ["-d"], "filter": null}
    }

Command line options override whatever the file sets.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .colormap import COLOR_SYSTEMS, FIELDS, ColorMap
from .errors import ConfigValidationError
from .renderer import FoldMode, MarkPosition, RenderOptions

COLOR_MODES = ("always", "never", "auto")


@dataclass
class SideDiffConfig:
    """Structured representation of a sidediff configuration file."""

    version: str = "1.0"

    # Layout
    width: Optional[int] = None  # None: terminal width
    number: bool = False
    digits: int = 4
    fold: str = "fold"  # truncate, fold, word
    mark: str = "center"  # left, right, center, side, no
    ambiguous: str = "narrow"  # narrow, wide
    tabstop: int = 8
    command: bool = True

    # Colors
    color_mode: str = "auto"  # always, never, auto
    color_system: str = "truecolor"  # truecolor, 256, standard
    color_map: Dict[str, str] = field(default_factory=dict)

    # Diff backend
    diff_program: str = "diff"
    diff_options: List[str] = field(default_factory=list)
    diff_filter: Optional[str] = None

    def to_render_options(self, width: int, view: bool = False) -> RenderOptions:
        """Convert to the renderer's options, with the resolved width."""
        return RenderOptions(
            width=self.width if self.width is not None else width,
            number=self.number,
            digits=self.digits,
            fold_mode=FoldMode(self.fold),
            mark_position=MarkPosition(self.mark),
            view=view,
            ambiguous=self.ambiguous,
            tabstop=self.tabstop,
            command=self.command,
        )

    def to_color_map(self, enabled: bool = True) -> ColorMap:
        """Build the color map: defaults overlaid with the configured fields."""
        colors = ColorMap(color_system=self.color_system, enabled=enabled)
        for name, spec in self.color_map.items():
            colors.set(name, spec)
        return colors


def _check_int(errors: List[str], name: str, value: Any, minimum: int) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        errors.append(f"'{name}' must be an integer >= {minimum}")


def _check_choice(errors: List[str], name: str, value: Any, choices) -> None:
    if value is not None and value not in choices:
        errors.append(f"Invalid {name}: {value} (expected one of {', '.join(choices)})")


def validate_config(config: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """Validate a sidediff configuration dict.

    Args:
        config: Raw configuration dict loaded from JSON

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors: List[str] = []
    if not isinstance(config, dict):
        return False, ["Configuration must be a JSON object"]

    version = config.get("version")
    if version and str(version) not in ("1.0", "1"):
        errors.append(f"Unsupported config version: {version}")

    _check_int(errors, "width", config.get("width"), 1)
    _check_int(errors, "digits", config.get("digits"), 1)
    _check_int(errors, "tabstop", config.get("tabstop"), 1)
    _check_choice(errors, "fold", config.get("fold"), [m.value for m in FoldMode])
    _check_choice(errors, "mark", config.get("mark"), [m.value for m in MarkPosition])
    _check_choice(errors, "ambiguous", config.get("ambiguous"), ["narrow", "wide"])

    for key in ("number", "command"):
        value = config.get(key)
        if value is not None and not isinstance(value, bool):
            errors.append(f"'{key}' must be a boolean")

    color = config.get("color", {})
    if not isinstance(color, dict):
        errors.append("'color' must be an object")
    else:
        _check_choice(errors, "color mode", color.get("mode"), COLOR_MODES)
        _check_choice(errors, "color system", color.get("system"), list(COLOR_SYSTEMS))
        color_map = color.get("map", {})
        if not isinstance(color_map, dict):
            errors.append("Color 'map' must be an object")
        else:
            for name, spec in color_map.items():
                if name not in FIELDS:
                    errors.append(f"Unknown color field: {name}")
                elif not isinstance(spec, str):
                    errors.append(f"Color field '{name}' must be a style string")

    diff = config.get("diff", {})
    if not isinstance(diff, dict):
        errors.append("'diff' must be an object")
    else:
        program = diff.get("program")
        if program is not None and (not isinstance(program, str) or not program):
            errors.append("Diff 'program' must be a non-empty string")
        options = diff.get("options")
        if options is not None and (
            not isinstance(options, list) or not all(isinstance(o, str) for o in options)
        ):
            errors.append("Diff 'options' must be a list of strings")
        diff_filter = diff.get("filter")
        if diff_filter is not None and not isinstance(diff_filter, str):
            errors.append("Diff 'filter' must be a string")

    return len(errors) == 0, errors


def load_config(
    path: Optional[str] = None,
    env_var: str = "SIDEDIFF_CONFIG"
) -> SideDiffConfig:
    """Load and validate a sidediff configuration file.

    Args:
        path: Direct path to config file. If None, uses env_var or defaults.
        env_var: Environment variable name for config path

    Returns:
        SideDiffConfig instance

    Raises:
        FileNotFoundError: If an explicitly named config file doesn't exist
        ConfigValidationError: If config validation fails or the file is not
            valid JSON
    """
    if path is None:
        path = os.environ.get(env_var)

    if path is None:
        default_paths = [
            Path.cwd() / ".sidediff.json",
            Path.home() / ".config" / "sidediff" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                path = str(default_path)
                break

    if path is None:
        return SideDiffConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"sidediff config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError([f"{path}: invalid JSON: {e}"]) from e

    is_valid, errors = validate_config(raw_config)
    if errors:
        raise ConfigValidationError(errors)

    color = raw_config.get("color", {})
    diff = raw_config.get("diff", {})

    return SideDiffConfig(
        version=str(raw_config.get("version", "1.0")),
        width=raw_config.get("width"),
        number=raw_config.get("number", False),
        digits=raw_config.get("digits", 4),
        fold=raw_config.get("fold", "fold"),
        mark=raw_config.get("mark", "center"),
        ambiguous=raw_config.get("ambiguous", "narrow"),
        tabstop=raw_config.get("tabstop", 8),
        command=raw_config.get("command", True),
        color_mode=color.get("mode", "auto"),
        color_system=color.get("system", "truecolor"),
        color_map=dict(color.get("map", {})),
        diff_program=diff.get("program", "diff"),
        diff_options=list(diff.get("options", [])),
        diff_filter=diff.get("filter"),
    )
