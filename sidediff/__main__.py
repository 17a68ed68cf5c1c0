#!/usr/bin/env python3
"""sidediff - side-by-side rendering of diff output.

Reads normal, context, unified or combined (``diff --cc``) diff output and
shows it in two or three columns.

Usage:
    # Compare two files (runs diff, shows unchanged text too)
    sidediff old.txt new.txt

    # Render existing diff output
    git diff | sidediff
    sidediff changes.patch

    # Word-level highlighting through a filter
    sidediff --filter "cdif" old.txt new.txt
"""

import argparse
import logging
import shutil
import sys
from contextlib import ExitStack
from typing import List, Optional, Sequence

from .backend import DiffProcess, build_diff_command
from .config import COLOR_MODES, SideDiffConfig, load_config
from .colormap import COLOR_SYSTEMS, FIELDS
from .errors import SideDiffError
from .renderer import MarkPosition
from .session import DiffSession, LockstepFiles

logger = logging.getLogger(__name__)

# Diff options that change the output format; lock-step needs normal diff.
FORMAT_OPTIONS = ("-c", "-u", "-C", "-U", "--context", "--unified")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sidediff",
        description="Side-by-side rendering of diff output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Color fields for --cm:
  {' '.join(FIELDS)}

Examples:
  sidediff old.txt new.txt
  sidediff -n --onword -W 120 old.txt new.txt
  git diff | sidediff --cm OTEXT="on #ffdddd" --cm NTEXT="on #ddffdd"
        """,
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Two files to compare, one file of diff output, or none to read stdin",
    )

    # Layout
    parser.add_argument(
        "--width", "-W",
        type=int,
        help="Total output width (default: terminal width)",
    )
    parser.add_argument(
        "--number", "-n",
        action="store_true",
        default=None,
        help="Show line numbers",
    )
    parser.add_argument(
        "--digit",
        type=int,
        dest="digits",
        help="Line number width (default: 4)",
    )
    fold = parser.add_mutually_exclusive_group()
    fold.add_argument(
        "--truncate",
        action="store_const",
        const="truncate",
        dest="fold",
        help="Cut long lines at the column edge",
    )
    fold.add_argument(
        "--fold",
        action="store_const",
        const="fold",
        dest="fold",
        help="Fold long lines (default)",
    )
    fold.add_argument(
        "--onword",
        action="store_const",
        const="word",
        dest="fold",
        help="Fold long lines at word boundaries",
    )
    parser.add_argument(
        "--mark",
        choices=[m.value for m in MarkPosition],
        help="Change mark position (default: center)",
    )
    parser.add_argument(
        "--view", "-v",
        action="store_true",
        help="View mode: each column shows its file top to bottom, no marks",
    )
    parser.add_argument(
        "--ambiguous",
        choices=["narrow", "wide"],
        help="Width of East Asian ambiguous characters (default: narrow)",
    )
    parser.add_argument(
        "--no-command",
        action="store_false",
        dest="command",
        default=None,
        help="Do not print hunk header lines",
    )

    # Colors
    parser.add_argument(
        "--color",
        choices=COLOR_MODES,
        help="When to color output (default: auto)",
    )
    parser.add_argument(
        "--color-system",
        choices=list(COLOR_SYSTEMS),
        help="Terminal color capability (default: truecolor)",
    )
    parser.add_argument(
        "--cm",
        action="append",
        default=[],
        metavar="FIELD=STYLE",
        help="Override a color field, e.g. OTEXT='on #ffeeee' (repeatable)",
    )

    # Diff backend
    parser.add_argument("-c", dest="diff_flags", action="append_const", const="-c",
                        help="Run diff in context format")
    parser.add_argument("-u", dest="diff_flags", action="append_const", const="-u",
                        help="Run diff in unified format")
    parser.add_argument("-b", dest="diff_flags", action="append_const", const="-b",
                        help="Ignore changes in the amount of white space")
    parser.add_argument("-w", dest="diff_flags", action="append_const", const="-w",
                        help="Ignore all white space")
    parser.add_argument("-B", dest="diff_flags", action="append_const", const="-B",
                        help="Ignore changes whose lines are all blank")
    parser.add_argument("-i", dest="diff_flags", action="append_const", const="-i",
                        help="Ignore case differences")
    parser.add_argument(
        "--diff",
        metavar="PROG",
        help="Diff program to run (default: diff)",
    )
    parser.add_argument(
        "--filter",
        metavar="CMD",
        help="Pipe diff output through CMD before rendering",
    )

    # Configuration
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Config file (default: $SIDEDIFF_CONFIG, ./.sidediff.json, "
             "~/.config/sidediff/config.json)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    return parser


def apply_overrides(config: SideDiffConfig, args: argparse.Namespace) -> SideDiffConfig:
    """Let command line options win over the config file."""
    for name in ("width", "number", "digits", "fold", "mark", "ambiguous", "command"):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    if args.color is not None:
        config.color_mode = args.color
    if args.color_system is not None:
        config.color_system = args.color_system
    if args.diff is not None:
        config.diff_program = args.diff
    if args.filter is not None:
        config.diff_filter = args.filter
    config.diff_options = config.diff_options + (args.diff_flags or [])
    return config


def use_color(mode: str) -> bool:
    if mode == "always":
        return True
    if mode == "never":
        return False
    return sys.stdout.isatty()


def is_lockstep(diff_options: Sequence[str]) -> bool:
    """Lock-step reading only works with normal diff output."""
    return not any(option.startswith(FORMAT_OPTIONS) for option in diff_options)


def run(args: argparse.Namespace) -> int:
    config = apply_overrides(load_config(args.config), args)
    options = config.to_render_options(
        width=shutil.get_terminal_size().columns, view=args.view
    )
    colors = config.to_color_map(enabled=use_color(config.color_mode))
    colors.update(args.cm)

    if len(args.files) == 2:
        old, new = args.files
        command = build_diff_command(old, new, config.diff_options, config.diff_program)
        with ExitStack() as stack:
            lockstep = None
            if is_lockstep(config.diff_options):
                lockstep = stack.enter_context(LockstepFiles(old, new))
            session = DiffSession(options, colors, lockstep=lockstep)
            proc = DiffProcess(command, config.diff_filter)
            with proc:
                session.run(proc.stdout)
        return 1 if proc.differs else 0

    session = DiffSession(options, colors)
    if args.files:
        with open(args.files[0], "r", encoding="utf-8", errors="replace") as f:
            differs = session.run(f)
    else:
        differs = session.run(sys.stdin)
    return 1 if differs else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.files) > 2:
        parser.error("at most two files may be given")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        return run(args)
    except SideDiffError as e:
        print(f"sidediff: {e}", file=sys.stderr)
        return 2
    except BrokenPipeError:
        return 0
    except OSError as e:
        print(f"sidediff: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
