"""CLI entry point for fss — I/O boundary only."""

from __future__ import annotations

import argparse
import io
import logging
import sys
from typing import TextIO

from fss import FssError, TraversalError
from fss.capabilities import Capabilities, detect_capabilities
from fss.config import MAX_PATH_LEN, Config, SearchMode
from fss.formatter.listing import ListingPresenter, printable
from fss.formatter.summary import format_scan_summary, format_search_summary
from fss.scanner import scan
from fss.search import search

logger = logging.getLogger(__name__)

# Value of -r when no depth follows it.
_UNLIMITED_DEPTH = 0


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``fss`` command.
    """
    parser = argparse.ArgumentParser(
        prog="fss",
        description="File System Scanner. Scan through the filesystem starting from PATH.",
        epilog='Example: fss ".." --recursive --files',
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan (default: current directory)",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        nargs="?",
        const=_UNLIMITED_DEPTH,
        default=None,
        metavar="N",
        help="Recursively scan directories (can be followed by a positive "
        "integer to indicate the depth)",
    )
    parser.add_argument(
        "-p",
        "--permissions",
        action="store_true",
        help="Show permissions of all entries",
    )
    parser.add_argument(
        "-t",
        "--modification-time",
        action="store_true",
        dest="modification_time",
        help="Show time of last modification of entries",
    )
    parser.add_argument(
        "-f",
        "--files",
        action="store_true",
        help="Show regular files (normally aggregated)",
    )
    parser.add_argument(
        "-l",
        "--symlinks",
        action="store_true",
        help="Show symlinks (normally aggregated)",
    )
    parser.add_argument(
        "-s",
        "--special",
        action="store_true",
        help="Show special files such as sockets, pipes, etc. (normally aggregated)",
    )
    parser.add_argument(
        "-d",
        "--dir-size",
        action="store_true",
        dest="dir_size",
        help="Recursively calculate and display the size of each directory",
    )
    parser.add_argument(
        "-a",
        "--abs",
        action="store_true",
        dest="absolute",
        help="Show the absolute path of each entry without any indentation",
    )

    # search modes
    parser.add_argument(
        "-S",
        "--search",
        default=None,
        dest="search_exact",
        metavar="PATTERN",
        help="Only show entries whose name matches PATTERN completely",
    )
    parser.add_argument(
        "--search-noext",
        default=None,
        dest="search_stem",
        metavar="PATTERN",
        help="Only show entries whose name (except for the extension) matches PATTERN",
    )
    parser.add_argument(
        "--contains",
        default=None,
        dest="search_contains",
        metavar="PATTERN",
        help="Only show entries whose name contains PATTERN",
    )

    parser.add_argument(
        "-e",
        "--show-err",
        action="store_true",
        dest="show_errors",
        help="Show errors",
    )
    return parser


def run_fss(argv: list[str] | None = None) -> str:
    """Run fss with provided CLI args and return the rendered output.

    This is the primary test target for CLI behavior; the listing is
    collected in memory instead of being streamed to stdout.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.

    Returns:
        str: Listing followed by the summary.

    Raises:
        FssError: On conflicting search modes or an unlistable root.
    """
    args = parse_args(argv)
    out = io.StringIO()
    _run_with_args(args, out)
    return out.getvalue()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse ``argv``, ignoring unknown options with a warning."""
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    for arg in unknown:
        logger.warning("Ignoring unknown option %s", arg)
    return args


def _resolve_recursion(value: int | str | None) -> tuple[bool, int]:
    """Translate the ``-r`` value into ``(recursive, max_depth)``.

    Args:
        value: ``None`` when ``-r`` is absent, ``_UNLIMITED_DEPTH`` for a
            bare ``-r``, otherwise the raw string that followed it.

    Returns:
        tuple[bool, int]: Whether to recurse and the depth limit
        (``0`` means unlimited).
    """
    if value is None:
        return False, 0
    if isinstance(value, int):
        return True, value

    try:
        depth = int(value)
    except ValueError:
        logger.warning(
            'Could not convert "%s" to an integer. Ignoring recursive option', value
        )
        return False, 0
    if depth <= 0:
        logger.warning(
            "Maximum recursion depth must be greater than 0! Ignoring recursive option"
        )
        return False, 0
    return True, depth


def _resolve_search(args: argparse.Namespace) -> tuple[SearchMode, str | None]:
    """Return the single active search mode and its pattern.

    Raises:
        FssError: If more than one search mode was given.
    """
    given = [
        (mode, pattern)
        for mode, pattern in (
            (SearchMode.EXACT, args.search_exact),
            (SearchMode.STEM, args.search_stem),
            (SearchMode.CONTAINS, args.search_contains),
        )
        if pattern is not None
    ]
    if len(given) > 1:
        raise FssError("Can only set one search mode at a time")
    if not given:
        return SearchMode.NONE, None
    return given[0]


def build_config(
    args: argparse.Namespace, capabilities: Capabilities | None = None
) -> Config:
    """Resolve parsed arguments into an immutable :class:`Config`.

    Permission and time display are dropped when the platform lacks them.

    Args:
        args: Parsed CLI namespace.
        capabilities: Platform capabilities. Detected when ``None``.

    Returns:
        Config: Resolved configuration.

    Raises:
        FssError: If more than one search mode was given.
    """
    caps = capabilities or detect_capabilities()
    search_mode, pattern = _resolve_search(args)
    recursive, max_depth = _resolve_recursion(args.recursive)

    if args.permissions and not caps.permissions:
        logger.debug("Permissions are not supported on this platform")
    if args.modification_time and not caps.modification_time:
        logger.debug("Modification times are not supported on this platform")

    return Config(
        root=args.path[:MAX_PATH_LEN],
        search_mode=search_mode,
        pattern=pattern,
        recursive=recursive,
        max_depth=max_depth,
        show_permissions=args.permissions and caps.permissions,
        show_modtime=args.modification_time and caps.modification_time,
        show_absolute=args.absolute,
        show_files=args.files,
        show_symlinks=args.symlinks,
        show_special=args.special,
        show_dir_size=args.dir_size,
        show_errors=args.show_errors,
        capabilities=caps,
    )


def _run_with_args(args: argparse.Namespace, out: TextIO) -> None:
    """Run the scan or search pipeline for parsed arguments.

    In search mode an unlistable root is only reported with
    ``--show-err``; otherwise the run ends quietly without a summary.

    Args:
        args: Parsed CLI namespace.
        out: Stream the listing and summary are written to.

    Raises:
        FssError: On conflicting search modes or an unlistable root.
    """
    config = build_config(args)
    presenter = ListingPresenter(config, out)

    if config.searching:
        try:
            found = search(config, presenter)
        except TraversalError as exc:
            if config.show_errors:
                raise
            logger.debug("%s", exc)
            return
        summary = format_search_summary(config.root, found.matches, found.traversed)
        out.write(printable(summary, out))
        return

    totals = scan(config, presenter)
    summary = format_scan_summary(
        config.root,
        totals.top_level,
        totals.cumulative if config.recursive else None,
    )
    out.write(printable(summary, out))


def main() -> None:
    """Run the CLI entry point with process arguments.

    Streams the listing to stdout. Exits with code 1 on conflicting
    search modes; an unlistable root is reported on stderr without a
    summary.
    """
    logging.basicConfig(stream=sys.stderr, format="%(message)s", level=logging.WARNING)
    args = parse_args()

    try:
        _run_with_args(args, sys.stdout)
    except TraversalError as exc:
        sys.stderr.write(f"{exc}\n")
    except FssError as exc:
        sys.stderr.write(f"fss: {exc}\n")
        sys.exit(1)
