"""Recursive directory scanner with per-level counts and aggregate lines."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from fss import TraversalError
from fss.classify import EntryKind, SpecialKind, classify
from fss.config import Config
from fss.counter import EntryCounter
from fss.dirsize import SizeResult, compute_size

logger = logging.getLogger(__name__)

#: Kinds that may be folded into an aggregate "<N ...>" line, in output order.
AGGREGATED_KINDS: tuple[EntryKind, ...] = (
    EntryKind.FILE,
    EntryKind.SYMLINK,
    EntryKind.SPECIAL,
)


@dataclass(frozen=True, slots=True)
class EntryView:
    """A single entry handed to the presenter.

    Attributes:
        path: Path of the entry as joined from its parent directory.
        name: Basename of the entry.
        stat: ``lstat`` result of the entry.
        kind: Classified entry kind.
        special: Special subtype (``NOT_APPLICABLE`` unless ``SPECIAL``).
        level: Nesting level below the scan root.
        absolute: Render the resolved absolute path without indentation.
        dir_size: Recursive size for directories when requested.
        target_is_dir: For symlinks, whether the target is a directory.
    """

    path: Path
    name: str
    stat: os.stat_result
    kind: EntryKind
    special: SpecialKind
    level: int
    absolute: bool
    dir_size: SizeResult | None = None
    target_is_dir: bool = False


class Presenter(Protocol):
    """Protocol for entry rendering.

    Keeps traversal logic decoupled from output layout.
    """

    def show_entry(self, view: EntryView) -> bool: ...

    def show_aggregate(
        self, kind: EntryKind, count: int, level: int, hidden_size: int
    ) -> None: ...


@dataclass(slots=True)
class ScanTotals:
    """Counts accumulated by :func:`scan`.

    Attributes:
        top_level: Immediate children of the root only.
        cumulative: Every entry visited at any level.
    """

    top_level: EntryCounter = field(default_factory=EntryCounter)
    cumulative: EntryCounter = field(default_factory=EntryCounter)


def list_dir(path: Path) -> list[os.DirEntry[str]]:
    """Return the entries of ``path`` sorted by name.

    Raises:
        OSError: If the directory cannot be listed.
    """
    with os.scandir(path) as it:
        dir_entries = list(it)
    dir_entries.sort(key=lambda e: e.name)
    return dir_entries


def build_view(
    config: Config,
    dir_entry: os.DirEntry[str],
    st: os.stat_result,
    kind: EntryKind,
    special: SpecialKind,
    level: int,
    absolute: bool,
) -> EntryView:
    """Assemble the presenter input for one entry.

    Directory sizes are computed here when enabled.
    """
    path = Path(dir_entry.path)
    dir_size: SizeResult | None = None
    if kind is EntryKind.DIRECTORY and config.show_dir_size:
        dir_size = compute_size(path, report_errors=config.show_errors)
    return EntryView(
        path=path,
        name=dir_entry.name,
        stat=st,
        kind=kind,
        special=special,
        level=level,
        absolute=absolute,
        dir_size=dir_size,
        target_is_dir=kind is EntryKind.SYMLINK and os.path.isdir(path),
    )


def report_traversal_error(config: Config, path: Path | str, exc: OSError) -> None:
    """Log a directory that could not be listed."""
    logger.log(
        logging.ERROR if config.show_errors else logging.DEBUG,
        'Error while iterating over "%s"\n%s',
        path,
        exc,
    )


def scan(config: Config, presenter: Presenter) -> ScanTotals:
    """Scan ``config.root`` and render every visible entry.

    Args:
        config: Resolved run configuration.
        presenter: Receives every shown entry and aggregate line.

    Returns:
        ScanTotals: Root-level and cumulative counts.

    Raises:
        TraversalError: If the root directory cannot be listed.
    """
    try:
        dir_entries = list_dir(Path(config.root))
    except OSError as exc:
        raise TraversalError(config.root, exc) from exc

    totals = ScanTotals()
    _scan_dir(config, presenter, totals, dir_entries, 0)
    return totals


def _scan_dir(
    config: Config,
    presenter: Presenter,
    totals: ScanTotals,
    dir_entries: list[os.DirEntry[str]],
    level: int,
) -> None:
    """Scan one listed directory and recurse into shown subdirectories.

    Subdirectories that cannot be listed are logged and skipped.
    """
    counts = EntryCounter()
    hidden_file_size = 0

    for dir_entry in dir_entries:
        try:
            st = dir_entry.stat(follow_symlinks=False)
        except OSError:
            logger.debug("Cannot stat: %s", dir_entry.path)
            continue

        kind, special = classify(st, config.capabilities)
        # Counted before the visibility check so aggregate lines stay exact.
        counts.increment(kind)

        if not config.shows(kind):
            if kind is EntryKind.FILE:
                hidden_file_size += st.st_size
            continue

        view = build_view(
            config, dir_entry, st, kind, special, level, config.show_absolute
        )
        if not presenter.show_entry(view):
            counts.decrement(kind)
            continue

        if kind is EntryKind.DIRECTORY and config.should_recurse(level):
            try:
                children = list_dir(view.path)
            except OSError as exc:
                report_traversal_error(config, view.path, exc)
                continue
            _scan_dir(config, presenter, totals, children, level + 1)

    if not config.show_absolute:
        for kind in AGGREGATED_KINDS:
            count = counts.count(kind)
            if count and not config.shows(kind):
                presenter.show_aggregate(kind, count, level, hidden_file_size)

    totals.cumulative.merge(counts)
    if level == 0:
        totals.top_level.merge(counts)
