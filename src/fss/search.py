"""Recursive name search built on the scanner primitives."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from fss import TraversalError
from fss.classify import EntryKind, classify
from fss.config import Config
from fss.counter import EntryCounter
from fss.filter import NameMatcher
from fss.scanner import Presenter, build_view, list_dir, report_traversal_error

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchTotals:
    """Counts accumulated by :func:`search`.

    Attributes:
        matches: Matching entries that were rendered.
        traversed: Every entry visited, matching or not.
    """

    matches: EntryCounter = field(default_factory=EntryCounter)
    traversed: EntryCounter = field(default_factory=EntryCounter)


def search(config: Config, presenter: Presenter) -> SearchTotals:
    """Search below ``config.root`` for entries matching the pattern.

    Matching entries are rendered with absolute paths. Directories are
    descended into whether or not their own name matched.

    Args:
        config: Resolved run configuration with an active search mode.
        presenter: Receives every matching, visible entry.

    Returns:
        SearchTotals: Match and traversal counts.

    Raises:
        ValueError: If ``config`` has no active search mode.
        TraversalError: If the root directory cannot be listed.
    """
    if not config.searching or config.pattern is None:
        raise ValueError("search requires an active search mode")

    matcher = NameMatcher(config.search_mode, config.pattern)
    try:
        dir_entries = list_dir(Path(config.root))
    except OSError as exc:
        raise TraversalError(config.root, exc) from exc

    totals = SearchTotals()
    _search_dir(config, presenter, matcher, totals, dir_entries, 0)
    return totals


def _search_dir(
    config: Config,
    presenter: Presenter,
    matcher: NameMatcher,
    totals: SearchTotals,
    dir_entries: list[os.DirEntry[str]],
    level: int,
) -> None:
    """Search one listed directory and recurse into every subdirectory."""
    counts = EntryCounter()

    for dir_entry in dir_entries:
        try:
            st = dir_entry.stat(follow_symlinks=False)
        except OSError:
            logger.debug("Cannot stat: %s", dir_entry.path)
            continue

        kind, special = classify(st, config.capabilities)

        if not (config.shows(kind) and matcher.matches(dir_entry.name)):
            counts.increment(kind)
        else:
            view = build_view(config, dir_entry, st, kind, special, level, True)
            # Entries that fail to render are left out of both tallies.
            if presenter.show_entry(view):
                counts.increment(kind)
                totals.matches.increment(kind)

        if kind is EntryKind.DIRECTORY and config.should_recurse(level):
            subdir = Path(dir_entry.path)
            try:
                children = list_dir(subdir)
            except OSError as exc:
                report_traversal_error(config, subdir, exc)
                continue
            _search_dir(config, presenter, matcher, totals, children, level + 1)

    totals.traversed.merge(counts)
