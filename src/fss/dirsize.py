"""Recursive directory size computation."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SizeOk:
    """Size was computed for the whole subtree."""

    size: int


@dataclass(frozen=True, slots=True)
class SizeError:
    """Some directory in the subtree could not be listed.

    Attributes:
        path: Directory whose listing failed.
        error: Underlying ``OSError``.
    """

    path: Path
    error: OSError


SizeResult = SizeOk | SizeError


def compute_size(
    directory: Path,
    root: Path | None = None,
    report_errors: bool = False,
) -> SizeResult:
    """Sum the sizes of all regular files below ``directory``.

    Symlinks are never followed. Entries whose metadata cannot be read
    are skipped. A directory that cannot be listed aborts the whole
    computation.

    Args:
        directory: Directory to measure.
        root: Directory the size was requested for, used in error
            messages. Defaults to ``directory``.
        report_errors: Log listing failures at ERROR instead of DEBUG.

    Returns:
        SizeResult: ``SizeOk`` with the byte total, or ``SizeError``
        naming the directory that could not be listed.
    """
    root = root if root is not None else directory
    try:
        with os.scandir(directory) as it:
            dir_entries = list(it)
    except OSError as exc:
        logger.log(
            logging.ERROR if report_errors else logging.DEBUG,
            "Error while traversing %s while calculating size of directory %s\n%s",
            directory,
            root,
            exc,
        )
        return SizeError(path=Path(directory), error=exc)

    total = 0
    for dir_entry in dir_entries:
        try:
            st = dir_entry.stat(follow_symlinks=False)
        except OSError:
            logger.debug("Cannot stat: %s", dir_entry.path)
            continue

        if stat.S_ISREG(st.st_mode):
            total += st.st_size
        elif stat.S_ISDIR(st.st_mode):
            result = compute_size(Path(dir_entry.path), root, report_errors)
            if isinstance(result, SizeError):
                return result
            total += result.size

    return SizeOk(total)
