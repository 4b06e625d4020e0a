"""Line-oriented listing output: one line per entry or aggregate."""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from typing import TextIO

from fss.classify import EntryKind
from fss.config import Config
from fss.dirsize import SizeError, SizeOk
from fss.scanner import EntryView

logger = logging.getLogger(__name__)

#: Width of the right-aligned size/type column.
COLUMN_WIDTH = 20

#: Width of the right-aligned modification time column.
TIME_WIDTH = 20

#: Spaces added per nesting level.
INDENT_WIDTH = 4

TIME_FORMAT = "%b %d %Y  %H:%M"

# rwx triplet for each 3-bit permission value
MODE_FMT: tuple[str, ...] = ("---", "--x", "-w-", "-wx", "r--", "r-x", "rw-", "rwx")

_PERMISSIONS_BLANK = " " * 12

_AGGREGATE_LABELS: dict[EntryKind, str] = {
    EntryKind.FILE: "files",
    EntryKind.SYMLINK: "symlinks",
    EntryKind.SPECIAL: "special entries",
}


def format_int(number: int) -> str:
    """Format ``number`` with comma thousands separators."""
    return f"{number:,}"


def format_permissions(mode: int) -> str:
    """Return user, group and other rwx triplets followed by padding.

    Args:
        mode: ``st_mode`` of the entry.

    Returns:
        str: For example ``"rwxr-xr-x   "``.
    """
    return (
        MODE_FMT[(mode >> 6) & 7] + MODE_FMT[(mode >> 3) & 7] + MODE_FMT[mode & 7] + "   "
    )


def format_mtime(mtime: float) -> str:
    """Return the local modification time right-aligned to ``TIME_WIDTH``.

    Raises:
        OverflowError: If the timestamp is out of range.
        OSError: If the platform cannot convert the timestamp.
        ValueError: If the timestamp is invalid.
    """
    stamp = datetime.fromtimestamp(mtime).strftime(TIME_FORMAT)
    return f"{stamp:>{TIME_WIDTH}}"


def printable(text: str, out: TextIO) -> str:
    """Return ``text`` in a form ``out`` can always encode.

    Undecodable filename bytes become U+FFFD and characters outside the
    stream encoding become ``?``.
    """
    text = os.fsencode(text).decode(sys.getfilesystemencoding(), "replace")
    encoding = getattr(out, "encoding", None)
    if encoding:
        text = text.encode(encoding, "replace").decode(encoding)
    return text


class ListingPresenter:
    """Render entries to a text stream.

    Each line is made of the optional permission and time columns, a
    right-aligned size or type column, the indentation for the nesting
    level and the entry name.
    """

    def __init__(self, config: Config, out: TextIO) -> None:
        """Initialize the presenter.

        Args:
            config: Resolved run configuration.
            out: Stream lines are written to.
        """
        self._config = config
        self._out = out

    def show_entry(self, view: EntryView) -> bool:
        """Write one entry line.

        Args:
            view: Entry to render.

        Returns:
            bool: ``False`` when the entry could not be rendered; nothing
            is written in that case.
        """
        display = self._display_name(view)
        if display is None:
            return False

        prefix = self._metadata_prefix(view, display)
        if prefix is None:
            return False

        self._write_line(prefix, self._column(view), view.level, view.absolute, display)
        return True

    def show_aggregate(
        self, kind: EntryKind, count: int, level: int, hidden_size: int
    ) -> None:
        """Write a ``<N kind>`` line for entries that were not listed.

        Args:
            kind: Aggregated entry kind.
            count: Number of entries of ``kind``.
            level: Nesting level of the directory.
            hidden_size: Total size of unlisted files; only used for
                ``EntryKind.FILE``.
        """
        prefix = ""
        if self._config.show_permissions:
            prefix += _PERMISSIONS_BLANK
        if self._config.show_modtime:
            prefix += " " * TIME_WIDTH

        column = ""
        if self._config.show_dir_size:
            column = format_int(hidden_size) if kind is EntryKind.FILE else "-"

        label = f"<{format_int(count)} {_AGGREGATE_LABELS[kind]}>"
        self._write_line(prefix, column, level, False, label)

    def _display_name(self, view: EntryView) -> str | None:
        if view.kind is EntryKind.SYMLINK:
            name = os.path.abspath(view.path) if view.absolute else view.name
            return self._symlink_name(view, name)

        if view.absolute:
            try:
                name = str(view.path.resolve(strict=True))
            except (OSError, RuntimeError) as exc:
                logger.debug("Cannot resolve %s: %s", view.path, exc)
                return None
        else:
            name = view.name

        if view.kind is EntryKind.DIRECTORY:
            return f"<{name}>"
        return name

    def _symlink_name(self, view: EntryView, name: str) -> str | None:
        try:
            target = view.path.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            logger.log(
                logging.ERROR if self._config.show_errors else logging.DEBUG,
                'Error while reading target of symlink "%s"\n%s',
                name,
                exc,
            )
            return None
        if view.target_is_dir:
            return f"<{name}> -> <{target}>"
        return f"{name} -> {target}"

    def _metadata_prefix(self, view: EntryView, display: str) -> str | None:
        prefix = ""
        if self._config.show_permissions:
            prefix += format_permissions(view.stat.st_mode)
        if self._config.show_modtime:
            try:
                prefix += format_mtime(view.stat.st_mtime)
            except (OverflowError, OSError, ValueError):
                logger.log(
                    logging.ERROR if self._config.show_errors else logging.DEBUG,
                    'Error while getting last modified time of "%s"',
                    display,
                )
                return None
        return prefix

    def _column(self, view: EntryView) -> str:
        if view.kind is EntryKind.FILE:
            return format_int(view.stat.st_size)
        if view.kind is EntryKind.SYMLINK:
            return "SYMLINK"
        if view.kind is EntryKind.SPECIAL:
            return view.special.value
        if isinstance(view.dir_size, SizeOk):
            return format_int(view.dir_size.size)
        if isinstance(view.dir_size, SizeError):
            return "ERROR"
        return ""

    def _write_line(
        self, prefix: str, column: str, level: int, absolute: bool, name: str
    ) -> None:
        indent = "" if absolute else " " * (INDENT_WIDTH * level)
        line = f"{prefix}{column:>{COLUMN_WIDTH}}    {indent}{name}\n"
        self._out.write(printable(line, self._out))
