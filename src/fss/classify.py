"""Entry classification from ``lstat`` metadata."""

from __future__ import annotations

import os
import stat
from collections.abc import Callable
from enum import Enum

from fss.capabilities import Capabilities


class EntryKind(Enum):
    """Kind of a filesystem entry as reported in listings and counts."""

    FILE = "file"
    SYMLINK = "symlink"
    SPECIAL = "special"
    DIRECTORY = "directory"


class SpecialKind(Enum):
    """Subtype of a special entry.

    ``NOT_APPLICABLE`` is used for non-special entries and for special
    entries on platforms that cannot tell the subtypes apart.
    """

    SOCKET = "SOCKET"
    BLOCK_DEVICE = "BLOCK DEVICE"
    CHAR_DEVICE = "CHAR DEVICE"
    FIFO = "FIFO PIPE"
    NOT_APPLICABLE = "SPECIAL"


_SPECIAL_TESTS: tuple[tuple[SpecialKind, Callable[[int], bool]], ...] = (
    (SpecialKind.SOCKET, stat.S_ISSOCK),
    (SpecialKind.BLOCK_DEVICE, stat.S_ISBLK),
    (SpecialKind.CHAR_DEVICE, stat.S_ISCHR),
    (SpecialKind.FIFO, stat.S_ISFIFO),
)


def special_kind(mode: int, capabilities: Capabilities) -> SpecialKind:
    """Return the special subtype encoded in ``mode``.

    Args:
        mode: ``st_mode`` of the entry.
        capabilities: Platform capabilities.

    Returns:
        SpecialKind: Matching subtype, or ``NOT_APPLICABLE``.
    """
    if not capabilities.special_kinds:
        return SpecialKind.NOT_APPLICABLE
    for kind, test in _SPECIAL_TESTS:
        if test(mode):
            return kind
    return SpecialKind.NOT_APPLICABLE


def classify(
    st: os.stat_result, capabilities: Capabilities
) -> tuple[EntryKind, SpecialKind]:
    """Classify an entry from its (non-following) metadata.

    Symlinks are checked first so a link to a directory is reported as a
    symlink. Special subtypes are checked before regular files and
    directories; anything unrecognised is a special entry with subtype
    ``NOT_APPLICABLE``.

    Args:
        st: Result of ``lstat`` on the entry.
        capabilities: Platform capabilities.

    Returns:
        tuple[EntryKind, SpecialKind]: Entry kind and special subtype.
    """
    mode = st.st_mode
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK, SpecialKind.NOT_APPLICABLE

    special = special_kind(mode, capabilities)
    if special is not SpecialKind.NOT_APPLICABLE:
        return EntryKind.SPECIAL, special
    if stat.S_ISREG(mode):
        return EntryKind.FILE, SpecialKind.NOT_APPLICABLE
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY, SpecialKind.NOT_APPLICABLE
    return EntryKind.SPECIAL, SpecialKind.NOT_APPLICABLE
