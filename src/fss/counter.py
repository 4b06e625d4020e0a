"""Per-kind entry tallies."""

from __future__ import annotations

from dataclasses import dataclass

from fss.classify import EntryKind

_FIELDS: dict[EntryKind, str] = {
    EntryKind.FILE: "files",
    EntryKind.SYMLINK: "symlinks",
    EntryKind.SPECIAL: "special",
    EntryKind.DIRECTORY: "directories",
}


@dataclass(slots=True)
class EntryCounter:
    """Counts of files, symlinks, special entries and directories.

    A fresh counter is created for every directory level and merged into
    the caller's accumulators once the level has been processed.
    """

    files: int = 0
    symlinks: int = 0
    special: int = 0
    directories: int = 0

    def increment(self, kind: EntryKind, amount: int = 1) -> None:
        field = _FIELDS[kind]
        setattr(self, field, getattr(self, field) + amount)

    def decrement(self, kind: EntryKind, amount: int = 1) -> None:
        """Undo a tentative :meth:`increment` for an entry that was not shown."""
        field = _FIELDS[kind]
        setattr(self, field, getattr(self, field) - amount)

    def count(self, kind: EntryKind) -> int:
        return getattr(self, _FIELDS[kind])

    def total(self) -> int:
        return self.files + self.symlinks + self.special + self.directories

    def merge(self, other: EntryCounter) -> None:
        """Add every count of ``other`` to this counter."""
        self.files += other.files
        self.symlinks += other.symlinks
        self.special += other.special
        self.directories += other.directories
