"""Resolved run configuration shared read-only by every traversal frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from fss.capabilities import Capabilities
from fss.classify import EntryKind

#: Root paths longer than this are truncated.
MAX_PATH_LEN = 256


class SearchMode(Enum):
    """Name matching mode. ``NONE`` selects a plain scan."""

    NONE = "none"
    EXACT = "exact"
    STEM = "stem"
    CONTAINS = "contains"


@dataclass(frozen=True, slots=True)
class Config:
    """Options controlling a scan or search run.

    Permission and modification-time flags are expected to be already
    gated by the platform capabilities (see ``fss.cli.build_config``).

    Attributes:
        root: Directory to start from, as given by the user.
        search_mode: Active search mode, ``NONE`` for a plain scan.
        pattern: Search pattern; required iff a search mode is active.
        recursive: Whether subdirectories are descended into.
        max_depth: Deepest level recursed into. ``0`` means unlimited.
        show_permissions: Print rwx permission triplets.
        show_modtime: Print last modification time.
        show_absolute: Print absolute paths without indentation and
            without aggregate lines.
        show_files: List regular files individually.
        show_symlinks: List symlinks individually.
        show_special: List special entries individually.
        show_dir_size: Compute recursive directory sizes.
        show_errors: Report recoverable errors on stderr.
        capabilities: Platform capabilities.
    """

    root: str = "."
    search_mode: SearchMode = SearchMode.NONE
    pattern: str | None = None
    recursive: bool = False
    max_depth: int = 0
    show_permissions: bool = False
    show_modtime: bool = False
    show_absolute: bool = False
    show_files: bool = False
    show_symlinks: bool = False
    show_special: bool = False
    show_dir_size: bool = False
    show_errors: bool = False
    capabilities: Capabilities = field(default_factory=Capabilities)

    def __post_init__(self) -> None:
        searching = self.search_mode is not SearchMode.NONE
        if searching and self.pattern is None:
            raise ValueError(f"search mode {self.search_mode.value} requires a pattern")
        if not searching and self.pattern is not None:
            raise ValueError("pattern given without a search mode")
        if self.max_depth < 0:
            raise ValueError("max_depth must be >= 0")

    @property
    def searching(self) -> bool:
        return self.search_mode is not SearchMode.NONE

    def shows(self, kind: EntryKind) -> bool:
        """Return whether entries of ``kind`` are listed individually.

        Directories are always listed.
        """
        if kind is EntryKind.FILE:
            return self.show_files
        if kind is EntryKind.SYMLINK:
            return self.show_symlinks
        if kind is EntryKind.SPECIAL:
            return self.show_special
        return True

    def should_recurse(self, level: int) -> bool:
        """Return whether a directory found at ``level`` is descended into."""
        if not self.recursive:
            return False
        return self.max_depth == 0 or level < self.max_depth
