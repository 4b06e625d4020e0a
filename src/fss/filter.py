"""Entry name matching for the search modes."""

from __future__ import annotations

from pathlib import PurePath

from fss.config import SearchMode


class NameMatcher:
    """Match entry names against a search pattern.

    ``EXACT`` compares the full name, ``STEM`` compares the name without
    its last extension and ``CONTAINS`` tests for a substring.
    """

    def __init__(self, mode: SearchMode, pattern: str) -> None:
        """Initialize the matcher.

        Args:
            mode: Search mode; must not be ``SearchMode.NONE``.
            pattern: Pattern to compare names against.

        Raises:
            ValueError: If ``mode`` is ``SearchMode.NONE``.
        """
        if mode is SearchMode.NONE:
            raise ValueError("NameMatcher requires an active search mode")
        self._mode = mode
        self._pattern = pattern

    def matches(self, name: str) -> bool:
        """Return whether ``name`` matches the pattern.

        Args:
            name: Entry basename.

        Returns:
            bool: ``True`` on a match.
        """
        if self._mode is SearchMode.STEM:
            return PurePath(name).stem == self._pattern
        if self._mode is SearchMode.EXACT:
            return name == self._pattern
        return self._pattern in name
