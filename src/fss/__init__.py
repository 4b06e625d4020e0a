"""fss — file system scanner with per-directory summaries and name search."""

from __future__ import annotations

from pathlib import Path

__version__ = "0.1.0"


class FssError(Exception):
    """User-facing CLI error.

    Raised for invalid argument combinations and other input errors
    detected before traversal. The message is printed to stderr and
    the process exits with code 1.
    """


class TraversalError(FssError):
    """The scan root itself could not be listed.

    Attributes:
        path: Root path as given on the command line.
        cause: Underlying ``OSError``.
    """

    def __init__(self, path: str | Path, cause: OSError) -> None:
        super().__init__(f'Error while iterating over "{path}"\n{cause}')
        self.path = path
        self.cause = cause
