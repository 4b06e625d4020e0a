"""Summary blocks printed after a scan or search."""

from __future__ import annotations

from fss.counter import EntryCounter
from fss.formatter.listing import format_int


def _count_lines(counts: EntryCounter) -> list[str]:
    """Return the five ``<N kind>`` lines of a summary block."""
    return [
        f"<{format_int(counts.files)} files>",
        f"<{format_int(counts.symlinks)} symlinks>",
        f"<{format_int(counts.special)} special files>",
        f"<{format_int(counts.directories)} subdirectories>",
        f"<{format_int(counts.total())} total entries>",
    ]


def format_block(title: str, counts: EntryCounter) -> str:
    """Render one titled summary block terminated by a blank line.

    Args:
        title: Heading line.
        counts: Counts to report.

    Returns:
        str: Block text ending in ``"\\n\\n"``.
    """
    return "\n".join([title, *_count_lines(counts)]) + "\n\n"


def format_scan_summary(
    root: str,
    top_level: EntryCounter,
    cumulative: EntryCounter | None = None,
) -> str:
    """Render the scan summary.

    Args:
        root: Root path as given by the user.
        top_level: Counts of the root's immediate children.
        cumulative: Counts including subdirectories; omitted for
            non-recursive scans.

    Returns:
        str: Summary text starting with a blank line.
    """
    text = "\n" + format_block(f'Summary of "{root}"', top_level)
    if cumulative is not None:
        text += format_block("Including subdirectories", cumulative)
    return text


def format_search_summary(
    root: str, matches: EntryCounter, traversed: EntryCounter
) -> str:
    """Render the search summary: matching entries, then all traversed ones."""
    return (
        "\n"
        + format_block("Summary of matching entries", matches)
        + format_block(f'Summary of traversal of "{root}"', traversed)
    )
