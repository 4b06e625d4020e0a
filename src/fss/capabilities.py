"""Platform capabilities, resolved once at startup."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Optional features the current platform supports.

    Attributes:
        permissions: Whether POSIX rwx permission bits are meaningful.
        modification_time: Whether last-modified times are displayed.
        special_kinds: Whether socket/device/FIFO subtypes can be told apart.
    """

    permissions: bool = True
    modification_time: bool = True
    special_kinds: bool = True


def detect_capabilities() -> Capabilities:
    """Return the capabilities of the running platform.

    Returns:
        Capabilities: All features on POSIX, none elsewhere.
    """
    posix = os.name == "posix"
    return Capabilities(
        permissions=posix,
        modification_time=posix,
        special_kinds=posix,
    )
