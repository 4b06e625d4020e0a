"""Shared fixtures for fss tests."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from fss.classify import EntryKind
from fss.scanner import EntryView


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a standard test directory tree.

    Structure::

        root/
        ├── a.txt              (5 bytes)
        ├── b.txt              (2 bytes)
        ├── c.log              (3 bytes)
        ├── link -> a.txt
        ├── sub1/
        │   ├── inner.txt      (5 bytes)
        │   └── deep/
        │       └── deeper/
        │           └── bottom.txt  (6 bytes)
        └── sub2/
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_text("alpha")
    (root / "b.txt").write_text("bb")
    (root / "c.log").write_text("ccc")
    (root / "link").symlink_to(root / "a.txt")
    (root / "sub1" / "deep" / "deeper").mkdir(parents=True)
    (root / "sub1" / "inner.txt").write_text("inner")
    (root / "sub1" / "deep" / "deeper" / "bottom.txt").write_text("bottom")
    (root / "sub2").mkdir()
    return root


@pytest.fixture
def fifo_tree(tmp_path: Path) -> Path:
    """Create a directory holding one file and one named pipe.

    Structure::

        fifo/
        ├── f.txt    (1 byte)
        └── pipe     (FIFO)
    """
    if not hasattr(os, "mkfifo"):
        pytest.skip("requires mkfifo")
    root = tmp_path / "fifo"
    root.mkdir()
    (root / "f.txt").write_text("x")
    os.mkfifo(root / "pipe")
    return root


@dataclass
class RecordingPresenter:
    """Presenter double that records calls instead of writing output.

    Entries whose name is in ``fail_names`` are reported as not rendered.
    """

    fail_names: set[str] = field(default_factory=set)
    shown: list[EntryView] = field(default_factory=list)
    aggregates: list[tuple[EntryKind, int, int, int]] = field(default_factory=list)

    def show_entry(self, view: EntryView) -> bool:
        if view.name in self.fail_names:
            return False
        self.shown.append(view)
        return True

    def show_aggregate(
        self, kind: EntryKind, count: int, level: int, hidden_size: int
    ) -> None:
        self.aggregates.append((kind, count, level, hidden_size))

    @property
    def names(self) -> list[str]:
        return [view.name for view in self.shown]


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


class _FailingEntry:
    """``os.DirEntry`` wrapper whose ``stat`` can be made to fail."""

    def __init__(self, entry: os.DirEntry[str], fail: bool) -> None:
        self._entry = entry
        self._fail = fail
        self.name = entry.name
        self.path = entry.path

    def stat(self, *, follow_symlinks: bool = True) -> os.stat_result:
        if self._fail:
            raise PermissionError(13, "Permission denied", self.path)
        return self._entry.stat(follow_symlinks=follow_symlinks)


class _ScandirWrapper:
    def __init__(self, inner, fail_stat: set[str]) -> None:
        self._inner = inner
        self._fail_stat = fail_stat

    def __enter__(self) -> _ScandirWrapper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._inner.close()

    def __iter__(self) -> Iterator[_FailingEntry]:
        for entry in self._inner:
            yield _FailingEntry(entry, entry.name in self._fail_stat)


@dataclass
class BrokenFs:
    """Registry of injected filesystem failures.

    Attributes:
        unlistable: Directories whose listing raises ``PermissionError``.
        unstatable: Entry names whose ``stat`` raises ``PermissionError``.
    """

    unlistable: set[Path] = field(default_factory=set)
    unstatable: set[str] = field(default_factory=set)


@pytest.fixture
def broken_fs(monkeypatch: pytest.MonkeyPatch) -> BrokenFs:
    """Patch ``os.scandir`` so tests can inject listing and stat failures."""
    registry = BrokenFs()
    real_scandir = os.scandir

    def fake_scandir(path: str | Path = ".") -> _ScandirWrapper:
        if Path(path) in registry.unlistable:
            raise PermissionError(13, "Permission denied", str(path))
        return _ScandirWrapper(real_scandir(path), registry.unstatable)

    monkeypatch.setattr(os, "scandir", fake_scandir)
    return registry
