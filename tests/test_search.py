"""Tests for fss.search."""

import logging
import os
from pathlib import Path

import pytest

from fss import TraversalError
from fss.classify import SpecialKind
from fss.config import Config, SearchMode
from fss.counter import EntryCounter
from fss.search import search


def _config(root: Path, mode: SearchMode, pattern: str, **kwargs) -> Config:
    return Config(root=str(root), search_mode=mode, pattern=pattern, **kwargs)


class TestSearchMatching:
    def test_exact_match_found_at_depth(self, sample_tree: Path, presenter) -> None:
        config = _config(
            sample_tree, SearchMode.EXACT, "bottom.txt", recursive=True, show_files=True
        )
        totals = search(config, presenter)
        assert presenter.names == ["bottom.txt"]
        assert presenter.shown[0].level == 3
        assert totals.matches == EntryCounter(files=1)

    def test_matches_render_absolute(self, sample_tree: Path, presenter) -> None:
        search(_config(sample_tree, SearchMode.CONTAINS, "sub"), presenter)
        assert presenter.names == ["sub1", "sub2"]
        assert all(view.absolute for view in presenter.shown)

    def test_directories_recursed_regardless_of_match(
        self, sample_tree: Path, presenter
    ) -> None:
        config = _config(sample_tree, SearchMode.CONTAINS, "deep", recursive=True)
        totals = search(config, presenter)
        assert presenter.names == ["deep", "deeper"]
        assert totals.matches == EntryCounter(directories=2)

    def test_stem_match(self, sample_tree: Path, presenter) -> None:
        (sample_tree / "a.png").write_text("png")
        config = _config(sample_tree, SearchMode.STEM, "a", show_files=True)
        totals = search(config, presenter)
        assert presenter.names == ["a.png", "a.txt"]
        assert totals.matches.files == 2

    def test_hidden_kind_never_matches(self, sample_tree: Path, presenter) -> None:
        totals = search(_config(sample_tree, SearchMode.EXACT, "a.txt"), presenter)
        assert presenter.names == []
        assert totals.matches.total() == 0
        assert totals.traversed.files == 5

    def test_symlink_needs_symlink_flag(self, sample_tree: Path, presenter) -> None:
        config = _config(sample_tree, SearchMode.EXACT, "link", show_symlinks=True)
        totals = search(config, presenter)
        assert presenter.names == ["link"]
        assert totals.matches == EntryCounter(symlinks=1)

    def test_no_aggregates(self, sample_tree: Path, presenter) -> None:
        search(_config(sample_tree, SearchMode.CONTAINS, "x"), presenter)
        assert presenter.aggregates == []


class TestSearchCounts:
    def test_traversed_counts_every_entry(self, sample_tree: Path, presenter) -> None:
        config = _config(
            sample_tree, SearchMode.EXACT, "a.txt", recursive=True, show_files=True
        )
        totals = search(config, presenter)
        assert totals.traversed == EntryCounter(
            files=5, symlinks=1, special=0, directories=4
        )
        assert totals.matches == EntryCounter(files=1)

    def test_non_recursive_traverses_root_only(
        self, sample_tree: Path, presenter
    ) -> None:
        totals = search(_config(sample_tree, SearchMode.CONTAINS, "e"), presenter)
        assert totals.traversed.total() == 6

    def test_depth_limit(self, sample_tree: Path, presenter) -> None:
        config = _config(
            sample_tree, SearchMode.CONTAINS, "deep", recursive=True, max_depth=1
        )
        search(config, presenter)
        assert presenter.names == ["deep"]

    def test_render_failure_excluded_from_both_tallies(
        self, sample_tree: Path, presenter
    ) -> None:
        presenter.fail_names.add("sub1")
        totals = search(_config(sample_tree, SearchMode.CONTAINS, "sub"), presenter)
        assert totals.matches == EntryCounter(directories=1)
        assert totals.traversed.directories == 1

    def test_failed_directory_still_recursed(self, sample_tree: Path, presenter) -> None:
        presenter.fail_names.add("sub1")
        config = _config(
            sample_tree, SearchMode.CONTAINS, "", recursive=True, show_files=True
        )
        totals = search(config, presenter)
        assert "sub1" not in presenter.names
        assert "inner.txt" in presenter.names
        assert totals.matches.directories == 3


class TestSearchErrors:
    def test_requires_search_mode(self, sample_tree: Path, presenter) -> None:
        with pytest.raises(ValueError, match="active search mode"):
            search(Config(root=str(sample_tree)), presenter)

    def test_unlistable_root_raises(self, tmp_path: Path, presenter) -> None:
        with pytest.raises(TraversalError):
            search(_config(tmp_path / "missing", SearchMode.EXACT, "x"), presenter)

    def test_unlistable_subdirectory_logged(
        self,
        sample_tree: Path,
        presenter,
        broken_fs,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        broken_fs.unlistable.add(sample_tree / "sub1")
        config = _config(
            sample_tree,
            SearchMode.CONTAINS,
            "sub",
            recursive=True,
            show_errors=True,
        )
        with caplog.at_level(logging.ERROR, logger="fss.scanner"):
            totals = search(config, presenter)
        assert "Error while iterating over" in caplog.text
        assert totals.matches.directories == 2
        assert totals.traversed == EntryCounter(files=3, symlinks=1, directories=2)

    def test_overlong_symlink_target_does_not_abort(
        self, sample_tree: Path, presenter
    ) -> None:
        os.symlink("x" * 300, sample_tree / "weird")
        config = _config(
            sample_tree, SearchMode.CONTAINS, "", recursive=True, show_symlinks=True
        )
        totals = search(config, presenter)
        assert "weird" in presenter.names
        assert totals.matches.symlinks == 2
        assert totals.traversed.files == 5


class TestSearchSpecialEntries:
    def test_fifo_matches_with_special_flag(self, fifo_tree: Path, presenter) -> None:
        config = _config(fifo_tree, SearchMode.EXACT, "pipe", show_special=True)
        totals = search(config, presenter)
        assert presenter.names == ["pipe"]
        assert presenter.shown[0].special is SpecialKind.FIFO
        assert totals.matches == EntryCounter(special=1)
        assert totals.traversed == EntryCounter(files=1, special=1)

    def test_fifo_hidden_without_special_flag(self, fifo_tree: Path, presenter) -> None:
        totals = search(_config(fifo_tree, SearchMode.EXACT, "pipe"), presenter)
        assert presenter.names == []
        assert totals.matches == EntryCounter()
        assert totals.traversed == EntryCounter(files=1, special=1)
