"""
Unit tests for the token-driven path resolver.

Each test builds a small directory tree under a temporary root and resolves
token sequences against it.
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from close_enough.errors import FilesystemError, MalformedTokenError, NoMatchError
from close_enough.models.config import ResolverConfig
from close_enough.models.tokens import parse_tokens
from close_enough.tools.path_resolver import PathResolver


class TestPathResolver:
    """Test cases for the PathResolver class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)
        self._create_test_structure()
        self.resolver = PathResolver()

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _create_test_structure(self):
        """Create the directory tree used by the tests."""
        directories = [
            "projects/alpha_beta/src",
            "projects/almanac",
            "photos/2020",
            "work/deep/nested/target_dir",
            "xylophone/inner/leaf",
        ]
        for directory in directories:
            (self.root / directory).mkdir(parents=True)
        (self.root / "projfile").write_text("not a directory")

    def _mkdirs(self, *directories):
        for directory in directories:
            (self.root / directory).mkdir(parents=True)

    def test_plain_token(self):
        assert self.resolver.resolve(["proj"], start=self.root) == self.root / "projects"

    def test_plain_token_ignores_files(self):
        (self.root / "projects").rename(self.root / "other")
        with pytest.raises(NoMatchError):
            self.resolver.resolve(["proj"], start=self.root)

    def test_trailing_slash_is_stripped(self):
        assert self.resolver.resolve(["proj/", "ab/"], start=self.root) == self.root / "projects" / "alpha_beta"

    def test_chain_narrows_levels(self):
        result = self.resolver.resolve(["proj", "ab", "s"], start=self.root)
        assert result == self.root / "projects" / "alpha_beta" / "src"

    def test_chain_picks_shortest_full_path(self):
        self._mkdirs("chain/ab1/cd_long", "chain/ab2/cd", "chain/abc/xx")
        result = self.resolver.resolve(["ab", "cd"], start=self.root / "chain")
        assert result == self.root / "chain" / "ab2" / "cd"

    def test_chain_defers_ambiguity(self):
        """The shortest first-level match loses when it has no matching child."""
        self._mkdirs("defer/ab", "defer/ab_long/cd")
        result = self.resolver.resolve(["ab", "cd"], start=self.root / "defer")
        assert result == self.root / "defer" / "ab_long" / "cd"

    def test_chain_ties_keep_listing_order(self):
        self._mkdirs("ties/aa2/cdy", "ties/aa1/cdx")
        result = self.resolver.resolve(["aa", "cd"], start=self.root / "ties")
        assert result == self.root / "ties" / "aa1" / "cdx"

    def test_chain_failure(self):
        with pytest.raises(NoMatchError, match="no directory matching 'zzz'") as exc_info:
            self.resolver.resolve(["proj", "zzz"], start=self.root)
        assert exc_info.value.query == "zzz"
        assert exc_info.value.context == str(self.root)

    def test_chain_failure_names_failing_token(self):
        with pytest.raises(NoMatchError, match="no directory matching 'zzz'") as exc_info:
            self.resolver.resolve(["zzz", "proj"], start=self.root)
        assert exc_info.value.query == "zzz"
        assert exc_info.value.context == str(self.root)

    def test_root_token_replaces_path(self):
        assert self.resolver.resolve(["/"], start=self.root) == Path("/")
        assert self.resolver.resolve([str(self.root), "proj"], start="/") == self.root / "projects"

    def test_root_token_splits_chains(self):
        result = self.resolver.resolve(["photos", str(self.root / "projects"), "alm"], start=self.root)
        assert result == self.root / "projects" / "almanac"

    def test_pop_one(self):
        start = self.root / "projects" / "alpha_beta" / "src"
        assert self.resolver.resolve([".."], start=start) == self.root / "projects" / "alpha_beta"

    def test_pop_many(self):
        start = self.root / "projects" / "alpha_beta" / "src"
        assert self.resolver.resolve(["..2"], start=start) == self.root / "projects"

    def test_pop_zero(self):
        assert self.resolver.resolve(["..0"], start=self.root) == self.root

    def test_pop_past_root_saturates(self):
        depth = len(self.root.parts)
        assert self.resolver.resolve([f"..{depth + 3}"], start=self.root) == Path("/")

    def test_pop_past_root_errors_when_configured(self):
        resolver = PathResolver(ResolverConfig(ancestor_overflow="error"))
        depth = len(self.root.parts)
        with pytest.raises(MalformedTokenError, match="cannot pop"):
            resolver.resolve([f"..{depth + 3}"], start=self.root)

    def test_pop_within_bounds_with_error_policy(self):
        resolver = PathResolver(ResolverConfig(ancestor_overflow="error"))
        assert resolver.resolve([".."], start=self.root / "photos") == self.root

    def test_ancestor_search(self):
        start = self.root / "xylophone" / "inner" / "leaf"
        assert self.resolver.resolve(["..xylo"], start=start) == self.root / "xylophone"

    def test_ancestor_search_then_plain(self):
        start = self.root / "xylophone" / "inner" / "leaf"
        assert self.resolver.resolve(["..xylo", "inn"], start=start) == self.root / "xylophone" / "inner"

    def test_ancestor_search_failure(self):
        start = self.root / "xylophone" / "inner" / "leaf"
        with pytest.raises(NoMatchError) as exc_info:
            self.resolver.resolve(["..qqq"], start=start)
        assert exc_info.value.query == "qqq"
        assert exc_info.value.context == str(start)

    def test_recursive_search(self):
        assert self.resolver.resolve(["%target"], start=self.root) == self.root / "work" / "deep" / "nested" / "target_dir"

    def test_recursive_search_prefers_nearest(self):
        self._mkdirs("near/aaa/zz/subject", "near/bbb/subway")
        assert self.resolver.resolve(["%sub"], start=self.root / "near") == self.root / "near" / "bbb" / "subway"

    def test_recursive_search_visits_siblings_in_order(self):
        self._mkdirs("order/n/sub_a", "order/m/sub_b")
        assert self.resolver.resolve(["%sub"], start=self.root / "order") == self.root / "order" / "m" / "sub_b"

    def test_recursive_search_failure_keeps_path(self):
        with pytest.raises(NoMatchError) as exc_info:
            self.resolver.resolve(["%qqq"], start=self.root)
        assert exc_info.value.query == "qqq"
        assert exc_info.value.context == str(self.root)

    def test_recursive_then_pop(self):
        result = self.resolver.resolve(["%target", "..2"], start=self.root)
        assert result == self.root / "work" / "deep"

    def test_ignored_directories_are_not_candidates(self):
        resolver = PathResolver(ResolverConfig(ignore=["proj*"]))
        with pytest.raises(NoMatchError):
            resolver.resolve(["proj"], start=self.root)

    def test_missing_start_directory(self):
        with pytest.raises(FilesystemError):
            self.resolver.resolve(["anything"], start=self.root / "missing")

    def test_accepts_parsed_tokens(self):
        tokens = parse_tokens(["proj", "alm"])
        assert self.resolver.resolve(tokens, start=self.root) == self.root / "projects" / "almanac"

    def test_no_tokens_returns_start(self):
        assert self.resolver.resolve([], start=self.root) == self.root

    def test_defaults_to_current_directory(self, monkeypatch):
        monkeypatch.chdir(self.root)
        assert self.resolver.resolve(["phot"]) == Path.cwd() / "photos"
