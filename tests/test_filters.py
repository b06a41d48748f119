"""Tests for glob-based path filtering."""

from pathlib import Path

import pytest

from commitgate.config import ExclusionRules
from commitgate.pipeline.filters import (
    compile_glob,
    filter_paths,
    matches_file_glob,
    matches_path_glob,
    normalize_path,
)


class TestCompileGlob:
    """Test glob translation."""

    def test_star_stays_in_segment(self):
        regex = compile_glob("src/*.java")
        assert regex.match("src/Game.java")
        assert not regex.match("src/sub/Game.java")

    def test_double_star_spans_segments(self):
        regex = compile_glob("src/**/*.java")
        assert regex.match("src/Game.java")
        assert regex.match("src/a/b/Game.java")

    def test_trailing_double_star(self):
        regex = compile_glob("out/**")
        assert regex.match("out/classes/Game.class")

    def test_question_mark_and_class(self):
        assert compile_glob("file?.txt").match("file1.txt")
        assert not compile_glob("file?.txt").match("file/.txt")
        assert compile_glob("[ab].py").match("a.py")
        assert not compile_glob("[!ab].py").match("a.py")
        assert compile_glob("[!ab].py").match("c.py")

    def test_case_sensitive(self):
        assert not compile_glob("*.JAVA").match("Game.java")

    def test_unclosed_bracket_is_literal(self):
        assert compile_glob("a[b").match("a[b")


class TestMatching:
    """Test path and basename matching rules."""

    @pytest.mark.parametrize("path", [".git/config", "sub/.git/HEAD"])
    def test_segment_glob_matches_any_depth(self, path):
        assert matches_path_glob(path, ".git")

    def test_segment_glob_wildcard(self):
        assert matches_path_glob("out/classes/Game.class", "*.class")

    def test_slash_glob_matches_prefix(self):
        assert matches_path_glob("build/generated/A.java", "build/generated")
        assert not matches_path_glob("src/build/generated/A.java", "build/generated")

    def test_file_glob_uses_basename(self):
        assert matches_file_glob("src/game/PlayerTest.java", "*Test.java")
        assert not matches_file_glob("src/TestData/Player.java", "*Test.java")


class TestFilterPaths:
    """Test the filter operation."""

    @pytest.fixture
    def rules(self):
        return ExclusionRules(
            ignore_paths=[".git/**", "out/**", "*.class", ".DS_Store"],
            ignore_files=["module-info.java", "*Test.java", "*Mock.java"],
        )

    @pytest.fixture
    def files(self):
        return {
            "src/Game.java",
            "src/GameTest.java",
            "src/PlayerMock.java",
            "src/module-info.java",
            "out/Game.class",
            "lib/Game.class",
            ".git/HEAD",
            "assets/.DS_Store",
            "README.md",
        }

    def test_excludes_matching_paths(self, files, rules):
        assert filter_paths(files, rules) == {"src/Game.java", "README.md"}

    def test_empty_input(self, rules):
        assert filter_paths(set(), rules) == set()

    def test_no_rules_keeps_everything(self, files):
        assert filter_paths(files) == files

    def test_idempotent(self, files, rules):
        once = filter_paths(files, rules)
        assert filter_paths(once, rules) == once

    def test_include_limits_selection(self, files, rules):
        assert filter_paths(files, rules, include=["*.java"]) == {"src/Game.java"}

    def test_include_full_path_glob(self):
        assert filter_paths({"src/a.py", "tests/a.py"}, include=["tests/**"]) == {"tests/a.py"}

    def test_normalizes_paths(self):
        assert filter_paths({"./src/a.py", Path("src/b.py")}) == {"src/a.py", "src/b.py"}

    def test_normalize_backslashes(self):
        assert normalize_path("src\\game\\A.java") == "src/game/A.java"
