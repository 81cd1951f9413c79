"""Tests for source discovery and batch analysis."""

import logging
from pathlib import Path

import pytest

from perf_sentinel.config import SentinelConfig
from perf_sentinel.discovery import analyze_paths, find_source_files, should_skip_file

EXTENSIONS = [".ts", ".tsx", ".js", ".jsx"]


def _touch(root, relpath, content="const x = 1\n"):
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path):
    for rel in (
        "src/a.ts",
        "src/b.tsx",
        "src/nested/c.js",
        "src/a.test.ts",
        "src/b.spec.tsx",
        "node_modules/lib/index.js",
        "dist/bundle.js",
        ".git/hooks/pre-commit.js",
        "README.md",
    ):
        _touch(tmp_path, rel)
    return tmp_path


class TestFindSourceFiles:
    def test_default_excludes(self, project):
        config = SentinelConfig()
        found = find_source_files(project, config.extensions, config.exclude_patterns)
        rel = [p.relative_to(project).as_posix() for p in found]
        assert rel == ["src/a.ts", "src/b.tsx", "src/nested/c.js"]

    def test_extension_filter(self, project):
        found = find_source_files(project, [".tsx"])
        assert [p.name for p in found] == ["b.spec.tsx", "b.tsx"]

    def test_max_files(self, project, caplog):
        with caplog.at_level(logging.WARNING, logger="perf_sentinel"):
            found = find_source_files(project, EXTENSIONS, max_files=2)
        assert len(found) == 2
        assert "max files" in caplog.text

    def test_custom_exclude(self, project):
        found = find_source_files(project, EXTENSIONS, ["src/nested/*", "*.test.*", "*.spec.*"])
        assert [p.name for p in found] == ["a.ts", "b.tsx"]

    def test_single_file(self, project):
        path = project / "src" / "a.ts"
        assert find_source_files(path, EXTENSIONS) == [path]


class TestShouldSkipFile:
    def test_name_patterns(self):
        assert should_skip_file(Path("src/a.test.ts"), ["*.test.*"])
        assert not should_skip_file(Path("src/a.ts"), ["*.test.*"])

    def test_directory_patterns_match_nested_paths(self):
        assert should_skip_file(Path("build/deep/x.js"), ["build/*"])


class TestAnalyzePaths:
    def test_unreadable_files_are_skipped(self, tmp_path, caplog):
        good = _touch(tmp_path, "good.ts")
        with caplog.at_level(logging.WARNING, logger="perf_sentinel"):
            results = analyze_paths([good, tmp_path / "missing.ts"])
        assert [r.file_path for r in results] == [str(good)]
        assert "missing.ts" in caplog.text

    def test_preserves_input_order(self, tmp_path):
        paths = [_touch(tmp_path, name) for name in ("z.ts", "a.ts", "m.ts")]
        assert [r.file_path for r in analyze_paths(paths)] == [str(p) for p in paths]
