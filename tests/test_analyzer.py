"""Tests for the file analyzer."""

import pytest

from perf_sentinel.analyzer import PerformanceAnalyzer
from perf_sentinel.cache import MemoCache
from perf_sentinel.exceptions import FileAccessError
from perf_sentinel.models import Severity


@pytest.fixture
def analyzer():
    return PerformanceAnalyzer()


class TestAnalyzeFile:
    def test_missing_file(self, analyzer, tmp_path):
        with pytest.raises(FileAccessError):
            analyzer.analyze_file(tmp_path / "nope.ts")

    def test_directory_is_not_a_file(self, analyzer, tmp_path):
        with pytest.raises(FileAccessError):
            analyzer.analyze_file(tmp_path)

    def test_undecodable_file(self, analyzer, tmp_path):
        path = tmp_path / "binary.ts"
        path.write_bytes(b"\xff\xfe\x00\x80")
        with pytest.raises(FileAccessError):
            analyzer.analyze_file(path)

    def test_clean_file(self, analyzer, tmp_path):
        path = tmp_path / "clean.ts"
        path.write_text("const x = 1\nexport default x\n", encoding="utf-8")

        analysis = analyzer.analyze_file(path)

        assert analysis.issues == ()
        assert analysis.summary.total_issues == 0
        assert analysis.score.total == 100
        assert analysis.score.grade == "A+"
        # Trailing newline gives an empty last segment.
        assert analysis.total_lines == 3
        assert analysis.file_path == str(path)

    def test_issues_are_counted_and_scored(self, analyzer, tmp_path):
        path = tmp_path / "leaky.ts"
        path.write_text(
            "window.addEventListener(name, handler)\n"
            "const id = setTimeout(run, 10)\n",
            encoding="utf-8",
        )

        analysis = analyzer.analyze_file(path)

        assert analysis.summary.high_severity == 1
        assert analysis.summary.medium_severity == 1
        assert [i.line for i in analysis.issues] == [1, 2]
        # 100 - 15 - 8 + 5
        assert analysis.score.total == 82
        assert analysis.score.breakdown.memory_leaks == 80
        assert analysis.score.breakdown.performance == 90

    def test_file_rules_run_after_line_rules(self, analyzer):
        content = "const id = setInterval(tick, 5)\n" + "\n" * 500
        analysis = analyzer.analyze_text(content, "big.ts")
        assert [i.message for i in analysis.issues] == ["Potential memory leak", "Large file"]
        assert analysis.issues_with(Severity.MEDIUM)[0].message == "Large file"

    def test_to_summary(self, analyzer):
        analysis = analyzer.analyze_text("const id = setInterval(tick, 5)", "src/a.ts")
        summary = analysis.to_summary()
        assert summary.file_path == "src/a.ts"
        assert summary.high_severity == 1
        assert summary.score == analysis.score.total
        assert summary.breakdown == analysis.score.breakdown


class TestMemoizedScoring:
    def test_identical_counts_hit_the_cache(self, tmp_path):
        with MemoCache(tmp_path / "cache") as cache:
            analyzer = PerformanceAnalyzer(cache=cache)
            first = analyzer.analyze_text("const a = 1", "a.ts")
            second = analyzer.analyze_text("const b = 2", "b.ts")

            assert first.score == second.score
            stats = cache.stats()
            assert stats["misses"] == 1
            assert stats["hits"] == 1
            assert stats["size"] == 1

    def test_files_are_always_rescanned(self, tmp_path):
        path = tmp_path / "a.ts"
        path.write_text("const a = 1", encoding="utf-8")
        with MemoCache(tmp_path / "cache") as cache:
            analyzer = PerformanceAnalyzer(cache=cache)
            assert analyzer.analyze_file(path).summary.total_issues == 0
            path.write_text("const id = setInterval(f, 1)", encoding="utf-8")
            assert analyzer.analyze_file(path).summary.high_severity == 1
