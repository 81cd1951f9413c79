"""Tests for the perf-sentinel command line."""

import json

import pytest
from typer.testing import CliRunner

from perf_sentinel import __version__, environment
from perf_sentinel.cli import app
from perf_sentinel.cli._common import ExitCode

runner = CliRunner()

LEAKY = "".join(f"window.addEventListener('e{i}', handler)\n" for i in range(3))


@pytest.fixture(autouse=True)
def no_git(monkeypatch):
    monkeypatch.setattr(environment, "_git", lambda root, *args: None)


@pytest.fixture(autouse=True)
def _clean_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.ts").write_text("const x = 1\n", encoding="utf-8")
    (root / "src" / "view.tsx").write_text(
        "const el = document.getElementById('root')\n", encoding="utf-8"
    )
    return root


@pytest.fixture
def snaps(tmp_path):
    return str(tmp_path / "snaps")


class TestGlobalOptions:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "baseline" in result.output


class TestAnalyze:
    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "nope.ts")])
        assert result.exit_code == ExitCode.PATH_NOT_FOUND

    def test_report(self, project):
        result = runner.invoke(app, ["analyze", str(project / "src" / "view.tsx")])
        assert result.exit_code == 0
        assert "Performance Analysis" in result.output
        assert "Line 1" in result.output

    def test_clean_file(self, project):
        result = runner.invoke(app, ["analyze", str(project / "src" / "app.ts")])
        assert result.exit_code == 0
        assert "No performance issues found." in result.output

    def test_json(self, tmp_path):
        path = tmp_path / "leaky.ts"
        path.write_text(LEAKY, encoding="utf-8")

        result = runner.invoke(app, ["-q", "analyze", str(path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["highSeverity"] == 3
        assert data["score"]["total"] == 60
        assert data["score"]["grade"] == "C+"


class TestBulk:
    def test_summary(self, project):
        result = runner.invoke(app, ["bulk", str(project), "--summary-only"])
        assert result.exit_code == 0
        assert "Project Quality Score" in result.output
        assert "Files analyzed:   2" in result.output

    def test_json_output(self, project, tmp_path):
        out = tmp_path / "results.json"
        result = runner.invoke(
            app, ["bulk", str(project), "--extensions", "tsx", "--output", str(out), "--summary-only"]
        )
        assert result.exit_code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload["projectScore"]["totalFiles"] == 1
        assert payload["files"][0]["filePath"].endswith("view.tsx")

    def test_exclude(self, project, tmp_path):
        out = tmp_path / "results.json"
        result = runner.invoke(
            app, ["bulk", str(project), "--exclude", "*.tsx", "--output", str(out)]
        )
        assert result.exit_code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert [f["filePath"][-6:] for f in payload["files"]] == ["app.ts"]

    def test_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["bulk", str(tmp_path / "absent")])
        assert result.exit_code == ExitCode.PATH_NOT_FOUND


class TestCI:
    def test_no_baseline(self, project, snaps, tmp_path):
        result = runner.invoke(
            app, ["ci", str(project), "--snapshots-dir", snaps, "--output", "console,json"]
        )
        assert result.exit_code == 0
        assert "No baseline available" in result.output
        assert len(list((tmp_path / "snaps").glob("report-*.json"))) == 1

    def test_regression_fails_then_passes_with_flag(self, project, snaps):
        saved = runner.invoke(app, ["baseline", "save", str(project), "--snapshots-dir", snaps])
        assert saved.exit_code == 0
        (project / "src" / "app.ts").write_text(LEAKY, encoding="utf-8")

        failed = runner.invoke(app, ["ci", str(project), "--snapshots-dir", snaps])
        assert failed.exit_code == ExitCode.REGRESSION
        assert "FAIL" in failed.output

        tolerated = runner.invoke(
            app, ["ci", str(project), "--snapshots-dir", snaps, "--no-fail-on-regression"]
        )
        assert tolerated.exit_code == 0

    def test_threshold_flags(self, project, snaps):
        runner.invoke(app, ["baseline", "save", str(project), "--snapshots-dir", snaps])
        (project / "src" / "app.ts").write_text(LEAKY, encoding="utf-8")

        result = runner.invoke(
            app,
            [
                "ci",
                str(project),
                "--snapshots-dir",
                snaps,
                "--max-score-regression",
                "50",
                "--max-high-severity-increase",
                "5",
            ],
        )
        assert result.exit_code == 0
        assert "WARNING" in result.output

    def test_negative_threshold(self, project):
        result = runner.invoke(app, ["ci", str(project), "--max-score-regression=-1"])
        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_unknown_output_format(self, project):
        result = runner.invoke(app, ["ci", str(project), "--output", "xml"])
        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_missing_config_file(self, project, tmp_path):
        result = runner.invoke(app, ["ci", str(project), "--config", str(tmp_path / "none.toml")])
        assert result.exit_code == ExitCode.CONFIG_ERROR

    def test_empty_tree(self, tmp_path, snaps):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(app, ["ci", str(empty), "--snapshots-dir", snaps])
        assert result.exit_code == 0
        assert "No files found to analyze." in result.output


class TestBaselineCommands:
    def test_default_store_is_shared_across_commands(self, project, tmp_path):
        saved = runner.invoke(app, ["baseline", "save", str(project)])
        assert saved.exit_code == 0
        assert (tmp_path / ".performance-snapshots" / "baselines").is_dir()

        shown = runner.invoke(app, ["baseline", "show"])
        assert shown.exit_code == 0
        assert "Baseline (main)" in shown.output

        listed = runner.invoke(app, ["snapshots", "list"])
        assert "No snapshots found." not in listed.output

        checked = runner.invoke(app, ["ci", str(project)])
        assert checked.exit_code == 0
        assert "PASS" in checked.output

    def test_unwritable_store(self, project, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x", encoding="utf-8")
        result = runner.invoke(
            app, ["baseline", "save", str(project), "--snapshots-dir", str(blocker / "snaps")]
        )
        assert result.exit_code == ExitCode.INTERNAL_ERROR

    def test_show_does_not_create_store(self, snaps, tmp_path):
        runner.invoke(app, ["baseline", "show", "--snapshots-dir", snaps])
        assert not (tmp_path / "snaps").exists()

    def test_show_missing(self, snaps):
        result = runner.invoke(app, ["baseline", "show", "--snapshots-dir", snaps])
        assert result.exit_code == 0
        assert "No baseline found for branch main." in result.output

    def test_save_then_show(self, project, snaps):
        saved = runner.invoke(
            app, ["baseline", "save", str(project), "--branch", "develop", "--snapshots-dir", snaps]
        )
        assert saved.exit_code == 0
        assert "Baseline for develop saved" in saved.output

        shown = runner.invoke(app, ["baseline", "show", "--branch", "develop", "--snapshots-dir", snaps])
        assert shown.exit_code == 0
        assert "Baseline (develop)" in shown.output
        assert "Average score" in shown.output


class TestSnapshotCommands:
    def test_list_does_not_create_store(self, snaps, tmp_path):
        runner.invoke(app, ["snapshots", "list", "--snapshots-dir", snaps])
        runner.invoke(app, ["snapshots", "cleanup", "--snapshots-dir", snaps])
        assert not (tmp_path / "snaps").exists()

    def test_list_empty(self, snaps):
        result = runner.invoke(app, ["snapshots", "list", "--snapshots-dir", snaps])
        assert result.exit_code == 0
        assert "No snapshots found." in result.output

    def test_list_after_save(self, project, snaps):
        runner.invoke(app, ["baseline", "save", str(project), "--snapshots-dir", snaps])
        result = runner.invoke(app, ["snapshots", "list", "--snapshots-dir", snaps])
        assert result.exit_code == 0
        assert "No snapshots found." not in result.output

    def test_cleanup_keeps_recent(self, project, snaps):
        runner.invoke(app, ["baseline", "save", str(project), "--snapshots-dir", snaps])
        result = runner.invoke(app, ["snapshots", "cleanup", "--snapshots-dir", snaps])
        assert result.exit_code == 0
        assert "Removed 0 snapshot(s)." in result.output
