"""
Smoke tests for the vena-planner CLI.

Tests basic functionality:
- App runs without errors
- Heavy and volume days can be logged
- Today's plan reflects history and autopilot status
- History can be shown, cleared, exported and imported
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from vena_planner.cli.main import app


runner = CliRunner()


@pytest.fixture
def history_file(tmp_path, monkeypatch):
    """History path inside an isolated HOME (no user config is read)."""
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path / "history.jsonl"


def _invoke(*args: str, history: Path):
    return runner.invoke(app, [*args, "--history-path", str(history)])


def _log_heavy(history: Path, date: str, single: str = "455", *extra: str):
    return _invoke("log-heavy", "--single", single, "--date", date, *extra, history=history)


class TestBasics:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "log-heavy" in result.output

    def test_today_on_empty_history(self, history_file):
        result = _invoke("today", "--date", "2026-01-06", "--json", history=history_file)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "NOMINAL"
        assert data["heavy"] is None
        assert data["volume"] == {"weight": 365, "reps": 4, "note": "Wave Start", "is_pause": False}
        assert data["advisory"]["source"] == "heuristic"

    def test_today_human_output(self, history_file):
        _log_heavy(history_file, "2026-01-06", "455", "--rpe", "8", "--quality", "good")
        result = _invoke("today", "--date", "2026-01-09", history=history_file)
        assert result.exit_code == 0, result.output
        assert "460" in result.output
        assert "SYSTEM NOMINAL" in result.output

    def test_invalid_lift(self, history_file):
        result = _invoke("status", "--lift", "deadlift", history=history_file)
        assert result.exit_code == 1


class TestLogging:
    def test_log_heavy_creates_history(self, history_file):
        result = _log_heavy(history_file, "2026-01-06", "455", "--rpe", "8", "--quality", "good")
        assert result.exit_code == 0, result.output
        assert "Next Wave Target: 365 for 3x4" in result.output
        assert history_file.exists()
        assert "2026-01-06" in history_file.read_text(encoding="utf-8")

    def test_log_heavy_json_reports_gates(self, history_file):
        result = _log_heavy(history_file, "2026-01-06", "500", "--rpe", "9.5", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["record"]["gate_flags"] == ["axial_overload"]
        assert len(data["gates"]) == 1

    def test_log_heavy_rejects_bad_quality(self, history_file):
        result = _log_heavy(history_file, "2026-01-06", "455", "--quality", "meh")
        assert result.exit_code == 1

    def test_log_heavy_rejects_bad_yes_no(self, history_file):
        result = _log_heavy(history_file, "2026-01-06", "455", "--overshoot", "maybe")
        assert result.exit_code == 1

    def test_log_volume_without_heavy_day(self, history_file):
        result = _invoke("log-volume", "--weight", "365", history=history_file)
        assert result.exit_code == 1
        assert "log the heavy day first" in result.output

    def test_log_volume_attaches_to_heavy_day(self, history_file):
        _log_heavy(history_file, "2026-01-06")
        result = _invoke("log-volume", "--weight", "365", history=history_file)
        assert result.exit_code == 0, result.output
        assert "3x4" in result.output

        shown = _invoke("show-history", "--json", history=history_file)
        records = json.loads(shown.output)
        assert len(records) == 1
        assert records[0]["volume_weight"] == 365
        assert records[0]["volume_reps"] == 4

        again = _invoke("log-volume", "--weight", "365", history=history_file)
        assert again.exit_code == 1

    def test_wave_steps_up(self, history_file):
        _log_heavy(history_file, "2026-01-06")
        _invoke("log-volume", "--weight", "365", history=history_file)
        result = _log_heavy(history_file, "2026-01-13", "460")
        assert "Next Wave Target: 365 for 3x5" in result.output

    def test_pivot_wave_does_not_move_wave(self, history_file):
        _log_heavy(history_file, "2026-01-06")
        _invoke("log-volume", "--weight", "365", history=history_file)
        _log_heavy(history_file, "2026-01-13")

        before = json.loads(_invoke("today", "--date", "2026-01-16", "--json", history=history_file).output)
        assert (before["volume"]["weight"], before["volume"]["reps"]) == (365, 5)

        logged = _invoke("log-volume", "--weight", "310", "--pivot", history=history_file)
        assert logged.exit_code == 0, logged.output
        assert "3x3" in logged.output

        after = json.loads(_invoke("today", "--date", "2026-01-20", "--json", history=history_file).output)
        assert (after["volume"]["weight"], after["volume"]["reps"]) == (365, 5)

    def test_relog_same_day_keeps_volume_and_skips_fatigue(self, history_file):
        _log_heavy(history_file, "2026-01-06", "500")
        _log_heavy(history_file, "2026-01-13", "490")
        _invoke("log-volume", "--weight", "365", history=history_file)

        result = _log_heavy(history_file, "2026-01-13", "480", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["replaced"] is True
        assert data["record"]["gate_flags"] == []
        assert data["record"]["volume_weight"] == 365

        records = json.loads(_invoke("show-history", "--json", history=history_file).output)
        assert len(records) == 2
        assert records[1]["top_single"] == 480
        assert records[1]["volume_reps"] == 4

    def test_relog_warns(self, history_file):
        _log_heavy(history_file, "2026-01-06", "455")
        result = _log_heavy(history_file, "2026-01-06", "465")
        assert result.exit_code == 0, result.output
        assert "Warning: Replaced the squat heavy day" in result.output


class TestAutopilotFlow:
    def test_two_failed_backdowns_lock_pivot(self, history_file):
        _log_heavy(history_file, "2026-01-06", "500", "--backdown-fail", "yes")
        _log_heavy(history_file, "2026-01-13", "500", "--backdown-fail", "yes")

        status = _invoke("status", "--json", history=history_file)
        assert json.loads(status.output)["status"] == "PROTOCOL-LOCK"

        result = _invoke("today", "--date", "2026-01-20", "--json", history=history_file)
        data = json.loads(result.output)
        assert data["pivot_active"] is True
        assert data["volume"]["reps"] == 3
        # 500 x 0.90 = 450, then -15% under pivot
        assert data["heavy"]["target"] == 385

    def test_lifts_are_independent(self, history_file):
        _log_heavy(history_file, "2026-01-06", "500", "--overshoot", "yes")
        result = _invoke("status", "--lift", "bench", "--json", history=history_file)
        assert json.loads(result.output)["status"] == "NOMINAL"


class TestHistoryCommands:
    def test_show_history_table(self, history_file):
        _log_heavy(history_file, "2026-01-06", "455", "--notes", "fast")
        result = _invoke("show-history", history=history_file)
        assert result.exit_code == 0, result.output
        assert "2026-01-06" in result.output

    def test_clear_history(self, history_file):
        _log_heavy(history_file, "2026-01-06")
        result = _invoke("clear-history", "--force", history=history_file)
        assert result.exit_code == 0
        shown = _invoke("show-history", "--json", history=history_file)
        assert json.loads(shown.output) == []

    def test_plot(self, history_file):
        _log_heavy(history_file, "2026-01-06", "455")
        _log_heavy(history_file, "2026-01-13", "465")
        result = _invoke("plot", history=history_file)
        assert result.exit_code == 0, result.output

    def test_export_import(self, history_file, tmp_path):
        _log_heavy(history_file, "2026-01-06")
        backup = tmp_path / "backup.json"
        exported = _invoke("export", "--output", str(backup), history=history_file)
        assert exported.exit_code == 0, exported.output
        assert backup.exists()

        restored = tmp_path / "restored.jsonl"
        result = _invoke("import", str(backup), "--force", history=restored)
        assert result.exit_code == 0, result.output
        assert "Imported 1 session" in result.output
