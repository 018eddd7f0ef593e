"""Tests for the `python -m coach` entrypoint."""
import json
from pathlib import Path

import pytest

from coach.__main__ import main


@pytest.fixture(name="snapshot_path")
def snapshot_path_fixture(tmp_path: Path, snapshot: dict) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot), encoding="utf-8")
    return path


def run_cli(capsys, *argv: str) -> dict:
    assert main(list(argv)) == 0
    return json.loads(capsys.readouterr().out)


class TestCli:
    def test_streaks(self, capsys, snapshot_path):
        out = run_cli(capsys, "streaks", str(snapshot_path), "--now", "2025-01-15T20:00:00")
        assert out == {"current_streak": 2, "longest_streak": 2, "last_active_date": "2025-01-15"}

    def test_nutrition_uses_week_start(self, capsys, snapshot_path):
        out = run_cli(
            capsys, "nutrition", str(snapshot_path),
            "--now", "2025-01-15T20:00:00", "--week-start", "2025-01-14",
        )
        assert out["total_days"] == 1
        assert out["days_under"] == 1

    def test_recovery(self, capsys, snapshot_path):
        out = run_cli(capsys, "recovery", str(snapshot_path), "--now", "2025-01-15T20:00:00")
        assert out["weekly_intensity_score"] == 5
        assert out["needs_recovery"] is False
        assert out["recent_activities"][0]["activity_type"] == "bjj"

    def test_weight(self, capsys, snapshot_path):
        out = run_cli(
            capsys, "weight", str(snapshot_path), "--now", "2025-01-15T20:00:00", "--window-days", "30",
        )
        assert out["weekly_rate_of_change"] == pytest.approx(3.0 / 30 * -7)
        assert out["direction"] == "losing"

    def test_report(self, capsys, snapshot_path):
        out = run_cli(
            capsys, "report", str(snapshot_path),
            "--now", "2025-01-15T20:00:00", "--week-start", "2025-01-09",
        )
        assert out["workouts_completed"] == 3
        assert out["week_start"] == "2025-01-09"
        assert out["nutrition"]["adherence_pct"] == 50

    def test_invalid_row_exits_nonzero(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"measurements": [{"measured_at": "2025-01-15", "weight": -1}]}))
        assert main(["weight", str(path), "--now", "2025-01-15T20:00:00"]) == 1

    def test_missing_file_exits_nonzero(self, tmp_path):
        assert main(["streaks", str(tmp_path / "missing.json")]) == 1

    def test_unknown_command(self, snapshot_path):
        with pytest.raises(SystemExit):
            main(["sleep", str(snapshot_path)])
