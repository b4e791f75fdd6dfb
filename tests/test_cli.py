from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from etterna.cli import app
from etterna.scoring import MatchingScorer

runner = CliRunner()

FENNEC = ["22.31", "22.37", "18.99", "21.53", "14.12", "15.85", "21.47"]


def test_judges_command(etterna_home: Path) -> None:
    result = runner.invoke(app, ["judges"])
    assert result.exit_code == 0
    assert "Judges" in result.stdout


def test_classify_command(etterna_home: Path) -> None:
    result = runner.invoke(app, ["classify", "10"])
    assert result.exit_code == 0
    assert "marvelous" in result.stdout
    assert "cb=no" in result.stdout

    result = runner.invoke(app, ["classify", "120", "--judge", "J7", "--wife", "wife2"])
    assert result.exit_code == 0
    assert "J7" in result.stdout
    assert "cb=yes" in result.stdout
    assert "wife2=" in result.stdout


def test_classify_rejects_unknown_judge(etterna_home: Path) -> None:
    result = runner.invoke(app, ["classify", "10", "--judge", "J12"])
    assert result.exit_code != 0


def test_rescore_command_with_lanes(etterna_home: Path, lanes_json_path: Path) -> None:
    result = runner.invoke(app, ["rescore", "--lanes", str(lanes_json_path)])
    assert result.exit_code == 0
    assert "judge=J4" in result.stdout
    assert "system=matching" in result.stdout

    json_result = runner.invoke(
        app, ["rescore", "--lanes", str(lanes_json_path), "--system", "naive", "--json"]
    )
    assert json_result.exit_code == 0
    report = json.loads(json_result.stdout)
    assert report["scoring_system"] == "naive"
    assert report["counts"]["judged_notes"] == 7


def test_rescore_command_scores_each_lane_once(
    etterna_home: Path,
    lanes_json_path: Path,
    monkeypatch,
) -> None:
    calls: list[int] = []
    original = MatchingScorer.evaluate

    def counting_evaluate(self, lane, judge, wife):
        calls.append(len(lane.note_seconds))
        return original(self, lane, judge, wife)

    monkeypatch.setattr(MatchingScorer, "evaluate", counting_evaluate)
    result = runner.invoke(app, ["rescore", "--lanes", str(lanes_json_path), "--json"])
    assert result.exit_code == 0
    assert calls == [4, 2, 0, 1]


def test_rescore_command_saves_report(etterna_home: Path, lanes_json_path: Path) -> None:
    result = runner.invoke(app, ["rescore", "--lanes", str(lanes_json_path), "--save"])
    assert result.exit_code == 0
    assert "Saved report:" in result.stdout
    assert len(list((etterna_home / "reports").glob("rescore_*.json"))) == 1


def test_rescore_command_with_replay(
    etterna_home: Path,
    tmp_path: Path,
    sample_replay_bytes: bytes,
) -> None:
    replay_path = tmp_path / "replay"
    replay_path.write_bytes(sample_replay_bytes)

    missing_bpms = runner.invoke(app, ["rescore", "--replay", str(replay_path)])
    assert missing_bpms.exit_code != 0

    result = runner.invoke(app, ["rescore", "--replay", str(replay_path), "--bpms", "0=60"])
    assert result.exit_code == 0
    assert "notes=3" in result.stdout
    assert "mines=1" in result.stdout
    assert "holds_dropped=1" in result.stdout


def test_rescore_needs_one_input(etterna_home: Path) -> None:
    result = runner.invoke(app, ["rescore"])
    assert result.exit_code != 0


def test_combo_command(
    etterna_home: Path,
    tmp_path: Path,
    sample_replay_bytes: bytes,
) -> None:
    replay_path = tmp_path / "replay"
    replay_path.write_bytes(sample_replay_bytes)

    result = runner.invoke(
        app,
        ["combo", str(replay_path), "--bpms", "0=60", "--min-notes", "1", "--max-notes", "5", "--rate", "1.5x"],
    )
    assert result.exit_code == 0
    assert "1.50x: length=1 speed=1.50" in result.stdout

    too_long = runner.invoke(app, ["combo", str(replay_path), "--bpms", "0=60", "--min-notes", "3"])
    assert too_long.exit_code == 0
    assert "No combo long enough." in too_long.stdout

    bad_rate = runner.invoke(app, ["combo", str(replay_path), "--bpms", "0=60", "--rate", "fast"])
    assert bad_rate.exit_code != 0


def test_rating_command(etterna_home: Path) -> None:
    result = runner.invoke(app, ["rating", "21", "24", "23", "14", "17", "25", "24", "--kind", "score"])
    assert result.exit_code == 0
    assert "25.2747" in result.stdout

    bad_kind = runner.invoke(app, ["rating", "21", "--kind", "weekly"])
    assert bad_kind.exit_code != 0


def test_overall_command(etterna_home: Path) -> None:
    result = runner.invoke(app, ["overall", *FENNEC, "--pre-070"])
    assert result.exit_code == 0
    assert "Chart difficulty" in result.stdout
    assert "22.37" in result.stdout

    too_few = runner.invoke(app, ["overall", "1", "2", "3"])
    assert too_few.exit_code != 0


def test_timeline_command(etterna_home: Path, scores_json_path: Path) -> None:
    result = runner.invoke(app, ["timeline", str(scores_json_path), "--json", "--workers", "1"])
    assert result.exit_code == 0
    report = json.loads(result.stdout)
    assert len(report["changes"]) == 2
    assert report["num_scores"] == 5
    assert report["pre_070"] is False


def test_pattern_command(etterna_home: Path) -> None:
    result = runner.invoke(app, ["pattern", "[12]34"])
    assert result.exit_code == 0
    assert "4k, 3 rows, 4 notes" in result.stdout
    assert "xx.." in result.stdout

    empty = runner.invoke(app, ["pattern", "zzz"])
    assert empty.exit_code == 0
    assert "Empty pattern." in empty.stdout


def test_config_command(etterna_home: Path) -> None:
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert '"judge": "J4"' in result.stdout
    assert (etterna_home / "config.yaml").exists()
