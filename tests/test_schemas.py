from __future__ import annotations

from etterna.schemas import validate


def test_lanes_schema_validates() -> None:
    lanes = {
        "lanes": [
            {"note_seconds": [1.0, 2.0], "hit_seconds": [1.01]},
            {"note_seconds": [], "hit_seconds": []},
        ],
        "num_mine_hits": 1,
        "num_hold_drops": 0,
    }
    assert validate("lanes", lanes) == []


def test_lanes_schema_reports_paths() -> None:
    errors = validate("lanes", {"lanes": [{"note_seconds": ["a"], "hit_seconds": []}], "num_mine_hits": -1})
    assert any(error.startswith("lanes/0/note_seconds/0:") for error in errors)
    assert any(error.startswith("num_mine_hits:") for error in errors)


def test_scores_schema_requires_seven_skillsets() -> None:
    good = {"scores": [{"group": "2024-01-01", "skillsets": [1, 2, 3, 4, 5, 6, 7]}]}
    bad = {"scores": [{"group": "2024-01-01", "skillsets": [1, 2, 3]}]}
    assert validate("scores", good) == []
    assert validate("scores", bad) != []


def test_rescore_report_schema_validates() -> None:
    report = {
        "version": "0.1",
        "judge": "J4",
        "wife": "wife3",
        "scoring_system": "matching",
        "wifescore": {"proportion": 0.95, "percent": "95.00%", "grade": "AA"},
        "counts": {"lanes": 4, "notes": 10, "hits": 9, "judged_notes": 10, "mine_hits": 0, "hold_drops": 0},
    }
    assert validate("rescore_report", report) == []
    report["wifescore"]["grade"] = "S"
    assert validate("rescore_report", report) != []


def test_unknown_schema() -> None:
    assert validate("chart", {}) == ["unknown schema: chart"]
