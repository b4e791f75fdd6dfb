from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture()
def etterna_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / ".etterna-py"
    monkeypatch.setenv("ETTERNA_HOME", str(home))
    return home


@pytest.fixture()
def sample_replay_bytes() -> bytes:
    return (
        b"0 0.010000 0\n"
        b"48 -0.020000 1 1\n"
        b"96 1.000000 2\n"
        b"144 0.005000 3 4\n"
        b"H 10 1\n"
        b"bad line here\n"
        b"192 0.000000 0 5\n"
        b"200 0.000000 1 9\n"
    )


@pytest.fixture()
def lanes_json_path(tmp_path: Path) -> Path:
    path = tmp_path / "lanes.json"
    payload = {
        "lanes": [
            {"note_seconds": [1.0, 2.0, 3.0, 4.0], "hit_seconds": [1.0, 2.0, 3.0, 4.0]},
            {"note_seconds": [1.5, 2.5], "hit_seconds": [1.51, 2.49]},
            {"note_seconds": [], "hit_seconds": []},
            {"note_seconds": [0.5], "hit_seconds": []},
        ],
        "num_mine_hits": 0,
        "num_hold_drops": 0,
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def scores_json_path(tmp_path: Path) -> Path:
    path = tmp_path / "scores.json"
    payload = {
        "scores": [
            {"group": "2024-01-01", "skillsets": [21, 24, 23, 14, 17, 25, 24]},
            {"group": "2024-01-01", "skillsets": [22, 20, 19, 18, 16, 21, 20]},
            {"group": "2024-01-01", "skillsets": [18, 19, 20, 21, 22, 23, 24]},
            {"group": "2024-01-02", "skillsets": [25, 26, 24, 23, 20, 22, 23]},
            {"group": "2024-01-02", "skillsets": [27, 25, 26, 22, 21, 24, 25]},
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
