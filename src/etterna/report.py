from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from etterna.config import reports_path
from etterna.judge import Judge
from etterna.models import NoteAndHitSeconds, Wifescore
from etterna.schemas import validate
from etterna.scoring import ScoringSystem
from etterna.skillsets import ChartSkillsets
from etterna.timeline import SkillTimeline
from etterna.wife import Wife

REPORT_VERSION = "0.1"


def _load_json(path: str | Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as fp:
        return json.load(fp)


def _raise_on_errors(kind: str, errors: list[str]) -> None:
    if errors:
        raise ValueError(f"invalid {kind}: {'; '.join(errors)}")


def parse_lanes_document(payload: dict[str, Any]) -> tuple[list[NoteAndHitSeconds], int, int]:
    _raise_on_errors("lanes document", validate("lanes", payload))
    lanes = [
        NoteAndHitSeconds(
            note_seconds=[float(value) for value in lane["note_seconds"]],
            hit_seconds=[float(value) for value in lane["hit_seconds"]],
        )
        for lane in payload["lanes"]
    ]
    return lanes, int(payload.get("num_mine_hits", 0)), int(payload.get("num_hold_drops", 0))


def load_lanes_document(path: str | Path) -> tuple[list[NoteAndHitSeconds], int, int]:
    """Read ``{"lanes": [...], "num_mine_hits": .., "num_hold_drops": ..}`` from JSON."""
    return parse_lanes_document(_load_json(path))


def parse_scores_document(payload: dict[str, Any]) -> list[tuple[str, ChartSkillsets]]:
    _raise_on_errors("scores document", validate("scores", payload))
    return [
        (str(score["group"]), ChartSkillsets(*[float(value) for value in score["skillsets"]]))
        for score in payload["scores"]
    ]


def load_scores_document(path: str | Path) -> list[tuple[str, ChartSkillsets]]:
    return parse_scores_document(_load_json(path))


def build_rescore_report(
    wifescore: Wifescore,
    lanes: Sequence[NoteAndHitSeconds],
    num_judged_notes: int,
    num_mine_hits: int,
    num_hold_drops: int,
    judge: Judge,
    scoring_system: ScoringSystem,
    wife: Wife,
) -> dict[str, Any]:
    report = {
        "version": REPORT_VERSION,
        "judge": judge.name,
        "wife": wife.name,
        "scoring_system": scoring_system.name,
        "wifescore": {
            "proportion": wifescore.as_proportion(),
            "percent": str(wifescore),
            "grade": wifescore.grade(),
        },
        "counts": {
            "lanes": len(lanes),
            "notes": sum(len(lane.note_seconds) for lane in lanes),
            "hits": sum(len(lane.hit_seconds) for lane in lanes),
            "judged_notes": num_judged_notes,
            "mine_hits": num_mine_hits,
            "hold_drops": num_hold_drops,
        },
    }
    _raise_on_errors("rescore report", validate("rescore_report", report))
    return report


def build_timeline_report(timeline: SkillTimeline[str], num_scores: int, pre_070: bool) -> dict[str, Any]:
    report = {
        "version": REPORT_VERSION,
        "pre_070": pre_070,
        "num_scores": num_scores,
        "changes": [
            {"group": str(group), "skillsets": skillsets.as_dict()} for group, skillsets in timeline.changes
        ],
    }
    _raise_on_errors("timeline report", validate("timeline_report", report))
    return report


def save_report(report: dict[str, Any], kind: str, data_dir: str | Path | None = None) -> Path:
    """Write a report below ``$ETTERNA_HOME/reports`` with a timestamped name."""
    _raise_on_errors(f"{kind} report", validate(f"{kind}_report", report))
    directory = reports_path(data_dir)
    directory.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = directory / f"{kind}_{ts}.json"
    suffix_idx = 1
    while path.exists():
        path = directory / f"{kind}_{ts}_{suffix_idx:02d}.json"
        suffix_idx += 1
    with path.open("w", encoding="utf-8") as fp:
        json.dump(report, fp, ensure_ascii=True, indent=2)
    return path
