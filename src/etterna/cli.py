from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from etterna import config
from etterna.display import judges_table, render_judgement, render_rescore, timeline_table
from etterna.judge import JUDGES, Judge, judge_by_name
from etterna.models import Hit, InvalidWifescoreError, NoteAndHitSeconds
from etterna.pattern import Pattern
from etterna.rating import (RatingSearchError, calculate_player_overall,
                            calculate_player_skillset_rating,
                            calculate_player_skillset_rating_pre_070,
                            calculate_score_overall)
from etterna.replay import parse_replay
from etterna.report import (build_rescore_report, build_timeline_report,
                            load_lanes_document, load_scores_document,
                            save_report)
from etterna.rescore import evaluate_lanes, wifescore_from_result
from etterna.scoring import ScoringSystem, scoring_system_by_name
from etterna.skillsets import ChartSkillsets, Skillset7, UserSkillsets
from etterna.structs import Rate
from etterna.timeline import SkillTimeline
from etterna.timing_info import TimingInfo
from etterna.wife import Wife, wife_by_name

app = typer.Typer(help="Etterna scoring and rating CLI")
console = Console()
logger = logging.getLogger(__name__)

_RATING_KINDS = {
    "score": calculate_score_overall,
    "player": calculate_player_skillset_rating,
    "player-pre-070": calculate_player_skillset_rating_pre_070,
    "overall": calculate_player_overall,
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    cfg = config.ensure_config()
    level = "DEBUG" if verbose else str(cfg.get("logging", {}).get("level", "WARNING"))
    try:
        config.configure_logging(level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _scoring_settings(
    cfg: dict[str, Any],
    judge_name: str | None,
    wife_name: str | None,
    system_name: str | None,
) -> tuple[Judge, Wife, ScoringSystem]:
    scoring = cfg.get("scoring", {})
    try:
        judge = judge_by_name(judge_name or str(scoring.get("judge", "J4")))
        wife = wife_by_name(wife_name or str(scoring.get("wife", "wife3")))
        system = scoring_system_by_name(system_name or str(scoring.get("system", "matching")))
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return judge, wife, system


def _load_lanes(
    lanes_file: Path | None,
    replay_file: Path | None,
    bpms: str | None,
    num_lanes: int,
) -> tuple[list[NoteAndHitSeconds], int, int]:
    if (lanes_file is None) == (replay_file is None):
        raise typer.BadParameter("pass exactly one of --lanes or --replay")
    if lanes_file is not None:
        try:
            return load_lanes_document(lanes_file)
        except (OSError, ValueError) as exc:
            raise typer.BadParameter(str(exc)) from exc

    if bpms is None:
        raise typer.BadParameter("--replay needs --bpms (e.g. 0.000=120.000)")
    try:
        timing_info = TimingInfo.from_sm_bpm_string(bpms)
        replay = parse_replay(Path(replay_file).read_bytes())
        lanes = replay.note_and_hit_seconds(timing_info, num_lanes=num_lanes)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    logger.debug(
        "replay %s: %d notes, %d mine hits, %d hold drops",
        replay_file,
        len(replay.notes),
        replay.num_mine_hits,
        replay.num_hold_drops,
    )
    return lanes, replay.num_mine_hits, replay.num_hold_drops


def _emit_json(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2))


@app.command("judges")
def judges() -> None:
    console.print(judges_table(list(JUDGES.values())))


@app.command("classify")
def classify(
    deviation_ms: float = typer.Argument(..., help="Hit deviation in milliseconds"),
    judge_name: str | None = typer.Option(None, "--judge"),
    wife_name: str | None = typer.Option(None, "--wife"),
    data_dir: Path | None = typer.Option(None, "--data-dir"),
) -> None:
    cfg = config.ensure_config(data_dir=data_dir)
    judge, wife, _ = _scoring_settings(cfg, judge_name, wife_name, None)
    deviation = deviation_ms / 1000.0
    judgement = judge.classify(deviation)
    points = wife.calc(Hit(deviation), judge)
    console.print(
        f"{judge.name}: {render_judgement(judgement)} "
        f"cb={'yes' if judge.is_cb(deviation) else 'no'} "
        f"{wife.name}={points:.4f}"
    )


@app.command("rescore")
def rescore_command(
    lanes_file: Path | None = typer.Option(None, "--lanes", exists=True, dir_okay=False),
    replay_file: Path | None = typer.Option(None, "--replay", exists=True, dir_okay=False),
    bpms: str | None = typer.Option(None, "--bpms"),
    judge_name: str | None = typer.Option(None, "--judge"),
    wife_name: str | None = typer.Option(None, "--wife"),
    system_name: str | None = typer.Option(None, "--system"),
    as_json: bool = typer.Option(False, "--json"),
    save: bool = typer.Option(False, "--save"),
    data_dir: Path | None = typer.Option(None, "--data-dir"),
) -> None:
    cfg = config.ensure_config(data_dir=data_dir)
    judge, wife, system = _scoring_settings(cfg, judge_name, wife_name, system_name)
    num_lanes = int(cfg.get("scoring", {}).get("num_lanes", 4))
    lanes, num_mine_hits, num_hold_drops = _load_lanes(lanes_file, replay_file, bpms, num_lanes)

    try:
        result = evaluate_lanes(lanes, judge, system, wife)
        wifescore = wifescore_from_result(result, num_mine_hits, num_hold_drops, wife)
        report = build_rescore_report(
            wifescore,
            lanes,
            result.num_judged_notes,
            num_mine_hits,
            num_hold_drops,
            judge,
            system,
            wife,
        )
    except (InvalidWifescoreError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    if save:
        path = save_report(report, "rescore", data_dir=data_dir)
        console.print(f"Saved report: {path}")
    if as_json:
        _emit_json(report)
    else:
        console.print(render_rescore(report))


@app.command("combo")
def combo(
    replay_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    bpms: str = typer.Option(..., "--bpms", help="e.g. 0.000=120.000"),
    min_notes: int = typer.Option(10, "--min-notes", min=1),
    max_notes: int = typer.Option(100, "--max-notes", min=1),
    rate_text: str = typer.Option("1.0x", "--rate"),
    weighted: bool = typer.Option(False, "--weighted", help="Count wife points instead of notes"),
    judge_name: str | None = typer.Option(None, "--judge"),
    wife_name: str | None = typer.Option(None, "--wife"),
    data_dir: Path | None = typer.Option(None, "--data-dir"),
) -> None:
    cfg = config.ensure_config(data_dir=data_dir)
    judge, wife, _ = _scoring_settings(cfg, judge_name, wife_name, None)
    try:
        rate = Rate.from_string(rate_text)
        timing_info = TimingInfo.from_sm_bpm_string(bpms)
        replay = parse_replay(replay_file.read_bytes())
        fastest = replay.fastest_combo(
            timing_info,
            judge,
            min_notes,
            max_notes,
            wife=wife if weighted else None,
            rate=rate.as_float(),
        )
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    if fastest.length == 0:
        console.print("No combo long enough.")
        return
    console.print(
        f"{rate}: length={fastest.length} speed={fastest.speed:.2f} "
        f"from {fastest.start_second:.2f}s to {fastest.end_second:.2f}s"
    )


@app.command("rating")
def rating(
    values: list[float] = typer.Argument(..., help="Ratings to aggregate"),
    kind: str = typer.Option("player", "--kind", help="score, player, player-pre-070 or overall"),
) -> None:
    calculate = _RATING_KINDS.get(kind.strip().lower())
    if calculate is None:
        raise typer.BadParameter(f"kind must be one of {', '.join(_RATING_KINDS)}")
    try:
        result = calculate(values)
    except RatingSearchError as exc:
        raise typer.BadParameter(str(exc)) from exc
    console.print(f"{result:.4f}")


@app.command("overall")
def overall(
    values: list[float] = typer.Argument(..., help="stream js hs stamina jackspeed chordjack tech"),
    player: bool = typer.Option(False, "--player/--chart"),
    pre_070: bool = typer.Option(False, "--pre-070"),
    data_dir: Path | None = typer.Option(None, "--data-dir"),
) -> None:
    cfg = config.ensure_config(data_dir=data_dir)
    pre_070 = pre_070 or bool(cfg.get("rating", {}).get("pre_070", False))
    try:
        skillsets = (UserSkillsets if player else ChartSkillsets).from_list(values)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    result = skillsets.with_calculated_overall(pre_070=pre_070)
    table = Table(title="Player rating" if player else "Chart difficulty")
    table.add_column("Skillset")
    table.add_column("Value", justify="right")
    table.add_row("Overall", f"{result.overall:.2f}")
    for skillset in Skillset7:
        table.add_row(str(skillset), f"{result.get(skillset):.2f}")
    console.print(table)


@app.command("timeline")
def timeline(
    scores_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    pre_070: bool = typer.Option(False, "--pre-070"),
    workers: int | None = typer.Option(None, "--workers", min=1),
    as_json: bool = typer.Option(False, "--json"),
    save: bool = typer.Option(False, "--save"),
    data_dir: Path | None = typer.Option(None, "--data-dir"),
) -> None:
    cfg = config.ensure_config(data_dir=data_dir)
    pre_070 = pre_070 or bool(cfg.get("rating", {}).get("pre_070", False))
    if workers is None:
        workers = cfg.get("timeline", {}).get("max_workers")
    try:
        scores = load_scores_document(scores_file)
        skill_timeline = SkillTimeline.calculate(scores, pre_070=pre_070, max_workers=workers)
        report = build_timeline_report(skill_timeline, num_scores=len(scores), pre_070=pre_070)
    except (OSError, ValueError, RatingSearchError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    if save:
        path = save_report(report, "timeline", data_dir=data_dir)
        console.print(f"Saved report: {path}")
    if as_json:
        _emit_json(report)
    else:
        console.print(timeline_table(report))


@app.command("pattern")
def pattern(text: str = typer.Argument(...)) -> None:
    parsed = Pattern.parse_taps(text)
    keymode = parsed.keymode()
    if keymode is None:
        console.print("Empty pattern.")
        return
    console.print(f"{keymode}k, {len(parsed.rows)} rows, {parsed.num_notes()} notes")
    for row in parsed.rows:
        console.print("".join("x" if lane in row else "." for lane in range(keymode)))


@app.command("config")
def show_config(data_dir: Path | None = typer.Option(None, "--data-dir")) -> None:
    cfg = config.ensure_config(data_dir=data_dir)
    console.print(f"Config: {config.config_path(data_dir)}")
    _emit_json(cfg)


if __name__ == "__main__":
    app()
