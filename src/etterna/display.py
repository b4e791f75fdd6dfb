from __future__ import annotations

from typing import Any

from rich.table import Table

from etterna.judge import Judge
from etterna.models import TapJudgement
from etterna.skillsets import Skillset8


def _hex_color(judgement: TapJudgement) -> str:
    red, green, blue = judgement.color
    return f"#{red:02x}{green:02x}{blue:02x}"


def render_judgement(judgement: TapJudgement) -> str:
    return f"[{_hex_color(judgement)}]{judgement.value}[/]"


def judges_table(judges: list[Judge]) -> Table:
    table = Table(title="Judges (windows in ms)")
    table.add_column("Judge")
    for judgement in list(TapJudgement)[:-1]:
        table.add_column(judgement.value, justify="right", style=_hex_color(judgement))
    table.add_column("hold", justify="right")
    table.add_column("roll", justify="right")
    table.add_column("mine", justify="right")
    table.add_column("scale", justify="right")
    for judge in judges:
        table.add_row(
            judge.name,
            *[f"{window * 1000:.2f}" for window in judge.tap_windows()],
            f"{judge.hold_window * 1000:.1f}",
            f"{judge.roll_window * 1000:.1f}",
            f"{judge.mine_window * 1000:.1f}",
            f"{judge.timing_scale:.2f}",
        )
    return table


def render_rescore(report: dict[str, Any]) -> str:
    wifescore = report.get("wifescore", {})
    counts = report.get("counts", {})
    return "\n".join([
        f"{wifescore.get('percent', '-')} ({wifescore.get('grade', '-')})",
        (
            f"judge={report.get('judge', '-')} "
            f"wife={report.get('wife', '-')} "
            f"system={report.get('scoring_system', '-')}"
        ),
        (
            f"lanes={counts.get('lanes', 0)} "
            f"notes={counts.get('notes', 0)} "
            f"hits={counts.get('hits', 0)} "
            f"judged={counts.get('judged_notes', 0)} "
            f"mines={counts.get('mine_hits', 0)} "
            f"holds_dropped={counts.get('hold_drops', 0)}"
        ),
    ])


def timeline_table(report: dict[str, Any]) -> Table:
    title = "Skill timeline (pre-0.70)" if report.get("pre_070") else "Skill timeline"
    table = Table(title=title)
    table.add_column("Group")
    for skillset in Skillset8:
        table.add_column(str(skillset), justify="right")
    for change in report.get("changes", []):
        skillsets = change.get("skillsets", {})
        table.add_row(
            str(change.get("group", "-")),
            *[f"{skillsets.get(skillset.value, 0.0):.2f}" for skillset in Skillset8],
        )
    return table
