from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from etterna.judge import Judge
from etterna.models import Hit, InvalidWifescoreError, NoteAndHitSeconds, ScoringResult, Wifescore
from etterna.numeric import require_sorted
from etterna.scoring import ScoringSystem
from etterna.wife import Wife

f32 = np.float32


def evaluate_lanes(
    lanes: Sequence[NoteAndHitSeconds],
    judge: Judge,
    scoring_system: ScoringSystem,
    wife: Wife,
) -> ScoringResult:
    result = ScoringResult()
    for idx, lane in enumerate(lanes):
        require_sorted(lane.hit_seconds, f"hit seconds of lane {idx}")
        require_sorted(lane.note_seconds, f"note seconds of lane {idx}")
        result = result + scoring_system.evaluate(lane, judge, wife)
    return result


def wifescore_from_result(
    result: ScoringResult,
    num_mine_hits: int,
    num_hold_drops: int,
    wife: Wife,
) -> Wifescore:
    """Fold mine and hold penalties into an already evaluated result and normalise it.

    Raises InvalidWifescoreError when nothing was judged or the single precision sum
    overflowed.
    """
    if num_mine_hits < 0 or num_hold_drops < 0:
        raise ValueError("mine hits and hold drops must be >= 0")
    if result.num_judged_notes == 0:
        raise InvalidWifescoreError("no judged notes; the lanes were empty")

    with np.errstate(over="ignore", invalid="ignore"):
        wifescore_sum = f32(result.wifescore_sum)
        wifescore_sum += f32(wife.MINE_HIT_WEIGHT) * f32(num_mine_hits)
        wifescore_sum += f32(wife.HOLD_DROP_WEIGHT) * f32(num_hold_drops)
        proportion = float(wifescore_sum / f32(result.num_judged_notes))
    wifescore = Wifescore.from_proportion(proportion)
    if wifescore is None:
        raise InvalidWifescoreError(f"rescore produced an invalid wifescore: {proportion}")
    return wifescore


def rescore(
    lanes: Sequence[NoteAndHitSeconds],
    num_mine_hits: int,
    num_hold_drops: int,
    judge: Judge,
    scoring_system: ScoringSystem,
    wife: Wife,
) -> Wifescore:
    """Score per-lane note and hit seconds with the given judge, scorer and wife version.

    Raises InvalidWifescoreError when nothing was judged or the result is not a valid
    wifescore.
    """
    if num_mine_hits < 0 or num_hold_drops < 0:
        raise ValueError("mine hits and hold drops must be >= 0")
    result = evaluate_lanes(lanes, judge, scoring_system, wife)
    return wifescore_from_result(result, num_mine_hits, num_hold_drops, wife)


def rescore_from_note_hits(
    note_hits: Iterable[Hit],
    num_mine_hits: int,
    num_hold_drops: int,
    judge: Judge,
    wife: Wife,
) -> Wifescore | None:
    """Judge conversion for hits that are already matched to notes.

    Returns None if ``note_hits`` is empty.
    """
    return wife.apply(note_hits, num_mine_hits, num_hold_drops, judge)
