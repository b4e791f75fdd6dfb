from __future__ import annotations

import pytest

from etterna.judge import J4
from etterna.models import NoteAndHitSeconds
from etterna.scoring import MATCHING, NAIVE, MatchingScorer, NaiveScorer, scoring_system_by_name
from etterna.wife import WIFE3, wife3


def _score(system, notes: list[float], hits: list[float]) -> float:
    result = system.evaluate(NoteAndHitSeconds(notes, hits), J4, WIFE3)
    return result.wifescore_sum / result.num_judged_notes


def w(deviation: float) -> float:
    return wife3(deviation, J4)


# (notes, hits, expected naive wifescore, expected matching wifescore)
CASES = [
    pytest.param(
        [1.0, 2.0, 3.0, 4.0],
        [1.0, 2.0, 3.0, 4.0],
        w(0.0),
        w(0.0),
        id="identical",
    ),
    pytest.param(
        [1.0, 2.0, 3.0, 4.0],
        [0.9, 3.1, 4.1],
        (w(0.1) + w(1.0) + w(0.1) + w(0.1)) / 4,
        (w(0.1) + w(1.0) + w(0.1) + w(0.1)) / 4,
        id="one-missed-note",
    ),
    pytest.param(
        [0.10, 0.20, 0.30, 0.40],
        [0.09, 0.10, 0.30, 0.40],
        (w(0.01) + w(0.10) + w(0.0) + w(0.0)) / 4,
        (w(0.0) + w(0.11) + w(0.0) + w(0.0)) / 4,
        id="two-hits-near-one-note",
    ),
    pytest.param(
        [0.05, 0.10, 0.15, 0.20],
        [0.01, 0.02, 0.03, 0.04, 0.05, 0.10, 0.15, 0.20],
        (w(0.04) + w(0.08) + w(0.12) + w(0.16)) / 4,
        (w(0.0) * 4 + w(1.0) * 4) / 8,
        id="early-stray-cluster",
    ),
    pytest.param(
        [0.05, 0.10, 0.15, 0.20],
        [0.01, 0.02, 0.03, 0.04],
        (w(0.04) + w(0.08) + w(0.12) + w(0.16)) / 4,
        (w(0.01) + w(0.07) + w(0.13) + w(1.0) + w(1.0)) / 5,
        id="all-hits-early",
    ),
    pytest.param(
        [0.05, 0.10, 0.15, 0.20],
        [],
        w(1.0),
        w(1.0),
        id="no-hits",
    ),
]


@pytest.mark.parametrize(("notes", "hits", "naive", "matching"), CASES)
def test_scoring_systems_against_reference_values(
    notes: list[float],
    hits: list[float],
    naive: float,
    matching: float,
) -> None:
    assert _score(NAIVE, notes, hits) == pytest.approx(naive, abs=1e-5)
    assert _score(MATCHING, notes, hits) == pytest.approx(matching, abs=1e-5)


def test_matching_counts_stray_taps_as_judged() -> None:
    result = MatchingScorer().evaluate(
        NoteAndHitSeconds([0.05, 0.10, 0.15, 0.20], [0.01, 0.02, 0.03, 0.04]), J4, WIFE3
    )
    assert result.num_judged_notes == 5


def test_naive_ignores_stray_taps() -> None:
    result = NaiveScorer().evaluate(NoteAndHitSeconds([1.0], [0.0, 1.0, 5.0]), J4, WIFE3)
    assert result.num_judged_notes == 1
    assert result.wifescore_sum == pytest.approx(1.0)


def test_hits_outside_bad_window_never_claim_notes() -> None:
    lane = NoteAndHitSeconds([1.0], [1.5])
    naive = NAIVE.evaluate(lane, J4, WIFE3)
    matching = MATCHING.evaluate(lane, J4, WIFE3)
    assert naive.wifescore_sum == pytest.approx(WIFE3.MISS_WEIGHT)
    assert naive.num_judged_notes == 1
    assert matching.wifescore_sum == pytest.approx(2 * WIFE3.MISS_WEIGHT)
    assert matching.num_judged_notes == 2


def test_each_note_claimed_once() -> None:
    lane = NoteAndHitSeconds([1.0, 1.05], [1.0, 1.0, 1.0])
    matching = MATCHING.evaluate(lane, J4, WIFE3)
    assert matching.num_judged_notes == 3
    assert matching.wifescore_sum == pytest.approx(w(0.0) + w(0.05) + WIFE3.MISS_WEIGHT, abs=1e-5)
    naive = NAIVE.evaluate(lane, J4, WIFE3)
    assert naive.wifescore_sum == pytest.approx(w(0.0) + w(0.05), abs=1e-5)


@pytest.mark.parametrize("system", [NAIVE, MATCHING], ids=lambda system: system.name)
def test_unsorted_input_fails_fast(system) -> None:
    with pytest.raises(ValueError, match="hit seconds must be sorted"):
        system.evaluate(NoteAndHitSeconds([1.0, 2.0], [2.0, 1.0]), J4, WIFE3)
    with pytest.raises(ValueError, match="note seconds must be sorted"):
        system.evaluate(NoteAndHitSeconds([2.0, 1.0], [1.0, 2.0]), J4, WIFE3)


def test_scoring_system_by_name() -> None:
    assert scoring_system_by_name("Matching") is MATCHING
    assert scoring_system_by_name("naive") is NAIVE
    with pytest.raises(ValueError, match="unknown scoring system"):
        scoring_system_by_name("optimal")
