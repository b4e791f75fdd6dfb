from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from etterna.judge import Judge
from etterna.models import Hit, NoteAndHitSeconds, ScoringResult
from etterna.numeric import as_f32_array, require_sorted
from etterna.wife import Wife

logger = logging.getLogger(__name__)

f32 = np.float32


class ScoringSystem(ABC):
    """Assigns the hits of one lane to its notes and sums up the wife points."""

    name: str

    def evaluate(self, lane: NoteAndHitSeconds, judge: Judge, wife: Wife) -> ScoringResult:
        require_sorted(lane.note_seconds, "note seconds")
        require_sorted(lane.hit_seconds, "hit seconds")
        return self._evaluate(
            as_f32_array(lane.note_seconds),
            as_f32_array(lane.hit_seconds),
            judge,
            wife,
        )

    @abstractmethod
    def _evaluate(
        self,
        notes: np.ndarray,
        hits: np.ndarray,
        judge: Judge,
        wife: Wife,
    ) -> ScoringResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NaiveScorer(ScoringSystem):
    """Each hit, in order, claims the closest unclaimed note inside the bad window.

    Hits that find no note are ignored. Every note left unclaimed counts as a miss.
    """

    name = "naive"

    def _evaluate(
        self,
        notes: np.ndarray,
        hits: np.ndarray,
        judge: Judge,
        wife: Wife,
    ) -> ScoringResult:
        bad_window = f32(judge.bad_window)
        claimed = np.zeros(len(notes), dtype=bool)
        wifescore_sum = f32(0.0)

        for hit in hits:
            deviations = np.abs(notes - hit)
            eligible = ~claimed & (deviations <= bad_window)
            if not eligible.any():
                continue
            # argmin returns the first minimum, so the earliest note wins ties
            best = int(np.argmin(np.where(eligible, deviations, np.inf)))
            claimed[best] = True
            wifescore_sum += f32(wife.calc(Hit(float(hit - notes[best])), judge))

        miss_weight = f32(wife.MISS_WEIGHT)
        for _ in range(int(np.count_nonzero(~claimed))):
            wifescore_sum += miss_weight

        return ScoringResult(float(wifescore_sum), len(notes))


@dataclass(frozen=True)
class _Candidate:
    distance: np.float32
    hit_idx: int
    note_idx: int


class MatchingScorer(ScoringSystem):
    """One-to-one assignment that pairs the globally closest hit and note first.

    Candidate pairs are all (hit, note) combinations within the bad window. They are
    claimed in order of distance, ties going to the earlier hit and then the earlier
    note. Unclaimed notes are misses; unclaimed hits are stray taps, which are judged
    and score the miss weight as well.
    """

    name = "matching"

    def _candidates(self, notes: np.ndarray, hits: np.ndarray, bad_window: np.float32) -> list[_Candidate]:
        candidates: list[_Candidate] = []
        # Search bounds are padded; the exact window check happens on the deviations
        lower = np.searchsorted(notes, hits - bad_window * f32(2.0), side="left")
        upper = np.searchsorted(notes, hits + bad_window * f32(2.0), side="right")
        for hit_idx, hit in enumerate(hits):
            for note_idx in range(int(lower[hit_idx]), int(upper[hit_idx])):
                distance = abs(hit - notes[note_idx])
                if distance <= bad_window:
                    candidates.append(_Candidate(distance, hit_idx, note_idx))
        candidates.sort(key=lambda c: (c.distance, c.hit_idx, c.note_idx))
        return candidates

    def _evaluate(
        self,
        notes: np.ndarray,
        hits: np.ndarray,
        judge: Judge,
        wife: Wife,
    ) -> ScoringResult:
        note_to_hit: dict[int, int] = {}
        matched_hits: set[int] = set()
        for candidate in self._candidates(notes, hits, f32(judge.bad_window)):
            if candidate.note_idx in note_to_hit or candidate.hit_idx in matched_hits:
                continue
            note_to_hit[candidate.note_idx] = candidate.hit_idx
            matched_hits.add(candidate.hit_idx)

        miss_weight = f32(wife.MISS_WEIGHT)
        wifescore_sum = f32(0.0)
        for note_idx, note in enumerate(notes):
            hit_idx = note_to_hit.get(note_idx)
            if hit_idx is None:
                wifescore_sum += miss_weight
            else:
                wifescore_sum += f32(wife.calc(Hit(float(hits[hit_idx] - note)), judge))

        num_stray_taps = len(hits) - len(matched_hits)
        for _ in range(num_stray_taps):
            wifescore_sum += miss_weight
        if num_stray_taps:
            logger.debug("%d stray taps on lane with %d notes", num_stray_taps, len(notes))

        return ScoringResult(float(wifescore_sum), len(notes) + num_stray_taps)


NAIVE = NaiveScorer()
MATCHING = MatchingScorer()
SCORING_SYSTEMS: dict[str, ScoringSystem] = {NAIVE.name: NAIVE, MATCHING.name: MATCHING}


def scoring_system_by_name(name: str) -> ScoringSystem:
    system = SCORING_SYSTEMS.get(name.strip().lower())
    if system is None:
        raise ValueError(f"unknown scoring system: {name} (expected naive or matching)")
    return system
