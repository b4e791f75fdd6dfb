from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import numpy as np

from etterna.judge import Judge
from etterna.models import FastestComboInfo, Hit, NoteAndHitSeconds, TapJudgements
from etterna.note_subsets import find_fastest_combo_in_score
from etterna.timing_info import TimingInfo
from etterna.wife import Wife

logger = logging.getLogger(__name__)

# Replay files write misses as a deviation of 1.0; anything at or beyond the 180ms
# bad window is read as a miss.
MISS_THRESHOLD = float(np.float32(0.18) - np.finfo(np.float32).eps)

_TAP_NOTE_TYPES = {1, 2}
_MINE_NOTE_TYPE = 4
_IGNORED_NOTE_TYPES = {5, 7}


@dataclass(frozen=True)
class ReplayFileNote:
    tick: int
    deviation: float
    column: int

    def hit(self) -> Hit:
        if abs(self.deviation) >= MISS_THRESHOLD:
            return Hit.miss()
        return Hit(self.deviation)


@dataclass
class ReplayFileData:
    notes: list[ReplayFileNote] = field(default_factory=list)
    num_mine_hits: int = 0
    num_hold_drops: int = 0

    def hits(self) -> list[Hit]:
        return [note.hit() for note in self.notes]

    def num_lanes(self) -> int:
        if not self.notes:
            return 0
        return max(note.column for note in self.notes) + 1

    def note_and_hit_seconds(self, timing_info: TimingInfo, num_lanes: int = 4) -> list[NoteAndHitSeconds]:
        """Split the replay into per-lane sorted note and hit seconds.

        Missed notes contribute a note but no hit.
        """
        if num_lanes < self.num_lanes():
            raise ValueError(f"replay uses {self.num_lanes()} lanes, more than {num_lanes}")
        by_lane: list[list[ReplayFileNote]] = [[] for _ in range(num_lanes)]
        for note in self.notes:
            by_lane[note.column].append(note)

        lanes: list[NoteAndHitSeconds] = []
        for lane_notes in by_lane:
            lane_notes.sort(key=lambda note: note.tick)
            note_seconds = timing_info.ticks_to_seconds([note.tick for note in lane_notes])
            hit_seconds = [
                float(np.float32(second) + np.float32(note.deviation))
                for second, note in zip(note_seconds, lane_notes)
                if not note.hit().was_missed()
            ]
            hit_seconds.sort()
            lanes.append(NoteAndHitSeconds(note_seconds=note_seconds, hit_seconds=hit_seconds))
        return lanes

    def fastest_combo(
        self,
        timing_info: TimingInfo,
        judge: Judge,
        min_num_notes: int,
        max_num_notes: int,
        wife: Wife | None = None,
        rate: float = 1.0,
    ) -> FastestComboInfo:
        """Fastest stretch of notes across all lanes that the player hit without breaking combo.

        With ``wife`` the speed counts wife points per second instead of notes.
        """
        ordered = sorted(self.notes, key=lambda note: note.tick)
        seconds = timing_info.ticks_to_seconds([note.tick for note in ordered])
        hits = [note.hit() for note in ordered]
        wife_pts = None if wife is None else [wife.calc(hit, judge) for hit in hits]
        return find_fastest_combo_in_score(
            seconds,
            [hit.is_cb(judge) for hit in hits],
            min_num_notes,
            max_num_notes,
            wife_pts=wife_pts,
            rate=rate,
        )


def parse_replay(data: bytes) -> ReplayFileData:
    """Parse a ReplayV2 file. Invalid lines are skipped with a warning.

    Lines look like ``<tick> <deviation> <column>[ <note type>]``; a line starting with
    ``H`` records a dropped hold.
    """
    replay = ReplayFileData()
    for line_no, raw_line in enumerate(data.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith(b"H"):
            replay.num_hold_drops += 1
            continue

        tokens = line.split(b" ", 2)
        if len(tokens) < 3 or not tokens[2]:
            logger.warning("replay line %d: expected at least 3 tokens, skipping", line_no)
            continue
        try:
            tick = int(tokens[0])
            deviation = float(tokens[1])
        except ValueError:
            logger.warning("replay line %d: invalid tick or deviation, skipping", line_no)
            continue
        if tick < 0:
            logger.warning("replay line %d: negative tick, skipping", line_no)
            continue

        remainder = tokens[2]
        column = remainder[0] - ord("0")
        note_type = remainder[2] - ord("0") if len(remainder) >= 3 else 1
        if not 0 <= column <= 9:
            logger.warning("replay line %d: invalid column, skipping", line_no)
            continue

        if note_type in _TAP_NOTE_TYPES:
            replay.notes.append(ReplayFileNote(tick, float(np.float32(deviation)), column))
        elif note_type == _MINE_NOTE_TYPE:
            # Mines are only written when they were hit
            replay.num_mine_hits += 1
        elif note_type in _IGNORED_NOTE_TYPES:
            continue
        else:
            logger.warning("replay line %d: unexpected note type %d", line_no, note_type)
    return replay


def longest_combo(hits: list[Hit], hit_filter: Callable[[Hit], bool]) -> int:
    """Longest streak of consecutive hits accepted by ``hit_filter``.

    Misses never pass, the filter is not called for them.
    """
    longest = 0
    current = 0
    for hit in hits:
        if not hit.was_missed() and hit_filter(hit):
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def tap_judgements(hits: list[Hit], judge: Judge) -> TapJudgements:
    judgements = TapJudgements()
    for hit in hits:
        judgements.add(hit.classify(judge))
    return judgements


def mean_deviation(hits: list[Hit]) -> float:
    """Mean signed deviation of all non-missed hits; NaN if every note was missed."""
    deviations = [hit.deviation for hit in hits if hit.deviation is not None]
    if not deviations:
        return float("nan")
    total = np.float32(0.0)
    for deviation in deviations:
        total += np.float32(deviation)
    return float(total / np.float32(len(deviations)))
