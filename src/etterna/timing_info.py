from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from etterna.numeric import require_sorted

TICKS_PER_BEAT = 48


class BpmStringParseError(ValueError):
    pass


@dataclass(frozen=True)
class BpmChange:
    beat: float
    bpm: float


@dataclass
class TimingInfo:
    first_bpm: float
    # Chronological, excluding the initial beat 0 entry
    changes: list[BpmChange] = field(default_factory=list)

    @classmethod
    def from_sm_bpm_string(cls, text: str | bytes) -> TimingInfo:
        """Parse a .sm style BPMS string such as ``0.000=120.000,64.000=180.000``."""
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        changes: list[BpmChange] = []
        for pair in text.split(","):
            if "=" not in pair:
                raise BpmStringParseError(f"no equals sign in bpms entry: {pair!r}")
            beat_raw, bpm_raw = pair.split("=", maxsplit=1)
            try:
                beat = float(beat_raw.strip())
            except ValueError as exc:
                raise BpmStringParseError(f"invalid beat: {beat_raw.strip()!r}") from exc
            try:
                bpm = float(bpm_raw.strip())
            except ValueError as exc:
                raise BpmStringParseError(f"invalid bpm: {bpm_raw.strip()!r}") from exc
            if math.isnan(beat) or math.isnan(bpm):
                raise BpmStringParseError("a bpm or beat was NaN")
            if bpm <= 0:
                raise BpmStringParseError(f"bpm must be > 0 (got {bpm})")
            changes.append(BpmChange(beat, bpm))

        changes.sort(key=lambda change: change.beat)
        if changes[0].beat != 0.0:
            raise BpmStringParseError(f"first bpm change is at beat {changes[0].beat}, expected 0")
        return cls(first_bpm=changes[0].bpm, changes=changes[1:])

    def ticks_to_seconds(self, ticks: Sequence[int]) -> list[float]:
        """Convert sorted note ticks (48 per beat) to seconds.

        Positions are tracked in double precision; the returned seconds are single
        precision values. A tick exactly on a bpm change uses the new bpm.
        """
        require_sorted(ticks, "ticks")
        seconds: list[float] = []
        idx = 0
        cursor_beat = 0.0
        cursor_second = 0.0
        beat_time = 60.0 / self.first_bpm

        def convert_up_to(limit_beat: float) -> None:
            nonlocal idx
            while idx < len(ticks) and ticks[idx] / TICKS_PER_BEAT < limit_beat:
                beat = ticks[idx] / TICKS_PER_BEAT
                seconds.append(float(np.float32(cursor_second + (beat - cursor_beat) * beat_time)))
                idx += 1

        for change in self.changes:
            convert_up_to(change.beat)
            cursor_second += beat_time * (change.beat - cursor_beat)
            cursor_beat = change.beat
            beat_time = 60.0 / change.bpm
        convert_up_to(math.inf)
        return seconds
