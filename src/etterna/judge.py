from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from etterna.models import TapJudgement


@dataclass(frozen=True)
class Judge:
    """Timing windows of one judge difficulty, in seconds (+/- around the note)."""

    name: str
    marvelous_window: float
    perfect_window: float
    great_window: float
    good_window: float
    bad_window: float
    hold_window: float
    roll_window: float
    # Window in which a mine can be hit, assuming no notes are prioritized
    mine_window: float
    timing_scale: float

    def __post_init__(self) -> None:
        windows = self.tap_windows()
        for label, value in [
            *zip(["marvelous", "perfect", "great", "good", "bad"], windows),
            ("hold", self.hold_window),
            ("roll", self.roll_window),
            ("mine", self.mine_window),
        ]:
            if value < 0:
                raise ValueError(f"{label} window must be >= 0")
        if any(lower > upper for lower, upper in zip(windows, windows[1:])):
            raise ValueError("tap windows must increase from marvelous to bad")
        if self.timing_scale <= 0:
            raise ValueError("timing scale must be > 0")

    def tap_windows(self) -> list[float]:
        return [
            self.marvelous_window,
            self.perfect_window,
            self.great_window,
            self.good_window,
            self.bad_window,
        ]

    def classify(self, deviation: float) -> TapJudgement:
        """First judgement whose window contains |deviation|; MISS past the bad window."""
        deviation_abs = abs(np.float32(deviation))
        for judgement, window in zip(TapJudgement, self.tap_windows()):
            if deviation_abs <= np.float32(window):
                return judgement
        return TapJudgement.MISS

    def is_cb(self, deviation: float) -> bool:
        """Anything worse than a great breaks combo."""
        return bool(abs(np.float32(deviation)) > np.float32(self.great_window))

    def is_marv(self, deviation: float) -> bool:
        return self.classify(deviation) is TapJudgement.MARVELOUS

    def is_perf(self, deviation: float) -> bool:
        return self.classify(deviation) is TapJudgement.PERFECT

    def is_great(self, deviation: float) -> bool:
        return self.classify(deviation) is TapJudgement.GREAT

    def is_good(self, deviation: float) -> bool:
        return self.classify(deviation) is TapJudgement.GOOD

    def is_bad(self, deviation: float) -> bool:
        return self.classify(deviation) is TapJudgement.BAD

    def is_miss(self, deviation: float) -> bool:
        return self.classify(deviation) is TapJudgement.MISS


# J1-J3 were removed from the game in 0.69.0
J1 = Judge("J1", 0.03375, 0.0675, 0.135, 0.2025, 0.27, 0.375, 0.75, 0.075, 1.50)
J2 = Judge("J2", 0.029925, 0.05985, 0.1197, 0.17955, 0.2394, 0.3325, 0.665, 0.075, 1.33)
J3 = Judge("J3", 0.0261, 0.0522, 0.1044, 0.1566, 0.2088, 0.29, 0.58, 0.075, 1.16)
J4 = Judge("J4", 0.0225, 0.045, 0.09, 0.135, 0.18, 0.25, 0.5, 0.075, 1.00)
# From J5 on the bad window is locked to J4's 180ms
J5 = Judge("J5", 0.0189, 0.0378, 0.0756, 0.1134, 0.18, 0.21, 0.42, 0.075, 0.84)
J6 = Judge("J6", 0.01485, 0.0297, 0.0594, 0.0891, 0.18, 0.165, 0.33, 0.075, 0.66)
J7 = Judge("J7", 0.01125, 0.0225, 0.045, 0.0675, 0.18, 0.125, 0.25, 0.075, 0.50)
J8 = Judge("J8", 0.007425, 0.01485, 0.0297, 0.04455, 0.18, 0.0825, 0.25, 0.075, 0.33)
J9 = Judge("J9", 0.0045, 0.009, 0.018, 0.027, 0.18, 0.05, 0.25, 0.075, 0.20)

JUDGES: dict[str, Judge] = {judge.name: judge for judge in [J1, J2, J3, J4, J5, J6, J7, J8, J9]}


def judge_by_name(name: str) -> Judge:
    key = name.strip().upper()
    if key.isdigit():
        key = f"J{key}"
    judge = JUDGES.get(key)
    if judge is None:
        raise ValueError(f"unknown judge: {name} (expected one of {', '.join(JUDGES)})")
    return judge
