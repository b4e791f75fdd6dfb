from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from etterna.judge import Judge


class TapJudgement(Enum):
    MARVELOUS = "marvelous"
    PERFECT = "perfect"
    GREAT = "great"
    GOOD = "good"
    BAD = "bad"
    MISS = "miss"

    @property
    def color(self) -> tuple[int, int, int]:
        return _JUDGEMENT_COLORS[self]

    @property
    def severity(self) -> int:
        return list(TapJudgement).index(self)


_JUDGEMENT_COLORS: dict[TapJudgement, tuple[int, int, int]] = {
    TapJudgement.MARVELOUS: (0x99, 0xCC, 0xFF),
    TapJudgement.PERFECT: (0xF2, 0xCB, 0x30),
    TapJudgement.GREAT: (0x14, 0xCC, 0x8F),
    TapJudgement.GOOD: (0x1A, 0xB2, 0xFF),
    TapJudgement.BAD: (0xFF, 0x1A, 0xB3),
    TapJudgement.MISS: (0xCC, 0x29, 0x29),
}


@dataclass(frozen=True)
class Hit:
    """A judged note: either a hit with a signed deviation in seconds, or a miss.

    A miss carries no timing information (``deviation is None``).
    """

    deviation: float | None = None

    @classmethod
    def miss(cls) -> Hit:
        return cls(deviation=None)

    def was_missed(self) -> bool:
        """True only if the note was never hit, regardless of judge."""
        return self.deviation is None

    def classify(self, judge: Judge) -> TapJudgement:
        if self.deviation is None:
            return TapJudgement.MISS
        return judge.classify(self.deviation)

    def is_within_window(self, window: float) -> bool:
        if self.deviation is None:
            return False
        return bool(abs(np.float32(self.deviation)) <= np.float32(window))

    def is_cb(self, judge: Judge) -> bool:
        if self.deviation is None:
            return True
        return judge.is_cb(self.deviation)

    def is_marv(self, judge: Judge) -> bool:
        return self.classify(judge) is TapJudgement.MARVELOUS

    def is_perf(self, judge: Judge) -> bool:
        return self.classify(judge) is TapJudgement.PERFECT

    def is_great(self, judge: Judge) -> bool:
        return self.classify(judge) is TapJudgement.GREAT

    def is_good(self, judge: Judge) -> bool:
        return self.classify(judge) is TapJudgement.GOOD

    def is_bad(self, judge: Judge) -> bool:
        return self.classify(judge) is TapJudgement.BAD

    def is_considered_miss(self, judge: Judge) -> bool:
        """Missed, or hit so far off that this judge counts it as a miss.

        A 200ms late hit is a bad on J1 but a miss on J4; ``was_missed`` is false for both.
        """
        return self.classify(judge) is TapJudgement.MISS


@dataclass
class TapJudgements:
    marvelouses: int = 0
    perfects: int = 0
    greats: int = 0
    goods: int = 0
    bads: int = 0
    misses: int = 0

    def __getitem__(self, judgement: TapJudgement) -> int:
        return getattr(self, _TAP_JUDGEMENT_FIELDS[judgement])

    def add(self, judgement: TapJudgement, count: int = 1) -> None:
        name = _TAP_JUDGEMENT_FIELDS[judgement]
        setattr(self, name, getattr(self, name) + count)

    def total(self) -> int:
        return self.marvelouses + self.perfects + self.greats + self.goods + self.bads + self.misses

    def as_dict(self) -> dict[str, int]:
        return {judgement.value: self[judgement] for judgement in TapJudgement}


_TAP_JUDGEMENT_FIELDS: dict[TapJudgement, str] = {
    TapJudgement.MARVELOUS: "marvelouses",
    TapJudgement.PERFECT: "perfects",
    TapJudgement.GREAT: "greats",
    TapJudgement.GOOD: "goods",
    TapJudgement.BAD: "bads",
    TapJudgement.MISS: "misses",
}


@dataclass
class NoteAndHitSeconds:
    """Note and hit timestamps of one lane, both sorted ascending."""

    note_seconds: list[float] = field(default_factory=list)
    hit_seconds: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class ScoringResult:
    wifescore_sum: float = 0.0
    num_judged_notes: int = 0

    def __add__(self, other: ScoringResult) -> ScoringResult:
        total = np.float32(self.wifescore_sum) + np.float32(other.wifescore_sum)
        return ScoringResult(float(total), self.num_judged_notes + other.num_judged_notes)

    def wifescore(self) -> Wifescore | None:
        if self.num_judged_notes == 0:
            return None
        with np.errstate(divide="ignore", invalid="ignore"):
            proportion = np.float32(self.wifescore_sum) / np.float32(self.num_judged_notes)
        return Wifescore.from_proportion(float(proportion))


class InvalidWifescoreError(ValueError):
    pass


# Grade thresholds as proportions, best grade first
GRADE_THRESHOLDS: list[tuple[str, float]] = [
    ("AAAAA", 0.99996),
    ("AAAA", 0.99955),
    ("AAA", 0.997),
    ("AA", 0.93),
    ("A", 0.80),
    ("B", 0.70),
    ("C", 0.60),
]


@dataclass(frozen=True, order=True)
class Wifescore:
    """Finite score proportion of at most 1.0. Build via ``from_proportion``/``from_percent``."""

    proportion: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.proportion) or self.proportion > 1.0:
            raise InvalidWifescoreError(f"invalid wifescore proportion: {self.proportion}")

    @classmethod
    def from_proportion(cls, proportion: float) -> Wifescore | None:
        if not math.isfinite(proportion) or proportion > 1.0:
            return None
        return cls(float(proportion))

    @classmethod
    def from_percent(cls, percent: float) -> Wifescore | None:
        return cls.from_proportion(float(np.float32(percent) / np.float32(100.0)))

    def as_proportion(self) -> float:
        return self.proportion

    def as_percent(self) -> float:
        return float(np.float32(self.proportion) * np.float32(100.0))

    def grade(self) -> str:
        for name, threshold in GRADE_THRESHOLDS:
            if self.proportion >= threshold:
                return name
        return "D"

    def __str__(self) -> str:
        return f"{self.as_percent():.2f}%"


@dataclass(frozen=True)
class FastestComboInfo:
    start_second: float = 0.0
    end_second: float = 0.0
    length: int = 0
    speed: float = 0.0
