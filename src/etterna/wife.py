from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

import numpy as np
from scipy import special

from etterna.judge import J4, Judge
from etterna.models import Hit, Wifescore

f32 = np.float32


class Wife(ABC):
    """Turns a hit deviation into score points; the best hit is worth 1.0.

    Weights are already halved from the game's internal max-2 scale.
    """

    name: str
    MISS_WEIGHT: float
    MINE_HIT_WEIGHT: float
    HOLD_DROP_WEIGHT: float

    @abstractmethod
    def calc_deviation(self, deviation: float, judge: Judge) -> float:
        """Curve value for a deviation in seconds, sign ignored."""
        raise NotImplementedError

    def calc(self, hit: Hit, judge: Judge) -> float:
        if hit.deviation is None or judge.is_miss(hit.deviation):
            return self.MISS_WEIGHT
        return self.calc_deviation(hit.deviation, judge)

    def apply(
        self,
        hits: Iterable[Hit],
        num_mine_hits: int,
        num_hold_drops: int,
        judge: Judge,
    ) -> Wifescore | None:
        """Wifescore of a list of judged notes plus mine and hold penalties.

        Returns None for an empty ``hits`` list.
        """
        wifescore_sum = f32(0.0)
        num_notes = 0
        for hit in hits:
            wifescore_sum += f32(self.calc(hit, judge))
            num_notes += 1
        if num_notes == 0:
            return None

        with np.errstate(over="ignore", invalid="ignore"):
            wifescore_sum += f32(num_mine_hits) * f32(self.MINE_HIT_WEIGHT)
            wifescore_sum += f32(num_hold_drops) * f32(self.HOLD_DROP_WEIGHT)
            proportion = float(wifescore_sum / f32(num_notes))
        return Wifescore.from_proportion(proportion)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Wife2(Wife):
    name = "wife2"
    MISS_WEIGHT = -8.0 / 2
    HOLD_DROP_WEIGHT = -6.0 / 2
    MINE_HIT_WEIGHT = -8.0 / 2

    def calc_deviation(self, deviation: float, judge: Judge) -> float:
        # Single precision throughout, like the game
        maxms = abs(f32(deviation) * f32(1000.0))
        avedeviation = f32(95.0) * f32(judge.timing_scale)
        y = f32(1.0) - f32(2.0) ** (-maxms * maxms / (avedeviation * avedeviation))
        y = y * y
        score = f32(10.0) * (f32(1.0) - y) + f32(-8.0)
        return float(score / f32(2.0))


class Wife3(Wife):
    name = "wife3"
    MISS_WEIGHT = -5.5 / 2
    HOLD_DROP_WEIGHT = -4.5 / 2
    MINE_HIT_WEIGHT = -7.0 / 2

    _MAX_POINTS = 2.0
    _MAX_BOO_WEIGHT = 180.0
    _JUDGE_POW = 0.75

    def calc_deviation(self, deviation: float, judge: Judge) -> float:
        ts = f32(judge.timing_scale)
        # ms offset and the full-points cutoff are single precision
        maxms = abs(f32(deviation) * f32(1000.0))
        ridic = f32(5.0) * ts
        if maxms <= ridic:
            return self._MAX_POINTS / 2

        # Curve inflection points and the curve itself are evaluated in double precision
        scale = float(ts) ** self._JUDGE_POW
        zero = float(f32(65.0)) * scale
        dev = float(f32(22.7)) * scale
        miss = self.MISS_WEIGHT * 2
        maxms_d = float(maxms)
        if maxms_d <= zero:
            score = self._MAX_POINTS * float(special.erf((zero - maxms_d) / dev))
        elif maxms_d <= self._MAX_BOO_WEIGHT:
            score = (maxms_d - zero) * miss / (self._MAX_BOO_WEIGHT - zero)
        else:
            score = miss
        return float(f32(score) / f32(2.0))


WIFE2 = Wife2()
WIFE3 = Wife3()
WIFES: dict[str, Wife] = {WIFE2.name: WIFE2, WIFE3.name: WIFE3}


def wife_by_name(name: str) -> Wife:
    key = name.strip().lower()
    if key in {"2", "3"}:
        key = f"wife{key}"
    wife = WIFES.get(key)
    if wife is None:
        raise ValueError(f"unknown wife version: {name} (expected wife2 or wife3)")
    return wife


def wife2(deviation: float, judge: Judge = J4) -> float:
    return WIFE2.calc(Hit(deviation), judge)


def wife3(deviation: float, judge: Judge = J4) -> float:
    return WIFE3.calc(Hit(deviation), judge)
