from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields
from enum import Enum

import numpy as np

from etterna.rating import calculate_player_overall, calculate_score_overall

f32 = np.float32


class Skillset8(Enum):
    OVERALL = "overall"
    STREAM = "stream"
    JUMPSTREAM = "jumpstream"
    HANDSTREAM = "handstream"
    STAMINA = "stamina"
    JACKSPEED = "jackspeed"
    CHORDJACK = "chordjack"
    TECHNICAL = "technical"

    @classmethod
    def from_user_input(cls, text: str) -> Skillset8 | None:
        """Parse a skillset name the way players type it ("js", "Jacks", "tech"...)."""
        return _USER_INPUT_ALIASES.get(text.strip().lower())

    def to_skillset7(self) -> Skillset7 | None:
        if self is Skillset8.OVERALL:
            return None
        return Skillset7(self.value)

    def __str__(self) -> str:
        return self.value.capitalize()


class Skillset7(Enum):
    STREAM = "stream"
    JUMPSTREAM = "jumpstream"
    HANDSTREAM = "handstream"
    STAMINA = "stamina"
    JACKSPEED = "jackspeed"
    CHORDJACK = "chordjack"
    TECHNICAL = "technical"

    @classmethod
    def from_user_input(cls, text: str) -> Skillset7 | None:
        skillset = Skillset8.from_user_input(text)
        return None if skillset is None else skillset.to_skillset7()

    def to_skillset8(self) -> Skillset8:
        return Skillset8(self.value)

    def __str__(self) -> str:
        return self.value.capitalize()


_USER_INPUT_ALIASES: dict[str, Skillset8] = {
    "overall": Skillset8.OVERALL,
    "stream": Skillset8.STREAM,
    "js": Skillset8.JUMPSTREAM,
    "jumpstream": Skillset8.JUMPSTREAM,
    "hs": Skillset8.HANDSTREAM,
    "handstream": Skillset8.HANDSTREAM,
    "stam": Skillset8.STAMINA,
    "stamina": Skillset8.STAMINA,
    "jack": Skillset8.JACKSPEED,
    "jacks": Skillset8.JACKSPEED,
    "jackspeed": Skillset8.JACKSPEED,
    "cj": Skillset8.CHORDJACK,
    "chordjack": Skillset8.CHORDJACK,
    "chordjacks": Skillset8.CHORDJACK,
    "tech": Skillset8.TECHNICAL,
    "technical": Skillset8.TECHNICAL,
}


@dataclass(frozen=True)
class Skillsets7:
    stream: float = 0.0
    jumpstream: float = 0.0
    handstream: float = 0.0
    stamina: float = 0.0
    jackspeed: float = 0.0
    chordjack: float = 0.0
    technical: float = 0.0

    @classmethod
    def generate(cls, generator: Callable[[Skillset7], float]) -> Skillsets7:
        return cls(**{skillset.value: generator(skillset) for skillset in Skillset7})

    @classmethod
    def from_list(cls, values: list[float]) -> Skillsets7:
        if len(values) != len(Skillset7):
            raise ValueError(f"expected {len(Skillset7)} skillset values, got {len(values)}")
        return cls(*[float(value) for value in values])

    def get(self, skillset: Skillset7) -> float:
        return getattr(self, skillset.value)

    def as_list(self) -> list[float]:
        return [self.get(skillset) for skillset in Skillset7]

    def max_skillset(self) -> float:
        return max(self.as_list())

    def with_overall(self, overall: float) -> Skillsets8:
        return Skillsets8(overall, *self.as_list())


@dataclass(frozen=True)
class Skillsets8:
    overall: float = 0.0
    stream: float = 0.0
    jumpstream: float = 0.0
    handstream: float = 0.0
    stamina: float = 0.0
    jackspeed: float = 0.0
    chordjack: float = 0.0
    technical: float = 0.0

    @classmethod
    def generate(cls, generator: Callable[[Skillset8], float]) -> Skillsets8:
        return cls(**{skillset.value: generator(skillset) for skillset in Skillset8})

    def get(self, skillset: Skillset8 | Skillset7) -> float:
        return getattr(self, skillset.value)

    def to_skillsets7(self) -> Skillsets7:
        return Skillsets7(*[self.get(skillset) for skillset in Skillset7])

    def as_dict(self) -> dict[str, float]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


@dataclass(frozen=True)
class ChartSkillsets(Skillsets7):
    """Difficulty of one chart at one rate."""

    def overall(self) -> float:
        # The aggregate can undershoot the best skillset, which is never wanted
        return max(calculate_score_overall(self.as_list()), self.max_skillset())

    def overall_pre_070(self) -> float:
        return self.max_skillset()

    def with_calculated_overall(self, pre_070: bool = False) -> Skillsets8:
        return self.with_overall(self.overall_pre_070() if pre_070 else self.overall())


@dataclass(frozen=True)
class UserSkillsets(Skillsets7):
    """Long-term player rating per skillset."""

    def overall(self) -> float:
        return calculate_player_overall(self.as_list())

    def overall_pre_070(self) -> float:
        total = f32(0.0)
        for value in self.as_list():
            total += f32(value)
        return float(total / f32(len(Skillset7)))

    def with_calculated_overall(self, pre_070: bool = False) -> Skillsets8:
        return self.with_overall(self.overall_pre_070() if pre_070 else self.overall())
