from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

import numpy as np


@dataclass(frozen=True, order=True)
class Rate:
    """Music rate in 0.05 steps, stored as 20x the rate (1.15x is 23)."""

    x20: int = 20

    def __post_init__(self) -> None:
        if self.x20 < 0:
            raise ValueError("rate must be >= 0")

    @classmethod
    def from_float(cls, rate: float) -> Rate:
        if not rate >= 0.0:
            raise ValueError(f"invalid rate: {rate}")
        return cls(int(round(rate * 20.0)))

    @classmethod
    def from_string(cls, text: str) -> Rate:
        cleaned = text.strip().lower().removesuffix("x")
        try:
            return cls.from_float(float(cleaned))
        except ValueError as exc:
            raise ValueError(f"invalid rate: {text!r}") from exc

    def as_float(self) -> float:
        return float(np.float32(self.x20) / np.float32(20.0))

    def __add__(self, other: Rate) -> Rate:
        return Rate(self.x20 + other.x20)

    def __sub__(self, other: Rate) -> Rate:
        return Rate(self.x20 - other.x20)

    def __str__(self) -> str:
        return f"{self.x20 / 20:.2f}x"


class FileSizeParseError(ValueError):
    pass


_FILE_SIZE_UNITS: dict[str, int] = {
    "b": 1,
    "kb": 1000,
    "kib": 1024,
    "mb": 1000**2,
    "mib": 1024**2,
    "gb": 1000**3,
    "gib": 1024**3,
    "tb": 1000**4,
    "tib": 1024**4,
}


@dataclass(frozen=True, order=True)
class FileSize:
    num_bytes: int = 0

    @classmethod
    def parse(cls, text: str) -> FileSize:
        """Parse strings like ``"12.5 MiB"``; the unit is case insensitive."""
        tokens = text.split()
        if not tokens:
            raise FileSizeParseError("file size string was empty")
        try:
            number = float(tokens[0])
        except ValueError as exc:
            raise FileSizeParseError(f"invalid file size number: {tokens[0]!r}") from exc
        if len(tokens) < 2:
            raise FileSizeParseError("file size has no unit (b, kb, mib, ...)")
        unit = tokens[1].lower()
        multiplier = _FILE_SIZE_UNITS.get(unit)
        if multiplier is None:
            raise FileSizeParseError(f"unknown file size unit: {unit!r}")
        return cls(int(number * multiplier))

    def kb(self) -> int:
        return self.num_bytes // 1000

    def mb(self) -> int:
        return self.num_bytes // 1000**2

    def gb(self) -> int:
        return self.num_bytes // 1000**3

    def tb(self) -> int:
        return self.num_bytes // 1000**4


class Difficulty(Enum):
    BEGINNER = "BG"
    EASY = "EZ"
    MEDIUM = "NM"
    HARD = "HD"
    CHALLENGE = "IN"
    EDIT = "ED"

    @classmethod
    def from_short_string(cls, text: str) -> Difficulty | None:
        """Parse the abbreviations shown on the evaluation screen (BG, IN, ...)."""
        try:
            return cls(text.strip().upper())
        except ValueError:
            return None

    @classmethod
    def from_long_string(cls, text: str) -> Difficulty | None:
        return _LONG_DIFFICULTY_NAMES.get(text.strip().lower())

    @classmethod
    def parse(cls, text: str) -> Difficulty:
        difficulty = cls.from_long_string(text) or cls.from_short_string(text)
        if difficulty is None:
            raise ValueError(f"invalid difficulty: {text!r}")
        return difficulty

    def to_short_string(self) -> str:
        return self.value


_LONG_DIFFICULTY_NAMES: dict[str, Difficulty] = {
    "beginner": Difficulty.BEGINNER,
    "novice": Difficulty.BEGINNER,
    "easy": Difficulty.EASY,
    "medium": Difficulty.MEDIUM,
    "normal": Difficulty.MEDIUM,
    "hard": Difficulty.HARD,
    "challenge": Difficulty.CHALLENGE,
    "expert": Difficulty.CHALLENGE,
    "insane": Difficulty.CHALLENGE,
    "edit": Difficulty.EDIT,
}


class Snap(Enum):
    """Beat snap of a note row (192 rows per measure)."""

    FOURTH = 4
    EIGHTH = 8
    TWELFTH = 12
    SIXTEENTH = 16
    TWENTY_FOURTH = 24
    THIRTY_SECOND = 32
    FORTY_EIGHTH = 48
    SIXTY_FOURTH = 64
    HUNDRED_NINETY_SECOND = 192

    @classmethod
    def from_row(cls, row: int) -> Snap:
        for snap in cls:
            if row % (192 // snap.value) == 0:
                return snap
        return cls.HUNDRED_NINETY_SECOND


_KEY_PATTERN = re.compile(r"[SX][0-9a-f]{40}")


@dataclass(frozen=True)
class _Key:
    value: str

    def __post_init__(self) -> None:
        if not self.is_valid(self.value):
            raise ValueError(f"invalid {type(self).__name__.lower()}: {self.value!r}")

    @staticmethod
    def is_valid(key: str) -> bool:
        """41 characters: 'S' or 'X' followed by 40 lowercase hex digits."""
        return _KEY_PATTERN.fullmatch(key) is not None

    def __str__(self) -> str:
        return self.value


class Scorekey(_Key):
    pass


class Chartkey(_Key):
    pass
