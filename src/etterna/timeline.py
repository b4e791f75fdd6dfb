from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Generic, TypeVar

import numpy as np

from etterna.rating import calculate_player_skillset_rating, calculate_player_skillset_rating_pre_070
from etterna.skillsets import Skillset7, Skillsets7, Skillsets8, UserSkillsets

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass
class SkillTimeline(Generic[K]):
    """Player rating after each group of scores, e.g. after each day of play.

    ``changes`` holds one ``(key, ratings)`` entry per group. Ratings are computed over
    every score up to the end of that group, not only the group's own scores.
    """

    changes: list[tuple[K, Skillsets8]] = field(default_factory=list)

    @classmethod
    def calculate(
        cls,
        entries: Iterable[tuple[K, Skillsets7]],
        pre_070: bool = False,
        max_workers: int | None = None,
    ) -> SkillTimeline[K]:
        """Build a timeline from ``(key, chart skillsets)`` pairs.

        Entries sharing a key must be contiguous. Each group boundary is rated
        independently on a thread pool; ``max_workers=1`` computes inline.
        """
        columns: list[list[float]] = [[] for _ in Skillset7]
        boundaries: list[tuple[K, int]] = []
        current_key: K | None = None
        num_scores = 0
        for key, skillsets in entries:
            if num_scores > 0 and key != current_key:
                boundaries.append((current_key, num_scores))
            current_key = key
            for column, value in zip(columns, skillsets.as_list()):
                column.append(value)
            num_scores += 1
        if num_scores > 0:
            boundaries.append((current_key, num_scores))

        arrays = [np.asarray(column, dtype=np.float32) for column in columns]
        rate_skillset = (
            calculate_player_skillset_rating_pre_070 if pre_070 else calculate_player_skillset_rating
        )

        def snapshot(boundary: tuple[K, int]) -> tuple[K, Skillsets8]:
            key, prefix_len = boundary
            ratings = UserSkillsets(*[rate_skillset(array[:prefix_len]) for array in arrays])
            return key, ratings.with_calculated_overall(pre_070=pre_070)

        logger.debug("rating %d groups over %d scores", len(boundaries), num_scores)
        if max_workers == 1 or len(boundaries) <= 1:
            return cls(changes=[snapshot(boundary) for boundary in boundaries])
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return cls(changes=list(executor.map(snapshot, boundaries)))

    def __len__(self) -> int:
        return len(self.changes)

    def latest(self) -> Skillsets8 | None:
        if not self.changes:
            return None
        return self.changes[-1][1]
