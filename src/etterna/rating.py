from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from etterna.numeric import erfc_f32, sum_f32

logger = logging.getLogger(__name__)

f32 = np.float32

NUM_PASSES = 11
INITIAL_RESOLUTION = 10.24
# Ratings in the game stay well below 100; this only guards absurd inputs
MAX_STEPS_PER_PASS = 10_000


class RatingSearchError(RuntimeError):
    pass


def _is_rating_okay(rating: np.float32, ssrs: np.ndarray, delta_multiplier: np.float32) -> bool:
    max_power_sum = f32(2.0) ** (rating * f32(0.1))
    # erfc runs in double precision and is narrowed back; the rest is single precision
    contributions = f32(2.0) / erfc_f32(delta_multiplier * (ssrs - rating)) - f32(2.0)
    power_sum = sum_f32(contributions[contributions > 0])
    return bool(power_sum < max_power_sum)


def calc_rating(
    ssrs: Sequence[float] | np.ndarray,
    final_multiplier: float,
    delta_multiplier: float,
) -> float:
    """Aggregate rating of a list of skill ratings.

    Finds the rating at which the power sum of all ratings above it drops below
    ``2 ** (rating / 10)``. The search starts at 0 and walks upwards with a resolution of
    10.24 that is halved after each of 11 passes. The result is biased up by two final
    resolution steps and then scaled by ``final_multiplier``.
    """
    values = np.asarray(ssrs, dtype=np.float32)
    delta = f32(delta_multiplier)
    rating = f32(0.0)
    resolution = f32(INITIAL_RESOLUTION)

    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        for _ in range(NUM_PASSES):
            steps = 0
            while not _is_rating_okay(rating + resolution, values, delta):
                rating += resolution
                steps += 1
                if steps > MAX_STEPS_PER_PASS:
                    logger.warning(
                        "rating search gave up after %d steps at %.2f over %d values",
                        steps,
                        float(rating),
                        len(values),
                    )
                    raise RatingSearchError(f"rating search did not settle below {float(rating):.2f}")
            resolution /= f32(2.0)

    rating += resolution * f32(2.0)
    return float(rating * f32(final_multiplier))


def calculate_score_overall(ssrs: Sequence[float] | np.ndarray) -> float:
    """Overall rating of a single score from its seven skillset ratings."""
    return calc_rating(ssrs, 1.11, 0.25)


def calculate_player_skillset_rating(ssrs: Sequence[float] | np.ndarray) -> float:
    return calc_rating(ssrs, 1.05, 0.1)


def calculate_player_skillset_rating_pre_070(ssrs: Sequence[float] | np.ndarray) -> float:
    return calc_rating(ssrs, 1.04, 0.1)


def calculate_player_overall(skillset_ratings: Sequence[float] | np.ndarray) -> float:
    return calc_rating(skillset_ratings, 1.125, 0.1)
