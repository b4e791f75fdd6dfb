from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from etterna.models import FastestComboInfo
from etterna.numeric import require_sorted

f32 = np.float32


def _check_bounds(min_num_notes: int, max_num_notes: int) -> None:
    if min_num_notes < 1:
        raise ValueError("min_num_notes must be >= 1")
    if max_num_notes < min_num_notes:
        raise ValueError("max_num_notes must be >= min_num_notes")


def find_fastest_note_subset(
    seconds: Sequence[float],
    min_num_notes: int,
    max_num_notes: int,
) -> FastestComboInfo:
    """Fastest run of notes on a single lane, in notes per second.

    Window lengths ``min_num_notes..=max_num_notes`` are tried. Ties go to the later
    and longer window: 30 NPS over 110 notes beats 30 NPS over 100 notes.
    """
    require_sorted(seconds, "seconds")
    _check_bounds(min_num_notes, max_num_notes)
    if len(seconds) <= min_num_notes:
        return FastestComboInfo()

    values = np.asarray(seconds, dtype=np.float32)
    fastest = FastestComboInfo()
    with np.errstate(divide="ignore", invalid="ignore"):
        for n in range(min_num_notes, min(len(values), max_num_notes + 1)):
            for i in range(len(values) - n):
                end_i = i + n
                nps = f32(n) / (values[end_i] - values[i])
                if nps >= fastest.speed:
                    fastest = FastestComboInfo(float(values[i]), float(values[end_i]), n, float(nps))
    return fastest


def find_fastest_note_subset_wife_pts(
    seconds: Sequence[float],
    min_num_notes: int,
    max_num_notes: int,
    wife_pts: Sequence[float],
) -> FastestComboInfo:
    """Like ``find_fastest_note_subset``, with NPS weighted by the window's mean wife points.

    50 notes in 10 seconds at 80% yield a speed of 4.
    """
    if len(wife_pts) != len(seconds):
        raise ValueError("wife_pts and seconds must have the same length")
    require_sorted(seconds, "seconds")
    _check_bounds(min_num_notes, max_num_notes)
    if len(seconds) <= min_num_notes:
        return FastestComboInfo()

    values = np.asarray(seconds, dtype=np.float32)
    points = np.asarray(wife_pts, dtype=np.float32)
    fastest = FastestComboInfo()
    window_sum_start = f32(0.0)
    for value in points[:min_num_notes]:
        window_sum_start += value

    with np.errstate(divide="ignore", invalid="ignore"):
        for n in range(min_num_notes, min(len(values), max_num_notes + 1)):
            # Sliding sum over the current window instead of re-summing every step
            window_sum = window_sum_start
            for i in range(len(values) - n):
                end_i = i + n
                nps = f32(n) / (values[end_i] - values[i])
                nps *= window_sum / f32(n)
                if nps >= fastest.speed:
                    fastest = FastestComboInfo(float(values[i]), float(values[end_i]), n, float(nps))
                window_sum -= points[i]
                window_sum += points[end_i]
            window_sum_start += points[n]
    return fastest


def find_fastest_combo_in_score(
    seconds: Sequence[float],
    are_cbs: Iterable[bool],
    min_num_notes: int,
    max_num_notes: int,
    wife_pts: Sequence[float] | None = None,
    rate: float = 1.0,
) -> FastestComboInfo:
    """Fastest note subset that lies entirely inside one combo, scaled by the music rate.

    ``are_cbs`` flags each note in ``seconds`` that broke combo. With ``wife_pts`` the
    speed is wife points per second instead of notes per second.
    """
    require_sorted(seconds, "seconds")
    _check_bounds(min_num_notes, max_num_notes)
    cb_flags = list(are_cbs)
    if len(cb_flags) != len(seconds):
        raise ValueError("are_cbs and seconds must have the same length")
    if wife_pts is not None and len(wife_pts) != len(seconds):
        raise ValueError("wife_pts and seconds must have the same length")

    fastest = FastestComboInfo()

    def check_combo(start: int, end: int) -> None:
        nonlocal fastest
        if wife_pts is None:
            subset = find_fastest_note_subset(seconds[start:end], min_num_notes, max_num_notes)
        else:
            subset = find_fastest_note_subset_wife_pts(
                seconds[start:end], min_num_notes, max_num_notes, wife_pts[start:end]
            )
        if subset.speed > fastest.speed:
            fastest = subset

    combo_start = 0
    for idx, is_cb in enumerate(cb_flags):
        if is_cb:
            check_combo(combo_start, idx)
            combo_start = idx + 1
    check_combo(combo_start, len(cb_flags))

    return FastestComboInfo(
        fastest.start_second,
        fastest.end_second,
        fastest.length,
        float(f32(fastest.speed) * f32(rate)),
    )
