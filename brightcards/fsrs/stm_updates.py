"""
Short-Term Memory (STM) Updates

Reviews less than a day after the previous one. The forgetting curve is
not meaningful at that scale, so stability moves by a grade-driven
multiplier and difficulty is left alone.
"""

from __future__ import annotations
import math

from brightcards.fsrs.constants import Grade, S_MIN
from brightcards.fsrs.parameters import SchedulerParameters, DEFAULT_PARAMETERS


def stability_short_term(
    stability: float,
    grade: Grade,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Stability after a same-day review.

    Formula:
        S' = S * exp(w17 * (G - 3 + w18))

    With the default weights Again and Hard shrink stability, Good and
    Easy grow it. Floored at S_MIN.

    Args:
        stability: Current stability
        grade: Review grade
        params: Scheduler parameters

    Returns:
        New stability value
    """
    new_stability = stability * math.exp(params.w(17) * (int(grade) - 3 + params.w(18)))
    return max(S_MIN, new_stability)
