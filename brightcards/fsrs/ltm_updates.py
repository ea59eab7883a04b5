"""
Long-Term Memory (LTM) Updates

Implements stability and difficulty updates for reviews spaced at least
one day apart, plus the initial state assigned on first grading.

Key principles:
- Lower grades start harder and less stable
- Difficulty moves with the grade, damped near the ceiling and pulled
  back toward the Easy anchor
- Lapses rebuild stability from the forgetting curve; recalls grow it
  more when recall was less likely (low R)
"""

from __future__ import annotations
import math

from brightcards.fsrs.constants import Grade, D_MIN, D_MAX, S_MIN
from brightcards.fsrs.parameters import SchedulerParameters, DEFAULT_PARAMETERS


def clamp_difficulty(difficulty: float) -> float:
    """Clip difficulty to [1, 10]."""
    return max(D_MIN, min(D_MAX, difficulty))


def _raw_initial_difficulty(grade: int, params: SchedulerParameters) -> float:
    return params.w(4) - math.exp(params.w(5) * (grade - 1)) + 1.0


def initial_difficulty(
    grade: Grade,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Difficulty assigned on first grading.

    Formula:
        D0(G) = clip(w4 - exp(w5 * (G - 1)) + 1, 1, 10)

    Args:
        grade: First grade given to the card
        params: Scheduler parameters

    Returns:
        Initial difficulty (higher for lower grades)
    """
    return clamp_difficulty(_raw_initial_difficulty(grade, params))


def initial_stability(
    grade: Grade,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> float:
    """Stability assigned on first grading: w0..w3 indexed by grade."""
    return params.w(int(grade) - 1)


def next_difficulty(
    difficulty: float,
    grade: Grade,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Update difficulty after a spaced review.

    Formula:
        dD  = -w6 * (G - 3)
        D'  = D + dD * (10 - D) / 9
        D'' = w7 * D0(Easy) + (1 - w7) * D'
        D_new = clip(D'', 1, 10)

    Again/Hard raise difficulty, Easy lowers it, Good leaves only the
    mean-reversion pull. Steps shrink as difficulty approaches 10.

    Args:
        difficulty: Current difficulty
        grade: Review grade
        params: Scheduler parameters

    Returns:
        New difficulty value (clipped to [1, 10])
    """
    delta_d = -params.w(6) * (int(grade) - 3)
    damped = difficulty + delta_d * (D_MAX - difficulty) / 9.0
    anchor = initial_difficulty(Grade.EASY, params)
    reverted = params.w(7) * anchor + (1.0 - params.w(7)) * damped
    return clamp_difficulty(reverted)


def stability_after_failure(
    difficulty: float,
    stability: float,
    retrievability: float,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Stability after a lapse (Again) on a spaced review.

    Formula:
        S' = w11 * D^(-w12) * ((S + 1)^w13 - 1) * exp(w14 * (1 - R))

    Floored at S_MIN.
    """
    new_stability = (
        params.w(11)
        * difficulty ** (-params.w(12))
        * ((stability + 1.0) ** params.w(13) - 1.0)
        * math.exp(params.w(14) * (1.0 - retrievability))
    )
    return max(S_MIN, new_stability)


def _grade_factor(grade: Grade, params: SchedulerParameters) -> float:
    if grade == Grade.HARD:
        return math.exp(params.w(10) * (int(grade) - 3))
    if grade == Grade.EASY:
        return math.exp(params.w(10))
    return 1.0


def stability_after_success(
    stability: float,
    retrievability: float,
    grade: Grade,
    params: SchedulerParameters = DEFAULT_PARAMETERS
) -> float:
    """
    Stability after a successful spaced review (Hard/Good/Easy).

    Formula:
        S' = S * (1 + exp(w8) * (exp(w9 * (1 - R)) - 1) * gf(G))

    Where gf is exp(-w10) for Hard, 1 for Good and exp(w10) for Easy.
    Since R <= 1 the growth term is never negative, so S' >= S.
    Floored at S_MIN.
    """
    if grade == Grade.AGAIN:
        raise ValueError("Use stability_after_failure for AGAIN")

    growth = (
        math.exp(params.w(8))
        * (math.exp(params.w(9) * (1.0 - retrievability)) - 1.0)
        * _grade_factor(grade, params)
    )
    return max(S_MIN, stability * (1.0 + growth))
