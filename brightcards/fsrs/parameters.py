"""
Scheduler Parameters

Frozen, validated parameter set shared by every scheduling formula.
Built once and passed explicitly; the engine never mutates it.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from brightcards.fsrs.constants import DEFAULT_WEIGHTS, R_TARGET, WEIGHT_COUNT
from brightcards.fsrs.errors import InvalidInputState


class SchedulerParameters(BaseModel):
    """Weight vector plus the retention target used to size intervals."""

    model_config = ConfigDict(frozen=True)

    weights: tuple[float, ...] = Field(default=DEFAULT_WEIGHTS, description="19 FSRS weights")
    desired_retention: float = Field(default=R_TARGET, gt=0.0, lt=1.0)

    @field_validator("weights")
    @classmethod
    def _check_weights(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if len(value) != WEIGHT_COUNT:
            raise ValueError(f"expected {WEIGHT_COUNT} weights, got {len(value)}")
        if not all(math.isfinite(w) for w in value):
            raise ValueError("weights must be finite")
        return value

    def w(self, index: int) -> float:
        """Weight by index (w0..w18)."""
        return self.weights[index]


def build_parameters(
    weights: tuple[float, ...] | list[float] | None = None,
    desired_retention: float = R_TARGET
) -> SchedulerParameters:
    """
    Build a parameter set, converting validation failures to InvalidInputState.

    Args:
        weights: Optional custom weight vector (defaults to FSRS-5 weights)
        desired_retention: Retention target in (0, 1)

    Returns:
        Frozen SchedulerParameters
    """
    try:
        return SchedulerParameters(
            weights=tuple(weights) if weights is not None else DEFAULT_WEIGHTS,
            desired_retention=desired_retention
        )
    except ValidationError as exc:
        raise InvalidInputState(f"Invalid scheduler parameters: {exc}") from exc


DEFAULT_PARAMETERS = SchedulerParameters()
