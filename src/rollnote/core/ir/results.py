"""
Evaluation results.

An expression evaluates either to an ordered sequence of individual
results (dice rolls, repetition totals) or to a plain integer.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Rolls(BaseModel):
    """Individual results after modifiers, in order."""

    values: list[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def to_number(self) -> int:
        return sum(self.values)

    def __str__(self) -> str:
        return str(self.values)


class Scalar(BaseModel):
    """A plain integer: literals and arithmetic."""

    value: int

    model_config = ConfigDict(frozen=True)

    def to_number(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


EvalResult = Rolls | Scalar
