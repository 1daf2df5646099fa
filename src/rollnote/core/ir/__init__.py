"""
Intermediate representation for dice notation.

Parsed expression trees and the values they evaluate to.
"""

from .expressions import (
    MAX_NUMBER,
    BinaryExpr,
    BinaryOp,
    Dice,
    DiceModifier,
    Expr,
    ModifierKind,
    Number,
    Repetition,
)
from .results import EvalResult, Rolls, Scalar

__all__ = [
    # Expressions
    "MAX_NUMBER",
    "BinaryExpr",
    "BinaryOp",
    "Dice",
    "DiceModifier",
    "Expr",
    "ModifierKind",
    "Number",
    "Repetition",
    # Results
    "EvalResult",
    "Rolls",
    "Scalar",
]
