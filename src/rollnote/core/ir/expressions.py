"""
Expression types for dice notation.

A parsed notation string is a list of these trees, one per top-level
expression. All nodes are frozen; the evaluator never mutates them.

Supports:
- Integer literals: 4, 20
- Dice: d20, 3d6, (1d4)d6, 2d(1d8)
- Arithmetic: +, -, *, / (left-associative, * and / bind tighter)
- Repetition: 3(1d6), 6(4d6dl1)
- Modifiers: kh, kl, dh, dl (value required), ! (optional threshold)
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# Literals must fit a signed 32-bit integer
MAX_NUMBER = 2**31 - 1

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class ModifierKind(StrEnum):
    """Post-processing rules applied to a sequence of rolls."""

    KEEP_HIGH = "kh"
    KEEP_LOW = "kl"
    DROP_HIGH = "dh"
    DROP_LOW = "dl"
    EXPLODE = "!"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


def _operand(expr: Expr) -> str:
    """Render a dice/modifier operand, parenthesising anything but a literal."""
    if isinstance(expr, Number):
        return str(expr)
    return f"({expr})"


class Number(BaseModel):
    """A non-negative integer literal. Negative values only arise from arithmetic."""

    value: int = Field(ge=0, le=MAX_NUMBER, description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class DiceModifier(BaseModel):
    """
    A single modifier attached to dice or a repetition.

    Examples:
        - DiceModifier(kind=KEEP_HIGH, value=Number(3)) → kh3
        - DiceModifier(kind=EXPLODE) → !
        - DiceModifier(kind=EXPLODE, value=Number(5)) → !5
    """

    kind: ModifierKind
    value: Expr | None = Field(default=None, description="Modifier argument")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.value is None:
            return self.kind.value
        return f"{self.kind.value}{_operand(self.value)}"


class Dice(BaseModel):
    """
    Roll ``count`` dice of ``sides`` faces, then apply modifiers in order.

    Both ``count`` and ``sides`` are expressions, so ``(1d4)d6`` rolls
    one to four six-sided dice.
    """

    count: Expr = Field(default_factory=lambda: Number(value=1), description="Number of dice")
    sides: Expr = Field(description="Faces per die")
    modifiers: list[DiceModifier] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        mods = "".join(str(m) for m in self.modifiers)
        return f"{_operand(self.count)}d{_operand(self.sides)}{mods}"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class Repetition(BaseModel):
    """
    Evaluate ``expr`` ``count`` times and collect each total.

    Modifiers apply to the collected totals, e.g. ``6(4d6dl1)kh3``.
    """

    count: Number = Field(description="Times to evaluate expr")
    expr: Expr
    modifiers: list[DiceModifier] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        mods = "".join(str(m) for m in self.modifiers)
        return f"{self.count}({self.expr}){mods}"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Number | Dice | BinaryExpr | Repetition

# Rebuild models for recursive forward references
DiceModifier.model_rebuild()
Dice.model_rebuild()
BinaryExpr.model_rebuild()
Repetition.model_rebuild()
