"""
Evaluator for dice notation.

Walks a parsed expression tree and produces either the individual rolls
(dice and repetitions) or a plain integer (literals and arithmetic).
The only side effect is drawing from the supplied random source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rollnote.core.errors import EvaluationError
from rollnote.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Dice,
    DiceModifier,
    Expr,
    ModifierKind,
    Number,
    Repetition,
)
from rollnote.core.ir.results import EvalResult, Rolls, Scalar
from rollnote.core.notation.randomness import RandomSource, make_random
from rollnote.core.settings import RollSettings, load_settings

logger = logging.getLogger(__name__)


@dataclass
class _EvalContext:
    rng: RandomSource
    settings: RollSettings


def evaluate(
    expr: Expr,
    rng: RandomSource | None = None,
    settings: RollSettings | None = None,
) -> EvalResult:
    """Evaluate an expression tree.

    Args:
        expr: Parsed expression tree.
        rng: Source of die draws. Defaults to a fresh ``random.Random``
            seeded from ``settings.seed``.
        settings: Evaluation limits. Defaults to :func:`load_settings`.

    Returns:
        ``Rolls`` for dice and repetitions, ``Scalar`` for literals and
        arithmetic.

    Raises:
        EvaluationError: If the tree is invalid for the values it produces
            (division by zero, zero-sided dice, missing modifier values, ...).
    """
    settings = settings or load_settings()
    if rng is None:
        rng = make_random(settings.seed)
    try:
        return _interpret(expr, _EvalContext(rng=rng, settings=settings))
    except RecursionError as e:
        raise EvaluationError("Expression is nested too deeply") from e


def _interpret(expr: Expr, ctx: _EvalContext) -> EvalResult:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, Number):
        return Scalar(value=expr.value)

    if isinstance(expr, Dice):
        return _interpret_dice(expr, ctx)

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr, ctx)

    if isinstance(expr, Repetition):
        return _interpret_repetition(expr, ctx)

    raise EvaluationError(f"Unknown expression type: {type(expr).__name__}")


def _number(expr: Expr, ctx: _EvalContext) -> int:
    return _interpret(expr, ctx).to_number()


def _interpret_binary(expr: BinaryExpr, ctx: _EvalContext) -> Scalar:
    """Reduce a chain of binary operations to one integer.

    The parser builds ``a + b + c`` as ``((a + b) + c)``, so the left spine
    is collected in a loop and folded in source order. Stack depth does not
    grow with the length of the chain.
    """
    chain: list[BinaryExpr] = []
    node: Expr = expr
    while isinstance(node, BinaryExpr):
        chain.append(node)
        node = node.left

    value = _number(node, ctx)
    for link in reversed(chain):
        value = _apply_binary(link.op, value, _number(link.right, ctx))
    return Scalar(value=value)


def _apply_binary(op: BinaryOp, left: int, right: int) -> int:
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        if right == 0:
            raise EvaluationError("Division by zero")
        return _div_toward_zero(left, right)

    raise EvaluationError(f"Unknown binary op: {op}")


def _div_toward_zero(left: int, right: int) -> int:
    """Integer division that truncates like C rather than flooring."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _interpret_dice(expr: Dice, ctx: _EvalContext) -> Rolls:
    """Roll count dice of the given sides, then apply modifiers."""
    count = _number(expr.count, ctx)
    sides = _number(expr.sides, ctx)

    if sides < 1:
        raise EvaluationError(f"Dice must have at least 1 side, got {sides}")
    if count < 0:
        raise EvaluationError(f"Cannot roll a negative number of dice: {count}")
    if count > ctx.settings.max_dice:
        raise EvaluationError(f"Too many dice: {count} (max {ctx.settings.max_dice})")

    rolls = [ctx.rng.randint(1, sides) for _ in range(count)]
    logger.debug("Rolled %dd%d: %s", count, sides, rolls)
    return _apply_modifiers(rolls, expr.modifiers, ctx, sides=sides)


def _interpret_repetition(expr: Repetition, ctx: _EvalContext) -> Rolls:
    """Evaluate the inner expression count times and collect the totals."""
    count = expr.count.value

    if count > ctx.settings.max_dice:
        raise EvaluationError(f"Too many repetitions: {count} (max {ctx.settings.max_dice})")

    totals = [_number(expr.expr, ctx) for _ in range(count)]
    logger.debug("Repeated %s %d times: %s", expr.expr, count, totals)
    return _apply_modifiers(totals, expr.modifiers, ctx, sides=None)


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------


def _apply_modifiers(
    rolls: list[int],
    modifiers: list[DiceModifier],
    ctx: _EvalContext,
    sides: int | None,
) -> Rolls:
    """Apply modifiers left to right, each replacing the working sequence.

    ``sides`` is None for repetitions, which cannot explode.
    """
    for modifier in modifiers:
        if modifier.kind == ModifierKind.EXPLODE:
            if sides is None:
                raise EvaluationError("Explode requires number of sides")
            if modifier.value is None:
                threshold = sides
            else:
                threshold = _number(modifier.value, ctx)
            rolls = _explode(rolls, sides, threshold, ctx)
            continue

        if modifier.value is None:
            raise EvaluationError(
                "All dice modifiers (except explode) must be followed by a value. E.g. 4d6kh3"
            )
        amount = _number(modifier.value, ctx)
        if amount < 0:
            raise EvaluationError(
                f"Modifier {modifier.kind.value!r} needs a non-negative value, got {amount}"
            )

        if modifier.kind == ModifierKind.KEEP_HIGH:
            rolls = sorted(rolls, reverse=True)[:amount]
        elif modifier.kind == ModifierKind.KEEP_LOW:
            rolls = sorted(rolls)[:amount]
        elif modifier.kind == ModifierKind.DROP_HIGH:
            rolls = sorted(rolls, reverse=True)[amount:]
        elif modifier.kind == ModifierKind.DROP_LOW:
            rolls = sorted(rolls)[amount:]
        else:
            raise EvaluationError(f"Unknown modifier: {modifier.kind}")

        logger.debug("Applied %s%d: %s", modifier.kind.value, amount, rolls)

    return Rolls(values=rolls)


def _explode(rolls: list[int], sides: int, threshold: int, ctx: _EvalContext) -> list[int]:
    """Re-roll every value at or above threshold, chaining on fresh draws.

    Each value present when the modifier starts gets its own chain: draws
    are appended until one falls below the threshold, then the walk moves
    to the next of the original values.

    Appended values are never walked again. Re-walking them would let a
    chain's own draws open second chains, so ``1d6!`` drawing 6, 6, 2 would
    keep rolling after the 2. Keep the single walk over the starting values.
    """
    if threshold <= 1:
        raise EvaluationError(f"Explode threshold must be greater than 1, got {threshold}")

    exploded = list(rolls)
    limit = ctx.settings.max_explode_rolls
    extra = 0
    for value in rolls:
        while value >= threshold:
            if extra >= limit:
                raise EvaluationError(f"Explode exceeded {limit} extra rolls")
            value = ctx.rng.randint(1, sides)
            exploded.append(value)
            extra += 1

    if extra:
        logger.debug("Exploded at %d with %d extra rolls: %s", threshold, extra, exploded)
    return exploded
