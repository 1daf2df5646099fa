"""
Recursive descent parser for dice notation.

Grammar (precedence low to high):
    program     → expression+
    expression  → add_sub
    add_sub     → mul_div (("+"|"-") mul_div)*
    mul_div     → term (("*"|"/") term)*
    term        → dice | repetition | number | "(" expression ")"
    dice        → operand? "d" operand modifier*
    repetition  → number "(" expression ")" modifier*
    operand     → number | "(" expression ")"
    modifier    → ("kh"|"kl"|"dh"|"dl") operand | "!" operand?
    number      → INT

Top-level expressions are separated wherever one expression ends and
the next token cannot continue it: ``3d6 4(1d4) + 4`` is two expressions.
An explode threshold must touch the ``!`` (``3d6!5``); ``3d6! 5`` is an
exploding roll followed by the literal 5.
"""

from __future__ import annotations

import logging

from rollnote.core.errors import ParseError, make_parse_error
from rollnote.core.ir.expressions import (
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
from rollnote.core.notation.tokenizer import (
    MODIFIER_TOKENS,
    NotationTokenError,
    Token,
    TokenKind,
    tokenize,
)

logger = logging.getLogger(__name__)

_MODIFIER_KINDS: dict[TokenKind, ModifierKind] = {
    TokenKind.KEEP_HIGH: ModifierKind.KEEP_HIGH,
    TokenKind.KEEP_LOW: ModifierKind.KEEP_LOW,
    TokenKind.DROP_HIGH: ModifierKind.DROP_HIGH,
    TokenKind.DROP_LOW: ModifierKind.DROP_LOW,
    TokenKind.BANG: ModifierKind.EXPLODE,
}

_ADD_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

_MUL_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
}


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return repr(tok.value)


class _Parser:
    """Recursive descent parser for dice notation."""

    def __init__(self, tokens: list[Token], source: str) -> None:
        self.tokens = tokens
        self.source = source
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]  # EOF

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def error(self, message: str, tok: Token | None = None) -> ParseError:
        tok = tok or self.current
        return make_parse_error(message, self.source, tok.pos)

    def expect(self, kind: TokenKind, message: str) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise self.error(f"{message}, got {_describe(tok)}")
        return self.advance()

    # -- Grammar rules --

    def parse_program(self) -> list[Expr]:
        """expression+"""
        exprs: list[Expr] = []
        while self.current.kind != TokenKind.EOF:
            if self.current.kind == TokenKind.RPAREN:
                raise self.error("Unmatched ')'")
            exprs.append(self.parse_expression())
        return exprs

    def parse_expression(self) -> Expr:
        return self.parse_add_sub()

    def parse_add_sub(self) -> Expr:
        """mul_div (('+' | '-') mul_div)*"""
        left = self.parse_mul_div()
        while self.current.kind in _ADD_OPS:
            op = _ADD_OPS[self.advance().kind]
            right = self.parse_mul_div()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_mul_div(self) -> Expr:
        """term (('*' | '/') term)*"""
        left = self.parse_term()
        while self.current.kind in _MUL_OPS:
            op = _MUL_OPS[self.advance().kind]
            right = self.parse_term()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_term(self) -> Expr:
        """dice | repetition | number | '(' expression ')'"""
        tok = self.current

        # d20: count omitted
        if tok.kind == TokenKind.D:
            return self._parse_dice([])

        if tok.kind == TokenKind.INT:
            if self.peek(1).kind == TokenKind.LPAREN:
                return self._parse_repetition()
            number = self._parse_number()
            if self.current.kind == TokenKind.D:
                return self._parse_dice([number])
            return number

        if tok.kind == TokenKind.LPAREN:
            group = self._parse_group()
            if self.current.kind == TokenKind.D:
                return self._parse_dice([group])
            return group

        raise self.error(f"Expected a number, dice or '(', got {_describe(tok)}")

    def _parse_number(self) -> Number:
        tok = self.expect(TokenKind.INT, "Expected a number")
        value = int(tok.value)
        if value > MAX_NUMBER:
            raise self.error(f"Number too large: {tok.value} (max {MAX_NUMBER})", tok)
        return Number(value=value)

    def _parse_group(self) -> Expr:
        """'(' expression ')'"""
        open_tok = self.expect(TokenKind.LPAREN, "Expected '('")
        expr = self.parse_expression()
        if self.current.kind != TokenKind.RPAREN:
            raise self.error(
                f"Unmatched '(': expected ')', got {_describe(self.current)}",
                open_tok if self.current.kind == TokenKind.EOF else None,
            )
        self.advance()
        return expr

    def _parse_operand(self, after: Token) -> Expr:
        """number | '(' expression ')'"""
        if self.current.kind == TokenKind.INT:
            return self._parse_number()
        if self.current.kind == TokenKind.LPAREN:
            return self._parse_group()
        raise self.error(
            f"Expected a number or '(' after {after.value!r}, got {_describe(self.current)}"
        )

    def _parse_dice(self, operands: list[Expr]) -> Dice:
        """operand? 'd' operand modifier*"""
        d_tok = self.expect(TokenKind.D, "Expected 'd'")
        operands.append(self._parse_operand(d_tok))
        modifiers = self._parse_modifiers()
        count, sides = _assign_count_sides(operands)
        return Dice(count=count, sides=sides, modifiers=modifiers)

    def _parse_repetition(self) -> Repetition:
        """number '(' expression ')' modifier*"""
        count = self._parse_number()
        expr = self._parse_group()
        modifiers = self._parse_modifiers()
        return Repetition(count=count, expr=expr, modifiers=modifiers)

    def _parse_modifiers(self) -> list[DiceModifier]:
        """modifier*"""
        modifiers: list[DiceModifier] = []
        while self.current.kind in MODIFIER_TOKENS:
            tok = self.advance()
            kind = _MODIFIER_KINDS[tok.kind]
            value: Expr | None = None

            if kind == ModifierKind.EXPLODE:
                touching = self.current.pos == tok.end
                if touching and self.current.kind in (TokenKind.INT, TokenKind.LPAREN):
                    value = self._parse_operand(tok)
            elif self.current.kind in (TokenKind.INT, TokenKind.LPAREN):
                value = self._parse_operand(tok)
            else:
                raise self.error(
                    f"Modifier {tok.value!r} must be followed by a value, e.g. 4d6{tok.value}3"
                )

            modifiers.append(DiceModifier(kind=kind, value=value))
        return modifiers


def _assign_count_sides(operands: list[Expr]) -> tuple[Expr, Expr]:
    """Resolve dice operands in document order.

    The last operand is always the side count; the one before it, if any,
    is the dice count. A lone operand leaves the count at 1.
    """
    count: Expr = Number(value=1)
    sides: Expr = Number(value=1)
    have_sides = False
    for operand in operands:
        if have_sides:
            count = sides
        sides = operand
        have_sides = True
    return count, sides


def parse(source: str) -> list[Expr]:
    """Parse a notation string into one expression tree per top-level expression.

    Args:
        source: Notation text (e.g., "4d6kh3 + 2 1d20")

    Returns:
        Parsed expression trees, in source order.

    Raises:
        ParseError: If the input is empty or any expression is invalid.
    """
    if not source.strip():
        raise ParseError("No expressions found")

    try:
        tokens = tokenize(source)
    except NotationTokenError as e:
        raise make_parse_error(str(e), source, e.pos) from e

    parser = _Parser(tokens, source)
    try:
        exprs = parser.parse_program()
    except RecursionError as e:
        raise ParseError("Expression is nested too deeply") from e

    logger.debug("Parsed %d expression(s) from %r", len(exprs), source)
    return exprs


def parse_expr(source: str) -> Expr:
    """Parse a notation string that must contain exactly one expression.

    Raises:
        ParseError: If the input is invalid or holds more than one expression.
    """
    exprs = parse(source)
    if len(exprs) != 1:
        raise ParseError(f"Expected a single expression, found {len(exprs)}")
    return exprs[0]
