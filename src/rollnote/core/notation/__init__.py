"""
Dice notation language.

Tokenizer, parser and evaluator for expressions such as ``4d6kh3 + 2``.

Usage:
    from rollnote.core.notation import evaluate, parse

    for expr in parse("4d6kh3 3(1d6)!"):
        result = evaluate(expr)
        print(result.to_number())
"""

from rollnote.core.notation.evaluator import evaluate
from rollnote.core.notation.parser import parse, parse_expr
from rollnote.core.notation.randomness import RandomSource, ScriptedRandom, make_random
from rollnote.core.notation.tokenizer import tokenize

__all__ = [
    "RandomSource",
    "ScriptedRandom",
    "evaluate",
    "make_random",
    "parse",
    "parse_expr",
    "tokenize",
]
