"""Tests for the dice notation tokenizer."""

from __future__ import annotations

import pytest

from rollnote.core.notation.tokenizer import NotationTokenError, TokenKind, tokenize


class TestTokenizer:
    """Tokenizer produces correct token sequences."""

    def test_integer(self) -> None:
        tokens = tokenize("42")
        assert tokens[0].kind == TokenKind.INT
        assert tokens[0].value == "42"

    def test_simple_dice(self) -> None:
        kinds = [t.kind for t in tokenize("3d6")]
        assert kinds == [TokenKind.INT, TokenKind.D, TokenKind.INT, TokenKind.EOF]

    def test_modifiers(self) -> None:
        tokens = tokenize("kh kl dh dl !")
        assert [t.kind for t in tokens] == [
            TokenKind.KEEP_HIGH,
            TokenKind.KEEP_LOW,
            TokenKind.DROP_HIGH,
            TokenKind.DROP_LOW,
            TokenKind.BANG,
            TokenKind.EOF,
        ]

    def test_drop_low_after_sides(self) -> None:
        # "d6dl1": the first d is a die, the second starts a modifier
        kinds = [t.kind for t in tokenize("4d6dl1")]
        assert kinds == [
            TokenKind.INT,
            TokenKind.D,
            TokenKind.INT,
            TokenKind.DROP_LOW,
            TokenKind.INT,
            TokenKind.EOF,
        ]

    def test_operators_and_punctuation(self) -> None:
        kinds = [t.kind for t in tokenize("+ - * / ( )")]
        assert kinds == [
            TokenKind.PLUS,
            TokenKind.MINUS,
            TokenKind.STAR,
            TokenKind.SLASH,
            TokenKind.LPAREN,
            TokenKind.RPAREN,
            TokenKind.EOF,
        ]

    def test_positions(self) -> None:
        tokens = tokenize("2d6 + 3")
        assert [t.pos for t in tokens] == [0, 1, 2, 4, 6, 7]
        assert tokens[-1].kind == TokenKind.EOF

    def test_token_end(self) -> None:
        tokens = tokenize("12d100")
        assert tokens[0].end == 2
        assert tokens[2].end == 6

    def test_whitespace_skipped(self) -> None:
        kinds = [t.kind for t in tokenize(" \t1\n")]
        assert kinds == [TokenKind.INT, TokenKind.EOF]

    def test_empty_input(self) -> None:
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF


class TestTokenizerErrors:
    """Tokenizer rejects characters outside the notation."""

    def test_unexpected_character(self) -> None:
        with pytest.raises(NotationTokenError) as exc_info:
            tokenize("2d6 x")
        assert exc_info.value.pos == 4
        assert "Unexpected character" in str(exc_info.value)

    def test_unknown_keep_modifier(self) -> None:
        with pytest.raises(NotationTokenError, match="Unknown modifier"):
            tokenize("4d6kx3")

    def test_uppercase_rejected(self) -> None:
        with pytest.raises(NotationTokenError, match="lowercase"):
            tokenize("2D6")

    def test_non_ascii_digit_rejected(self) -> None:
        with pytest.raises(NotationTokenError):
            tokenize("2d٦")
