"""
Error types for dice notation parsing and evaluation.
"""

from dataclasses import dataclass


class RollnoteError(Exception):
    """Base exception for all rollnote errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message} ({self.context.format()})"
        return self.message


class ParseError(RollnoteError):
    """
    Raised when dice notation cannot be parsed.

    Examples:
    - Unmatched parentheses
    - Dangling operators
    - Unknown modifier letters
    - Number literals out of range
    """

    pass


class EvaluationError(RollnoteError):
    """
    Raised when a parsed expression cannot be evaluated.

    Examples:
    - Division by zero
    - Dice with fewer than one side
    - Keep/drop modifier without a value
    - Exploding a repetition (no side count)
    """

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error inside a notation string.

    Attributes:
        source: The full input text
        column: Column number (1-indexed)
    """

    source: str
    column: int

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "column 5"
        """
        return f"column {self.column}"

    def format_snippet(self) -> str:
        """Render the source with a caret under the error column."""
        prefix = "  | "
        marker = " " * (len(prefix) + self.column - 1) + "^"
        return f"{prefix}{self.source}\n{marker}"


def make_parse_error(message: str, source: str, pos: int) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        source: Input text being parsed
        pos: 0-indexed offset of the offending character

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(source=source, column=pos + 1)
    return ParseError(message, context)
