"""
rollnote command line.

    roll [options] <expr>...

Every argument is joined into one notation string, lowercased, parsed and
rolled. Each top-level expression prints one line: its total, or with
``--verbose`` the individual rolls.
"""

from __future__ import annotations

import logging
import sys
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from rollnote.core.errors import EvaluationError, ParseError
from rollnote.core.ir.results import Rolls
from rollnote.core.notation import evaluate, make_random, parse
from rollnote.core.settings import load_settings

USAGE = """Usage: roll [options] <expr>

Options:
  -v, --verbose   Show individual rolls
  --seed N        Seed the random source
  -h, --help      Show this help message"""

err_console = Console(stderr=True, highlight=False, soft_wrap=True)

app = typer.Typer(
    help="Roll dice notation such as 4d6kh3, 2d20kl1 + 5 or 6(4d6dl1).",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def get_version() -> str:
    """Get rollnote version from package metadata."""
    from rollnote import __version__

    return __version__


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"rollnote {get_version()}")
        raise typer.Exit()


def _fail(label: str, error: ParseError | EvaluationError) -> NoReturn:
    err_console.print(f"[red]{label}:[/red] {escape(str(error))}")
    if isinstance(error, ParseError) and error.context is not None:
        err_console.print(escape(error.context.format_snippet()))
    raise typer.Exit(code=1)


@app.command()
def roll(
    expression: list[str] | None = typer.Argument(
        None,
        help="Dice expression(s), e.g. 4d6kh3 + 2",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show individual rolls",
    ),
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Seed the random source for reproducible rolls (overrides ROLLNOTE_SEED)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log parsing and rolling details to stderr",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Roll dice notation expressions."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

    if not expression:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1)

    source = " ".join(expression).lower()
    try:
        exprs = parse(source)
    except ParseError as e:
        _fail("Parse error", e)

    settings = load_settings()
    rng = make_random(seed if seed is not None else settings.seed)

    for expr in exprs:
        try:
            result = evaluate(expr, rng, settings)
        except EvaluationError as e:
            _fail("Evaluation error", e)

        if verbose and isinstance(result, Rolls):
            typer.echo(str(result.values))
        else:
            typer.echo(str(result.to_number()))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
