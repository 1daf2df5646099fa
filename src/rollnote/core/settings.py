"""
Runtime limits and seeding for dice evaluation.

Settings are read from environment variables so that embedding hosts and
the CLI share one configuration surface:

    ROLLNOTE_MAX_DICE            - most dice a single roll may throw (default 1000)
    ROLLNOTE_MAX_EXPLODE_ROLLS   - most extra draws one explode modifier may add (default 10000)
    ROLLNOTE_SEED                - integer seed for the default random source (unset = OS entropy)

Usage:
    from rollnote.core.settings import load_settings

    settings = load_settings()
    if count > settings.max_dice:
        ...
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MAX_DICE = 1000
DEFAULT_MAX_EXPLODE_ROLLS = 10_000

MAX_DICE_VAR = "ROLLNOTE_MAX_DICE"
MAX_EXPLODE_ROLLS_VAR = "ROLLNOTE_MAX_EXPLODE_ROLLS"
SEED_VAR = "ROLLNOTE_SEED"


@dataclass(frozen=True)
class RollSettings:
    """Limits applied during evaluation."""

    max_dice: int = DEFAULT_MAX_DICE
    max_explode_rolls: int = DEFAULT_MAX_EXPLODE_ROLLS
    seed: int | None = None


def _read_optional_int(name: str) -> int | None:
    """Read an integer env var, or None when it is unset or not an integer."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None

    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s value '%s'. Expected an integer, ignoring it.", name, raw)
        return None


def _read_int(name: str, default: int, minimum: int) -> int:
    """Read an integer env var, falling back to ``default`` on bad input."""
    value = _read_optional_int(name)
    if value is None:
        return default

    if value < minimum:
        logger.warning("%s must be at least %d, got %d. Using %d.", name, minimum, value, default)
        return default
    return value


def load_settings() -> RollSettings:
    """Build settings from the ROLLNOTE_* environment variables.

    Returns:
        RollSettings: Current settings. Unset or invalid variables keep
        their defaults.

    Examples:
        >>> import os
        >>> os.environ["ROLLNOTE_MAX_DICE"] = "50"
        >>> load_settings().max_dice
        50
    """
    max_dice = _read_int(MAX_DICE_VAR, DEFAULT_MAX_DICE, minimum=0)
    max_explode_rolls = _read_int(MAX_EXPLODE_ROLLS_VAR, DEFAULT_MAX_EXPLODE_ROLLS, minimum=0)
    seed = _read_optional_int(SEED_VAR)
    return RollSettings(max_dice=max_dice, max_explode_rolls=max_explode_rolls, seed=seed)
