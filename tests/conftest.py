"""Shared pytest fixtures for rollnote tests."""

import pytest

from rollnote.core.settings import MAX_DICE_VAR, MAX_EXPLODE_ROLLS_VAR, SEED_VAR, RollSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ROLLNOTE_* variables from the developer's shell out of tests."""
    for name in (MAX_DICE_VAR, MAX_EXPLODE_ROLLS_VAR, SEED_VAR):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> RollSettings:
    """Return default evaluation settings."""
    return RollSettings()
