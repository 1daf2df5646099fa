"""Tests for ROLLNOTE_* environment configuration."""

from __future__ import annotations

import logging

import pytest

from rollnote.core.settings import (
    DEFAULT_MAX_DICE,
    DEFAULT_MAX_EXPLODE_ROLLS,
    RollSettings,
    load_settings,
)


class TestLoadSettings:
    def test_defaults(self) -> None:
        assert load_settings() == RollSettings()
        assert load_settings().max_dice == DEFAULT_MAX_DICE
        assert load_settings().max_explode_rolls == DEFAULT_MAX_EXPLODE_ROLLS
        assert load_settings().seed is None

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLNOTE_MAX_DICE", "50")
        monkeypatch.setenv("ROLLNOTE_MAX_EXPLODE_ROLLS", "20")
        monkeypatch.setenv("ROLLNOTE_SEED", "1234")
        assert load_settings() == RollSettings(max_dice=50, max_explode_rolls=20, seed=1234)

    def test_whitespace_trimmed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLNOTE_MAX_DICE", " 12 ")
        assert load_settings().max_dice == 12

    def test_negative_seed_allowed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLNOTE_SEED", "-5")
        assert load_settings().seed == -5

    def test_invalid_seed_ignored(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("ROLLNOTE_SEED", "abc")
        monkeypatch.setenv("ROLLNOTE_MAX_DICE", "0")
        with caplog.at_level(logging.WARNING, logger="rollnote.core.settings"):
            settings = load_settings()
        assert settings == RollSettings(max_dice=0, seed=None)
        assert "ROLLNOTE_SEED" in caplog.text

    def test_invalid_value_falls_back(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("ROLLNOTE_MAX_DICE", "lots")
        with caplog.at_level(logging.WARNING, logger="rollnote.core.settings"):
            settings = load_settings()
        assert settings.max_dice == DEFAULT_MAX_DICE
        assert "ROLLNOTE_MAX_DICE" in caplog.text

    def test_negative_limit_falls_back(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("ROLLNOTE_MAX_EXPLODE_ROLLS", "-1")
        with caplog.at_level(logging.WARNING, logger="rollnote.core.settings"):
            settings = load_settings()
        assert settings.max_explode_rolls == DEFAULT_MAX_EXPLODE_ROLLS
        assert "at least 0" in caplog.text

    def test_settings_are_frozen(self) -> None:
        settings = RollSettings()
        with pytest.raises(AttributeError):
            settings.max_dice = 5  # type: ignore[misc]
