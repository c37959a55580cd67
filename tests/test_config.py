"""Tests for engine settings."""

import pytest
from battleship_offline import config as config_module
from battleship_offline.config import DEFAULT_PLACEMENT_ATTEMPTS, EngineSettings
from pydantic import ValidationError


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BATTLESHIP_RNG_SEED", raising=False)
    monkeypatch.delenv("BATTLESHIP_PLACEMENT_ATTEMPTS", raising=False)
    settings = EngineSettings.from_env()
    assert settings.rng_seed is None
    assert settings.placement_attempts == DEFAULT_PLACEMENT_ATTEMPTS


def test_from_env_parses_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATTLESHIP_RNG_SEED", "99")
    monkeypatch.setenv("BATTLESHIP_PLACEMENT_ATTEMPTS", " 25 ")
    settings = EngineSettings.from_env()
    assert settings.rng_seed == 99
    assert settings.placement_attempts == 25


def test_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATTLESHIP_RNG_SEED", "99")
    assert EngineSettings.from_env(rng_seed=5).rng_seed == 5


def test_attempt_budget_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATTLESHIP_PLACEMENT_ATTEMPTS", "0")
    with pytest.raises(ValidationError):
        EngineSettings.from_env()


def test_load_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    config_module.load_settings.cache_clear()
    monkeypatch.setenv("BATTLESHIP_RNG_SEED", "3")
    first = config_module.load_settings()
    monkeypatch.setenv("BATTLESHIP_RNG_SEED", "4")
    assert config_module.load_settings() is first
    assert first.rng_seed == 3
    config_module.load_settings.cache_clear()
