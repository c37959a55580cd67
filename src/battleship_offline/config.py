"""Engine settings loaded from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

DEFAULT_PLACEMENT_ATTEMPTS = 500


class EngineSettings(BaseModel):
    """Tunables for a game session."""

    rng_seed: int | None = None
    placement_attempts: int = Field(default=DEFAULT_PLACEMENT_ATTEMPTS, ge=1)

    @classmethod
    def from_env(cls, **overrides: Any) -> "EngineSettings":
        """Construct settings from `BATTLESHIP_RNG_SEED` and `BATTLESHIP_PLACEMENT_ATTEMPTS`."""

        data: Dict[str, Any] = {}
        seed = os.getenv("BATTLESHIP_RNG_SEED")
        if seed is not None and seed.strip():
            data["rng_seed"] = seed.strip()
        attempts = os.getenv("BATTLESHIP_PLACEMENT_ATTEMPTS")
        if attempts is not None and attempts.strip():
            data["placement_attempts"] = attempts.strip()
        data.update(overrides)
        return cls(**data)


@lru_cache(maxsize=1)
def load_settings() -> EngineSettings:
    """Load and cache engine settings from the environment."""

    return EngineSettings.from_env()
