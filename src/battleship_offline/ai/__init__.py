"""AI package exports."""

from .strategies import (
    Difficulty,
    HuntTargetTargeting,
    OmniscientTargeting,
    RandomTargeting,
    TargetingContext,
    TargetingStrategy,
    choose_target,
    strategy_for,
)

__all__ = [
    "Difficulty",
    "HuntTargetTargeting",
    "OmniscientTargeting",
    "RandomTargeting",
    "TargetingContext",
    "TargetingStrategy",
    "choose_target",
    "strategy_for",
]
