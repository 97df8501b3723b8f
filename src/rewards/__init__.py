"""Rewards — конверсия расчётной стоимости базового актива в баллы."""

from .calculator import RewardCalculator, RewardConfig

__all__ = [
    "RewardCalculator",
    "RewardConfig",
]
