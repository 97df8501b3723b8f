"""Progression — баланс баллов, вычисление уровня и выдача бейджей."""

from .engine import (
    ProgressionConfig,
    ProgressionEngine,
    ProgressionResult,
    calculate_level,
)

__all__ = [
    "ProgressionConfig",
    "ProgressionEngine",
    "ProgressionResult",
    "calculate_level",
]
