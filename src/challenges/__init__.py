"""Challenges — определения челленджей/квестов и их разовое завершение."""

from .registry import (
    ChallengeProgress,
    ChallengeRegistry,
    CompletionResult,
    QuestProgress,
    RewardGranter,
)

__all__ = [
    "ChallengeRegistry",
    "ChallengeProgress",
    "QuestProgress",
    "CompletionResult",
    "RewardGranter",
]
