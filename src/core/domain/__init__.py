"""
Доменные модели и value objects.

Содержит фундаментальные сущности: Challenge, Quest, PriceReading,
UserStats, публикуемые уведомления и конвертеры единиц.
"""

from src.core.domain.challenge import MAX_BADGES, Challenge, ChallengeType, Quest
from src.core.domain.events import (
    BadgeAwarded,
    ChallengeCompleted,
    ChallengeCreated,
    ChallengeDeactivated,
    LevelUp,
    LiquidityRewarded,
    Notification,
    PointsCredited,
    QuestCompleted,
    QuestCreated,
    SwapRewarded,
)
from src.core.domain.price import PriceReading
from src.core.domain.units import (
    BASE_ASSET_DECIMALS,
    POINTS_DENOMINATOR,
    POINTS_USD_STEP,
    PRICE_FEED_DECIMALS,
    PRICE_SCALE,
    SCALE_BASE,
    base_units,
    fiat_value,
    fiat_value_to_points,
    points_denominator_for,
    usd_price,
)
from src.core.domain.user import UserStats, normalize_user, same_principal

__all__ = [
    # Units module
    "BASE_ASSET_DECIMALS",
    "SCALE_BASE",
    "PRICE_FEED_DECIMALS",
    "PRICE_SCALE",
    "POINTS_USD_STEP",
    "POINTS_DENOMINATOR",
    "base_units",
    "usd_price",
    "fiat_value",
    "fiat_value_to_points",
    "points_denominator_for",
    # Challenge / quest models
    "MAX_BADGES",
    "Challenge",
    "ChallengeType",
    "Quest",
    # Price
    "PriceReading",
    # User
    "UserStats",
    "normalize_user",
    "same_principal",
    # Notifications
    "Notification",
    "PointsCredited",
    "LevelUp",
    "BadgeAwarded",
    "ChallengeCreated",
    "ChallengeDeactivated",
    "ChallengeCompleted",
    "QuestCreated",
    "QuestCompleted",
    "LiquidityRewarded",
    "SwapRewarded",
]
