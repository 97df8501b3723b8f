"""
Notifications — внешне наблюдаемые события ядра геймификации

Каждый переход состояния, интересный внешнему наблюдателю, публикуется как
неизменяемая модель в EventLog (src.core.notifications). Поле `kind` —
стабильное имя события.
"""

from typing import Literal

from pydantic import BaseModel, Field

from .challenge import ChallengeType


class Notification(BaseModel):
    """Базовый класс публикуемых событий."""

    kind: str

    model_config = {"frozen": True}


# =============================================================================
# ПРОГРЕССИЯ
# =============================================================================


class PointsCredited(Notification):
    kind: Literal["points_credited"] = "points_credited"
    user: str
    amount: int = Field(..., ge=0)
    new_balance: int = Field(..., ge=0)


class LevelUp(Notification):
    kind: Literal["level_up"] = "level_up"
    user: str
    old_level: int = Field(..., ge=1)
    new_level: int = Field(..., ge=1)


class BadgeAwarded(Notification):
    kind: Literal["badge_awarded"] = "badge_awarded"
    user: str
    badge_id: int = Field(..., ge=0)


# =============================================================================
# ЧЕЛЛЕНДЖИ / КВЕСТЫ
# =============================================================================


class ChallengeCreated(Notification):
    kind: Literal["challenge_created"] = "challenge_created"
    challenge_id: int = Field(..., ge=0)
    challenge_type: ChallengeType
    required_amount: int = Field(..., ge=0)
    reward_points: int = Field(..., ge=0)
    badge_id: int = Field(..., ge=0)


class ChallengeDeactivated(Notification):
    kind: Literal["challenge_deactivated"] = "challenge_deactivated"
    challenge_id: int = Field(..., ge=0)


class ChallengeCompleted(Notification):
    kind: Literal["challenge_completed"] = "challenge_completed"
    user: str
    challenge_id: int = Field(..., ge=0)
    reward_points: int = Field(..., ge=0)
    badge_id: int = Field(..., ge=0)


class QuestCreated(Notification):
    kind: Literal["quest_created"] = "quest_created"
    quest_id: int = Field(..., ge=0)
    name: str
    challenge_ids: tuple[int, ...]


class QuestCompleted(Notification):
    kind: Literal["quest_completed"] = "quest_completed"
    user: str
    quest_id: int = Field(..., ge=0)
    reward_points: int = Field(..., ge=0)
    badge_id: int = Field(..., ge=0)


# =============================================================================
# ПУЛ
# =============================================================================


class LiquidityRewarded(Notification):
    kind: Literal["liquidity_rewarded"] = "liquidity_rewarded"
    user: str
    base_asset_amount: int = Field(..., ge=0)
    points: int = Field(..., ge=0)


class SwapRewarded(Notification):
    kind: Literal["swap_rewarded"] = "swap_rewarded"
    user: str
    zero_for_one: bool
    base_asset_amount: int = Field(..., ge=0)
    points: int = Field(..., ge=0)
