"""
Challenge / Quest — определения выполняемых задач с наградой

Неизменяемые Pydantic модели. Challenge сохраняет определение на всё время
жизни; единственный изменяемый признак, флаг `active`, меняется созданием
нового экземпляра (см. ChallengeRegistry.deactivate_challenge). Quest
объединяет id челленджей, совместное завершение которых даёт доп. награду.
"""

from enum import Enum
from typing import Final

from pydantic import BaseModel, Field

from src.core.math.integer_safeguards import UINT256_MAX, UINT_BITS


# id бейджа — номер бита в слове леджера
MAX_BADGES: Final[int] = UINT_BITS


# =============================================================================
# ПЕРЕЧИСЛЕНИЯ
# =============================================================================


class ChallengeType(str, Enum):
    """Метрика, по которой проверяется челлендж"""

    LIQUIDITY_PROVISION = "LIQUIDITY_PROVISION"
    SWAPPING = "SWAPPING"
    TIME_BASED = "TIME_BASED"


# =============================================================================
# CHALLENGE
# =============================================================================


class Challenge(BaseModel):
    """
    Ограниченное по времени типизированное требование с разовым бонусом.

    Порядок start_time и end_time не проверяется: окно с
    end_time < start_time просто никогда не открывается.
    """

    challenge_type: ChallengeType = Field(..., description="Проверяемая метрика")
    required_amount: int = Field(
        ..., ge=0, le=UINT256_MAX, description="Порог метрики (минимальные единицы базового актива)"
    )
    reward_points: int = Field(
        ..., ge=0, le=UINT256_MAX, description="Бонусные баллы за завершение"
    )
    badge_id: int = Field(..., ge=0, lt=MAX_BADGES, description="Бейдж за завершение")
    start_time: int = Field(..., ge=0, description="Начало окна (unix, сек, включительно)")
    end_time: int = Field(..., ge=0, description="Конец окна (unix, сек, включительно)")
    active: bool = Field(default=True, description="False после деактивации")

    model_config = {"frozen": True}

    def is_open(self, now: int) -> bool:
        """Лежит ли now внутри [start_time, end_time]."""
        return self.start_time <= now <= self.end_time

    def deactivated(self) -> "Challenge":
        """Копия челленджа с active=False."""
        return self.model_copy(update={"active": False})


# =============================================================================
# QUEST
# =============================================================================


class Quest(BaseModel):
    """Упорядоченный набор челленджей с собственной разовой наградой."""

    name: str = Field(..., min_length=1, description="Отображаемое имя")
    challenge_ids: tuple[int, ...] = Field(
        ..., min_length=1, description="Индексы челленджей (упорядоченные)"
    )
    reward_points: int = Field(
        ..., ge=0, le=UINT256_MAX, description="Бонусные баллы за завершение"
    )
    badge_id: int = Field(..., ge=0, lt=MAX_BADGES, description="Бейдж за завершение")

    model_config = {"frozen": True}
