"""
UserStats — снимок прогрессии и метрик пользователя

Пользователи не создаются явно: адрес без истории читается как 0 баллов,
уровень 1, без бейджей и с нулевыми счётчиками.
"""

from pydantic import BaseModel, Field

from src.core.math.integer_safeguards import iter_bits


def normalize_user(user: str) -> str:
    """
    Каноническая форма адресоподобного принципала.

    Raises:
        ValueError: Если user пустой или не строка
    """
    if not isinstance(user, str) or not user.strip():
        raise ValueError(f"user must be a non-empty string, got {user!r}")
    return user.strip().lower()


def same_principal(caller: object, principal: str) -> bool:
    """
    Совпадает ли caller с principal после нормализации.

    Некорректный caller (не строка, пустая строка) просто не совпадает.
    """
    if not isinstance(caller, str) or not caller.strip():
        return False
    return normalize_user(caller) == normalize_user(principal)


class UserStats(BaseModel):
    """Снимок, собранный из запросов ProgressionEngine и MetricsTracker."""

    user: str = Field(..., min_length=1, description="Нормализованный принципал")
    points: int = Field(..., ge=0, description="Баланс баллов")
    level: int = Field(..., ge=1, description="Кэшированный уровень")
    badges: int = Field(..., ge=0, description="Битсет бейджей")
    liquidity_provided: int = Field(..., ge=0, description="Накопленная ликвидность (минимальные единицы)")
    swap_volume: int = Field(..., ge=0, description="Накопленный объём свопов (минимальные единицы)")

    model_config = {"frozen": True}

    @property
    def badge_ids(self) -> list[int]:
        """Полученные id бейджей по возрастанию."""
        return list(iter_bits(self.badges))
