"""PoolEventAdapter — реакция на расчётные добавления ликвидности и свопы.

Биржа передаёт знаковые дельты балансов обеих ног пула. Модуль дельты ноги
базового актива — расчётная сумма:

    base_asset_amount = |amount{leg}_delta|
    points            = RewardCalculator.points_for_value(base_asset_amount)

Событие обрабатывается по принципу всё-или-ничего:
1. баллы считаются до любых изменений (невалидная цена ничего не меняет)
2. оба сложения (баланс баллов и счётчик метрики) проверяются на
   переполнение до записи
3. начисление баллов, затем обновление метрики
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.contracts.validators import validate_pool_event
from src.core.domain.events import LiquidityRewarded, SwapRewarded
from src.core.domain.user import normalize_user
from src.core.math.integer_safeguards import abs_delta, checked_add, validate_int
from src.core.notifications import EventLog
from src.metrics.tracker import MetricsTracker
from src.progression.engine import ProgressionEngine, ProgressionResult
from src.rewards.calculator import RewardCalculator

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class PoolEventConfig:
    """Какая нога пула (0 или 1) несёт базовый актив."""

    base_asset_leg: int = 0

    def __post_init__(self) -> None:
        if self.base_asset_leg not in (0, 1):
            raise ValueError(f"base_asset_leg must be 0 or 1, got {self.base_asset_leg}")


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class RewardOutcome:
    """Итог одного события пула."""

    user: str
    base_asset_amount: int
    points: int
    metric_total: int
    progression: ProgressionResult


# =============================================================================
# ADAPTER
# =============================================================================


class PoolEventAdapter:
    """Точки входа, вызываемые биржей после расчёта."""

    def __init__(
        self,
        calculator: RewardCalculator,
        progression: ProgressionEngine,
        metrics: MetricsTracker,
        config: Optional[PoolEventConfig] = None,
        event_log: Optional[EventLog] = None,
    ):
        self.calculator = calculator
        self.progression = progression
        self.metrics = metrics
        self.config = config or PoolEventConfig()
        self.event_log = event_log if event_log is not None else progression.event_log

    def on_liquidity_added(
        self, user: str, amount0_delta: int, amount1_delta: int
    ) -> RewardOutcome:
        """Награда за расчётное добавление ликвидности.

        Raises:
            InvalidPrice / StalePrice: оракул отклонён (состояние не меняется)
            OverflowError: баланс или счётчик переполнился бы (не меняется)
            ValueError: некорректный user или дельты
        """
        user = normalize_user(user)
        amount = self._base_leg(amount0_delta, amount1_delta)
        points = self.calculator.points_for_value(amount)

        checked_add(self.progression.get_points(user), points)
        checked_add(self.metrics.get_liquidity_provided(user), amount)

        progression = self.progression.credit_points(user, points)
        total = self.metrics.record_liquidity_provision(user, amount)

        self.event_log.emit(
            LiquidityRewarded(user=user, base_asset_amount=amount, points=points)
        )
        logger.info(
            "Liquidity addition rewarded",
            extra={
                "event": "pool.liquidity_rewarded",
                "user": user,
                "base_asset_amount": amount,
                "points": points,
            },
        )
        return RewardOutcome(
            user=user,
            base_asset_amount=amount,
            points=points,
            metric_total=total,
            progression=progression,
        )

    def on_swap_executed(
        self,
        user: str,
        zero_for_one: bool,
        amount_specified: int,
        amount0_delta: int,
        amount1_delta: int,
    ) -> RewardOutcome:
        """Награда за расчётный своп.

        `zero_for_one` и `amount_specified` описывают запрос; награду
        определяют только расчётные дельты.

        Raises:
            InvalidPrice / StalePrice: оракул отклонён (состояние не меняется)
            OverflowError: баланс или счётчик переполнился бы (не меняется)
            ValueError: некорректный user или дельты
        """
        user = normalize_user(user)
        validate_int(amount_specified, "amount_specified")
        amount = self._base_leg(amount0_delta, amount1_delta)
        points = self.calculator.points_for_value(amount)

        checked_add(self.progression.get_points(user), points)
        checked_add(self.metrics.get_swap_volume(user), amount)

        progression = self.progression.credit_points(user, points)
        total = self.metrics.record_swap(user, amount)

        self.event_log.emit(
            SwapRewarded(
                user=user,
                zero_for_one=bool(zero_for_one),
                base_asset_amount=amount,
                points=points,
            )
        )
        logger.info(
            "Swap rewarded",
            extra={
                "event": "pool.swap_rewarded",
                "user": user,
                "zero_for_one": bool(zero_for_one),
                "amount_specified": amount_specified,
                "base_asset_amount": amount,
                "points": points,
            },
        )
        return RewardOutcome(
            user=user,
            base_asset_amount=amount,
            points=points,
            metric_total=total,
            progression=progression,
        )

    def handle_payload(self, payload: Dict[str, Any]) -> RewardOutcome:
        """Проверить сырое событие пула по его контракту и обработать.

        Raises:
            jsonschema.ValidationError: событие нарушает контракт
            ValueError: неизвестный event_type
        """
        event_type = validate_pool_event(payload)

        if event_type == "liquidity_added":
            return self.on_liquidity_added(
                payload["user"], payload["amount0_delta"], payload["amount1_delta"]
            )
        return self.on_swap_executed(
            payload["user"],
            payload["zero_for_one"],
            payload["amount_specified"],
            payload["amount0_delta"],
            payload["amount1_delta"],
        )

    def _base_leg(self, amount0_delta: int, amount1_delta: int) -> int:
        amount0 = abs_delta(amount0_delta, "amount0_delta")
        amount1 = abs_delta(amount1_delta, "amount1_delta")
        return amount0 if self.config.base_asset_leg == 0 else amount1
