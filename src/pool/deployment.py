"""Deployment — по одному экземпляру каждого компонента, корректно связанные.

Повторяет разовую настройку администратором: движок прогрессии, трекер
метрик и реестр челленджей с общим журналом событий и привязанным правом
выдачи наград реестра.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from src.challenges.registry import ChallengeRegistry
from src.core.domain.user import UserStats, normalize_user
from src.core.notifications import EventLog
from src.metrics.tracker import MetricsTracker
from src.oracle.adapter import OracleConfig, PriceFeed, PriceOracleAdapter
from src.progression.engine import ProgressionConfig, ProgressionEngine
from src.rewards.calculator import RewardCalculator, RewardConfig

from .event_adapter import PoolEventAdapter, PoolEventConfig

DEFAULT_REGISTRY_ID = "challenge-registry"


@dataclass(frozen=True)
class GamificationDeployment:
    """Связанные компоненты с общим журналом событий."""

    event_log: EventLog
    oracle: PriceOracleAdapter
    calculator: RewardCalculator
    progression: ProgressionEngine
    metrics: MetricsTracker
    registry: ChallengeRegistry
    pool: PoolEventAdapter

    def get_user_stats(self, user: str) -> UserStats:
        """Снимок прогрессии и метрик пользователя (только чтение)."""
        user = normalize_user(user)
        return UserStats(
            user=user,
            points=self.progression.get_points(user),
            level=self.progression.get_level(user),
            badges=self.progression.get_badges(user),
            liquidity_provided=self.metrics.get_liquidity_provided(user),
            swap_volume=self.metrics.get_swap_volume(user),
        )


def deploy_gamification(
    admin: str,
    price_feed: PriceFeed,
    clock: Optional[Callable[[], int]] = None,
    registry_id: str = DEFAULT_REGISTRY_ID,
    oracle_config: Optional[OracleConfig] = None,
    reward_config: Optional[RewardConfig] = None,
    progression_config: Optional[ProgressionConfig] = None,
    pool_config: Optional[PoolEventConfig] = None,
) -> GamificationDeployment:
    """Создать и связать все компоненты.

    Args:
        admin: принципал администратора
        price_feed: внешний фид актив/фиат
        clock: источник unix-времени, общий для оракула и реестра
        registry_id: принципал реестра челленджей
    """
    event_log = EventLog()
    oracle = PriceOracleAdapter(price_feed, oracle_config, clock=clock)
    calculator = RewardCalculator(oracle, reward_config)
    progression = ProgressionEngine(admin, progression_config, event_log=event_log)
    metrics = MetricsTracker()
    registry = ChallengeRegistry(
        registry_id=registry_id,
        admin=admin,
        metrics=metrics,
        rewards=progression,
        clock=clock,
        event_log=event_log,
    )
    progression.bind_challenge_registry(admin, registry_id)
    pool = PoolEventAdapter(calculator, progression, metrics, pool_config, event_log)

    return GamificationDeployment(
        event_log=event_log,
        oracle=oracle,
        calculator=calculator,
        progression=progression,
        metrics=metrics,
        registry=registry,
        pool=pool,
    )
