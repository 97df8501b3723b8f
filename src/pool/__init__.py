"""Pool — точки входа для событий ликвидности/свопов и сборка компонентов."""

from .deployment import GamificationDeployment, deploy_gamification
from .event_adapter import PoolEventAdapter, PoolEventConfig, RewardOutcome

__all__ = [
    "PoolEventAdapter",
    "PoolEventConfig",
    "RewardOutcome",
    "GamificationDeployment",
    "deploy_gamification",
]
