"""ProgressionEngine — машина состояний баллы → уровень → бейджи.

Состояние пользователя:
- points: неубывающий баланс (внешне наблюдаемый итог баллов)
- level: кэш, выводится из points, по умолчанию 1
- badges: битсет, биты только устанавливаются

Переходы:
- credit_points → пересчёт уровня → при строгом росте сохранить его,
  опубликовать LevelUp и проверить milestone-бейджи по возрастанию
- award_badge_and_points (только реестр челленджей) → credit_points,
  затем выдача указанного бейджа

Формула уровня: min(points // POINTS_PER_LEVEL + 1, MAX_LEVEL). После
сохранения MAX_LEVEL новых LevelUp нет, хотя баллы продолжают копиться.

Принципалы (admin, registry_id, пользователи) сравниваются в
нормализованной форме.
"""

import logging
from dataclasses import dataclass
from typing import Final, Optional

from src.core.domain.challenge import MAX_BADGES
from src.core.domain.events import BadgeAwarded, LevelUp, PointsCredited
from src.core.domain.user import normalize_user, same_principal
from src.core.errors import RegistryAlreadyBound, Unauthorized
from src.core.math.integer_safeguards import (
    checked_add,
    has_bit,
    iter_bits,
    set_bit,
    validate_uint,
    validate_uint_below,
)
from src.core.notifications import EventLog
from src.core.store.memory import InMemoryKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

POINTS_PER_LEVEL: Final[int] = 100
MAX_LEVEL: Final[int] = 100
INITIAL_LEVEL: Final[int] = 1

# (минимальный уровень, id бейджа), по возрастанию
DEFAULT_LEVEL_MILESTONES: Final[tuple[tuple[int, int], ...]] = (
    (10, 0),
    (25, 1),
    (50, 2),
)

# Выдаётся, когда сохранённый уровень равен MAX_LEVEL
MAX_LEVEL_BADGE_ID: Final[int] = 3


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ProgressionConfig:
    """Конфигурация уровней и milestone-бейджей."""

    points_per_level: int = POINTS_PER_LEVEL
    max_level: int = MAX_LEVEL
    level_milestones: tuple[tuple[int, int], ...] = DEFAULT_LEVEL_MILESTONES
    max_level_badge_id: int = MAX_LEVEL_BADGE_ID

    def __post_init__(self) -> None:
        if self.points_per_level <= 0:
            raise ValueError(
                f"points_per_level must be positive, got {self.points_per_level}"
            )
        if self.max_level < INITIAL_LEVEL:
            raise ValueError(f"max_level must be >= 1, got {self.max_level}")

        previous = 0
        for level, badge_id in self.level_milestones:
            if level <= previous:
                raise ValueError("level_milestones must be strictly ascending by level")
            validate_uint_below(badge_id, "milestone badge_id", MAX_BADGES)
            previous = level
        validate_uint_below(self.max_level_badge_id, "max_level_badge_id", MAX_BADGES)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class ProgressionResult:
    """Итог одного начисления баллов."""

    user: str
    points_credited: int
    new_balance: int

    previous_level: int
    new_level: int
    leveled_up: bool

    # Бейджи, впервые выданные этим вызовом, в порядке выдачи
    badges_awarded: tuple[int, ...]


def calculate_level(
    points: int,
    points_per_level: int = POINTS_PER_LEVEL,
    max_level: int = MAX_LEVEL,
) -> int:
    """Уровень для суммы баллов.

    level = floor(points / points_per_level) + 1, не выше max_level.

    Examples:
        >>> calculate_level(0)
        1
        >>> calculate_level(199)
        2
        >>> calculate_level(10**30)
        100
    """
    validate_uint(points, "points")
    return min(points // points_per_level + 1, max_level)


# =============================================================================
# ENGINE
# =============================================================================


class ProgressionEngine:
    """Единственный владелец баллов, уровней и бейджей.

    Выдача наград — это право: администратор один раз привязывает его к
    принципалу реестра челленджей, и каждый вызов предъявляет этот
    принципал как `caller`.
    """

    def __init__(
        self,
        admin: str,
        config: Optional[ProgressionConfig] = None,
        event_log: Optional[EventLog] = None,
        points_store: Optional[KeyValueStore[str, int]] = None,
        level_store: Optional[KeyValueStore[str, int]] = None,
        badge_store: Optional[KeyValueStore[str, int]] = None,
    ):
        """
        Args:
            admin: принципал, которому разрешено привязать реестр
            config: конфигурация уровней
            event_log: приёмник уведомлений (общий для компонентов)
            points_store / level_store / badge_store: состояние пользователей
        """
        self.admin = normalize_user(admin)
        self.config = config or ProgressionConfig()
        self.event_log = event_log if event_log is not None else EventLog()

        self._points = points_store if points_store is not None else InMemoryKeyValueStore(int)
        self._levels = (
            level_store
            if level_store is not None
            else InMemoryKeyValueStore(lambda: INITIAL_LEVEL)
        )
        self._badges = badge_store if badge_store is not None else InMemoryKeyValueStore(int)

        self._challenge_registry: Optional[str] = None

    # -------------------------------------------------------------------------
    # Wiring
    # -------------------------------------------------------------------------

    @property
    def challenge_registry(self) -> Optional[str]:
        """Принципал с правом выдачи наград (None до привязки)."""
        return self._challenge_registry

    def bind_challenge_registry(self, caller: str, registry_id: str) -> None:
        """Однократная привязка права выдачи наград.

        Raises:
            Unauthorized: caller не администратор
            RegistryAlreadyBound: реестр уже привязан
            ValueError: пустой registry_id
        """
        if not same_principal(caller, self.admin):
            raise Unauthorized(caller, "bind_challenge_registry")
        if self._challenge_registry is not None:
            raise RegistryAlreadyBound(self._challenge_registry)

        registry_id = normalize_user(registry_id)
        self._challenge_registry = registry_id
        logger.info(
            "Challenge registry bound",
            extra={"event": "progression.registry_bound", "registry_id": registry_id},
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_points(self, user: str) -> int:
        return self._points.get(normalize_user(user))

    def get_level(self, user: str) -> int:
        return self._levels.get(normalize_user(user))

    def get_badges(self, user: str) -> int:
        """Битсет бейджей пользователя."""
        return self._badges.get(normalize_user(user))

    def has_badge(self, user: str, badge_id: int) -> bool:
        return has_bit(self.get_badges(user), badge_id)

    def badge_ids(self, user: str) -> list[int]:
        """Полученные id бейджей по возрастанию."""
        return list(iter_bits(self.get_badges(user)))

    def calculate_level(self, points: int) -> int:
        """Уровень для points в конфигурации этого движка."""
        return calculate_level(
            points, self.config.points_per_level, self.config.max_level
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def credit_points(self, user: str, amount: int) -> ProgressionResult:
        """Добавить amount к балансу и проверить уровень/бейджи.

        Args:
            user: принципал
            amount: баллы (0 допустим и ничего не меняет)

        Returns:
            ProgressionResult

        Raises:
            ValueError: amount не беззнаковое целое
            OverflowError: баланс превысил бы UINT256_MAX
        """
        user = normalize_user(user)
        validate_uint(amount, "amount")

        new_balance = checked_add(self._points.get(user), amount)
        self._points.set(user, new_balance)
        self.event_log.emit(
            PointsCredited(user=user, amount=amount, new_balance=new_balance)
        )

        previous_level = self._levels.get(user)
        awarded = self._evaluate_level(user, new_balance)
        new_level = self._levels.get(user)

        return ProgressionResult(
            user=user,
            points_credited=amount,
            new_balance=new_balance,
            previous_level=previous_level,
            new_level=new_level,
            leveled_up=new_level > previous_level,
            badges_awarded=tuple(awarded),
        )

    def award_badge_and_points(
        self, caller: str, user: str, points: int, badge_id: int
    ) -> ProgressionResult:
        """Награда челленджа/квеста: credit_points, затем бейдж badge_id.

        Один вызов может выдать и milestone-бейджи начисления, и явный бейдж.

        Raises:
            Unauthorized: caller не привязанный реестр челленджей
            ValueError: некорректные points или badge_id (до любых изменений)
        """
        if self._challenge_registry is None or not same_principal(
            caller, self._challenge_registry
        ):
            logger.warning(
                "Unauthorized reward grant attempt",
                extra={"event": "progression.unauthorized", "caller": caller},
            )
            raise Unauthorized(caller, "award_badge_and_points")

        user = normalize_user(user)
        validate_uint(points, "points")
        validate_uint_below(badge_id, "badge_id", MAX_BADGES)

        result = self.credit_points(user, points)
        awarded = list(result.badges_awarded)
        if self._award_badge(user, badge_id):
            awarded.append(badge_id)

        return ProgressionResult(
            user=result.user,
            points_credited=result.points_credited,
            new_balance=result.new_balance,
            previous_level=result.previous_level,
            new_level=result.new_level,
            leveled_up=result.leveled_up,
            badges_awarded=tuple(awarded),
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _evaluate_level(self, user: str, balance: int) -> list[int]:
        """Сохранить строго больший уровень и выдать milestone-бейджи."""
        stored_level = self._levels.get(user)
        level = self.calculate_level(balance)
        if level <= stored_level:
            return []

        self._levels.set(user, level)
        self.event_log.emit(LevelUp(user=user, old_level=stored_level, new_level=level))
        logger.info(
            "User leveled up",
            extra={
                "event": "progression.level_up",
                "user": user,
                "old_level": stored_level,
                "new_level": level,
            },
        )

        awarded = []
        for min_level, badge_id in self.config.level_milestones:
            if level >= min_level and self._award_badge(user, badge_id):
                awarded.append(badge_id)
        if level == self.config.max_level and self._award_badge(
            user, self.config.max_level_badge_id
        ):
            awarded.append(self.config.max_level_badge_id)
        return awarded

    def _award_badge(self, user: str, badge_id: int) -> bool:
        """Установить бит бейджа; False (без события), если уже есть."""
        badges = self._badges.get(user)
        if has_bit(badges, badge_id):
            return False

        self._badges.set(user, set_bit(badges, badge_id))
        self.event_log.emit(BadgeAwarded(user=user, badge_id=badge_id))
        return True
