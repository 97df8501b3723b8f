"""ChallengeRegistry — определения челленджей/квестов и движок завершения.

Машины состояний:
- Challenge: Created(active=True) → Deactivated(active=False), в одну сторону
- (user, challenge) и (user, quest): Pending → Completed, в одну сторону

Проверки завершения идут в фиксированном порядке до первого отказа:

    complete_challenge: InvalidChallenge → ChallengeInactive →
        AlreadyCompleted → OutsideWindow → RequirementNotMet
    complete_quest: InvalidQuest → AlreadyCompleted → IncompleteChallenges

При успехе запись о завершении пишется ДО выдачи награды, поэтому
повторный вход в реестр из выдачи видит AlreadyCompleted. Если выдача
падает, запись откатывается и ошибка пробрасывается.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, NamedTuple, Optional, Protocol, Sequence

from src.core.contracts.validators import (
    validate_challenge_definition,
    validate_quest_definition,
)
from src.core.domain.challenge import Challenge, ChallengeType, Quest
from src.core.domain.events import (
    ChallengeCompleted,
    ChallengeCreated,
    ChallengeDeactivated,
    QuestCompleted,
    QuestCreated,
)
from src.core.domain.user import normalize_user, same_principal
from src.core.errors import (
    AlreadyCompleted,
    ChallengeInactive,
    IncompleteChallenges,
    InvalidChallenge,
    InvalidQuest,
    OutsideWindow,
    RequirementNotMet,
    Unauthorized,
)
from src.core.notifications import EventLog
from src.core.store.memory import AppendOnlyArena, InMemoryKeyValueStore, KeyValueStore
from src.metrics.tracker import MetricsTracker
from src.progression.engine import ProgressionResult

logger = logging.getLogger(__name__)


# =============================================================================
# КОЛЛАБОРАТОРЫ
# =============================================================================


class RewardGranter(Protocol):
    """Ограниченная операция выдачи наград движка прогрессии."""

    def award_badge_and_points(
        self, caller: str, user: str, points: int, badge_id: int
    ) -> ProgressionResult:
        ...


# =============================================================================
# РЕЗУЛЬТАТЫ
# =============================================================================


class ChallengeProgress(NamedTuple):
    """(completed, progress) одного пользователя по одному челленджу."""

    completed: bool
    progress: int


class QuestProgress(NamedTuple):
    """(completed, challenges_completed) одного пользователя по одному квесту."""

    completed: bool
    challenges_completed: int


@dataclass(frozen=True)
class CompletionResult:
    """Итог успешного завершения челленджа или квеста."""

    user: str
    item_id: int
    reward_points: int
    badge_id: int
    progression: ProgressionResult


# =============================================================================
# РЕЕСТР
# =============================================================================


class ChallengeRegistry:
    """Владелец определений челленджей/квестов и записей о завершении.

    Читает MetricsTracker; награды выдаёт только через право RewardGranter,
    предъявляя `registry_id` как caller.
    """

    def __init__(
        self,
        registry_id: str,
        admin: str,
        metrics: MetricsTracker,
        rewards: RewardGranter,
        clock: Optional[Callable[[], int]] = None,
        event_log: Optional[EventLog] = None,
        challenge_arena: Optional[AppendOnlyArena[Challenge]] = None,
        quest_arena: Optional[AppendOnlyArena[Quest]] = None,
        challenge_completions: Optional[KeyValueStore[tuple[str, int], bool]] = None,
        quest_completions: Optional[KeyValueStore[tuple[str, int], bool]] = None,
    ):
        """
        Args:
            registry_id: принципал, предъявляемый выдающему награды
            admin: принципал, которому разрешено создавать/деактивировать определения
            metrics: источник метрик прогресса (только чтение)
            rewards: движок прогрессии (или любой RewardGranter)
            clock: текущее unix-время в секундах
            event_log: приёмник уведомлений
        """
        self.registry_id = normalize_user(registry_id)
        self.admin = normalize_user(admin)
        self._metrics = metrics
        self._rewards = rewards
        self._clock = clock or (lambda: int(time.time()))
        self.event_log = event_log if event_log is not None else EventLog()

        self._challenges = challenge_arena if challenge_arena is not None else AppendOnlyArena()
        self._quests = quest_arena if quest_arena is not None else AppendOnlyArena()
        self._challenge_done = (
            challenge_completions
            if challenge_completions is not None
            else InMemoryKeyValueStore(bool)
        )
        self._quest_done = (
            quest_completions if quest_completions is not None else InMemoryKeyValueStore(bool)
        )

    # -------------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------------

    def create_challenge(self, caller: str, challenge: Challenge) -> int:
        """Добавить определение челленджа.

        Returns:
            id нового челленджа

        Raises:
            Unauthorized: caller не администратор
        """
        self._require_admin(caller, "create_challenge")
        if not challenge.active:
            challenge = challenge.model_copy(update={"active": True})

        challenge_id = self._challenges.append(challenge)
        self.event_log.emit(
            ChallengeCreated(
                challenge_id=challenge_id,
                challenge_type=challenge.challenge_type,
                required_amount=challenge.required_amount,
                reward_points=challenge.reward_points,
                badge_id=challenge.badge_id,
            )
        )
        return challenge_id

    def create_challenge_from_payload(self, caller: str, payload: Dict[str, Any]) -> int:
        """Проверить сырой payload администратора и зарегистрировать челлендж.

        Raises:
            jsonschema.ValidationError: payload не соответствует challenge_definition
            Unauthorized: caller не администратор
        """
        self._require_admin(caller, "create_challenge")
        validate_challenge_definition(payload)
        return self.create_challenge(caller, Challenge.model_validate(payload))

    def create_quest(
        self,
        caller: str,
        name: str,
        challenge_ids: Sequence[int],
        reward_points: int,
        badge_id: int,
    ) -> int:
        """Добавить определение квеста.

        Все указанные id челленджей должны уже существовать.

        Returns:
            id нового квеста

        Raises:
            Unauthorized: caller не администратор
            InvalidChallenge: указанный id вне диапазона
            pydantic.ValidationError: пустое имя/список id, некорректная награда или бейдж
        """
        self._require_admin(caller, "create_quest")
        quest = Quest(
            name=name,
            challenge_ids=tuple(challenge_ids),
            reward_points=reward_points,
            badge_id=badge_id,
        )
        for challenge_id in quest.challenge_ids:
            if not self._challenges.contains(challenge_id):
                raise InvalidChallenge(challenge_id)

        quest_id = self._quests.append(quest)
        self.event_log.emit(
            QuestCreated(quest_id=quest_id, name=quest.name, challenge_ids=quest.challenge_ids)
        )
        return quest_id

    def create_quest_from_payload(self, caller: str, payload: Dict[str, Any]) -> int:
        """Проверить сырой payload администратора и зарегистрировать квест.

        Raises:
            jsonschema.ValidationError: payload не соответствует quest_definition
        """
        self._require_admin(caller, "create_quest")
        validate_quest_definition(payload)
        return self.create_quest(
            caller,
            name=payload["name"],
            challenge_ids=payload["challenge_ids"],
            reward_points=payload["reward_points"],
            badge_id=payload["badge_id"],
        )

    def deactivate_challenge(self, caller: str, challenge_id: int) -> None:
        """Необратимый переход в inactive. Для неактивного ничего не делает.

        Raises:
            Unauthorized: caller не администратор
            InvalidChallenge: id вне диапазона
        """
        self._require_admin(caller, "deactivate_challenge")
        challenge = self.get_challenge(challenge_id)
        if not challenge.active:
            return

        self._challenges.replace(challenge_id, challenge.deactivated())
        self.event_log.emit(ChallengeDeactivated(challenge_id=challenge_id))

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def complete_challenge(self, caller: str, challenge_id: int) -> CompletionResult:
        """Завершить челлендж для caller и выдать награду.

        Raises:
            InvalidChallenge, ChallengeInactive, AlreadyCompleted,
            OutsideWindow, RequirementNotMet: предусловия, в этом порядке
            Unauthorized: реестр не привязан к выдающему награды
        """
        user = normalize_user(caller)
        challenge = self.get_challenge(challenge_id)

        if not challenge.active:
            raise ChallengeInactive(challenge_id)
        if self._challenge_done.get((user, challenge_id)):
            raise AlreadyCompleted("challenge", challenge_id, user)

        now = self._clock()
        if not challenge.is_open(now):
            raise OutsideWindow(challenge_id, now, challenge.start_time, challenge.end_time)

        if challenge.challenge_type != ChallengeType.TIME_BASED:
            progress = self._metric_for(user, challenge.challenge_type)
            if progress < challenge.required_amount:
                raise RequirementNotMet(challenge_id, progress, challenge.required_amount)

        key = (user, challenge_id)
        self._challenge_done.set(key, True)
        try:
            progression = self._rewards.award_badge_and_points(
                self.registry_id, user, challenge.reward_points, challenge.badge_id
            )
        except Exception:
            self._challenge_done.set(key, False)
            raise

        self.event_log.emit(
            ChallengeCompleted(
                user=user,
                challenge_id=challenge_id,
                reward_points=challenge.reward_points,
                badge_id=challenge.badge_id,
            )
        )
        logger.info(
            "Challenge completed",
            extra={
                "event": "challenges.challenge_completed",
                "user": user,
                "challenge_id": challenge_id,
                "reward_points": challenge.reward_points,
            },
        )
        return CompletionResult(
            user=user,
            item_id=challenge_id,
            reward_points=challenge.reward_points,
            badge_id=challenge.badge_id,
            progression=progression,
        )

    def complete_quest(self, caller: str, quest_id: int) -> CompletionResult:
        """Завершить квест для caller, когда все его челленджи завершены им же.

        Raises:
            InvalidQuest, AlreadyCompleted, IncompleteChallenges: в этом порядке
            Unauthorized: реестр не привязан к выдающему награды
        """
        user = normalize_user(caller)
        quest = self.get_quest(quest_id)

        if self._quest_done.get((user, quest_id)):
            raise AlreadyCompleted("quest", quest_id, user)

        missing = [
            cid for cid in quest.challenge_ids if not self._challenge_done.get((user, cid))
        ]
        if missing:
            raise IncompleteChallenges(quest_id, missing)

        key = (user, quest_id)
        self._quest_done.set(key, True)
        try:
            progression = self._rewards.award_badge_and_points(
                self.registry_id, user, quest.reward_points, quest.badge_id
            )
        except Exception:
            self._quest_done.set(key, False)
            raise

        self.event_log.emit(
            QuestCompleted(
                user=user,
                quest_id=quest_id,
                reward_points=quest.reward_points,
                badge_id=quest.badge_id,
            )
        )
        logger.info(
            "Quest completed",
            extra={"event": "challenges.quest_completed", "user": user, "quest_id": quest_id},
        )
        return CompletionResult(
            user=user,
            item_id=quest_id,
            reward_points=quest.reward_points,
            badge_id=quest.badge_id,
            progression=progression,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_challenge(self, challenge_id: int) -> Challenge:
        """InvalidChallenge, если id вне диапазона."""
        if not self._challenges.contains(challenge_id):
            raise InvalidChallenge(challenge_id)
        return self._challenges.get(challenge_id)

    def get_quest(self, quest_id: int) -> Quest:
        """InvalidQuest, если id вне диапазона."""
        if not self._quests.contains(quest_id):
            raise InvalidQuest(quest_id)
        return self._quests.get(quest_id)

    @property
    def challenge_count(self) -> int:
        return len(self._challenges)

    @property
    def quest_count(self) -> int:
        return len(self._quests)

    def is_challenge_completed(self, user: str, challenge_id: int) -> bool:
        return self._challenge_done.get((normalize_user(user), challenge_id))

    def is_quest_completed(self, user: str, quest_id: int) -> bool:
        return self._quest_done.get((normalize_user(user), quest_id))

    def get_challenge_progress(self, user: str, challenge_id: int) -> ChallengeProgress:
        """Флаг завершения и метрика прогресса.

        TIME_BASED: required_amount после завершения, иначе 0.
        """
        user = normalize_user(user)
        challenge = self.get_challenge(challenge_id)
        completed = self._challenge_done.get((user, challenge_id))

        if challenge.challenge_type == ChallengeType.TIME_BASED:
            progress = challenge.required_amount if completed else 0
        else:
            progress = self._metric_for(user, challenge.challenge_type)
        return ChallengeProgress(completed=completed, progress=progress)

    def get_quest_progress(self, user: str, quest_id: int) -> QuestProgress:
        """Флаг завершения и число завершённых челленджей квеста."""
        user = normalize_user(user)
        quest = self.get_quest(quest_id)
        done = sum(1 for cid in quest.challenge_ids if self._challenge_done.get((user, cid)))
        return QuestProgress(
            completed=self._quest_done.get((user, quest_id)),
            challenges_completed=done,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _metric_for(self, user: str, challenge_type: ChallengeType) -> int:
        if challenge_type == ChallengeType.LIQUIDITY_PROVISION:
            return self._metrics.get_liquidity_provided(user)
        if challenge_type == ChallengeType.SWAPPING:
            return self._metrics.get_swap_volume(user)
        raise ValueError(f"No metric for challenge type {challenge_type}")

    def _require_admin(self, caller: str, operation: str) -> None:
        if not same_principal(caller, self.admin):
            logger.warning(
                "Unauthorized administrative call",
                extra={"event": "challenges.unauthorized", "caller": caller, "operation": operation},
            )
            raise Unauthorized(caller, operation)
