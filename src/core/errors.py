"""
Errors — именованные отказы ядра геймификации

Любой отказ синхронно возвращается вызывающему как один из классов ниже.
Локального восстановления нет: исключение означает, что баллы не начислены,
бейдж не выдан и запись о завершении не сохранена.
"""


class GamificationError(Exception):
    """Базовый класс всех доменных ошибок ядра геймификации."""


# =============================================================================
# ОШИБКИ ЦЕНЫ
# =============================================================================


class InvalidPrice(GamificationError):
    """Оракул вернул цену <= 0; вызвавшее событие отклоняется."""

    def __init__(self, price: int):
        self.price = price
        super().__init__(f"Invalid oracle price: {price} (must be > 0)")


class StalePrice(GamificationError):
    """Ответ оракула старше настроенного порога устаревания."""

    def __init__(self, age_sec: int, max_age_sec: int):
        self.age_sec = age_sec
        self.max_age_sec = max_age_sec
        super().__init__(
            f"Stale oracle price: age {age_sec}s exceeds maximum {max_age_sec}s"
        )


# =============================================================================
# ОШИБКИ ИНДЕКСОВ
# =============================================================================


class InvalidChallenge(GamificationError):
    """Индекс челленджа вне диапазона."""

    def __init__(self, challenge_id: int):
        self.challenge_id = challenge_id
        super().__init__(f"Invalid challenge id: {challenge_id}")


class InvalidQuest(GamificationError):
    """Индекс квеста вне диапазона."""

    def __init__(self, quest_id: int):
        self.quest_id = quest_id
        super().__init__(f"Invalid quest id: {quest_id}")


# =============================================================================
# НАРУШЕНИЯ ПРЕДУСЛОВИЙ
# =============================================================================


class ChallengeInactive(GamificationError):
    """Челлендж деактивирован администратором."""

    def __init__(self, challenge_id: int):
        self.challenge_id = challenge_id
        super().__init__(f"Challenge {challenge_id} is not active")


class OutsideWindow(GamificationError):
    """Текущее время вне окна челленджа [start_time, end_time]."""

    def __init__(self, challenge_id: int, now: int, start_time: int, end_time: int):
        self.challenge_id = challenge_id
        self.now = now
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(
            f"Challenge {challenge_id} not open at t={now} "
            f"(window [{start_time}, {end_time}])"
        )


class AlreadyCompleted(GamificationError):
    """Вызывающий уже завершил этот челлендж или квест."""

    def __init__(self, kind: str, item_id: int, user: str):
        self.kind = kind
        self.item_id = item_id
        self.user = user
        super().__init__(f"{kind} {item_id} already completed by {user}")


class RequirementNotMet(GamificationError):
    """Накопленная метрика вызывающего ниже требования челленджа."""

    def __init__(self, challenge_id: int, progress: int, required: int):
        self.challenge_id = challenge_id
        self.progress = progress
        self.required = required
        super().__init__(
            f"Challenge {challenge_id} requirement not met: {progress} < {required}"
        )


class IncompleteChallenges(GamificationError):
    """
    Хотя бы один челлендж квеста ещё не завершён вызывающим.

    missing — незавершённые id в порядке их перечисления в квесте.
    """

    def __init__(self, quest_id: int, missing: list[int]):
        self.quest_id = quest_id
        self.missing = missing
        super().__init__(
            f"Quest {quest_id} has incomplete challenges: {missing}"
        )


# =============================================================================
# ОШИБКИ ДОСТУПА
# =============================================================================


class Unauthorized(GamificationError):
    """У вызывающего нет права на операцию."""

    def __init__(self, caller: str, operation: str):
        self.caller = caller
        self.operation = operation
        super().__init__(f"{caller} is not authorized to call {operation}")


class RegistryAlreadyBound(GamificationError):
    """Право выдачи наград уже привязано к реестру челленджей."""

    def __init__(self, registry_id: str):
        self.registry_id = registry_id
        super().__init__(f"Challenge registry already bound to {registry_id}")
