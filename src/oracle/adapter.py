"""PriceOracleAdapter — проверенный доступ к внешнему ценовому фиду.

Фид отвечает `latest_price() -> (price, timestamp, round_id)`. Награды
определяет только price; она обязана быть строго положительной. Ответ <= 0
отклоняет вызвавший расчёт с InvalidPrice, а не читается как ноль.
Опциональный порог отклоняет ответы старше `max_staleness_sec`.

`decimals` описывает масштаб ответа фида; калькулятор наград строит по нему
делитель баллов.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.core.domain.price import PriceReading
from src.core.domain.units import PRICE_FEED_DECIMALS
from src.core.errors import InvalidPrice, StalePrice
from src.core.math.integer_safeguards import validate_int, validate_uint

logger = logging.getLogger(__name__)


class PriceFeed(Protocol):
    """Чтение раундов внешнего оракула."""

    def latest_price(self) -> tuple[int, int, int]:
        """(price, timestamp, round_id) последнего раунда."""
        ...


@dataclass
class StaticPriceFeed:
    """In-process фид с задаваемым ответом.

    Заменяет внешний агрегатор в тестах и локальной сборке; каждое
    обновление открывает новый раунд.
    """

    price: int
    timestamp: int = 0
    round_id: int = 1

    def latest_price(self) -> tuple[int, int, int]:
        return (self.price, self.timestamp, self.round_id)

    def update_price(self, price: int, timestamp: Optional[int] = None) -> None:
        self.price = price
        if timestamp is not None:
            self.timestamp = timestamp
        self.round_id += 1


@dataclass(frozen=True)
class OracleConfig:
    """Конфигурация адаптера оракула.

    decimals: число знаков ответа фида
    max_staleness_sec: максимальный возраст раунда (None = без порога)
    """

    decimals: int = PRICE_FEED_DECIMALS
    max_staleness_sec: Optional[int] = None

    def __post_init__(self) -> None:
        validate_uint(self.decimals, "decimals")
        if self.max_staleness_sec is not None:
            validate_uint(self.max_staleness_sec, "max_staleness_sec")


class PriceOracleAdapter:
    """Обёртка над PriceFeed с проверкой ответа."""

    def __init__(
        self,
        feed: PriceFeed,
        config: Optional[OracleConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Args:
            feed: внешний ценовой фид
            config: конфигурация адаптера
            clock: текущее unix-время в секундах (для порога устаревания)
        """
        self.feed = feed
        self.config = config or OracleConfig()
        self._clock = clock or (lambda: int(time.time()))

    @property
    def decimals(self) -> int:
        """Число знаков ответа фида."""
        return self.config.decimals

    def latest_reading(self) -> PriceReading:
        """Последний раунд как PriceReading, без проверки цены."""
        price, timestamp, round_id = self.feed.latest_price()
        return PriceReading(
            price=validate_int(price, "price"),
            timestamp=validate_uint(timestamp, "timestamp"),
            round_id=validate_uint(round_id, "round_id"),
        )

    def latest_price(self) -> int:
        """Последняя валидная цена.

        Returns:
            Положительная цена с `config.decimals` знаками

        Raises:
            InvalidPrice: price <= 0
            StalePrice: раунд старше max_staleness_sec (если задан)
        """
        reading = self.latest_reading()

        if not reading.is_valid:
            logger.warning(
                "Oracle returned invalid price",
                extra={
                    "event": "oracle.invalid_price",
                    "price": reading.price,
                    "round_id": reading.round_id,
                },
            )
            raise InvalidPrice(reading.price)

        max_age = self.config.max_staleness_sec
        if max_age is not None:
            age = self._clock() - reading.timestamp
            if age > max_age:
                logger.warning(
                    "Oracle price is stale",
                    extra={
                        "event": "oracle.stale_price",
                        "age_sec": age,
                        "max_age_sec": max_age,
                        "round_id": reading.round_id,
                    },
                )
                raise StalePrice(age, max_age)

        return reading.price

    def is_price_valid(self) -> bool:
        """Завершится ли latest_price() успешно."""
        try:
            self.latest_price()
        except (InvalidPrice, StalePrice):
            return False
        return True
