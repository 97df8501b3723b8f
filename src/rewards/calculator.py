"""RewardCalculator — сумма базового актива → баллы по цене оракула.

Формула:
    usd_value = amount * price // SCALE_BASE
    points    = usd_value // (POINTS_USD_STEP * 10**decimals)

decimals — масштаб ответа фида (OracleConfig.decimals), поэтому один балл
всегда стоит POINTS_USD_STEP долларов независимо от масштаба фида. При
настройках по умолчанию (18 знаков актива, 8 знаков цены, балл за $10)
сумма X по $2000 даёт X * 2000 // (10 * 10**18) баллов. Везде деление вниз:
дробный прогресс не награждается.
"""

from dataclasses import dataclass
from typing import Final, Optional

from src.core.domain.units import (
    POINTS_USD_STEP,
    SCALE_BASE,
    fiat_value,
    fiat_value_to_points,
    points_denominator_for,
)
from src.core.errors import InvalidPrice
from src.core.math.integer_safeguards import validate_int, validate_uint
from src.oracle.adapter import PriceOracleAdapter


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class RewardConfig:
    """Масштабы конверсии.

    scale_base: масштаб минимальной единицы базового актива
    points_usd_step: долларов расчётной стоимости на один балл
    points_denominator: явный делитель стоимости в баллы; None = вывести
        из points_usd_step и decimals фида
    """

    scale_base: int = SCALE_BASE
    points_usd_step: int = POINTS_USD_STEP
    points_denominator: Optional[int] = None

    def __post_init__(self) -> None:
        if self.scale_base <= 0:
            raise ValueError(f"scale_base must be positive, got {self.scale_base}")
        if self.points_usd_step <= 0:
            raise ValueError(
                f"points_usd_step must be positive, got {self.points_usd_step}"
            )
        if self.points_denominator is not None and self.points_denominator <= 0:
            raise ValueError(
                f"points_denominator must be positive, got {self.points_denominator}"
            )


DEFAULT_REWARD_CONFIG: Final[RewardConfig] = RewardConfig()


# =============================================================================
# CALCULATOR
# =============================================================================


class RewardCalculator:
    """Конвертер без состояния; цену читает через адаптер оракула."""

    def __init__(
        self,
        oracle: PriceOracleAdapter,
        config: Optional[RewardConfig] = None,
    ):
        self.oracle = oracle
        self.config = config or DEFAULT_REWARD_CONFIG

    @property
    def points_denominator(self) -> int:
        """Делитель фиатной стоимости в баллы в масштабе фида."""
        if self.config.points_denominator is not None:
            return self.config.points_denominator
        return points_denominator_for(self.oracle.decimals, self.config.points_usd_step)

    def points_for_value(self, base_asset_amount: int) -> int:
        """Баллы за расчётную сумму базового актива по текущей цене.

        Args:
            base_asset_amount: сумма в минимальных единицах

        Returns:
            Баллы (вниз)

        Raises:
            InvalidPrice: цена оракула <= 0
            ValueError: сумма не беззнаковое целое
        """
        validate_uint(base_asset_amount, "base_asset_amount")
        price = self.oracle.latest_price()
        return self.points_for_value_at(base_asset_amount, price)

    def points_for_value_at(self, base_asset_amount: int, price: int) -> int:
        """Чистое ядро points_for_value для явной цены в масштабе фида.

        Raises:
            InvalidPrice: price <= 0
            ValueError: сумма не беззнаковое целое
        """
        validate_uint(base_asset_amount, "base_asset_amount")
        validate_int(price, "price")
        if price <= 0:
            raise InvalidPrice(price)

        usd_value = fiat_value(base_asset_amount, price, self.config.scale_base)
        return fiat_value_to_points(usd_value, self.points_denominator)
