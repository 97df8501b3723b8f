"""
Units — масштабы сумм базового актива, цен оракула и баллов

Единственный допустимый способ преобразований между:
- суммой базового актива (минимальные единицы, 18 знаков)
- фиатной стоимостью (масштаб цены оракула)
- баллами (1 балл за каждые POINTS_USD_STEP долларов, целое)

ЗАПРЕЩЕНО смешивать масштабы без явного конвертера из этого модуля.
"""

from typing import Final

from src.core.math.integer_safeguards import mul_div_floor, validate_uint


# =============================================================================
# МАСШТАБЫ
# =============================================================================

# Знаки базового актива (нативная валюта сети)
BASE_ASSET_DECIMALS: Final[int] = 18
SCALE_BASE: Final[int] = 10**BASE_ASSET_DECIMALS

# Знаки ответа оракула по умолчанию (USD-фиды)
PRICE_FEED_DECIMALS: Final[int] = 8
PRICE_SCALE: Final[int] = 10**PRICE_FEED_DECIMALS

# Один балл за столько долларов расчётной стоимости
POINTS_USD_STEP: Final[int] = 10


def points_denominator_for(price_decimals: int, usd_step: int = POINTS_USD_STEP) -> int:
    """
    Делитель фиатной стоимости в баллы для фида с price_decimals знаками.

    Стоимость считается в масштабе самого фида, поэтому делитель
    обязан следовать его decimals.

    Examples:
        >>> points_denominator_for(8)
        1000000000
        >>> points_denominator_for(18) == 10 * 10**18
        True
    """
    validate_uint(price_decimals, "price_decimals")
    validate_uint(usd_step, "usd_step")
    if usd_step == 0:
        raise ValueError("usd_step must be positive, got 0")
    return usd_step * 10**price_decimals


# Делитель для фида с PRICE_FEED_DECIMALS знаками
POINTS_DENOMINATOR: Final[int] = points_denominator_for(PRICE_FEED_DECIMALS)


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def base_units(whole: int, scale_base: int = SCALE_BASE) -> int:
    """
    Конверсия: целые единицы базового актива → минимальные единицы.

    Args:
        whole: Сумма в целых единицах (например, 100 для 100 ETH)
        scale_base: Масштаб минимальной единицы базового актива

    Returns:
        Сумма в минимальных единицах
    """
    validate_uint(whole, "whole")
    return whole * scale_base


def usd_price(dollars: int, price_scale: int = PRICE_SCALE) -> int:
    """
    Конверсия: целые доллары → цена в масштабе оракула.

    Examples:
        >>> usd_price(2000)
        200000000000
    """
    validate_uint(dollars, "dollars")
    return dollars * price_scale


def fiat_value(
    base_asset_amount: int, price: int, scale_base: int = SCALE_BASE
) -> int:
    """
    Конверсия: сумма базового актива → фиатная стоимость в масштабе цены.

    usd_value = amount * price / SCALE_BASE (вниз)

    Args:
        base_asset_amount: Расчётная сумма в минимальных единицах
        price: Положительная цена оракула
        scale_base: Масштаб минимальной единицы базового актива

    Returns:
        Фиатная стоимость с decimals фида
    """
    validate_uint(base_asset_amount, "base_asset_amount")
    validate_uint(price, "price")
    return mul_div_floor(base_asset_amount, price, scale_base)


def fiat_value_to_points(
    usd_value: int, points_denominator: int = POINTS_DENOMINATOR
) -> int:
    """
    Конверсия: фиатная стоимость → баллы (вниз).

    Дробный прогресс к следующему баллу отбрасывается.
    """
    validate_uint(usd_value, "usd_value")
    if points_denominator <= 0:
        raise ValueError(
            f"points_denominator must be positive, got {points_denominator}"
        )
    return usd_value // points_denominator
