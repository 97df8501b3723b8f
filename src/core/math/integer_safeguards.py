"""
Integer Safeguards — примитивы беззнаковой арифметики

Все величины ядра геймификации (баллы, суммы базового актива, счётчики
метрик, битсеты бейджей) — беззнаковые целые в модели 256-битного слова
леджера. Этот модуль — единственное место их проверки и комбинирования:

- Валидация беззнаковых/знаковых целых (bool отклоняется)
- Сложение с явным потолком переполнения
- Умножение-деление с округлением вниз для конверсии по цене
- Битовые операции для флагов бейджей

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Float никогда не попадает в расчёт сумм и баллов
2. Деление всегда округляет вниз (дробные награды не начисляются)
3. Переполнение выше UINT256_MAX — ошибка конфигурации (OverflowError),
   а не циклический перенос
4. Все операции детерминированы и без побочных эффектов
"""

from typing import Final, Iterator

# =============================================================================
# ГРАНИЦЫ СЛОВА
# =============================================================================

# Разрядность беззнакового слова леджера
UINT_BITS: Final[int] = 256

UINT256_MAX: Final[int] = 2**UINT_BITS - 1

# Знаковые границы для дельт балансов пула
INT256_MIN: Final[int] = -(2 ** (UINT_BITS - 1))
INT256_MAX: Final[int] = 2 ** (UINT_BITS - 1) - 1


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_uint(value: object, name: str) -> int:
    """
    Проверка беззнакового целого.

    Args:
        value: Проверяемое значение
        name: Имя параметра для сообщения об ошибке

    Returns:
        value без изменений

    Raises:
        ValueError: Если value не int в [0, UINT256_MAX]
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    if value > UINT256_MAX:
        raise ValueError(f"{name} exceeds UINT256_MAX, got {value}")
    return value


def validate_int(value: object, name: str) -> int:
    """
    Проверка знакового целого (дельты балансов, ответы оракула).

    Raises:
        ValueError: Если value не int в [INT256_MIN, INT256_MAX]
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if not INT256_MIN <= value <= INT256_MAX:
        raise ValueError(f"{name} out of int256 range, got {value}")
    return value


def validate_uint_below(value: object, name: str, upper: int) -> int:
    """
    Проверка беззнакового целого строго меньше upper.

    Raises:
        ValueError: Если value не беззнаковое целое или value >= upper
    """
    validate_uint(value, name)
    if value >= upper:
        raise ValueError(f"{name} must be < {upper}, got {value}")
    return value


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def checked_add(a: int, b: int) -> int:
    """
    Сложение с явным потолком переполнения.

    Args:
        a: Беззнаковое слагаемое
        b: Беззнаковое слагаемое

    Returns:
        a + b

    Raises:
        OverflowError: Если a + b > UINT256_MAX
    """
    result = a + b
    if result > UINT256_MAX:
        raise OverflowError(
            f"Unsigned overflow: {a} + {b} exceeds UINT256_MAX"
        )
    return result


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) на беззнаковых целых.

    Произведение вычисляется точно до деления, промежуточного
    усечения нет.

    Args:
        a: Беззнаковый множитель
        b: Беззнаковый множитель
        denominator: Положительный делитель

    Returns:
        floor(a * b / denominator)

    Raises:
        ValueError: Если denominator <= 0

    Examples:
        >>> mul_div_floor(10**18, 2000 * 10**8, 10**18)
        200000000000
        >>> mul_div_floor(7, 1, 2)
        3
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    return (a * b) // denominator


def abs_delta(delta: int, name: str = "delta") -> int:
    """
    Модуль знаковой дельты баланса.

    Дельта пула отрицательна, когда пользователь платит в пул, и
    положительна, когда получает; для наград нужен только модуль.

    Raises:
        ValueError: Если delta не знаковое 256-битное целое
    """
    validate_int(delta, name)
    return -delta if delta < 0 else delta


# =============================================================================
# БИТСЕТЫ
# =============================================================================


def set_bit(bitset: int, index: int) -> int:
    """Битсет с установленным битом index. Биты никогда не сбрасываются."""
    validate_uint_below(index, "index", UINT_BITS)
    return bitset | (1 << index)


def has_bit(bitset: int, index: int) -> bool:
    """Установлен ли бит index."""
    validate_uint_below(index, "index", UINT_BITS)
    return bool(bitset & (1 << index))


def iter_bits(bitset: int) -> Iterator[int]:
    """Индексы установленных битов по возрастанию."""
    index = 0
    while bitset:
        if bitset & 1:
            yield index
        bitset >>= 1
        index += 1
