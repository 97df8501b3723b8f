"""
Core math modules

Примитивы беззнаковой целочисленной арифметики: переполнение и
округление вниз.
"""

from src.core.math.integer_safeguards import (
    # Word bounds
    INT256_MAX,
    INT256_MIN,
    UINT256_MAX,
    UINT_BITS,
    # Validation
    validate_int,
    validate_uint,
    validate_uint_below,
    # Arithmetic
    abs_delta,
    checked_add,
    mul_div_floor,
    # Bitsets
    has_bit,
    iter_bits,
    set_bit,
)

__all__ = [
    # Word bounds
    "INT256_MAX",
    "INT256_MIN",
    "UINT256_MAX",
    "UINT_BITS",
    # Validation
    "validate_int",
    "validate_uint",
    "validate_uint_below",
    # Arithmetic
    "abs_delta",
    "checked_add",
    "mul_div_floor",
    # Bitsets
    "has_bit",
    "iter_bits",
    "set_bit",
]
