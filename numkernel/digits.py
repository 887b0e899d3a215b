"""
Decimal digit operations on fixed-width integers.

Responsibility: everything that looks at a value in base 10. All operations
work on the absolute value; reverse_digits and rotate_digits put the original
sign back on the result.
"""

import math
from typing import Iterator, Optional

from .settings import SETTINGS
from .widths import width_constants, wrap

# Widths whose every value is exactly representable as a double, so that
# int(log10(v)) never lands on the wrong side of a power of ten.
LOG10_FAST_WIDTHS = (8, 16, 32)


def enumerate_digits(value: int) -> Iterator[int]:
    """
    Yield the decimal digits of |value|, least significant first.

    Zero yields a single 0. The generator is lazy and single-use.
    """
    quotient = abs(value)
    while True:
        quotient, remainder = divmod(quotient, 10)
        yield remainder
        if quotient == 0:
            return


def _digit_count_software(value: int) -> int:
    result = 0
    while True:
        value //= 10
        result += 1
        if value == 0:
            return result


def digit_count(value: int, width: int = 32, force_software: Optional[bool] = None) -> int:
    """
    Number of decimal digits in |value| (1 for zero).

    Parameters
    ----------
    value : int
        Input value.
    width : int
        Bit width W. Widths up to 32 use floor(log10(v)) + 1; wider types
        count by repeated division.
    force_software : bool, optional
        Always use the division loop. Defaults to
        SETTINGS['digits']['force_software_log10'].

    Returns
    -------
    int
        Digit count.
    """
    c = width_constants(width)
    if force_software is None:
        force_software = SETTINGS['digits']['force_software_log10']

    value = abs(value)
    if c.size in LOG10_FAST_WIDTHS and not force_software:
        return int(math.log10(max(value, 1))) + 1
    return _digit_count_software(value)


def least_significant_digit(value: int) -> int:
    return abs(value) % 10


def most_significant_digit(value: int, width: int = 32) -> int:
    c = width_constants(width)
    return abs(value) // c.powers_of_ten[digit_count(value, width) - 1]


def digital_root(value: int) -> int:
    """
    Repeated digit sum of |value|: 0 for 0, else 1 + (|v| - 1) mod 9.
    """
    nonzero = int(value != 0)
    return nonzero + (abs(value) - nonzero) % 9


def reverse_digits(value: int, width: int = 32, signed: bool = False) -> int:
    """
    Reverse the decimal digits of |value| and restore the sign.

    Trailing zeros become leading zeros and disappear (1200 -> 21). A
    reversed value too large for the width wraps around like any other
    W-bit overflow.
    """
    result = 0
    for digit in enumerate_digits(value):
        result = result * 10 + digit

    return wrap(-result if value < 0 else result, width, signed)


def rotate_digits(value: int, count: int, width: int = 32, signed: bool = False) -> int:
    """
    Cyclically rotate the decimal digits of |value|.

    A positive count moves the low `count` digits to the top (rotate right);
    a negative count rotates the other way. Counts are taken modulo the
    number of digits.

        rotate_digits(12345, 2)  == 45123
        rotate_digits(12345, -2) == 34512

    Parameters
    ----------
    value : int
        Value whose digits are rotated; its sign is kept.
    count : int
        Number of positions.
    width : int
        Bit width W; results that overflow it wrap.
    signed : bool
        Return a signed W-bit value.

    Returns
    -------
    int
        low_block * 10^(n - k) + high_block, where the low block holds the
        k = count mod n least significant digits.
    """
    c = width_constants(width)
    magnitude = abs(value)
    n = digit_count(magnitude, width)
    k = count % n

    high, low = divmod(magnitude, c.powers_of_ten[k])
    result = low * c.powers_of_ten[n - k] + high

    return wrap(-result if value < 0 else result, width, signed)
