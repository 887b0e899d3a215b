"""
Elementary number theory on fixed-width integers.

Responsibility: gcd/lcm, wrapping exponentiation, integer square root,
inverses modulo 2^W and the small arithmetic helpers built on them.
Prime testing and counting live in primes.py and prime_count.py,
factorisation in factorization.py.

Preconditions are the caller's job and are not checked in these paths:
modular_inverse of an even value returns a meaningless number, and
exponentiate / lcm wrap silently on overflow.
"""

import math
from typing import Optional, Tuple

from .bit_functions import paired_width, trailing_zero_count
from .settings import SETTINGS
from .widths import UnsupportedWidthError, width_constants, wrap

SQRT_FLOAT_WIDTHS = (8, 16, 32, 64)

# y * C >> (W/2) approximates y * (1 - 1/sqrt(2)); applied when the input has
# an odd number of significant bits. No constant has been derived for 256 bits.
SQRT_ODD_CORRECTION = {
    8: 5,
    16: 75,
    32: 19195,
    64: 1257966796,
    128: 5402926248376769403,
}

# Each fixed-point step shrinks the error by a factor of at most
# 1 - 1/sqrt(2), starting from an error below 2^(W/2 - 4.5).
SQRT_ITERATIONS = {
    8: 2,
    16: 4,
    32: 9,
    64: 18,
    128: 36,
}

SQRT_DOWN_CORRECTIONS = 5
SQRT_UP_CORRECTIONS = 2


def gcd(value: int, other: int, width: int = 32, signed: bool = False) -> int:
    """
    Greatest common divisor by Stein's binary algorithm.

    Parameters
    ----------
    value, other : int
        Operands. If either is zero the other is returned unchanged.
    width : int
        Bit width W.
    signed : bool
        Treat the operands as signed; the gcd of the absolute values is returned.

    Returns
    -------
    int
        gcd(|value|, |other|).
    """
    if other == 0:
        return wrap(value, width, signed)
    if value == 0:
        return wrap(other, width, signed)

    a = abs(value)
    b = abs(other)
    shift = trailing_zero_count(a | b, width)

    while True:
        a >>= trailing_zero_count(a, width)
        b >>= trailing_zero_count(b, width)
        if b > a:
            a, b = b, a
        a -= b
        if a == 0:
            break

    return wrap(b << shift, width, signed)


def lcm(value: int, other: int, width: int = 32, signed: bool = False) -> int:
    """(value / gcd) * other, wrapping on overflow."""
    return wrap((value // gcd(value, other, width, signed)) * other, width, signed)


def exponentiate(base: int, exponent: int, width: int = 32, signed: bool = False) -> int:
    """
    base ** exponent modulo 2^W by repeated squaring.

    The exponent is read as an unsigned W-bit value. No overflow checks.
    """
    mask = width_constants(width).all_bits_set
    base &= mask
    exponent &= mask
    result = 1

    while True:
        if exponent & 1:
            result = (result * base) & mask
        exponent >>= 1
        base = (base * base) & mask
        if exponent == 0:
            break

    return wrap(result, width, signed)


def _square_root_float(value: int) -> int:
    candidate = int(math.sqrt(value))
    candidate -= int(candidate * candidate > value)
    candidate += int((candidate + 1) * (candidate + 1) <= value)
    return candidate


def _square_root_software(value: int, size: int) -> int:
    """
    Fixed-iteration integer square root.

    With m = ceil(msb / 2), iterate y <- y^2 / 2^(m+1) + z from y = z, where
    z is 2^(m-1) minus the top bits of the input. The fixed point y* gives
    2^m - y* = sqrt(2^(m+1) * (value >> s)), i.e. sqrt(v) for an even bit
    length and sqrt(2v) for an odd one; the latter is scaled by 1/sqrt(2)
    with a per-width constant. A fixed number of unit corrections in each
    direction finishes the job. The loop count depends only on the width.
    """
    if size not in SQRT_ODD_CORRECTION:
        raise UnsupportedWidthError(
            f"no software square root correction constant for {size}-bit integers"
        )

    msb = (value | 1).bit_length()
    msb_is_odd = msb & 1
    m = (msb + 1) >> 1
    x = 1 << (m - 1)
    y = x - (value >> (m + 1 - msb_is_odd))
    z = y
    x += x

    for _ in range(SQRT_ITERATIONS[size]):
        y = ((y * y) >> (m + 1)) + z

    y = x - y
    y -= msb_is_odd * ((y * SQRT_ODD_CORRECTION[size]) >> (size >> 1))

    for _ in range(SQRT_DOWN_CORRECTIONS):
        y -= int(y * y > value)
    for _ in range(SQRT_UP_CORRECTIONS):
        y += int((y + 1) * (y + 1) <= value)

    return y


def square_root(value: int, width: int = 32, force_software: Optional[bool] = None) -> int:
    """
    floor(sqrt(value)) for an unsigned W-bit value.

    Parameters
    ----------
    value : int
        Unsigned input.
    width : int
        Bit width W. Widths up to 64 go through math.sqrt with an exact +-1
        fix-up; 128 uses the fixed-iteration integer refinement.
    force_software : bool, optional
        Use the integer refinement at every width. Defaults to
        SETTINGS['square_root']['force_software'].

    Returns
    -------
    int
        The integer square root.

    Raises
    ------
    UnsupportedWidthError
        For 256-bit integers, which have no correction constant.
    """
    c = width_constants(width)
    if force_software is None:
        force_software = SETTINGS['square_root']['force_software']

    value &= c.all_bits_set
    if c.size in SQRT_FLOAT_WIDTHS and not force_software:
        return _square_root_float(value)
    return _square_root_software(value, c.size)


def modular_inverse(value: int, width: int = 32) -> int:
    """
    x with value * x == 1 (mod 2^W), for odd value.

    Based on the paper:
        An Improved Integer Multiplicative Inverse (modulo 2^w)
        Jeffrey Hurchalla, April 2022

    The seed (3v) ^ 2 is correct to 5 bits and every round doubles that, so
    8-bit needs one round and each doubling of W adds one more. Even inputs
    are not invertible and produce garbage.
    """
    c = width_constants(width)
    mask = c.all_bits_set
    value &= mask

    x = ((3 * value) ^ 2) & mask
    y = (1 - value * x) & mask
    x = (x * (y + 1)) & mask

    for _ in range(c.log2_size - 3):
        y = (y * y) & mask
        x = (x * (y + 1)) & mask

    return x


def next_power_of_two(value: int, width: int = 32) -> int:
    """
    Smallest power of two >= value.

    Zero (whose predecessor wraps to all bits set) and values above the
    largest W-bit power of two give 0.
    """
    c = width_constants(width)
    shift = ((value - 1) & c.all_bits_set).bit_length()
    return ((1 ^ (shift >> c.log2_size)) << shift) & c.all_bits_set


def next_square(value: int, width: int = 32) -> int:
    """Smallest perfect square strictly greater than value."""
    root = square_root(value, width) + 1
    return wrap(root * root, width)


def nth_square(value: int, width: int = 32, signed: bool = False) -> int:
    return wrap(value * value, width, signed)


def elegant_pair(value: int, other: int, width: int = 32) -> int:
    """
    Szudzik-style pairing of two unsigned W-bit values into a 2W-bit value.

    Shell x = max(value, other) holds codes x^2 .. x^2 + 2x. The walk
    direction through a shell alternates with the parity of x, so
    consecutive codes always differ in one coordinate by one.
    """
    c = width_constants(width)
    out = width_constants(paired_width(width))
    value &= c.all_bits_set
    other &= c.all_bits_set

    x = max(value, other)
    y = (value ^ other) * (x & 1)

    return (x * (x + 1) + (y ^ other) - (y ^ value)) & out.all_bits_set


def elegant_unpair(value: int, width: int = 32) -> Tuple[int, int]:
    """Inverse of elegant_pair; value is a 2W-bit code, halves are W-bit."""
    out = width_constants(paired_width(width))
    value &= out.all_bits_set

    x = square_root(value, out.size)
    y = value - x * x
    z = x

    if y < z:
        y, z = z, y
    else:
        y = (z << 1) - y

    if max(y, z) & 1:
        y, z = z, y

    return y, z
