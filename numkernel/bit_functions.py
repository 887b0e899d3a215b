"""
Bit-level primitives on fixed-width integers.

Responsibility: operations whose meaning is defined purely by the bit
pattern of a W-bit value. Decimal digits live in digits.py, arithmetic
in number_theory.py.

Every function takes the value as a Python int plus its width W (default 32)
and, where the result is a value of the same type, a signed flag. Inputs are
read through their W-bit two's complement pattern and results are wrapped
back into range, so e.g. reverse_bits(-2, 8, signed=True) works on 0xFE.
"""

from typing import Optional, Tuple

from .fast_pairing import select_pairing_strategy, table_pair, table_unpair
from .widths import UnsupportedWidthError, width_constants, wrap


def clear_lowest_set_bit(value: int, width: int = 32, signed: bool = False) -> int:
    """v & (v - 1). BLSR."""
    return wrap(value & (value - 1), width, signed)


def extract_lowest_set_bit(value: int, width: int = 32, signed: bool = False) -> int:
    """v & -v. BLSI."""
    return wrap(value & -value, width, signed)


def fill_from_lowest_set_bit(value: int, width: int = 32, signed: bool = False) -> int:
    """
    v | (v - 1): set every bit below the lowest set bit.

    Zero has no lowest set bit and comes back as all bits set.
    """
    return wrap(value | (value - 1), width, signed)


def fill_from_lowest_clear_bit(value: int, width: int = 32, signed: bool = False) -> int:
    """v & (v + 1): clear the trailing run of ones."""
    return wrap(value & (value + 1), width, signed)


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def trailing_zero_count(value: int, width: int = 32) -> int:
    """Number of trailing zero bits; W for zero."""
    c = width_constants(width)
    value &= c.all_bits_set
    if value == 0:
        return c.size
    return (value & -value).bit_length() - 1


def most_significant_bit(value: int, width: int = 32) -> int:
    """1-based position of the highest set bit (W - lzcnt), 0 for zero."""
    return (value & width_constants(width).all_bits_set).bit_length()


def least_significant_bit(value: int, width: int = 32) -> int:
    """1-based position of the lowest set bit (tzcnt + 1), 0 for zero."""
    if value & width_constants(width).all_bits_set == 0:
        return 0
    return trailing_zero_count(value, width) + 1


def population_parity(value: int, width: int = 32) -> int:
    """1 if an odd number of bits are set, else 0."""
    return bin(value & width_constants(width).all_bits_set).count('1') & 1


def reverse_bits(value: int, width: int = 32, signed: bool = False) -> int:
    """
    Reverse the order of all W bits.

    Runs log2(W) - 1 butterfly stages, each swapping adjacent blocks of 2^k
    bits under mask(k), then swaps the two halves.

    Parameters
    ----------
    value : int
        Value to reverse.
    width : int
        Bit width W.
    signed : bool
        Return the result as a signed W-bit value.

    Returns
    -------
    int
        The bit-reversed value.
    """
    c = width_constants(width)
    value &= c.all_bits_set

    for k in range(c.log2_size - 1):
        shift = 1 << k
        mask = c.fermat_masks[k]
        value = ((value >> shift) & mask) | ((value & mask) << shift)

    half = c.half_size
    return wrap((value >> half) | (value << half), width, signed)


def reflected_binary_encode(value: int, width: int = 32, signed: bool = False) -> int:
    """Gray code: v ^ (v >> 1), using a logical shift."""
    value &= width_constants(width).all_bits_set
    return wrap(value ^ (value >> 1), width, signed)


def reflected_binary_decode(value: int, width: int = 32, signed: bool = False) -> int:
    """
    Inverse Gray code.

    Prefix-XOR by doubling shifts: v ^= v >> 1; v ^= v >> 2; ... up to W/2.
    """
    c = width_constants(width)
    value &= c.all_bits_set

    for k in range(c.log2_size):
        value ^= value >> (1 << k)

    return wrap(value, width, signed)


def permute_bits_lexicographically(value: int, width: int = 32, signed: bool = False) -> int:
    """
    Next larger value with the same population count.

    x = v | (v - 1)
    y = tzcnt(v) + 1
    z = ((~x & (x + 1)) - 1) >> y
    result = (x + 1) | z

    The result wraps once v is already the largest W-bit value with its
    population count. Zero maps to zero.
    """
    c = width_constants(width)
    value &= c.all_bits_set

    x = (value | (value - 1)) & c.all_bits_set
    y = trailing_zero_count(value, width) + 1
    z = ((~x & (x + 1)) - 1) >> y

    return wrap((x + 1) | z, width, signed)


def _spread(value: int, width: int) -> int:
    """Move bit i of a value below 2^(width/2) to bit 2i, stages in decreasing order."""
    c = width_constants(width)
    for k in range(c.log2_size - 2, -1, -1):
        value = (value | (value << (1 << k))) & c.fermat_masks[k]
    return value


def _gather(value: int, width: int) -> int:
    """Inverse of _spread: collect the even bits, stages in increasing order."""
    c = width_constants(width)
    value &= c.fermat_masks[0]
    for k in range(c.log2_size - 1):
        value = (value | (value >> (1 << k))) & c.fermat_masks[k + 1]
    return value


def paired_width(width: int) -> int:
    """Width of the result of pairing two width-bit values."""
    paired = width_constants(width).size << 1
    try:
        width_constants(paired)
    except UnsupportedWidthError:
        raise UnsupportedWidthError(
            f"pairing {width}-bit values needs a {paired}-bit result, which is not supported"
        ) from None
    return paired


def bitwise_pair(value: int, other: int, width: int = 32,
                 result_width: Optional[int] = None,
                 strategy: Optional[str] = None) -> int:
    """
    Interleave the bits of two W-bit values (Morton / Z-order encoding).

    Bit i of value lands on bit 2i of the result and bit i of other on bit
    2i + 1, so value fills the even positions counted from zero.

    Parameters
    ----------
    value, other : int
        Inputs, read as unsigned W-bit patterns.
    width : int
        Input width W; must be at most 128 so that 2W is a supported width.
    result_width : int, optional
        Width of the result type. Defaults to 2W. A narrower result silently
        drops the high bits of the code.
    strategy : str, optional
        'auto', 'table' or 'butterfly'; see fast_pairing.select_pairing_strategy.

    Returns
    -------
    int
        The interleaved code as an unsigned result_width-bit value.
    """
    c = width_constants(width)
    paired = paired_width(width)
    out = width_constants(paired if result_width is None else result_width)

    value &= c.all_bits_set
    other &= c.all_bits_set

    if select_pairing_strategy(width, strategy) == 'table':
        code = table_pair(value, other, c.size)
    else:
        code = _spread(value, paired) | (_spread(other, paired) << 1)

    return code & out.all_bits_set


def bitwise_unpair(value: int, width: int = 32,
                   strategy: Optional[str] = None) -> Tuple[int, int]:
    """
    Split a 2W-bit Morton code back into its two W-bit halves.

    Parameters
    ----------
    value : int
        Code produced by bitwise_pair.
    width : int
        Width W of each half.
    strategy : str, optional
        'auto', 'table' or 'butterfly'.

    Returns
    -------
    tuple of int
        (value, other) as passed to bitwise_pair.
    """
    c = width_constants(width)
    paired = paired_width(width)
    value &= width_constants(paired).all_bits_set

    if select_pairing_strategy(width, strategy) == 'table':
        return table_unpair(value, c.size)

    return _gather(value, paired), _gather(value >> 1, paired)
