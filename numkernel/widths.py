"""
Per-width constants for fixed-width binary integers.

Responsibility: the registry of supported bit widths and the values derived
from each width. Nothing here knows about primes, digits or random numbers.

A fixed-width integer is modelled as a plain Python int together with its
width W (and, where it matters, whether it is signed). Every operation in the
package reduces its result back into the W-bit two's complement range with
wrap(), which stands in for the silent wrap-around of hardware integers.

Stage masks follow the Fermat-number construction:

    mask(k) = AllBitsSet / (2^(2^k) + 1)

which for W = 8 gives 0x55, 0x33, 0x0F: blocks of 2^k set bits alternating
with blocks of 2^k clear bits.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

SUPPORTED_WIDTHS = (8, 16, 32, 64, 128, 256)

SMALL_LITERALS = (2, 3, 4, 5, 6, 7, 9, 10, 11, 13, 17)


class UnsupportedWidthError(ValueError):
    """Raised when an operation is asked to work at a width it has no path for."""


@dataclass(frozen=True)
class WidthConstants:
    """
    Immutable constants for one bit width.

    Attributes
    ----------
    size : int
        Bit count W.
    log2_size : int
        log2(W).
    all_bits_set : int
        2^W - 1, the unsigned view of -1.
    sign_bit : int
        2^(W-1).
    signed_min, signed_max : int
        Range of the signed W-bit type.
    fermat_masks : tuple of int
        mask(k) for k = 0 .. log2(W) - 1.
    small_literals : tuple of int
        The small constants used by the kernels, reduced to W bits.
    max_digits : int
        Number of decimal digits in all_bits_set.
    powers_of_ten : tuple of int
        10^0 .. 10^max_digits.
    """

    size: int
    log2_size: int
    all_bits_set: int
    sign_bit: int
    signed_min: int
    signed_max: int
    fermat_masks: Tuple[int, ...]
    small_literals: Tuple[int, ...]
    max_digits: int
    powers_of_ten: Tuple[int, ...]

    @property
    def half_size(self) -> int:
        return self.size >> 1


def fermat_number(k: int) -> int:
    """Return the k-th Fermat number 2^(2^k) + 1."""
    return (1 << (1 << k)) + 1


def fermat_mask(k: int, width: int) -> int:
    """
    Return the butterfly stage mask for block size 2^k at the given width.

    Parameters
    ----------
    k : int
        Stage index, 0 <= k < log2(width).
    width : int
        Bit width W.

    Returns
    -------
    int
        (2^W - 1) // (2^(2^k) + 1)
    """
    return ((1 << width) - 1) // fermat_number(k)


def _build(width: int) -> WidthConstants:
    all_bits_set = (1 << width) - 1
    log2_size = width.bit_length() - 1
    max_digits = len(str(all_bits_set))

    return WidthConstants(
        size=width,
        log2_size=log2_size,
        all_bits_set=all_bits_set,
        sign_bit=1 << (width - 1),
        signed_min=-(1 << (width - 1)),
        signed_max=(1 << (width - 1)) - 1,
        fermat_masks=tuple(fermat_mask(k, width) for k in range(log2_size)),
        small_literals=tuple(v & all_bits_set for v in SMALL_LITERALS),
        max_digits=max_digits,
        powers_of_ten=tuple(10 ** i for i in range(max_digits + 1)),
    )


# Populated once at import; read-only afterwards.
WIDTHS: Mapping[int, WidthConstants] = MappingProxyType(
    {width: _build(width) for width in SUPPORTED_WIDTHS}
)


def width_constants(width: int) -> WidthConstants:
    """
    Look up the constants for a supported width.

    Raises
    ------
    UnsupportedWidthError
        If width is not one of 8, 16, 32, 64, 128, 256.
    """
    try:
        return WIDTHS[width]
    except KeyError:
        raise UnsupportedWidthError(
            f"{width} is not a supported bit width (expected one of {SUPPORTED_WIDTHS})"
        ) from None


def to_unsigned(value: int, width: int) -> int:
    """Return the W-bit two's complement bit pattern of value as a non-negative int."""
    return value & width_constants(width).all_bits_set


def wrap(value: int, width: int, signed: bool = False) -> int:
    """
    Reduce value into the range of a W-bit integer.

    Parameters
    ----------
    value : int
        Any Python int.
    width : int
        Bit width W.
    signed : bool
        Interpret the result as two's complement signed.

    Returns
    -------
    int
        value mod 2^W, shifted into [-2^(W-1), 2^(W-1)) when signed.
    """
    c = width_constants(width)
    value &= c.all_bits_set
    if signed and value & c.sign_bit:
        value -= 1 << c.size
    return value

