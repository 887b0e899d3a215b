"""
Bounded sampling from the operating system's secure entropy source.

Responsibility: uniform unsigned integers in [minimum, maximum] with the
same bounded-sampling contract as pcg.Pcg32XshRr, but no in-process state.
Every draw reads fresh bytes through the secrets module.
"""

import secrets
from typing import Optional

from .widths import width_constants


def next_uint_raw(width: int = 64) -> int:
    """A full-range unsigned W-bit value from width // 8 random bytes."""
    c = width_constants(width)
    return int.from_bytes(secrets.token_bytes(c.size >> 3), 'little')


def _sample(exclusive_high: int, width: int) -> int:
    """
    Uniform value in [0, exclusive_high) by rejection.

    Draws above the largest multiple of exclusive_high (minus one) that fits
    in W bits are redrawn so the final modulo carries no bias.
    """
    all_bits_set = width_constants(width).all_bits_set
    accept_max = all_bits_set - ((all_bits_set % exclusive_high) + 1) % exclusive_high

    while True:
        result = next_uint_raw(width)
        if result <= accept_max:
            return result % exclusive_high


def next_uint(minimum: int = 0, maximum: Optional[int] = None, width: int = 64) -> int:
    """
    Uniform unsigned W-bit value in [minimum, maximum].

    Parameters
    ----------
    minimum : int
        Inclusive lower bound.
    maximum : int, optional
        Inclusive upper bound. Defaults to 2^W - 1.
    width : int
        Bit width W of the result.

    Returns
    -------
    int
        The sample. A range covering all 2^W values is a single raw draw.
        As with the generator, maximum < minimum wraps the range around.
    """
    c = width_constants(width)
    if maximum is None:
        maximum = c.all_bits_set

    span = (maximum - minimum) & c.all_bits_set
    if span == c.all_bits_set:
        return next_uint_raw(width)

    return (_sample(span + 1, width) + minimum) & c.all_bits_set


if __name__ == '__main__':
    print("Testing secure sampling...")

    draws = [next_uint(0, 5) for _ in range(60000)]
    counts = [draws.count(k) for k in range(6)]
    print(f"  0..5 counts over 60,000 draws: {counts}")
    print(f"  in range: {'✓' if all(0 <= d <= 5 for d in draws) else '✗'}")
    print(f"  32-bit draw: {next_uint(width=32):#010x}")
