"""
Prime factorisation by trial division on a mod-30 wheel.

Responsibility: factor information for single integers. Primality testing
is primes.is_prime, counting is prime_count.

Wheel layout: after 2, 3, 5, 7, 11 and 13 only the residues coprime to 30
are tried, starting at 17:

    17 19 23 29 31 37 41 43 | 47 49 53 59 61 67 71 73 | ...
      +2 +4 +6 +2 +6 +4 +2 +4

The bound sqrt(remaining) is refreshed once per block of eight candidates.
"""

from typing import Iterator

from .number_theory import square_root
from .widths import width_constants

WHEEL_START = 17

WHEEL_STEPS = (2, 4, 6, 2, 6, 4, 2, 4)

TRIAL_PRIMES = (2, 3, 5, 7, 11, 13)

# Returned as already reduced, see enumerate_prime_factors.
REDUCED_PRIMES = (5, 7, 11, 13)


def enumerate_prime_factors(value: int, width: int = 32) -> Iterator[int]:
    """
    Yield the prime factors of an unsigned W-bit value in ascending order,
    with multiplicity.

    Parameters
    ----------
    value : int
        Value to factor.
    width : int
        Bit width W; the wheel bound uses square_root at this width, so
        256-bit values that survive trial division by 2..13 raise
        UnsupportedWidthError.

    Yields
    ------
    int
        Prime factors, e.g. 360 -> 2, 2, 2, 3, 3, 5.

    Notes
    -----
    A prime has no proper factorisation and yields nothing. Values below 4
    and 5, 7, 11, 13 return immediately; any other prime is trial divided
    and then dropped because the leftover equals the input.
    """
    value &= width_constants(width).all_bits_set
    if value < 4 or value in REDUCED_PRIMES:
        return

    index = value
    for factor in TRIAL_PRIMES:
        while index % factor == 0:
            yield factor
            index //= factor

    factor = WHEEL_START
    limit = square_root(index, width)

    while factor <= limit:
        for step in WHEEL_STEPS:
            while index % factor == 0:
                yield factor
                index //= factor
            factor += step
        limit = square_root(index, width)

    if index != 1 and index != value:
        yield index


def euler_totient(value: int, width: int = 32) -> int:
    """
    Euler's phi(value): the count of 1 <= k <= value coprime to value.

    phi(n) = n * prod(1 - 1/p) over the distinct primes p dividing n.
    phi(0) is taken as 0.
    """
    value &= width_constants(width).all_bits_set
    factors = list(enumerate_prime_factors(value, width))

    if not factors:
        # 0, 1 or a prime
        return value - 1 if value > 1 else value

    result = value
    for p in sorted(set(factors)):
        result -= result // p
    return result


if __name__ == '__main__':
    print("Testing wheel factorisation...")

    for n, expected in [(360, [2, 2, 2, 3, 3, 5]), (323, [17, 19]), (97, []),
                        (4294967295, [3, 5, 17, 257, 65537])]:
        got = list(enumerate_prime_factors(n))
        status = "✓" if got == expected else f"✗ (expected {expected})"
        print(f"  {n:,}: {got} {status}")

    print("\nEuler's totient:")
    for n, expected in [(1, 1), (9, 6), (36, 12), (97, 96), (100, 40)]:
        got = euler_totient(n)
        status = "✓" if got == expected else f"✗ (expected {expected})"
        print(f"  phi({n}) = {got} {status}")
