"""
Primality testing for 32-bit unsigned integers.

Responsibility: is_prime only. Counting primes and finding the n-th prime
live in prime_count.py.

Deterministic Miller-Rabin: every n < 2^32 that passes the strong probable
prime test for the bases 2, 7 and 61 is prime. Trial division by the primes
up to 97 settles the small and the smooth inputs first.
"""

from typing import Tuple

UINT32_MAX = 0xFFFFFFFF

SMALL_PRIMES = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47,
    53, 59, 61, 67, 71, 73, 79, 83, 89, 97,
)

MILLER_RABIN_BASES_32 = (2, 7, 61)

_MASK_128 = (1 << 128) - 1


def modulo_multiplier(divisor: int) -> int:
    """
    Precompute M = floor((2^128 - 1) / d) + 1 for modulo().

    M / 2^128 is a fixed-point reciprocal of d just above 1/d.
    """
    return _MASK_128 // divisor + 1


def modulo(value: int, divisor: int, multiplier: int) -> int:
    """
    value mod divisor without dividing, for value < 2^64 and divisor < 2^32.

    The low 128 bits of M * value are the fractional part of value / d; keeping
    the top 64 of them and multiplying back by d recovers the remainder.
    """
    fraction = ((multiplier * value) & _MASK_128) >> 64
    return ((fraction + 1) * divisor) >> 64


def _strong_probable_prime(value: int, base: int, exponent: int, shift: int,
                           multiplier: int) -> bool:
    minus_one = value - 1
    witness = 1

    while True:
        if exponent & 1:
            witness = modulo(base * witness, value, multiplier)
        base = modulo(base * base, value, multiplier)
        exponent >>= 1
        if exponent == 0:
            break

    if witness == 1 or witness == minus_one:
        return True

    for _ in range(1, shift):
        witness = modulo(witness * witness, value, multiplier)
        if witness == 1:
            return False
        if witness == minus_one:
            return True

    return False


def is_prime(value: int) -> bool:
    """
    Deterministic primality test for 0 <= value < 2^32.

    Parameters
    ----------
    value : int
        Candidate. Values outside the 32-bit range are out of contract.

    Returns
    -------
    bool
        True iff value is prime.
    """
    if value < 2:
        return False

    for p in SMALL_PRIMES:
        if value % p == 0:
            return value == p

    exponent, shift = decompose(value)
    multiplier = modulo_multiplier(value)

    return all(
        _strong_probable_prime(value, base, exponent, shift, multiplier)
        for base in MILLER_RABIN_BASES_32
    )


def decompose(value: int) -> Tuple[int, int]:
    """Write value - 1 as d * 2^s with d odd; returns (d, s)."""
    minus_one = value - 1
    shift = (minus_one & -minus_one).bit_length() - 1
    return minus_one >> shift, shift
