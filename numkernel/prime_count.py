"""
Sub-linear prime counting for 32-bit n.

Responsibility: pi(n) and the n-th prime. Primality itself is primes.is_prime.

Lucy_Hedgehog / Meissel-Lehmer style sieve over odd numbers only. For
h = ceil(sqrt(n) / 2):

- larges[i]  count of surviving odd numbers in [3, n / (2i + 1)]
- smalls[i]  count of surviving odd numbers in [3, 2i + 1]
- roughs[i]  the odd numbers not yet sieved out, 1 first

Each sieving prime p with p^4 <= n removes its multiples from both tables;
the final pass adds back the partial sieving function for the remaining
rough numbers. Time is roughly O(n^(3/4) / log n), the three working arrays
hold h int64 values each and are freed when the call returns.

Based on the source code:
    https://github.com/favre49/ThayirSadamLibrary/blob/main/number-theory/PrimeCount.hpp
"""

import math
import time

import numpy as np
from numba import njit

from .number_theory import square_root
from .primes import UINT32_MAX, is_prime

# pi(n) for n = 0..8
SMALL_COUNTS = (0, 0, 1, 2, 2, 3, 3, 4, 4)

# Index of 4294967291, the largest 32-bit prime (0-based: nth_prime(0) == 2).
NTH_PRIME_MAX_INDEX = 203280220

NTH_PRIME_ESTIMATE_FACTOR = 1.10445


@njit
def _count_primes_kernel(value, root):
    """pi(value) for value >= 9, with root = floor(sqrt(value))."""
    half = (root + 1) >> 1
    larges = np.empty(half, dtype=np.int64)
    roughs = np.empty(half, dtype=np.int64)
    smalls = np.empty(half, dtype=np.int64)

    for i in range(half):
        larges[i] = ((value // (2 * i + 1)) - 1) >> 1
        roughs[i] = 2 * i + 1
        smalls[i] = i

    ignore = np.zeros(root + 1, dtype=np.bool_)
    counter = 0
    factor = 3

    while factor <= root:
        if not ignore[factor]:
            factor_squared = factor * factor
            if factor_squared * factor_squared > value:
                break

            ignore[factor] = True
            i = factor_squared
            while i <= root:
                ignore[i] = True
                i += 2 * factor

            k = 0
            for j in range(half):
                rough = roughs[j]
                if not ignore[rough]:
                    x = rough * factor
                    if x > root:
                        y = smalls[((value // x) - 1) >> 1]
                    else:
                        y = larges[smalls[x >> 1] - counter]
                    larges[k] = larges[j] - y + counter
                    roughs[k] = rough
                    k += 1

            half = k
            i = (root - 1) >> 1
            j = ((root // factor) - 1) | 1
            while j >= factor:
                x = smalls[j >> 1] - counter
                lower = (j * factor) >> 1
                while i >= lower:
                    smalls[i] -= x
                    i -= 1
                j -= 2

            counter += 1

        factor += 2

    larges[0] += ((half + 2 * (counter - 1)) * (half - 1)) // 2
    for i in range(1, half):
        larges[0] -= larges[i]

    for i in range(1, half):
        w = roughs[i]
        x = value // w
        y = smalls[((x // w) - 1) >> 1] - counter
        if y < i + 1:
            break
        z = 0
        for j in range(i + 1, y + 1):
            z += smalls[((x // roughs[j]) - 1) >> 1]
        larges[0] += z - (y - i) * (counter + i - 1)

    return larges[0] + 1


def prime_count(value: int, verbose: bool = False) -> int:
    """
    Number of primes <= value, pi(value), for 0 <= value < 2^32.

    Parameters
    ----------
    value : int
        Upper bound (inclusive).
    verbose : bool
        Print the working-set size and the time taken.

    Returns
    -------
    int
        pi(value).
    """
    if value < len(SMALL_COUNTS):
        return SMALL_COUNTS[value]

    root = square_root(value, 32)
    if verbose:
        print(f"    Sieving pi({value:,}) with 3 x {(root + 1) >> 1:,} working entries")

    start = time.time()
    result = int(_count_primes_kernel(value, root))
    if verbose:
        print(f"    pi({value:,}) = {result:,} in {time.time() - start:.2f}s")

    return result


def prime_counting_sieve(value: int) -> int:
    """
    Sieve entry point that short-cuts primes to value - 1.

    For prime value this returns value - 1 without sieving, which is
    Euler's totient of a prime, NOT pi(value). For every other value it
    returns pi(value). Use prime_count() for pi and
    factorization.euler_totient() for phi.
    """
    if is_prime(value):
        return value - 1
    return prime_count(value)


def nth_prime(index: int, verbose: bool = False) -> int:
    """
    The index-th prime, counting from zero (0 -> 2, 1 -> 3, 2 -> 5).

    Estimates a starting point floor(1.10445 * n * ln n) | 1, counts the
    primes up to it and scans upward over odd candidates. Should the
    estimate ever land past the answer, n * ln n (a proven lower bound)
    is used instead.

    Parameters
    ----------
    index : int
        Zero-based prime index.
    verbose : bool
        Print the estimate and the count it starts from.

    Returns
    -------
    int
        The prime, or 0 when index > 203280220 (the answer would not fit in
        32 bits).
    """
    if index > NTH_PRIME_MAX_INDEX:
        return 0
    if index < 3:
        return (2, 3, 5)[index]

    for factor in (NTH_PRIME_ESTIMATE_FACTOR, 1.0):
        candidate = min(int(index * factor * math.log(index)), UINT32_MAX) | 1
        start = candidate - 1 if is_prime(candidate) else candidate
        found = prime_count(start, verbose) - 1
        if found < index:
            break

    if verbose:
        print(f"    Estimate {candidate:,}: {found + 1:,} primes below, scanning up")

    while True:
        if is_prime(candidate):
            found += 1
            if found == index:
                return candidate
        candidate += 2


if __name__ == '__main__':
    print("Testing prime counting sieve...")

    reference = [
        (10, 4),
        (100, 25),
        (1000, 168),
        (10**6, 78498),
        (10**8, 5761455),
        (UINT32_MAX, 203280221),
    ]
    for n, expected in reference:
        got = prime_count(n)
        status = "✓" if got == expected else f"✗ (expected {expected})"
        print(f"  pi({n:,}) = {got:,} {status}")

    print("\nn-th prime:")
    for n, expected in [(0, 2), (10, 31), (999, 7919), (NTH_PRIME_MAX_INDEX, 4294967291)]:
        got = nth_prime(n)
        status = "✓" if got == expected else f"✗ (expected {expected})"
        print(f"  p({n:,}) = {got:,} {status}")
