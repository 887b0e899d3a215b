"""
Shared reference data for the prime tests.
"""

import numpy as np
import pytest

SIEVE_LIMIT = 200_000


def prime_flags_upto(N: int) -> np.ndarray:
    """
    Boolean array where flags[i] is True iff i is prime (Eratosthenes).

    The textbook sieve, copied on purpose rather than built on numkernel,
    so it stays a reference the kernel code cannot influence.
    """
    flags = np.ones(N + 1, dtype=bool)
    flags[0] = flags[1] = False
    for p in range(2, int(N**0.5) + 1):
        if flags[p]:
            flags[p*p::p] = False
    return flags


@pytest.fixture(scope="session")
def prime_flags() -> np.ndarray:
    return prime_flags_upto(SIEVE_LIMIT)
