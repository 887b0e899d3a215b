"""
Tests for the sub-linear prime counting sieve and the n-th prime search.

Small arguments are compared against a cumulative Eratosthenes count, large
ones against published values of pi(n).
"""

import numpy as np
import pytest

from numkernel import prime_count as prime_count_module
from numkernel.prime_count import (
    NTH_PRIME_MAX_INDEX,
    nth_prime,
    prime_count,
    prime_counting_sieve,
)


@pytest.fixture(scope="module")
def pi_table(prime_flags):
    """pi(n) for every n up to the sieve limit."""
    return np.cumsum(prime_flags)


@pytest.fixture(scope="module")
def primes(prime_flags):
    return np.flatnonzero(prime_flags)


class TestPrimeCount:
    """pi(n)."""

    @pytest.mark.parametrize("n,expected", [(n, [0, 0, 1, 2, 2, 3, 3, 4, 4][n]) for n in range(9)])
    def test_small(self, n, expected):
        assert prime_count(n) == expected

    def test_matches_sieve_dense(self, pi_table):
        for n in range(5000):
            assert prime_count(n) == pi_table[n], f"pi({n})"

    def test_matches_sieve_sparse(self, pi_table):
        for n in range(5000, len(pi_table), 997):
            assert prime_count(n) == pi_table[n], f"pi({n})"

    def test_around_prime_squares(self, pi_table):
        """Values where the rough-number bookkeeping changes."""
        for p in (3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47):
            for n in (p**2 - 1, p**2, p**2 + 1, p**4 - 1, p**4, p**4 + 1):
                if n < len(pi_table):
                    assert prime_count(n) == pi_table[n], f"pi({n})"

    @pytest.mark.parametrize("n,expected", [
        (10**6, 78498),
        (10**7, 664579),
        (10**8, 5761455),
        (10**9, 50847534),
        (2**31 - 1, 105097565),
        (2**32 - 1, 203280221),
    ])
    def test_reference_values(self, n, expected):
        assert prime_count(n) == expected

    def test_verbose(self, capsys):
        prime_count(10**6, verbose=True)
        out = capsys.readouterr().out
        assert "Sieving pi(1,000,000)" in out

    def test_quiet_by_default(self, capsys):
        prime_count(10**6)
        assert capsys.readouterr().out == ""


class TestPrimeCountingSieve:
    """pi(n), except n - 1 for prime n."""

    def test_composite_gives_pi(self):
        assert prime_counting_sieve(100) == 25
        assert prime_counting_sieve(1000) == 168

    def test_prime_gives_predecessor(self):
        assert prime_counting_sieve(97) == 96
        assert prime_counting_sieve(2) == 1
        assert prime_counting_sieve(4294967291) == 4294967290

    def test_small(self):
        assert [prime_counting_sieve(n) for n in range(9)] == [0, 0, 1, 2, 2, 4, 3, 6, 4]


class TestNthPrime:
    """The index-th prime, zero based."""

    @pytest.mark.parametrize("index,expected", [
        (0, 2), (1, 3), (2, 5), (3, 7), (10, 31), (999, 7919), (9999, 104729),
    ])
    def test_known(self, index, expected):
        assert nth_prime(index) == expected

    def test_matches_sieve(self, primes):
        for index in list(range(300)) + list(range(300, len(primes), 613)):
            assert nth_prime(index) == primes[index], f"nth_prime({index})"

    def test_largest_32_bit_prime(self):
        assert nth_prime(NTH_PRIME_MAX_INDEX) == 4294967291

    def test_beyond_32_bits_is_zero(self):
        assert nth_prime(NTH_PRIME_MAX_INDEX + 1) == 0
        assert nth_prime(2**32 - 1) == 0

    def test_overshooting_estimate_falls_back(self, monkeypatch):
        monkeypatch.setattr(prime_count_module, 'NTH_PRIME_ESTIMATE_FACTOR', 3.0)
        assert nth_prime(10) == 31
        assert nth_prime(999) == 7919

    def test_verbose(self, capsys):
        nth_prime(999, verbose=True)
        out = capsys.readouterr().out
        assert "Estimate 7,621" in out
