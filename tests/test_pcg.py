"""
Tests for the PCG32 XSH-RR generator.

The reference sequence is the classic pcg32 demo output for
(initstate=42, initseq=54), expressed as the state after seeding
(1753877967969059832) and the stream selector whose increment is 109.
"""

import numpy as np
import pytest
from scipy.stats import chisquare

from numkernel.pcg import STREAM_MAX, Pcg32XshRr, jump_state
from numkernel.primes import is_prime

SEED = 1753877967969059832
STREAM = 109
REFERENCE = [0xa15c02b7, 0x7b47f409, 0xba1d3330, 0x83d2f293, 0xbfa4784b, 0xcbed606e]


def make_generator():
    return Pcg32XshRr(seed=SEED, stream=STREAM)


class TestConstruction:
    """Seeding and stream validation."""

    def test_reference_sequence(self):
        g = make_generator()
        assert [next(g) for _ in REFERENCE] == REFERENCE

    def test_increment_is_odd_with_complemented_top_bit(self):
        assert Pcg32XshRr(seed=0, stream=109).increment == 109
        assert Pcg32XshRr(seed=0, stream=0).increment == 2**63 + 1
        assert Pcg32XshRr(seed=0, stream=108).increment == 2**63 + 109

    def test_adjacent_streams_differ(self):
        even = Pcg32XshRr(seed=SEED, stream=108)
        odd = Pcg32XshRr(seed=SEED, stream=109)
        assert even.increment != odd.increment
        assert [next(even) for _ in range(4)] != [next(odd) for _ in range(4)]

    @pytest.mark.parametrize("stream", [-1, STREAM_MAX + 1, 2**64])
    def test_stream_out_of_range(self, stream):
        with pytest.raises(ValueError, match="less than 2\\^63"):
            Pcg32XshRr(seed=0, stream=stream)

    def test_largest_stream_accepted(self):
        g = Pcg32XshRr(seed=0, stream=STREAM_MAX)
        assert g.increment & 1

    def test_seed_wraps_to_64_bits(self):
        assert Pcg32XshRr(seed=2**64 + 5, stream=1).state == 5

    def test_default_seeding(self):
        a = Pcg32XshRr()
        b = Pcg32XshRr()
        assert a.increment & 1
        assert (a.state, a.increment) != (b.state, b.increment)

    def test_repr(self):
        assert "Pcg32XshRr(state=0x185706b82c2e03f8" in repr(make_generator())


class TestDeterminism:
    """Identical seeds give identical sequences; clones are independent."""

    def test_same_seed_same_sequence(self):
        a, b = make_generator(), make_generator()
        assert [next(a) for _ in range(1000)] == [next(b) for _ in range(1000)]

    def test_iterator_protocol(self):
        g = make_generator()
        assert iter(g) is g
        assert [v for _, v in zip(range(3), g)] == REFERENCE[:3]

    def test_clone_continues_from_current_state(self):
        g = make_generator()
        next(g)
        h = g.clone()
        assert [next(h) for _ in range(5)] == REFERENCE[1:]
        assert next(g) == REFERENCE[1], "drawing from the clone must not advance the original"


class TestJump:
    """O(log n) skip-ahead."""

    @pytest.mark.parametrize("count", [0, 1, 2, 5, 63, 64, 1000, 12345])
    def test_matches_sequential_draws(self, count):
        sequential = make_generator()
        for _ in range(count):
            next(sequential)

        jumped = make_generator()
        jumped.jump(count)
        assert jumped.state == sequential.state
        assert next(jumped) == next(sequential)

    def test_reference_offsets(self):
        for k, expected in enumerate(REFERENCE):
            g = make_generator()
            g.jump(k)
            assert next(g) == expected

    def test_negative_rewinds(self):
        g = make_generator()
        draws = [next(g) for _ in range(6)]
        g.jump(-6)
        assert [next(g) for _ in range(6)] == draws

    def test_full_period_returns(self):
        g = make_generator()
        g.jump(2**64)
        assert g.state == SEED

    def test_composes(self):
        state = jump_state(300, 6364136223846793005, SEED, STREAM)
        state = jump_state(700, 6364136223846793005, state, STREAM)
        assert state == jump_state(1000, 6364136223846793005, SEED, STREAM)


class TestBoundedSampling:
    """next_uint32 and next_prime."""

    @pytest.mark.parametrize("minimum,maximum", [(0, 5), (10, 20), (0, 1), (2**31, 2**32 - 1), (7, 7)])
    def test_within_bounds(self, minimum, maximum):
        g = make_generator()
        for _ in range(2000):
            value = g.next_uint32(minimum, maximum)
            assert minimum <= value <= maximum

    def test_hits_both_ends(self):
        g = make_generator()
        draws = {g.next_uint32(10, 20) for _ in range(2000)}
        assert draws == set(range(10, 21))

    def test_full_range_is_raw_output(self):
        g = make_generator()
        assert [g.next_uint32(0, 2**32 - 1) for _ in REFERENCE] == REFERENCE

    def test_wrapped_range(self):
        """maximum < minimum wraps through 2^32 like unsigned subtraction."""
        g = make_generator()
        for _ in range(1000):
            value = g.next_uint32(2**32 - 3, 2)
            assert value in {2**32 - 3, 2**32 - 2, 2**32 - 1, 0, 1, 2}

    def test_uniformity(self):
        """One million draws over 0..5 pass a chi-square test."""
        g = make_generator()
        draws = np.fromiter((g.next_uint32(0, 5) for _ in range(10**6)), dtype=np.int64, count=10**6)
        counts = np.bincount(draws, minlength=6)

        assert counts.sum() == 10**6
        _, p_value = chisquare(counts)
        assert p_value > 1e-3, f"counts {counts.tolist()} look non-uniform (p = {p_value:.2e})"

    def test_next_prime(self):
        g = make_generator()
        for _ in range(200):
            p = g.next_prime(1000, 2000)
            assert is_prime(p)
            assert 1000 <= p < 2100

    def test_next_prime_wraps_past_largest(self):
        """The odd draw is 2^32 - 1, which is composite; the search wraps to 1, then 3."""
        g = make_generator()
        assert g.next_prime(2**32 - 2, 2**32 - 1) == 3
