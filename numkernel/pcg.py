"""
PCG32 (XSH-RR) pseudo-random generator with O(log n) jump-ahead.

Responsibility: deterministic, seedable 32-bit draws and bounded sampling.
Entropy for default seeding comes from secure_random, primality for
next_prime from primes.

State update (64-bit LCG):

    state' = state * multiplier + increment    (mod 2^64)

Output (XSH-RR) from the state before the update:

    x = ((state >> 18) ^ state) >> 27          (low 32 bits)
    r = state >> 59
    out = rotr32(x, r)

The increment is always odd: bit 0 is forced on and bit 63 is set to the
complement of the caller's low stream bit, so streams 2k and 2k + 1 differ.

A generator instance is mutable and owned by one consumer. Hand a copy to
another thread or task with clone() rather than sharing the instance.
"""

import copy
from typing import Optional

from .primes import UINT32_MAX, is_prime
from .secure_random import next_uint, next_uint_raw

DEFAULT_MULTIPLIER = 6364136223846793005

STREAM_MAX = (1 << 63) - 1
STREAM_ERROR = "stream offset must be a positive integer less than 2^63"

_MASK_64 = (1 << 64) - 1


def _rotate_right_32(value: int, count: int) -> int:
    count &= 31
    return ((value >> count) | (value << (32 - count))) & UINT32_MAX


def jump_state(count: int, multiplier: int, state: int, increment: int) -> int:
    """
    Apply the LCG step count times in O(log count).

    Composes the affine map x -> m*x + c with itself by binary
    exponentiation: squaring (m, c) gives (m^2, (m + 1) * c).

    Parameters
    ----------
    count : int
        Number of steps, taken modulo 2^64 (so -1 steps back once).
    multiplier, state, increment : int
        64-bit generator parameters.

    Returns
    -------
    int
        The state after count steps.
    """
    count &= _MASK_64
    acc_mul = 1
    acc_add = 0
    cur_mul = multiplier
    cur_add = increment

    while count > 0:
        if count & 1:
            acc_mul = (acc_mul * cur_mul) & _MASK_64
            acc_add = (acc_add * cur_mul + cur_add) & _MASK_64
        cur_add = ((cur_mul + 1) * cur_add) & _MASK_64
        cur_mul = (cur_mul * cur_mul) & _MASK_64
        count >>= 1

    return (acc_mul * state + acc_add) & _MASK_64


class Pcg32XshRr:
    """
    Permuted congruential generator, 64-bit state, 32-bit output.

    Parameters
    ----------
    seed : int, optional
        Initial 64-bit state. Drawn from the secure entropy source if omitted.
    stream : int, optional
        Stream selector in [0, 2^63). Drawn securely if omitted.
    multiplier : int
        LCG multiplier.

    Raises
    ------
    ValueError
        If stream is negative or 2^63 or larger.

    Examples
    --------
    >>> g = Pcg32XshRr(seed=1753877967969059832, stream=109)
    >>> hex(next(g))
    '0xa15c02b7'
    """

    def __init__(self, seed: Optional[int] = None, stream: Optional[int] = None,
                 multiplier: int = DEFAULT_MULTIPLIER):
        if seed is None:
            seed = next_uint_raw(64)
        if stream is None:
            stream = next_uint(0, STREAM_MAX, width=64)
        if stream < 0 or stream > STREAM_MAX:
            raise ValueError(f"{STREAM_ERROR}, got {stream}")

        self._multiplier = multiplier & _MASK_64
        self._state = seed & _MASK_64
        self._increment = (((~stream & 1) << 63) | stream | 1) & _MASK_64

    @property
    def state(self) -> int:
        return self._state

    @property
    def increment(self) -> int:
        return self._increment

    @property
    def multiplier(self) -> int:
        return self._multiplier

    def __repr__(self) -> str:
        return (f"Pcg32XshRr(state={self._state:#018x}, "
                f"increment={self._increment:#018x})")

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.next_uint32()

    def clone(self) -> 'Pcg32XshRr':
        """Independent generator that continues from the current state."""
        return copy.copy(self)

    def jump(self, count: int) -> None:
        """
        Advance the generator by count draws without producing them.

        Negative counts rewind: the state sequence has period 2^64 and the
        count is reduced modulo that.
        """
        self._state = jump_state(count, self._multiplier, self._state, self._increment)

    def _step(self) -> int:
        old = self._state
        self._state = (old * self._multiplier + self._increment) & _MASK_64
        xorshifted = (((old >> 18) ^ old) >> 27) & UINT32_MAX
        return _rotate_right_32(xorshifted, old >> 59)

    def _sample(self, exclusive_high: int) -> int:
        """
        Lemire's nearly divisionless bounded sampling in [0, exclusive_high).

        The 64-bit product sample * n puts the result in the high word; low
        words below (2^32 - n) mod n would make some results more likely and
        are redrawn. The modulo is only computed when the low word is small.
        """
        product = self._step() * exclusive_high
        leftover = product & UINT32_MAX

        if leftover < exclusive_high:
            threshold = ((1 << 32) - exclusive_high) % exclusive_high
            while leftover < threshold:
                product = self._step() * exclusive_high
                leftover = product & UINT32_MAX

        return product >> 32

    def next_uint32(self, minimum: int = 0, maximum: int = UINT32_MAX) -> int:
        """
        Uniform 32-bit value in [minimum, maximum].

        Parameters
        ----------
        minimum, maximum : int
            Inclusive bounds. maximum < minimum wraps the range around
            2^32, matching unsigned subtraction.

        Returns
        -------
        int
            The sample. The full range returns the raw output unchanged.
        """
        span = (maximum - minimum) & UINT32_MAX
        if span == UINT32_MAX:
            return self._step()
        return (self._sample(span + 1) + minimum) & UINT32_MAX

    def next_prime(self, minimum: int = 0, maximum: int = UINT32_MAX) -> int:
        """
        A prime found by probing upward from an odd sample in [minimum, maximum].

        The result can exceed maximum, and the probe wraps past 2^32 - 1.
        It only terminates if a prime lies on the odd probe sequence, which
        for 32-bit values always holds (the sequence wraps to 1, 3, ...).
        The draw is not uniform over the primes in the range.
        """
        candidate = self.next_uint32(minimum, maximum) | 1
        while not is_prime(candidate):
            candidate = (candidate + 2) & UINT32_MAX
        return candidate


if __name__ == '__main__':
    print("Testing PCG32 XSH-RR...")

    reference = [0xa15c02b7, 0x7b47f409, 0xba1d3330, 0x83d2f293, 0xbfa4784b, 0xcbed606e]
    g = Pcg32XshRr(seed=1753877967969059832, stream=109)
    got = [next(g) for _ in range(len(reference))]
    print(f"  reference sequence: {'✓' if got == reference else '✗'}")

    h = Pcg32XshRr(seed=1753877967969059832, stream=109)
    h.jump(5)
    print(f"  jump(5) then draw: {'✓' if next(h) == reference[5] else '✗'}")

    h.jump(-6)
    print(f"  jump(-6) rewinds: {'✓' if next(h) == reference[0] else '✗'}")

    draws = [g.next_uint32(10, 20) for _ in range(10000)]
    print(f"  bounded [10, 20]: {'✓' if min(draws) == 10 and max(draws) == 20 else '✗'}")
    print(f"  next_prime: {g.next_prime(1000, 2000):,}")
