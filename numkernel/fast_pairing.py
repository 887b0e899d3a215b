"""
Table-driven bit interleaving (Morton / Z-order codes).

Responsibility: the accelerated pairing strategy and its vectorised array
entry points. The portable butterfly network in bit_functions is the
fallback; both must agree bit for bit.

Instead of running log2(W) mask-and-shift stages per value, spread each input
byte through a 256-entry table and gather each 16-bit chunk of a code through
a 65536-entry table:

- SPREAD[b]  places bit i of byte b at bit 2i        (uint16 -> stored as uint64)
- GATHER[c]  collects the even bits of chunk c        (uint8)

Tables are built once at import from the Fermat stage masks. The strategy is
only available while the paired result fits in 64 bits, i.e. for input widths
of 32 bits or less.
"""

import numpy as np
from typing import Optional, Tuple

from .settings import SETTINGS, PAIRING_STRATEGIES
from .widths import fermat_mask, width_constants

TABLE_MAX_INPUT_WIDTH = 32


def _build_spread_table() -> np.ndarray:
    """SPREAD[b] for b in 0..255, computed with the 16-bit butterfly stages."""
    x = np.arange(256, dtype=np.uint64)
    for k in (2, 1, 0):
        x = (x | (x << np.uint64(1 << k))) & np.uint64(fermat_mask(k, 16))
    return x


def _build_gather_table() -> np.ndarray:
    """GATHER[c] for c in 0..65535, computed with the 16-bit butterfly stages."""
    x = np.arange(65536, dtype=np.uint64) & np.uint64(fermat_mask(0, 16))
    for k in (0, 1, 2):
        x = (x | (x >> np.uint64(1 << k))) & np.uint64(fermat_mask(k + 1, 16))
    return x.astype(np.uint8)


SPREAD = _build_spread_table()
GATHER = _build_gather_table()


def table_available(width: int) -> bool:
    """True if the table strategy can pair two width-bit inputs."""
    return width_constants(width).size <= TABLE_MAX_INPUT_WIDTH


def select_pairing_strategy(width: int, strategy: Optional[str] = None) -> str:
    """
    Decide which pairing implementation to run for a given input width.

    Parameters
    ----------
    width : int
        Bit width of each input half.
    strategy : str, optional
        'auto', 'table' or 'butterfly'. Defaults to SETTINGS['pairing']['strategy'].

    Returns
    -------
    str
        'table' or 'butterfly'. Requests for 'table' (or 'auto') at widths the
        tables cannot cover resolve to 'butterfly'.
    """
    if strategy is None:
        strategy = SETTINGS['pairing']['strategy']
    if strategy not in PAIRING_STRATEGIES:
        raise ValueError(
            f"strategy must be one of {PAIRING_STRATEGIES}, got {strategy!r}"
        )
    if strategy == 'butterfly' or not table_available(width):
        return 'butterfly'
    return 'table'


def table_pair(value: int, other: int, width: int) -> int:
    """Interleave two width-bit values using the spread table (width <= 32)."""
    result = 0
    for i in range(width >> 3):
        shift = i << 3
        result |= int(SPREAD[(value >> shift) & 0xFF]) << (shift << 1)
        result |= int(SPREAD[(other >> shift) & 0xFF]) << ((shift << 1) + 1)
    return result


def table_unpair(value: int, width: int) -> Tuple[int, int]:
    """Split a 2*width-bit code into its even-bit and odd-bit halves (width <= 32)."""
    x = 0
    y = 0
    for i in range(width >> 3):
        chunk = (value >> (i << 4)) & 0xFFFF
        x |= int(GATHER[chunk]) << (i << 3)
        y |= int(GATHER[chunk >> 1]) << (i << 3)
    return x, y


def bitwise_pair_array(values: np.ndarray, others: np.ndarray) -> np.ndarray:
    """
    Vectorised Morton encoding of two uint32 arrays.

    Parameters
    ----------
    values : np.ndarray
        Array of 32-bit unsigned integers, placed in the even bit positions.
    others : np.ndarray
        Array of the same shape, placed in the odd bit positions.

    Returns
    -------
    np.ndarray
        uint64 array of interleaved codes.
    """
    a = np.asarray(values).astype(np.uint64)
    b = np.asarray(others).astype(np.uint64)
    result = np.zeros(a.shape, dtype=np.uint64)

    for i in range(4):
        shift = np.uint64(i * 8)
        out_shift = np.uint64(i * 16)
        result |= SPREAD[(a >> shift) & np.uint64(0xFF)] << out_shift
        result |= SPREAD[(b >> shift) & np.uint64(0xFF)] << (out_shift + np.uint64(1))

    return result


def bitwise_unpair_array(codes: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vectorised inverse of bitwise_pair_array.

    Parameters
    ----------
    codes : np.ndarray
        uint64 Morton codes.

    Returns
    -------
    tuple of np.ndarray
        (values, others) as uint32 arrays.
    """
    c = np.asarray(codes).astype(np.uint64)
    x = np.zeros(c.shape, dtype=np.uint32)
    y = np.zeros(c.shape, dtype=np.uint32)

    for i in range(4):
        chunk = (c >> np.uint64(i * 16)) & np.uint64(0xFFFF)
        shift = np.uint32(i * 8)
        x |= GATHER[chunk].astype(np.uint32) << shift
        y |= GATHER[chunk >> np.uint64(1)].astype(np.uint32) << shift

    return x, y
