"""
Tests for the per-width constant registry and the wrap-around helpers.

Every other module reads its masks and ranges from here, so a wrong stage
mask or sign bit shows up as a mysterious failure elsewhere. These tests pin
the values down directly.
"""

import dataclasses

import pytest

from numkernel.widths import (
    SMALL_LITERALS,
    SUPPORTED_WIDTHS,
    WIDTHS,
    UnsupportedWidthError,
    fermat_mask,
    to_unsigned,
    width_constants,
    wrap,
)


class TestRegistry:
    """The registry holds exactly the supported widths and is read-only."""

    def test_supported_widths(self):
        assert tuple(WIDTHS) == SUPPORTED_WIDTHS

    @pytest.mark.parametrize("width", [0, 1, 12, 24, 48, 512])
    def test_unsupported_width_raises(self, width):
        with pytest.raises(UnsupportedWidthError):
            width_constants(width)

    def test_unsupported_width_is_value_error(self):
        """Callers catching ValueError also catch width errors."""
        with pytest.raises(ValueError):
            width_constants(12)

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            WIDTHS[512] = WIDTHS[256]

    def test_constants_are_frozen(self):
        c = width_constants(32)
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.size = 64

    def test_same_instance_every_lookup(self):
        assert width_constants(64) is width_constants(64)


class TestWidthConstants:
    """Derived values for individual widths."""

    @pytest.mark.parametrize("width", SUPPORTED_WIDTHS)
    def test_basic_fields(self, width):
        c = width_constants(width)
        assert c.size == width
        assert 1 << c.log2_size == width
        assert c.all_bits_set == 2**width - 1
        assert c.sign_bit == 2**(width - 1)
        assert c.signed_min == -2**(width - 1)
        assert c.signed_max == 2**(width - 1) - 1
        assert c.half_size == width // 2

    def test_fermat_masks_8(self):
        assert width_constants(8).fermat_masks == (0x55, 0x33, 0x0F)

    def test_fermat_masks_32(self):
        assert width_constants(32).fermat_masks == (
            0x55555555, 0x33333333, 0x0F0F0F0F, 0x00FF00FF, 0x0000FFFF,
        )

    @pytest.mark.parametrize("width", SUPPORTED_WIDTHS)
    def test_fermat_masks_alternate_blocks(self, width):
        """mask(k) is blocks of 2^k ones alternating with 2^k zeros, ones lowest."""
        c = width_constants(width)
        assert len(c.fermat_masks) == c.log2_size
        for k, mask in enumerate(c.fermat_masks):
            block = 1 << k
            expected = 0
            for start in range(0, width, 2 * block):
                expected |= ((1 << block) - 1) << start
            assert mask == expected, f"W={width}: mask({k}) = {mask:#x}, expected {expected:#x}"
            assert mask == fermat_mask(k, width)

    @pytest.mark.parametrize("width,digits", [(8, 3), (16, 5), (32, 10), (64, 20), (128, 39)])
    def test_max_digits(self, width, digits):
        c = width_constants(width)
        assert c.max_digits == digits
        assert c.powers_of_ten[-1] == 10**digits

    def test_small_literals(self):
        assert width_constants(8).small_literals == SMALL_LITERALS
        assert width_constants(256).small_literals == SMALL_LITERALS


class TestWrap:
    """Reduction into the unsigned and signed W-bit ranges."""

    @pytest.mark.parametrize("value,width,signed,expected", [
        (-1, 8, False, 255),
        (256, 8, False, 0),
        (255, 8, True, -1),
        (128, 8, True, -128),
        (127, 8, True, 127),
        (2**32 + 5, 32, False, 5),
        (2**63, 64, True, -2**63),
        (-2**63 - 1, 64, True, 2**63 - 1),
    ])
    def test_wrap(self, value, width, signed, expected):
        assert wrap(value, width, signed) == expected

    def test_to_unsigned(self):
        assert to_unsigned(-2, 16) == 0xFFFE
        assert to_unsigned(-1, 256) == 2**256 - 1
