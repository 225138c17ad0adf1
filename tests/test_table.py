"""
Tests for configuration and the Character Quaternion Table
"""

import logging

import pytest
import numpy as np

from quaternion_hash import (
    CharacterQuaternionTable,
    DegenerateQuaternion,
    HashCodeScheme,
    HashConfig,
    UnsupportedCharacter,
    build_table,
    derive_quaternions,
)
from quaternion_hash.constants import DISTRIBUTED_BITS, DOMAIN_SIZE, TABLE_SIZE
from quaternion_hash.table import (
    derive_buffer_bits,
    derive_segment_bits,
    derive_segment_values,
    to_code_units,
)


SQRT5 = np.sqrt(5.0)


class TestHashConfig:
    def test_defaults(self):
        config = HashConfig()
        assert config.segment_index_shift == 0
        assert config.hash_code is HashCodeScheme.IDENTITY

    def test_scheme_from_string(self):
        assert HashConfig(hash_code="clr").hash_code is HashCodeScheme.CLR

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            HashConfig(hash_code="murmur")

    def test_non_integer_shift(self):
        with pytest.raises(ValueError):
            HashConfig(segment_index_shift=1.5)
        with pytest.raises(ValueError):
            HashConfig(segment_index_shift=True)

    def test_numpy_shift_is_normalized(self):
        config = HashConfig(segment_index_shift=np.int64(2))
        assert type(config.segment_index_shift) is int
        assert config == HashConfig(segment_index_shift=2)

    def test_routing_offset(self):
        assert HashConfig(segment_index_shift=5).routing_offset == 1
        assert HashConfig(segment_index_shift=-1).routing_offset == 3

    def test_identity_hash_code_sign_extends(self):
        codes = HashConfig().hash_codes(np.array([0x41, 0x7FFF, 0x8000, 0xFFFE]))
        assert codes.tolist() == [0x41, 0x7FFF, 0xFFFF8000, 0xFFFFFFFE]

    def test_clr_hash_code(self):
        codes = HashConfig(hash_code=HashCodeScheme.CLR).hash_codes(np.array([0x41, 0x8000]))
        assert codes.tolist() == [0x00410041, 0x80008000]


class TestCodeUnits:
    def test_ascii(self):
        assert to_code_units("Ab").tolist() == [65, 98]

    def test_empty(self):
        assert len(to_code_units("")) == 0

    def test_astral_character_is_surrogate_pair(self):
        assert to_code_units("\U0001F600").tolist() == [0xD83D, 0xDE00]

    def test_iterable_of_ints_and_chars(self):
        assert to_code_units([65, "b", 0xFFFF]).tolist() == [65, 98, 0xFFFF]

    def test_iterable_with_multi_unit_item(self):
        with pytest.raises(UnsupportedCharacter) as exc_info:
            to_code_units(["a", "\U0001F600"])
        assert exc_info.value.position == 1

    def test_iterable_with_empty_string_item(self):
        with pytest.raises(UnsupportedCharacter) as exc_info:
            to_code_units(["a", ""])
        assert exc_info.value.code_unit is None
        assert exc_info.value.position == 1
        assert "Empty character at position 1" in str(exc_info.value)
        assert "-0x" not in str(exc_info.value)

    def test_integer_too_wide_for_int64(self):
        with pytest.raises(UnsupportedCharacter) as exc_info:
            to_code_units([65, 2**70])
        assert exc_info.value.code_unit == 2**70
        assert exc_info.value.position == 1

    def test_integer_outside_16_bits(self):
        with pytest.raises(UnsupportedCharacter) as exc_info:
            to_code_units([70000])
        assert exc_info.value.position == 0
        with pytest.raises(UnsupportedCharacter):
            to_code_units([-1])

    def test_non_integer_items_rejected(self):
        for item in (65.9, 65.0, True, None, b"A"):
            with pytest.raises(UnsupportedCharacter) as exc_info:
                to_code_units([item])
            assert exc_info.value.code_unit is item
            assert exc_info.value.position == 0

    def test_numpy_integer_items(self):
        assert to_code_units([np.uint16(65), np.int64(98)]).tolist() == [65, 98]

    def test_float_array_rejected(self):
        with pytest.raises(UnsupportedCharacter):
            derive_quaternions(np.array([65.9]))


class TestSegmentation:
    def test_buffer_layout_for_A(self):
        bits = derive_buffer_bits([65])[0]
        assert bits.shape == (48,)
        assert np.flatnonzero(bits).tolist() == [0, 6, 16, 22]

    def test_buffer_sign_extension(self):
        bits = derive_buffer_bits([0x8000])[0]
        # bit 15 of the code unit, then bits 31..47 of the extended hash code
        assert np.flatnonzero(bits).tolist() == [15] + list(range(31, 48))

    def test_segment_values_for_A(self):
        assert derive_segment_values([65]).tolist() == [[2176, 0, 1088, 0]]

    def test_segment_bits_for_A(self):
        segments = derive_segment_bits([65])[0]
        assert segments.shape == (4, 12)
        # first-routed bit ends up highest
        assert np.flatnonzero(segments[0]).tolist() == [7, 11]
        assert np.flatnonzero(segments[2]).tolist() == [6, 10]

    def test_segment_values_with_shift(self):
        config = HashConfig(segment_index_shift=1)
        assert derive_segment_values([65], config).tolist() == [[0, 2176, 0, 1088]]

    def test_segment_values_clr(self):
        config = HashConfig(hash_code=HashCodeScheme.CLR)
        assert derive_segment_values([65], config).tolist() == [[2184, 0, 1092, 0]]

    def test_last_buffer_bit_is_not_distributed(self):
        # 0x8000 sets bit 47; flipping only that bit must not change the segments
        assert DISTRIBUTED_BITS == 47
        bits = derive_buffer_bits([0x8000])[0]
        assert bits[47]
        ones = int(derive_segment_bits([0x8000]).sum())
        assert ones == int(bits[:47].sum())

    def test_segment_values_in_range(self):
        values = derive_segment_values(np.arange(1, TABLE_SIZE - 1))
        assert values.min() >= 0
        assert values.max() <= 4095

    def test_quaternion_for_A(self):
        q = derive_quaternions([65])[0]
        assert q.dtype == np.float32
        np.testing.assert_allclose(q, [2 / SQRT5, 0, 1 / SQRT5, 0], atol=1e-6)

    def test_zero_code_unit_is_degenerate(self):
        with pytest.raises(DegenerateQuaternion):
            derive_quaternions([0])

    def test_out_of_range_code_unit(self):
        with pytest.raises(UnsupportedCharacter):
            derive_quaternions([TABLE_SIZE])
        with pytest.raises(UnsupportedCharacter):
            derive_quaternions([-1])


class TestCharacterQuaternionTable:
    def test_covers_domain(self):
        table = build_table()
        assert isinstance(table, CharacterQuaternionTable)
        assert len(table) == DOMAIN_SIZE == 65534
        assert table.quaternions.shape == (TABLE_SIZE, 4)
        assert not table.valid[0]
        assert not table.valid[TABLE_SIZE - 1]
        assert table.valid[1:TABLE_SIZE - 1].all()

    def test_every_entry_is_unit(self):
        table = build_table()
        norms = np.linalg.norm(table.quaternions[table.valid].astype(np.float64), axis=1)
        np.testing.assert_allclose(norms, 1.0, atol=1e-6)

    def test_invalid_slots_are_nan(self):
        table = build_table()
        assert np.isnan(table.quaternions[0]).all()
        assert np.isnan(table.quaternions[TABLE_SIZE - 1]).all()

    def test_read_only(self):
        table = build_table()
        with pytest.raises(ValueError):
            table.quaternions[65, 0] = 1.0
        with pytest.raises(ValueError):
            table.valid[0] = True

    def test_matches_direct_derivation(self):
        table = build_table()
        units = np.array([1, 65, 0x3B1, 0x8000, 0xD83D, 0xFFFE])
        np.testing.assert_allclose(table.lookup(units), derive_quaternions(units), atol=1e-7)

    def test_cached_per_config(self):
        assert build_table() is build_table(HashConfig())
        assert build_table(HashConfig(segment_index_shift=1)) is not build_table()

    def test_shift_sensitivity(self):
        base = build_table()
        shifted = build_table(HashConfig(segment_index_shift=1))
        assert not np.array_equal(base.quaternion_for("A"), shifted.quaternion_for("A"))

    def test_shift_congruent_mod_four(self):
        a = build_table(HashConfig(segment_index_shift=3))
        b = build_table(HashConfig(segment_index_shift=-1))
        np.testing.assert_array_equal(a.quaternions[a.valid], b.quaternions[b.valid])

    def test_clr_scheme_differs(self):
        identity = build_table()
        clr = build_table(HashConfig(hash_code=HashCodeScheme.CLR))
        assert not np.array_equal(identity.quaternions[identity.valid], clr.quaternions[clr.valid])

    def test_lookup_rejects_boundaries(self):
        table = build_table()
        with pytest.raises(UnsupportedCharacter) as exc_info:
            table.lookup([65, 0])
        assert exc_info.value.code_unit == 0
        assert exc_info.value.position == 1
        with pytest.raises(UnsupportedCharacter):
            table.lookup([0xFFFF])

    def test_quaternion_for(self):
        table = build_table()
        np.testing.assert_array_equal(table.quaternion_for("A"), table.quaternion_for(65))
        with pytest.raises(UnsupportedCharacter):
            table.quaternion_for("\U0001F600")
        with pytest.raises(UnsupportedCharacter):
            table.quaternion_for(0)

    def test_contains(self):
        table = build_table()
        assert "A" in table
        assert 0xFFFE in table
        assert 0 not in table
        assert "\uffff" not in table
        assert 70000 not in table
        assert 2**70 not in table
        assert -1 not in table
        assert 65.9 not in table
        assert "" not in table

    def test_quaternion_for_rejects_wide_and_non_integer(self):
        table = build_table()
        with pytest.raises(UnsupportedCharacter):
            table.quaternion_for(2**70)
        with pytest.raises(UnsupportedCharacter):
            table.quaternion_for(65.9)
        with pytest.raises(UnsupportedCharacter) as exc_info:
            table.quaternion_for("")
        assert exc_info.value.code_unit is None

    def test_congruent_shifts_share_one_table(self):
        base = build_table()
        for shift in (4, 8, -4, 4000):
            assert build_table(HashConfig(segment_index_shift=shift)) is base
        assert base.config.segment_index_shift == 0
        reduced = build_table(HashConfig(segment_index_shift=7))
        assert reduced is build_table(HashConfig(segment_index_shift=3))
        assert reduced.config.segment_index_shift == 3

    def test_build_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="quaternion_hash.table")
        build_table(HashConfig(segment_index_shift=6, hash_code=HashCodeScheme.CLR))
        assert any("Built quaternion table" in r.getMessage() for r in caplog.records)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
