"""
Character Quaternion Table

Maps every 16-bit code unit in [1, 65534] to a unit quaternion derived
from the code unit's bit pattern:

    c, hash(c) → 6-byte buffer → 48 bits → 4 × 12-bit segments → (x, y, z, w)

Bit Segmentation:
    Bit i (0 ≤ i < 47) goes to segment (i + shift) mod 4. The first bit a
    segment receives is written at position 0; every later bit first shifts
    the segment left by one (dropping position 11) and is then written at
    position 0. Earlier bits therefore end up in the high positions. Bit 47
    is never distributed.

The derivation runs over a whole array of code units at once: the four
segment buffers of every code unit are updated in place, one bit index
at a time.

Storage:
    Dense (65536, 4) float32 array indexed by code unit. Slots 0 and 65535
    hold NaN and are marked invalid in a parallel boolean mask. Both arrays
    are read-only, so one table can be shared by any number of threads.
"""

from __future__ import annotations
from typing import Iterable, Optional, Union
from numbers import Integral
from dataclasses import dataclass, field
from functools import lru_cache
import logging
import time

import numpy as np

from .config import DEFAULT_HASH_CONFIG, HashCodeScheme, HashConfig
from .constants import (
    BUFFER_BYTES,
    DISTRIBUTED_BITS,
    DOMAIN_SIZE,
    MAX_CODE_UNIT,
    MIN_CODE_UNIT,
    QUATERNION_DTYPE,
    SEGMENT_BITS,
    SEGMENT_COUNT,
    TABLE_SIZE,
)
from .errors import DegenerateQuaternion, UnsupportedCharacter
from .quaternion import quat_normalize

logger = logging.getLogger(__name__)

CharacterLike = Union[str, int]


# =============================================================================
# SECTION 1: Code Units
# =============================================================================

def _coerce_code_unit(item, position: Optional[int] = None) -> int:
    """
    Turn one input item into a 16-bit code unit.

    Raises:
        UnsupportedCharacter: for strings that are not exactly one code
            unit, non-integer items and integers outside 0..65535
    """
    if isinstance(item, str):
        if not item:
            raise UnsupportedCharacter(None, position)
        encoded = item.encode('utf-16-le', 'surrogatepass')
        if len(encoded) != 2:
            raise UnsupportedCharacter(ord(item[0]), position)
        return int.from_bytes(encoded, 'little')

    if isinstance(item, bool) or not isinstance(item, Integral):
        raise UnsupportedCharacter(item, position)
    # Range check on the Python int, before any fixed-width conversion
    code_unit = int(item)
    if not 0 <= code_unit < TABLE_SIZE:
        raise UnsupportedCharacter(code_unit, position)
    return code_unit


def to_code_units(text: Union[str, Iterable[CharacterLike]]) -> np.ndarray:
    """
    Convert text to an int64 array of 16-bit code units.

    A str is encoded as UTF-16LE (surrogates passed through), so characters
    outside the BMP become surrogate pairs. Any other iterable is read item
    by item: integers are taken as code units, one-character strings by
    their code unit. Every item must fit in 16 bits; the table domain
    itself (excluding 0 and 65535) is checked at lookup.
    """
    if isinstance(text, str):
        raw = text.encode('utf-16-le', 'surrogatepass')
        if not raw:
            return np.zeros(0, dtype=np.int64)
        return np.frombuffer(raw, dtype='<u2').astype(np.int64)

    units = [_coerce_code_unit(item, position) for position, item in enumerate(text)]
    return np.array(units, dtype=np.int64)


def _as_code_unit_array(code_units) -> np.ndarray:
    """Coerce to a 1-D int64 array, rejecting values that are not 16-bit."""
    if not isinstance(code_units, np.ndarray):
        if isinstance(code_units, Integral):
            code_units = [code_units]
        return to_code_units(code_units)

    units = np.atleast_1d(code_units)
    if units.size and units.dtype.kind not in 'iu':
        raise UnsupportedCharacter(units.flat[0].item(), 0)
    bad = np.flatnonzero((units < 0) | (units >= TABLE_SIZE))
    if bad.size:
        raise UnsupportedCharacter(int(units[bad[0]]), int(bad[0]))
    return units.astype(np.int64)


# =============================================================================
# SECTION 2: Bit Segmentation
# =============================================================================

def derive_buffer_bits(code_units, config: HashConfig = DEFAULT_HASH_CONFIG) -> np.ndarray:
    """
    Build the 48-bit derivation buffer of each code unit.

    Bytes 0-1 hold the code unit and bytes 2-5 its hash code, both
    little-endian. Bit 0 is the least significant bit of byte 0.

    Returns:
        bool array of shape (n, 48)
    """
    units = _as_code_unit_array(code_units)
    n = len(units)

    buffer = np.empty((n, BUFFER_BYTES), dtype=np.uint8)
    buffer[:, 0:2] = units.astype('<u2').view(np.uint8).reshape(n, 2)
    buffer[:, 2:6] = config.hash_codes(units).astype('<u4').view(np.uint8).reshape(n, 4)

    return np.unpackbits(buffer, axis=1, bitorder='little').astype(bool)


def derive_segment_bits(code_units, config: HashConfig = DEFAULT_HASH_CONFIG) -> np.ndarray:
    """
    Distribute buffer bits into the four 12-bit segments.

    Returns:
        bool array of shape (n, 4, 12); [..., s, p] is bit p of segment s
    """
    bits = derive_buffer_bits(code_units, config)
    segments = np.zeros((len(bits), SEGMENT_COUNT, SEGMENT_BITS), dtype=bool)
    offset = config.routing_offset

    for i in range(DISTRIBUTED_BITS):
        # View into the target segment of every code unit
        segment = segments[:, (i + offset) % SEGMENT_COUNT, :]
        if i // SEGMENT_COUNT > 0:
            segment[:, 1:] = segment[:, :-1].copy()
        segment[:, 0] = bits[:, i]

    return segments


def derive_segment_values(code_units, config: HashConfig = DEFAULT_HASH_CONFIG) -> np.ndarray:
    """
    Read each segment as an unsigned integer in [0, 4095].

    Returns:
        int64 array of shape (n, 4) in (x, y, z, w) order
    """
    segments = derive_segment_bits(code_units, config)
    weights = np.left_shift(1, np.arange(SEGMENT_BITS, dtype=np.int64))
    return (segments * weights).sum(axis=-1)


def derive_quaternions(code_units, config: HashConfig = DEFAULT_HASH_CONFIG) -> np.ndarray:
    """
    Derive the unit quaternion of each code unit.

    Raises:
        DegenerateQuaternion: if a code unit's segments are all zero

    Returns:
        float32 array of shape (n, 4)
    """
    units = _as_code_unit_array(code_units)
    values = derive_segment_values(units, config)

    zero_rows = np.flatnonzero(~values.any(axis=1))
    if zero_rows.size:
        unit = int(units[zero_rows[0]])
        raise DegenerateQuaternion(
            f"Code unit {unit:#06x} derives an all-zero quaternion "
            f"(shift={config.segment_index_shift}, hash_code={config.hash_code.value})"
        )

    return quat_normalize(values.astype(QUATERNION_DTYPE))


# =============================================================================
# SECTION 3: Lookup Table
# =============================================================================

@dataclass(frozen=True, eq=False)
class CharacterQuaternionTable:
    """
    Immutable code unit → unit quaternion table.

    Attributes:
        config: Configuration the table was derived from
        quaternions: (65536, 4) float32, NaN in the two invalid slots
        valid: (65536,) bool, False at 0 and 65535
    """
    config: HashConfig
    quaternions: np.ndarray = field(repr=False)
    valid: np.ndarray = field(repr=False)

    def __post_init__(self):
        self.quaternions.flags.writeable = False
        self.valid.flags.writeable = False

    def __len__(self) -> int:
        return int(self.valid.sum())

    def __contains__(self, char: CharacterLike) -> bool:
        try:
            self.quaternion_for(char)
        except UnsupportedCharacter:
            return False
        return True

    def lookup(self, code_units) -> np.ndarray:
        """
        Fetch the quaternions of a sequence of code units.

        Raises:
            UnsupportedCharacter: for the first code unit outside [1, 65534]

        Returns:
            float32 array of shape (n, 4)
        """
        units = _as_code_unit_array(code_units)
        invalid = np.flatnonzero(~self.valid[units])
        if invalid.size:
            raise UnsupportedCharacter(int(units[invalid[0]]), int(invalid[0]))
        return self.quaternions[units]

    def quaternion_for(self, char: CharacterLike) -> np.ndarray:
        """Quaternion of a single character (one-character str or code unit)."""
        code_unit = _coerce_code_unit(char)
        if not self.valid[code_unit]:
            raise UnsupportedCharacter(code_unit)
        return self.quaternions[code_unit].copy()


@lru_cache(maxsize=None)
def _build_table(routing_offset: int, hash_code: HashCodeScheme) -> CharacterQuaternionTable:
    # Keyed on the effective parameters: shifts congruent mod 4 share one table
    config = HashConfig(segment_index_shift=routing_offset, hash_code=hash_code)
    start = time.perf_counter()

    units = np.arange(MIN_CODE_UNIT, MAX_CODE_UNIT + 1, dtype=np.int64)
    quaternions = np.full((TABLE_SIZE, SEGMENT_COUNT), np.nan, dtype=QUATERNION_DTYPE)
    quaternions[units] = derive_quaternions(units, config)

    valid = np.zeros(TABLE_SIZE, dtype=bool)
    valid[units] = True

    logger.debug(
        "Built quaternion table: %d code units, shift=%d, hash_code=%s in %.3fs",
        DOMAIN_SIZE, routing_offset, hash_code.value,
        time.perf_counter() - start,
    )
    return CharacterQuaternionTable(config=config, quaternions=quaternions, valid=valid)


def build_table(config: Optional[HashConfig] = None) -> CharacterQuaternionTable:
    """
    Build (or reuse) the table for a configuration.

    Every code unit in the domain is derived eagerly, so a degenerate
    configuration fails here rather than at hash time. Only the shift
    mod 4 and the hash-code scheme affect the table, so the cache holds
    at most one table per distinct pair (eight in total) and the returned
    table's config carries the reduced shift.

    Raises:
        DegenerateQuaternion: if any code unit derives an all-zero quaternion
    """
    if config is None:
        config = DEFAULT_HASH_CONFIG
    return _build_table(config.routing_offset, config.hash_code)
