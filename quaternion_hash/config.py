"""
Hash Configuration

Single source of truth for the parameters that fix a hash family:
the segment index shift and the per-character hash-code scheme.
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Integral

import numpy as np

from .constants import DEFAULT_SEGMENT_INDEX_SHIFT, SEGMENT_COUNT


class HashCodeScheme(Enum):
    """32-bit hash code of a character code unit."""
    IDENTITY = "identity"  # 16-bit value sign-extended to 32 bits
    CLR = "clr"            # c | (c << 16), as the .NET runtime hashes a char


@dataclass(frozen=True)
class HashConfig:
    """
    Immutable configuration of one hash family.

    Two tables built from equal configs are identical, so configs are
    used as cache keys for table construction.

    Attributes:
        segment_index_shift: Offset added to the bit index before routing
            it to a segment. Only its value mod 4 affects the output.
        hash_code: Scheme producing bytes 2-5 of the derivation buffer

    Example:
        >>> config = HashConfig(segment_index_shift=1)
        >>> config.hash_codes(np.array([65]))
        array([65], dtype=uint32)
    """
    segment_index_shift: int = DEFAULT_SEGMENT_INDEX_SHIFT
    hash_code: HashCodeScheme = HashCodeScheme.IDENTITY

    def __post_init__(self):
        """Validate configuration."""
        shift = self.segment_index_shift
        if isinstance(shift, bool) or not isinstance(shift, Integral):
            raise ValueError(f"segment_index_shift must be an integer, got {shift!r}")
        object.__setattr__(self, 'segment_index_shift', int(shift))

        if not isinstance(self.hash_code, HashCodeScheme):
            try:
                scheme = HashCodeScheme(self.hash_code)
            except ValueError:
                known = ", ".join(s.value for s in HashCodeScheme)
                raise ValueError(f"Unknown hash code scheme {self.hash_code!r} (expected one of: {known})")
            object.__setattr__(self, 'hash_code', scheme)

    @property
    def routing_offset(self) -> int:
        """Effective shift in [0, SEGMENT_COUNT)."""
        return self.segment_index_shift % SEGMENT_COUNT

    def hash_codes(self, code_units: np.ndarray) -> np.ndarray:
        """
        Compute the 32-bit hash code of each code unit.

        Returns:
            uint32 array holding the two's-complement bit pattern of each
            hash code
        """
        units = np.asarray(code_units).astype(np.uint16)
        if self.hash_code == HashCodeScheme.IDENTITY:
            return units.view(np.int16).astype(np.int32).view(np.uint32)
        elif self.hash_code == HashCodeScheme.CLR:
            wide = units.astype(np.uint32)
            return wide | (wide << np.uint32(16))
        else:
            raise ValueError(f"Unsupported hash code scheme: {self.hash_code}")


DEFAULT_HASH_CONFIG = HashConfig()
