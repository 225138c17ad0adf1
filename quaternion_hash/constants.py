# quaternion_hash/constants.py
"""
Quaternion Hash Constants

This module defines constants used throughout the quaternion hash:

LAYER 1: Code-Unit Domain
- CODE_UNIT_BITS: width of one character code unit
- MIN_CODE_UNIT / MAX_CODE_UNIT: inclusive bounds of the table domain
- TABLE_SIZE: slots in the dense lookup table (one per 16-bit value)

LAYER 2: Bit Segmentation
- BUFFER_BYTES: code unit (2 bytes) + hash code (4 bytes)
- SEGMENT_COUNT: one segment per quaternion component
- SEGMENT_BITS: width of each segment
- DISTRIBUTED_BITS: bits routed into segments (the last buffer bit is not)

LAYER 3: Quaternion Algebra
- QUATERNION_DTYPE: component precision
- IDENTITY_COMPONENTS: multiplicative identity in (x, y, z, w) order
"""
import numpy as np


# =============================================================================
# LAYER 1: Code-Unit Domain
# =============================================================================

CODE_UNIT_BITS = 16
TABLE_SIZE = 1 << CODE_UNIT_BITS       # 65536 slots, indexed by code unit
MIN_CODE_UNIT = 1                      # 0 is excluded
MAX_CODE_UNIT = TABLE_SIZE - 2         # 65535 is excluded
DOMAIN_SIZE = MAX_CODE_UNIT - MIN_CODE_UNIT + 1

DEFAULT_SEGMENT_INDEX_SHIFT = 0


# =============================================================================
# LAYER 2: Bit Segmentation
# =============================================================================

BUFFER_BYTES = 6
BUFFER_BITS = BUFFER_BYTES * 8         # 48
SEGMENT_COUNT = 4
SEGMENT_BITS = BUFFER_BITS // SEGMENT_COUNT   # 12

# Bit 47 is never routed into a segment
DISTRIBUTED_BITS = BUFFER_BITS - 1

assert SEGMENT_BITS * SEGMENT_COUNT == BUFFER_BITS, "Segments must tile the buffer"


# =============================================================================
# LAYER 3: Quaternion Algebra
# =============================================================================

QUATERNION_DTYPE = np.float32
IDENTITY_COMPONENTS = (0.0, 0.0, 0.0, 1.0)
