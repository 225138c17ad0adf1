"""
Quaternion Algebra Module

Single-precision quaternion operations in (x, y, z, w) component order,
w being the scalar part. Quaternions are numpy arrays of shape (4,) or
stacks of shape (n, 4).
"""

from functools import reduce
from typing import Iterable

import numpy as np

from .constants import IDENTITY_COMPONENTS, QUATERNION_DTYPE
from .errors import DegenerateQuaternion


def identity() -> np.ndarray:
    """Return the multiplicative identity (0, 0, 0, 1)."""
    return np.array(IDENTITY_COMPONENTS, dtype=QUATERNION_DTYPE)


def quat_mul(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product q1 * q2 (non-commutative)."""
    x1, y1, z1, w1 = q1
    x2, y2, z2, w2 = q2
    # cross(v1, v2) and dot(v1, v2) of the vector parts
    cx = y1 * z2 - z1 * y2
    cy = z1 * x2 - x1 * z2
    cz = x1 * y2 - y1 * x2
    dot = x1 * x2 + y1 * y2 + z1 * z2
    return np.array([
        x1 * w2 + x2 * w1 + cx,
        y1 * w2 + y2 * w1 + cy,
        z1 * w2 + z2 * w1 + cz,
        w1 * w2 - dot,
    ], dtype=QUATERNION_DTYPE)


def quat_norm(q: np.ndarray) -> np.ndarray:
    """
    Magnitude of a quaternion, or of each row of a (n, 4) stack.
    """
    q = np.asarray(q, dtype=QUATERNION_DTYPE)
    return np.sqrt(np.sum(q * q, axis=-1))


def quat_normalize(q: np.ndarray) -> np.ndarray:
    """
    Scale a quaternion (or each row of a stack) to unit length.

    Raises:
        DegenerateQuaternion: if any quaternion is all zero
    """
    q = np.asarray(q, dtype=QUATERNION_DTYPE)
    length_sq = np.sum(q * q, axis=-1, keepdims=True)
    if np.any(length_sq == 0):
        raise DegenerateQuaternion("Cannot normalize a zero quaternion")
    inv_norm = QUATERNION_DTYPE(1.0) / np.sqrt(length_sq)
    return (q * inv_norm).astype(QUATERNION_DTYPE)


def quat_product(quaternions: Iterable[np.ndarray]) -> np.ndarray:
    """
    Multiply quaternions left to right, starting from the identity.

    An empty sequence yields the identity.
    """
    return reduce(quat_mul, quaternions, identity())
