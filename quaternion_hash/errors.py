"""
Error types raised by the quaternion hash.
"""

from numbers import Integral
from typing import Any, Optional


class QuaternionHashError(Exception):
    """Base class for quaternion hash failures."""


class UnsupportedCharacter(QuaternionHashError, ValueError):
    """
    A character outside the table domain [1, 65534] was presented.

    Attributes:
        code_unit: The offending item: an out-of-domain integer, a value that
            is not an integer, or None for an empty character string
        position: Index of the item in the hashed input, if known
    """

    def __init__(self, code_unit: Any, position: Optional[int] = None):
        self.code_unit = code_unit
        self.position = position
        where = f" at position {position}" if position is not None else ""
        if code_unit is None:
            what = "Empty character"
        elif isinstance(code_unit, Integral) and not isinstance(code_unit, bool):
            what = f"Unsupported character code unit {int(code_unit):#06x}"
        else:
            what = f"Not an integer code unit: {code_unit!r}"
        super().__init__(f"{what}{where}")


class DegenerateQuaternion(QuaternionHashError, ArithmeticError):
    """Normalization was attempted on an all-zero quaternion."""
