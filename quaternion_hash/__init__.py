"""
Quaternion Hash - Order-Sensitive Text Hashing on the Unit 3-Sphere

Every 16-bit character code unit maps to a unit quaternion derived from
its bit pattern; a string hashes to the normalized product of its
characters' quaternions. Not a cryptographic hash.
"""

__version__ = "0.1.0"

from .config import HashCodeScheme, HashConfig
from .errors import QuaternionHashError, UnsupportedCharacter, DegenerateQuaternion
from .table import CharacterQuaternionTable, build_table, derive_quaternions
from .hasher import QuaternionHashFactory, quaternion_hash

__all__ = [
    "HashCodeScheme",
    "HashConfig",
    "QuaternionHashError",
    "UnsupportedCharacter",
    "DegenerateQuaternion",
    "CharacterQuaternionTable",
    "build_table",
    "derive_quaternions",
    "QuaternionHashFactory",
    "quaternion_hash",
]
