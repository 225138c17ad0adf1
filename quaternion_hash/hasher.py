"""
String Hasher Module

Folds a string into one unit quaternion: each code unit's quaternion is
looked up in the character table and the lookups are multiplied left to
right, starting from the identity. Quaternion multiplication does not
commute, so reordering the characters generally changes the hash.
"""

from typing import Iterable, Optional, Union

import numpy as np

from .config import HashCodeScheme, HashConfig
from .constants import DEFAULT_SEGMENT_INDEX_SHIFT
from .quaternion import quat_normalize, quat_product
from .table import CharacterLike, CharacterQuaternionTable, build_table, to_code_units

Text = Union[str, Iterable[CharacterLike]]


class QuaternionHashFactory:
    """
    Hashes text to unit quaternions for one hash family.

    The character table is derived for the whole code-unit domain when the
    factory is created and shared with every other factory using the same
    configuration. Hashing only reads the table, so one factory can be used
    from several threads at once.

    Example:
        >>> factory = QuaternionHashFactory()
        >>> factory.create_hash("A")
        array([0.8944272, 0.       , 0.4472136, 0.       ], dtype=float32)
    """

    def __init__(self, segment_index_shift: int = DEFAULT_SEGMENT_INDEX_SHIFT,
                 hash_code: Union[HashCodeScheme, str] = HashCodeScheme.IDENTITY,
                 config: Optional[HashConfig] = None):
        if config is None:
            config = HashConfig(segment_index_shift=segment_index_shift, hash_code=hash_code)
        self.config = config
        self.table: CharacterQuaternionTable = build_table(config)

    @property
    def segment_index_shift(self) -> int:
        return self.config.segment_index_shift

    def create_hash(self, text: Text) -> np.ndarray:
        """
        Hash text to a unit quaternion (x, y, z, w).

        Args:
            text: A str (hashed as UTF-16 code units), or an iterable of
                integer code units or one-character strings

        Returns:
            float32 array of shape (4,); the identity for empty input

        Raises:
            UnsupportedCharacter: if any code unit is 0, 65535 or not 16-bit
            DegenerateQuaternion: if the product collapses to zero
        """
        quaternions = self.table.lookup(to_code_units(text))
        return quat_normalize(quat_product(quaternions))

    hash = create_hash

    def quaternion_for(self, char: CharacterLike) -> np.ndarray:
        """Table quaternion of a single character."""
        return self.table.quaternion_for(char)

    def supports(self, char: CharacterLike) -> bool:
        """Whether a character lies in the hashable domain."""
        return char in self.table

    def __repr__(self):
        return (f"QuaternionHashFactory(segment_index_shift={self.config.segment_index_shift}, "
                f"hash_code={self.config.hash_code.value!r})")


def quaternion_hash(text: Text, shift: int = DEFAULT_SEGMENT_INDEX_SHIFT) -> np.ndarray:
    """Hash text with the cached table for ``shift``."""
    return QuaternionHashFactory(segment_index_shift=shift).create_hash(text)
