"""
The ARC4 state permutation ("S-block").

An :class:`SBlock` is a 256-entry permutation of the byte values 0..255.
Every public constructor guarantees that invariant; the only operation that
breaks it on purpose is :meth:`SBlock.erase`, which zeroes the content once
the value is no longer needed.
"""

from __future__ import annotations

import hashlib
import secrets
from collections.abc import Iterable, Iterator
from typing import Any

from .errors import InvalidArgument

SBLOCK_SIZE = 256
MIN_SALT_SIZE = 4

_SALT_DOMAIN = b"arc4kit-sblock"
_WORD_SPACE = 1 << 16

_IDENTITY = bytes(range(SBLOCK_SIZE))


def _salt_words(salt: bytes) -> Iterator[int]:
    """Yield 16-bit words from a SHA-256 counter-mode expansion of ``salt``."""
    counter = 0
    while True:
        block = hashlib.sha256(
            _SALT_DOMAIN + salt + counter.to_bytes(4, "big")
        ).digest()
        for k in range(0, len(block), 2):
            yield (block[k] << 8) | block[k + 1]
        counter += 1


class SBlock:
    """Immutable 256-byte permutation of 0..255.

    Instances behave like a read-only sequence of ints. Use one of the
    class-level constructors rather than calling the class directly.
    """

    __slots__ = ("_box",)

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        """
        Args:
            data: Exactly 256 bytes forming a permutation of 0..255.

        Raises:
            InvalidArgument: If ``data`` is not a valid permutation.
        """
        if not self.is_valid_permutation(data):
            raise InvalidArgument(
                "S-block must be 256 bytes containing each value 0..255 once"
            )
        self._box = bytearray(data)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def _trusted(cls, box: bytearray) -> SBlock:
        obj = cls.__new__(cls)
        obj._box = box
        return obj

    @classmethod
    def identity(cls) -> SBlock:
        """Return the ascending permutation 0, 1, ..., 255."""
        return cls._trusted(bytearray(_IDENTITY))

    @classmethod
    def from_bytes(cls, data: Any) -> SBlock:
        """Validate ``data`` and wrap a private copy of it.

        Args:
            data: A bytes-like value of exactly 256 bytes.

        Returns:
            The validated permutation.

        Raises:
            InvalidArgument: If the length is not 256 or any value is missing
                or duplicated.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidArgument(
                f"S-block data must be bytes-like, got {type(data).__name__}"
            )
        if len(data) != SBLOCK_SIZE:
            raise InvalidArgument(
                f"S-block data must be {SBLOCK_SIZE} bytes, got {len(data)}"
            )
        return cls(data)

    @classmethod
    def from_salt(cls, salt: bytes | bytearray | memoryview) -> SBlock:
        """Derive a deterministic permutation from ``salt``.

        The salt is expanded with SHA-256 in counter mode and the resulting
        words drive an unbiased Fisher-Yates shuffle of the identity
        permutation. Equal salts always give equal permutations.

        Args:
            salt: At least 4 bytes of salt.

        Raises:
            InvalidArgument: If ``salt`` is shorter than 4 bytes.
        """
        if not isinstance(salt, (bytes, bytearray, memoryview)):
            raise InvalidArgument(
                f"Salt must be bytes-like, got {type(salt).__name__}"
            )
        if len(salt) < MIN_SALT_SIZE:
            raise InvalidArgument(
                f"Salt must be at least {MIN_SALT_SIZE} bytes, got {len(salt)}"
            )

        box = bytearray(_IDENTITY)
        words = _salt_words(bytes(salt))
        for i in range(SBLOCK_SIZE - 1, 0, -1):
            bound = i + 1
            limit = _WORD_SPACE - (_WORD_SPACE % bound)
            w = next(words)
            while w >= limit:
                w = next(words)
            j = w % bound
            box[i], box[j] = box[j], box[i]
        return cls._trusted(box)

    @classmethod
    def random(cls) -> SBlock:
        """Return a permutation shuffled with the OS CSPRNG."""
        box = bytearray(_IDENTITY)
        for i in range(SBLOCK_SIZE - 1, 0, -1):
            j = secrets.randbelow(i + 1)
            box[i], box[j] = box[j], box[i]
        return cls._trusted(box)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def is_valid_permutation(data: Iterable[int] | bytes | bytearray) -> bool:
        """Return True if ``data`` is a permutation of 0..255.

        Accepts bytes-like values and iterables of ints. Never raises for
        malformed input.
        """
        try:
            values = list(data)
        except TypeError:
            return False
        if len(values) != SBLOCK_SIZE:
            return False
        seen = [False] * SBLOCK_SIZE
        for v in values:
            if type(v) is not int or not 0 <= v < SBLOCK_SIZE or seen[v]:
                return False
            seen[v] = True
        return True

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Return a copy of the permutation as bytes."""
        return bytes(self._box)

    def copy(self) -> SBlock:
        """Return an independent copy of this value."""
        return self._trusted(bytearray(self._box))

    def erase(self) -> None:
        """Overwrite all entries with zero. Idempotent."""
        self._box[:] = bytes(len(self._box))

    def __len__(self) -> int:
        return len(self._box)

    def __getitem__(self, index: int) -> int:
        return self._box[index]

    def __iter__(self) -> Iterator[int]:
        return iter(bytes(self._box))

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SBlock):
            return self._box == other._box
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self._box == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<SBlock {self._box[:4].hex()}...>"
