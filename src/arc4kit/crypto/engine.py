from __future__ import annotations

import logging
from typing import Any

from ._lifecycle import Releasable
from .errors import CryptographicOperationFailure, InvalidArgument
from .sblock import SBLOCK_SIZE, SBlock

logger = logging.getLogger(__name__)

_ERASED_COUNTER = -1


def _coerce_sblock(sblock: SBlock | bytes | bytearray | memoryview | None) -> SBlock:
    if sblock is None:
        return SBlock.identity()
    if isinstance(sblock, SBlock):
        return sblock.copy()
    return SBlock.from_bytes(sblock)


class ARC4Engine(Releasable):
    """ARC4 cipher state: a 256-byte permutation plus the two PRGA counters.

    The engine runs the Key-Scheduling Algorithm (KSA) once on construction
    and then hands out keystream bytes through the Pseudo-Random Generation
    Algorithm (PRGA). Encryption and decryption are the same XOR operation.

    An engine is not safe for concurrent use; every keystream byte mutates
    the shared state.
    """

    def __init__(
        self,
        key: bytes | bytearray | memoryview,
        sblock: SBlock | bytes | bytearray | memoryview | None = None,
    ) -> None:
        """
        Args:
            key: Secret key bytes (must not be empty). Only read during key
                scheduling; the engine does not keep a reference to it.
            sblock: Starting permutation. ``None`` selects the identity
                permutation, a 256-byte value is validated as a permutation.
                The engine always schedules a private copy.

        Raises:
            InvalidArgument: If ``key`` is empty or not bytes-like, or the
                starting permutation is invalid.
            CryptographicOperationFailure: If key scheduling faults.
        """
        if not isinstance(key, (bytes, bytearray, memoryview)):
            raise InvalidArgument(f"Key must be bytes-like, got {type(key).__name__}")
        if len(key) == 0:
            raise InvalidArgument("Key must not be empty")

        self._state = _coerce_sblock(sblock)
        self._box = self._state._box
        self._x = 0
        self._y = 0

        try:
            self._schedule(key)
        except Exception as e:
            self._state.erase()
            raise CryptographicOperationFailure("ARC4 key scheduling failed") from e

        self._activate()
        logger.debug("ARC4 engine scheduled with %d-byte key", len(key))

    def _schedule(self, key: Any) -> None:
        """Run the KSA over the working permutation."""
        S = self._box
        klen = len(key)
        j = 0
        for i in range(SBLOCK_SIZE):
            j = (j + S[i] + key[i % klen]) & 0xFF
            S[i], S[j] = S[j], S[i]

    # ------------------------------------------------------------------
    # Keystream
    # ------------------------------------------------------------------

    def next_byte(self) -> int:
        """Advance the PRGA by one step and return the keystream byte."""
        self._ensure_active()
        S = self._box
        x = (self._x + 1) & 0xFF
        y = (self._y + S[x]) & 0xFF
        S[x], S[y] = S[y], S[x]
        self._x, self._y = x, y
        return S[(S[x] + S[y]) & 0xFF]

    def keystream(self, n: int) -> bytes:
        """Return the next ``n`` keystream bytes.

        Raises:
            InvalidArgument: If ``n`` is negative.
        """
        if not isinstance(n, int) or n < 0:
            raise InvalidArgument(f"Keystream length must be a non-negative int, got {n!r}")
        self._ensure_active()
        out = bytearray(n)
        self.cipher(out)
        return bytes(out)

    def cipher(
        self,
        buffer: bytearray | memoryview,
        offset: int = 0,
        count: int | None = None,
    ) -> None:
        """XOR ``buffer[offset:offset + count]`` with the keystream in place.

        Args:
            buffer: Writable buffer (``bytearray`` or writable ``memoryview``).
            offset: Start index, ``>= 0``.
            count: Number of bytes, ``>= 0``. ``None`` means up to the end of
                the buffer. A count of zero is a no-op.

        Raises:
            AlreadyReleased: If the engine was released.
            InvalidArgument: If the buffer is read-only or the range is out of
                bounds.
            CryptographicOperationFailure: If the loop faults. Swaps already
                performed stay applied and the permutation remains valid.
        """
        self._ensure_active()

        if isinstance(buffer, memoryview):
            if buffer.readonly:
                raise InvalidArgument("Buffer must be writable")
            if buffer.format == "B" and buffer.ndim == 1:
                view = buffer
            elif buffer.c_contiguous:
                view = buffer.cast("B")
            else:
                raise InvalidArgument("Non-byte buffers must be C-contiguous")
        elif isinstance(buffer, bytearray):
            view = memoryview(buffer)
        else:
            raise InvalidArgument(
                f"Buffer must be a bytearray or writable memoryview, got {type(buffer).__name__}"
            )

        size = len(view)
        if not isinstance(offset, int) or offset < 0:
            raise InvalidArgument(f"Offset must be a non-negative int, got {offset!r}")
        if count is None:
            count = max(size - offset, 0)
        if not isinstance(count, int) or count < 0:
            raise InvalidArgument(f"Count must be a non-negative int, got {count!r}")
        if offset + count > size:
            raise InvalidArgument(
                f"Range [{offset}, {offset + count}) exceeds buffer of length {size}"
            )

        if count == 0:
            return

        S = self._box
        x = self._x
        y = self._y
        try:
            for i in range(offset, offset + count):
                # counters are committed only once the swap has completed
                nx = (x + 1) & 0xFF
                ny = (y + S[nx]) & 0xFF
                S[nx], S[ny] = S[ny], S[nx]
                x, y = nx, ny
                view[i] ^= S[(S[x] + S[y]) & 0xFF]
        except Exception as e:
            raise CryptographicOperationFailure("ARC4 cipher operation failed") from e
        finally:
            self._x, self._y = x, y

    def process(self, data: bytes | bytearray | memoryview) -> bytes:
        """Encrypt or decrypt ``data`` and return the result as new bytes."""
        self._ensure_active()
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidArgument(f"Data must be bytes-like, got {type(data).__name__}")
        out = bytearray(data)
        self.cipher(out)
        return bytes(out)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SBlock:
        """A snapshot of the current permutation.

        Mutating or erasing the snapshot never affects the engine.
        """
        self._ensure_active()
        return self._state.copy()

    def _erase(self) -> None:
        self._x = _ERASED_COUNTER
        self._y = _ERASED_COUNTER
        self._state.erase()

    def __repr__(self) -> str:
        return f"<ARC4Engine {self._lifecycle.value}>"
