from __future__ import annotations

import logging

from ._lifecycle import Releasable
from ._transform_base import BaseTransform, _check_range
from .engine import ARC4Engine
from .errors import InvalidArgument
from .sblock import SBlock

logger = logging.getLogger(__name__)


class ARC4Transform(Releasable, BaseTransform):
    """Byte-granular ARC4 transform.

    The block size is one byte, so any amount of data can be fed through
    :meth:`transform_block`. Finishing a final block does not invalidate the
    keystream: the next call simply continues where the previous one stopped.
    """

    def __init__(
        self,
        key: bytes | bytearray | memoryview,
        sblock: SBlock | bytes | bytearray | memoryview | None = None,
    ) -> None:
        """
        Args:
            key: Secret key bytes (must not be empty).
            sblock: Optional starting permutation, see :class:`ARC4Engine`.

        Raises:
            InvalidArgument: If the key or starting permutation is invalid.
        """
        self._engine = ARC4Engine(key, sblock)
        self._activate()

    @property
    def input_block_size(self) -> int:
        return 1

    @property
    def output_block_size(self) -> int:
        return 1

    @property
    def can_transform_multiple_blocks(self) -> bool:
        return True

    @property
    def can_reuse_transform(self) -> bool:
        return True

    @property
    def state(self) -> SBlock:
        """Snapshot of the current permutation."""
        self._ensure_active()
        return self._engine.state

    def transform_block(
        self,
        input_buffer: bytes | bytearray | memoryview,
        input_offset: int,
        input_count: int,
        output_buffer: bytearray | memoryview,
        output_offset: int,
    ) -> int:
        self._ensure_active()
        _check_range("input", input_buffer, input_offset, input_count)
        if input_count == 0:
            raise InvalidArgument("input count must be positive")
        _check_range("output", output_buffer, output_offset, input_count)
        if isinstance(output_buffer, bytes) or (
            isinstance(output_buffer, memoryview) and output_buffer.readonly
        ):
            raise InvalidArgument("output buffer must be writable")

        end = output_offset + input_count
        output_buffer[output_offset:end] = input_buffer[
            input_offset : input_offset + input_count
        ]
        self._engine.cipher(output_buffer, output_offset, input_count)
        return input_count

    def transform_final_block(
        self,
        input_buffer: bytes | bytearray | memoryview,
        input_offset: int,
        input_count: int,
    ) -> bytes:
        self._ensure_active()
        _check_range("input", input_buffer, input_offset, input_count)

        out = bytearray(input_buffer[input_offset : input_offset + input_count])
        self._engine.cipher(out)
        return bytes(out)

    def reset(
        self,
        key: bytes | bytearray | memoryview,
        sblock: SBlock | bytes | bytearray | memoryview | None = None,
    ) -> None:
        """Discard the current keystream and schedule a new key.

        The new engine is built before the old one is erased, so a rejected
        key leaves the transform unchanged.
        """
        self._ensure_active()
        engine = ARC4Engine(key, sblock)
        self._engine.release()
        self._engine = engine
        logger.debug("ARC4 transform reset")

    def _erase(self) -> None:
        self._engine.release()
