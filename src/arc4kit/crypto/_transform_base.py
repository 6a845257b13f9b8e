from __future__ import annotations

import abc

from .errors import InvalidArgument


def _check_range(name: str, buffer: object, offset: int, count: int) -> None:
    """Validate that ``[offset, offset + count)`` lies inside ``buffer``."""
    if not isinstance(buffer, (bytes, bytearray, memoryview)):
        raise InvalidArgument(f"{name} must be bytes-like, got {type(buffer).__name__}")
    if not isinstance(offset, int) or offset < 0:
        raise InvalidArgument(f"{name} offset must be a non-negative int, got {offset!r}")
    if not isinstance(count, int) or count < 0:
        raise InvalidArgument(f"{name} count must be a non-negative int, got {count!r}")
    if offset + count > len(buffer):
        raise InvalidArgument(
            f"{name} range [{offset}, {offset + count}) exceeds length {len(buffer)}"
        )


class BaseTransform(abc.ABC):
    """Base class for block transforms used in cryptographic pipelines.

    A transform consumes input in units of ``input_block_size`` bytes and
    produces output in units of ``output_block_size`` bytes. Pipelines call
    :meth:`transform_block` for intermediate data and
    :meth:`transform_final_block` for the last (possibly partial) chunk.
    """

    @property
    @abc.abstractmethod
    def input_block_size(self) -> int:
        """Input block size in bytes."""
        ...

    @property
    @abc.abstractmethod
    def output_block_size(self) -> int:
        """Output block size in bytes."""
        ...

    @property
    @abc.abstractmethod
    def can_transform_multiple_blocks(self) -> bool:
        """Whether :meth:`transform_block` accepts more than one block."""
        ...

    @property
    @abc.abstractmethod
    def can_reuse_transform(self) -> bool:
        """Whether the transform stays usable after a final block."""
        ...

    @abc.abstractmethod
    def transform_block(
        self,
        input_buffer: bytes | bytearray | memoryview,
        input_offset: int,
        input_count: int,
        output_buffer: bytearray | memoryview,
        output_offset: int,
    ) -> int:
        """Transform a whole number of input blocks into ``output_buffer``.

        Args:
            input_buffer: Source data.
            input_offset: Start index in ``input_buffer``.
            input_count: Number of bytes, a positive multiple of
                ``input_block_size``.
            output_buffer: Writable destination.
            output_offset: Start index in ``output_buffer``.

        Returns:
            The number of bytes written.

        Raises:
            InvalidArgument: If any range is out of bounds or the count is
                not block-aligned.
        """
        ...

    @abc.abstractmethod
    def transform_final_block(
        self,
        input_buffer: bytes | bytearray | memoryview,
        input_offset: int,
        input_count: int,
    ) -> bytes:
        """Transform the final chunk of input and return the output.

        Raises:
            InvalidArgument: If the range is out of bounds.
        """
        ...

    def encrypt(self, data: bytes | bytearray | memoryview) -> bytes:
        """Transform ``data`` in one call.

        Args:
            data: Plaintext bytes.

        Returns:
            Ciphertext bytes.
        """
        return self.transform_final_block(data, 0, len(data))

    def decrypt(self, data: bytes | bytearray | memoryview) -> bytes:
        """Transform ``data`` in one call.

        Args:
            data: Ciphertext bytes.

        Returns:
            Plaintext bytes.
        """
        return self.transform_final_block(data, 0, len(data))
