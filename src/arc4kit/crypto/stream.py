from __future__ import annotations

import errno
import io
import logging
from typing import IO, Any

from .ARC4 import DEFAULT_ENCODING, key_material
from .engine import ARC4Engine
from .errors import AlreadyReleased, InvalidArgument
from .sblock import SBlock

logger = logging.getLogger(__name__)


class ARC4Stream(io.RawIOBase):
    """Binary stream that enciphers writes and deciphers reads with ARC4.

    The wrapped channel's capabilities (readable, writable, seekable) are
    reported unchanged, and seek, tell, truncate and flush are forwarded as
    is. The keystream is positional: callers that seek must make sure the
    keystream they continue with matches the data at the new position.

    Closing the stream releases the engine and, unless ``leave_open`` is set,
    closes the underlying channel.
    """

    _engine: ARC4Engine | None = None
    _raw: Any = None
    _leave_open = False

    def __init__(
        self,
        raw: IO[bytes] | io.RawIOBase | io.BufferedIOBase,
        key: str | bytes | bytearray | memoryview,
        sblock: SBlock | bytes | bytearray | memoryview | None = None,
        *,
        encoding: str = DEFAULT_ENCODING,
        leave_open: bool = False,
    ) -> None:
        """
        Args:
            raw: Underlying binary channel.
            key: Raw key bytes or a password string.
            sblock: Optional starting permutation, see :class:`ARC4Engine`.
            encoding: Encoding for password strings.
            leave_open: Keep ``raw`` open when this stream is closed.

        Raises:
            InvalidArgument: If ``raw`` is missing or the key or starting
                permutation is invalid.
        """
        if raw is None:
            raise InvalidArgument("Underlying stream must not be None")
        self._engine = ARC4Engine(key_material(key, encoding), sblock)
        self._raw = raw
        self._leave_open = leave_open
        super().__init__()

    def _check_open(self) -> None:
        if self.closed:
            raise AlreadyReleased("ARC4Stream has already been closed")

    @property
    def raw(self) -> Any:
        """The wrapped channel."""
        return self._raw

    @property
    def state(self) -> SBlock:
        """Snapshot of the current permutation."""
        self._check_open()
        return self._engine.state

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def readable(self) -> bool:
        self._check_open()
        return bool(self._raw.readable())

    def writable(self) -> bool:
        self._check_open()
        return bool(self._raw.writable())

    def seekable(self) -> bool:
        self._check_open()
        return bool(self._raw.seekable())

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def readinto(self, b: Any) -> int | None:
        self._check_open()
        if not self._raw.readable():
            raise io.UnsupportedOperation("underlying stream is not readable")

        view = memoryview(b).cast("B")
        n = self._raw.readinto(view)
        if n:
            self._engine.cipher(view, 0, n)
        return n

    def write(self, b: Any) -> int:
        self._check_open()
        if not self._raw.writable():
            raise io.UnsupportedOperation("underlying stream is not writable")

        data = bytearray(b)
        self._engine.cipher(data)

        view = memoryview(data)
        total = len(view)
        written = 0
        while written < total:
            n = self._raw.write(view[written:])
            if not n:
                # keystream already consumed for the whole chunk
                raise BlockingIOError(
                    errno.EAGAIN,
                    "underlying stream accepted no data",
                    written,
                )
            written += n
        return total

    # ------------------------------------------------------------------
    # Positioning
    # ------------------------------------------------------------------

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return int(self._raw.seek(offset, whence))

    def tell(self) -> int:
        self._check_open()
        return int(self._raw.tell())

    def size(self) -> int:
        """Length of the underlying channel in bytes.

        The channel position is restored afterwards.

        Raises:
            io.UnsupportedOperation: If the channel is not seekable.
        """
        self._check_open()
        if not self._raw.seekable():
            raise io.UnsupportedOperation("underlying stream is not seekable")
        pos = self._raw.tell()
        try:
            return int(self._raw.seek(0, io.SEEK_END))
        finally:
            self._raw.seek(pos)

    def truncate(self, size: int | None = None) -> int:
        self._check_open()
        return int(self._raw.truncate(size))

    def flush(self) -> None:
        self._check_open()
        if self._raw is not None:
            self._raw.flush()

    def close(self) -> None:
        if self.closed:
            return
        try:
            super().close()
        finally:
            if self._engine is not None:
                self._engine.release()
            if self._raw is not None and not self._leave_open:
                self._raw.close()
            logger.debug("ARC4Stream closed (leave_open=%s)", self._leave_open)
