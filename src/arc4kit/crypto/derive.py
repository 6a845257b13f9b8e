from __future__ import annotations

import logging

from ._lifecycle import Releasable
from .ARC4 import DEFAULT_ENCODING, generate_salt, key_material
from .engine import ARC4Engine
from .errors import InvalidArgument
from .sblock import MIN_SALT_SIZE, SBlock

logger = logging.getLogger(__name__)


def _validate_salt(salt: object) -> bytearray:
    if not isinstance(salt, (bytes, bytearray, memoryview)):
        raise InvalidArgument(f"Salt must be bytes-like, got {type(salt).__name__}")
    if len(salt) < MIN_SALT_SIZE:
        raise InvalidArgument(
            f"Salt must be at least {MIN_SALT_SIZE} bytes, got {len(salt)}"
        )
    return bytearray(salt)


class ARC4DeriveBytes(Releasable):
    """Derive key bytes from a password and salt with the ARC4 keystream.

    The salt is turned into a starting permutation with
    :meth:`SBlock.from_salt`, the password is scheduled over it, and the
    keystream is returned as derived bytes. The same password and salt
    always yield the same sequence. There is no iteration count.
    """

    def __init__(
        self,
        key: str | bytes | bytearray | memoryview,
        salt: bytes | bytearray | memoryview | None = None,
        *,
        encoding: str = DEFAULT_ENCODING,
        salt_size: int = MIN_SALT_SIZE,
    ) -> None:
        """
        Args:
            key: Password string or raw key bytes.
            salt: Salt of at least 4 bytes. If ``None``, ``salt_size`` random
                bytes are generated.
            encoding: Encoding for password strings.
            salt_size: Length of a generated salt.

        Raises:
            InvalidArgument: If the key is empty or the salt too short.
        """
        self._salt = _validate_salt(generate_salt(salt_size) if salt is None else salt)
        self._key = bytearray(key_material(key, encoding))
        self._engine = ARC4Engine(self._key, SBlock.from_salt(self._salt))
        self._activate()

    @property
    def salt(self) -> bytes:
        """Copy of the current salt. Assigning a new salt resets the output."""
        self._ensure_active()
        return bytes(self._salt)

    @salt.setter
    def salt(self, value: bytes | bytearray | memoryview) -> None:
        self._ensure_active()
        new_salt = _validate_salt(value)
        self._salt[:] = bytes(len(self._salt))
        self._salt = new_salt
        self.reset()

    @property
    def state(self) -> SBlock:
        """Snapshot of the current permutation."""
        self._ensure_active()
        return self._engine.state

    def get_bytes(self, cb: int) -> bytes:
        """Return the next ``cb`` derived bytes.

        Raises:
            InvalidArgument: If ``cb`` is negative.
        """
        self._ensure_active()
        return self._engine.keystream(cb)

    def reset(self) -> None:
        """Restart the derived sequence from the first byte."""
        self._ensure_active()
        engine = ARC4Engine(self._key, SBlock.from_salt(self._salt))
        self._engine.release()
        self._engine = engine
        logger.debug("ARC4 derive-bytes reset with %d-byte salt", len(self._salt))

    def _erase(self) -> None:
        self._engine.release()
        self._key[:] = bytes(len(self._key))
        self._salt[:] = bytes(len(self._salt))


def derive_bytes(
    password: str | bytes | bytearray | memoryview,
    salt: bytes | bytearray | memoryview,
    n: int,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> bytes:
    """Derive ``n`` bytes from ``password`` and ``salt`` in one call."""
    with ARC4DeriveBytes(password, salt, encoding=encoding) as kdf:
        return kdf.get_bytes(n)
