"""
Factory helpers for the ARC4 stream cipher.

The engine itself only accepts normalized key bytes and an optional starting
permutation. Turning passwords into key bytes and generating default salts
happens here, outside the cipher core.
"""

from __future__ import annotations

import secrets

from .engine import ARC4Engine
from .errors import InvalidArgument
from .sblock import MIN_SALT_SIZE, SBLOCK_SIZE, SBlock

block_size = 1
key_size = range(1, SBLOCK_SIZE + 1)

DEFAULT_ENCODING = "utf-8"

__all__ = [
    "block_size",
    "key_size",
    "DEFAULT_ENCODING",
    "MIN_SALT_SIZE",
    "SBLOCK_SIZE",
    "generate_salt",
    "key_material",
    "new",
    "new_random",
]


def key_material(
    secret: str | bytes | bytearray | memoryview,
    encoding: str = DEFAULT_ENCODING,
) -> bytes:
    """Normalize a password or raw key into key bytes.

    Args:
        secret: A password string, encoded with ``encoding``, or raw key bytes.
        encoding: Text encoding used for password strings.

    Returns:
        A fresh copy of the key bytes.

    Raises:
        InvalidArgument: If the result is empty, the type is unsupported, or
            the password cannot be encoded.
    """
    if isinstance(secret, str):
        try:
            data = secret.encode(encoding)
        except (LookupError, UnicodeEncodeError) as e:
            raise InvalidArgument(f"Cannot encode password with {encoding!r}: {e}") from e
    elif isinstance(secret, (bytes, bytearray, memoryview)):
        data = bytes(secret)
    else:
        raise InvalidArgument(
            f"Key must be str or bytes-like, got {type(secret).__name__}"
        )

    if not data:
        raise InvalidArgument("Key must not be empty")
    return data


def generate_salt(size: int = MIN_SALT_SIZE) -> bytes:
    """Return ``size`` random salt bytes from the OS CSPRNG.

    Raises:
        InvalidArgument: If ``size`` is smaller than 4.
    """
    if not isinstance(size, int) or size < MIN_SALT_SIZE:
        raise InvalidArgument(
            f"Salt size must be at least {MIN_SALT_SIZE}, got {size!r}"
        )
    return secrets.token_bytes(size)


def new(
    key: str | bytes | bytearray | memoryview,
    *,
    iv: bytes | bytearray | memoryview | None = None,
    sblock: SBlock | None = None,
    encoding: str = DEFAULT_ENCODING,
) -> ARC4Engine:
    """Create an ARC4 engine.

    Args:
        key: Raw key bytes or a password string.
        iv: Optional 256-byte starting permutation, validated before use.
        sblock: Optional starting permutation as an :class:`SBlock`.
        encoding: Encoding for password strings.

    Returns:
        A scheduled :class:`ARC4Engine`.

    Raises:
        InvalidArgument: If the key is empty, both ``iv`` and ``sblock`` are
            given, or the starting permutation is invalid.
    """
    if iv is not None and sblock is not None:
        raise InvalidArgument("Pass either iv or sblock, not both")

    start = SBlock.from_bytes(iv) if iv is not None else sblock
    return ARC4Engine(key_material(key, encoding), start)


def new_random(
    key: str | bytes | bytearray | memoryview,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> tuple[ARC4Engine, bytes]:
    """Create an ARC4 engine over a fresh random starting permutation.

    The returned IV must be kept alongside the ciphertext; decryption
    needs ``new(key, iv=iv)``.

    Returns:
        The scheduled engine and the 256-byte IV it started from.
    """
    start = SBlock.random()
    iv = start.to_bytes()
    return ARC4Engine(key_material(key, encoding), start), iv
