"""
Defines structured configuration models using dataclasses.
"""

from dataclasses import dataclass


@dataclass
class KeyConfig:
    """Configuration for turning secrets into key material.

    Attributes:
        encoding: Text encoding applied to password strings.
        salt_size: Length of randomly generated salts, at least 4.
    """

    encoding: str = "utf-8"
    salt_size: int = 4


@dataclass
class StreamConfig:
    """Configuration for ARC4 file streaming.

    Attributes:
        leave_open: Whether closing an ARC4 stream leaves the wrapped file open.
        chunk_size: Number of bytes read per iteration when streaming files.
    """

    leave_open: bool = False
    chunk_size: int = 65536
