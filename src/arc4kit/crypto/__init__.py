"""
ARC4 stream cipher primitive and its stream, transform and derive adapters.
"""

__all__ = [
    "ARC4",
    "ARC4DeriveBytes",
    "ARC4Engine",
    "ARC4Stream",
    "ARC4Transform",
    "AlreadyReleased",
    "Arc4Error",
    "CryptographicOperationFailure",
    "InvalidArgument",
    "Lifecycle",
    "SBlock",
    "derive_bytes",
]

from . import ARC4
from ._lifecycle import Lifecycle
from .derive import ARC4DeriveBytes, derive_bytes
from .engine import ARC4Engine
from .errors import (
    AlreadyReleased,
    Arc4Error,
    CryptographicOperationFailure,
    InvalidArgument,
)
from .sblock import SBlock
from .stream import ARC4Stream
from .transform import ARC4Transform
