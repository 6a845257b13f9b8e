"""
Data contracts and type definitions.
"""

__all__ = [
    "KeyConfig",
    "StreamConfig",
]

from .config import KeyConfig, StreamConfig
