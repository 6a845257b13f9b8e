"""
Settings file discovery, loading and typed access.
"""

__all__ = [
    "ConfigAdapter",
    "copy_default_config",
    "load_config",
    "save_config",
    "save_config_file",
]

from .adapter import ConfigAdapter
from .file_io import (
    copy_default_config,
    load_config,
    save_config,
    save_config_file,
)
