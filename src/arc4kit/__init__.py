from .version import __version__ as __version__

__title__ = "arc4kit"
__description__ = "ARC4 stream cipher with stream, transform and key-derivation adapters."
__author__ = "Saudade Z"
__email__ = "saudadez217@gmail.com"
__license__ = "Apache-2.0"
