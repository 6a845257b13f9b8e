class Arc4Error(Exception):
    """Base class for all ARC4 failures."""


class InvalidArgument(Arc4Error, ValueError):
    """A key, salt, permutation or buffer range was rejected."""


class AlreadyReleased(Arc4Error, RuntimeError):
    """The object was used after its key-derived state was erased."""


class CryptographicOperationFailure(Arc4Error):
    """An unexpected fault occurred during key scheduling or ciphering.

    The original exception is always available as ``__cause__``.
    """
